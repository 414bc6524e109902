from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Union

from cryptography.fernet import Fernet, InvalidToken
from pydantic import ValidationError

from common.models import User
from common.navigation import Navigator, Page

from .models import Session


logger = logging.getLogger(__name__)

UserLike = Union[User, Mapping[str, Any], None]


class SessionStoreError(RuntimeError):
    """The session store is misconfigured (e.g. an unusable Fernet key)."""


def _to_fernet(key: str | bytes) -> Fernet:
    """Construct a Fernet instance from a user-provided key.

    The key must be a URL-safe base64-encoded 32-byte key (str or bytes),
    as returned by `cryptography.fernet.Fernet.generate_key()`.
    """
    if isinstance(key, str):
        key_bytes = key.strip().encode("utf-8")
    else:
        key_bytes = key.strip()
    try:
        return Fernet(key_bytes)
    except (ValueError, TypeError) as ex:
        raise SessionStoreError("Session key is not a valid Fernet key") from ex


def _dump_session_json(session: Session) -> bytes:
    # Deterministic JSON: stable key order, no extra whitespace
    return json.dumps(
        session.model_dump(mode="json"), separators=(",", ":"), sort_keys=True
    ).encode("utf-8")


def _load_session_json(data: bytes) -> Session:
    raw = json.loads(data.decode("utf-8"))
    return Session.model_validate(raw)


def _write_private(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(data)
    os.replace(tmp, path)


def load_or_create_key(path: os.PathLike[str] | str) -> bytes:
    """Read a Fernet key from `path`, generating and saving one if missing."""
    p = Path(path)
    if p.exists():
        return p.read_bytes().strip()
    key = Fernet.generate_key()
    _write_private(p, key)
    logger.info("Generated new session key at %s", p)
    return key


class SessionStore(Protocol):
    def read(self) -> Session: ...

    def write(self, session: Session) -> None: ...

    def delete(self) -> None: ...


class MemorySessionStore:
    """Process-local store; used for tests and when persistence is not wanted."""

    def __init__(self, initial: Optional[Session] = None) -> None:
        self._session = initial.model_copy(deep=True) if initial else Session.empty()
        self.writes = 0

    def read(self) -> Session:
        return self._session.model_copy(deep=True)

    def write(self, session: Session) -> None:
        self.writes += 1
        self._session = session.model_copy(deep=True)

    def delete(self) -> None:
        self._session = Session.empty()


class FileSessionStore:
    """
    File-backed persistence for `Session`, encrypted at rest using Fernet.

    Usage
    - `read()` returns the stored session, or an empty one when the file is
      missing, cannot be decrypted with the configured key, or holds invalid
      JSON. Such files are left in place and overwritten by the next write.
    - `write(session)` replaces the whole document in one rename, so readers
      never observe a token without its user or vice versa.
    - `delete()` removes the file.
    """

    def __init__(self, path: os.PathLike[str] | str, *, fernet_key: str | bytes) -> None:
        self._path = Path(path)
        self._fernet = _to_fernet(fernet_key)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Session:
        if not self._path.exists():
            return Session.empty()
        body = self._path.read_bytes()
        try:
            decrypted = self._fernet.decrypt(body)
        except InvalidToken:
            logger.warning("Session file %s could not be decrypted; ignoring it", self._path)
            return Session.empty()
        try:
            return _load_session_json(decrypted)
        except (ValueError, ValidationError):
            logger.warning("Session file %s is corrupt; ignoring it", self._path)
            return Session.empty()

    def write(self, session: Session) -> None:
        _write_private(self._path, self._fernet.encrypt(_dump_session_json(session)))

    def delete(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass


class SessionContext:
    """
    The session handed explicitly to page controllers.

    Wraps a store with the get/set/clear contract. `clear_session` also sends
    the user back to the entry page when a navigator is attached.
    """

    def __init__(self, store: SessionStore, *, navigator: Optional[Navigator] = None) -> None:
        self._store = store
        self._navigator = navigator

    @property
    def navigator(self) -> Optional[Navigator]:
        return self._navigator

    def set_session(self, token: str, user: UserLike) -> None:
        if user is not None and not isinstance(user, User):
            user = User.model_validate(dict(user))
        self._store.write(Session(token=token, user=user))

    def get_token(self) -> Optional[str]:
        return self._store.read().token

    def get_user(self) -> Optional[User]:
        return self._store.read().user

    def clear_session(self) -> None:
        self._store.delete()
        if self._navigator is not None:
            self._navigator.redirect(Page.AUTH)


__all__ = [
    "FileSessionStore",
    "MemorySessionStore",
    "SessionContext",
    "SessionStore",
    "SessionStoreError",
    "load_or_create_key",
]
