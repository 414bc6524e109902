from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .tasks_api import DEFAULT_API_BASE


# Environment variable names
ENV_API_BASE = "TASKS_API_BASE"
ENV_SESSION_FILE = "TASKS_SESSION_FILE"
ENV_SESSION_KEY = "TASKS_SESSION_KEY"
ENV_HTTP_TIMEOUT = "TASKS_HTTP_TIMEOUT"
ENV_FLASH_SECONDS = "TASKS_FLASH_SECONDS"
ENV_LOG_LEVEL = "TASKS_LOG_LEVEL"

DEFAULT_SESSION_FILE = Path(".cache") / "session.json"
DEFAULT_FLASH_SECONDS = 1.2


class ConfigError(RuntimeError):
    """Missing or malformed configuration."""


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.environ.get(name)
    return v if v not in (None, "") else default


def _require(v: Optional[str], what: str) -> str:
    if not v:
        raise ConfigError(f"Missing required configuration: {what}")
    return v


def _getenv_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = _getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as ex:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from ex
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value


class Settings(BaseModel):
    """
    Runtime settings for the task client.

    Fields
    - api_base: task service base URL, e.g. "http://localhost:5000/api".
    - session_file: path of the encrypted session document.
    - session_key: Fernet key; when None a key file next to the session file
      is used (created on first run).
    - http_timeout: per-request timeout in seconds; None waits indefinitely.
    - flash_seconds: lifetime of the "Task added!" message.
    - log_level: console log level name.
    """

    api_base: str = DEFAULT_API_BASE
    session_file: Path = DEFAULT_SESSION_FILE
    session_key: Optional[str] = Field(default=None, repr=False)
    http_timeout: Optional[float] = None
    flash_seconds: float = DEFAULT_FLASH_SECONDS
    log_level: str = "WARNING"

    @property
    def session_key_file(self) -> Path:
        return self.session_file.with_name(self.session_file.name + ".key")

    @classmethod
    def from_env(cls) -> "Settings":
        session_file = _getenv(ENV_SESSION_FILE)
        return cls(
            api_base=_require(_getenv(ENV_API_BASE, DEFAULT_API_BASE), ENV_API_BASE).rstrip("/"),
            session_file=Path(session_file).expanduser() if session_file else DEFAULT_SESSION_FILE,
            session_key=_getenv(ENV_SESSION_KEY),
            http_timeout=_getenv_float(ENV_HTTP_TIMEOUT, None),
            flash_seconds=_getenv_float(ENV_FLASH_SECONDS, DEFAULT_FLASH_SECONDS),
            log_level=(_getenv(ENV_LOG_LEVEL, "WARNING") or "WARNING").upper(),
        )


__all__ = ["ConfigError", "Settings"]
