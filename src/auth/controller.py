from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Mapping, Optional

from common.messages import MessageSlot, StatusMessage, failure, server_text, success
from common.navigation import Page
from common.tasks_api import TaskApiClient, TaskApiNetworkError
from state.session_store import SessionContext


logger = logging.getLogger(__name__)

REGISTER_OK = "Registered! Now login."
REGISTER_FAILED = "Register failed"
LOGIN_FAILED = "Login failed"
NETWORK_FAILED = "Could not reach the task service"


class AuthMode(str, Enum):
    LOGIN = "login"
    REGISTER = "register"


def _register_failed(data: Any) -> bool:
    if data is None or not isinstance(data, Mapping):
        return True
    if data.get("error"):
        return True
    message = data.get("message")
    return isinstance(message, str) and "exists" in message


class AuthController:
    """
    Entry page: login and register forms, one visible at a time.

    Field values are trimmed and otherwise passed through; the server decides
    what is valid.
    """

    def __init__(
        self,
        api: TaskApiClient,
        session: SessionContext,
        *,
        initial_mode: AuthMode = AuthMode.LOGIN,
    ) -> None:
        self._api = api
        self._session = session
        self.mode = initial_mode
        self._message = MessageSlot()

    @property
    def message(self) -> Optional[StatusMessage]:
        return self._message.current

    def switch_mode(self, mode: AuthMode) -> None:
        self.mode = mode
        self._message.clear()

    def submit_register(self, name: str, email: str, password: str) -> bool:
        """Register a new account; on success switch to the login form."""
        try:
            data = self._api.register(name.strip(), email.strip(), password.strip())
        except TaskApiNetworkError as exc:
            self._message.show(failure(f"{NETWORK_FAILED}: {exc}"))
            return False

        if _register_failed(data):
            self._message.show(failure(server_text(data, REGISTER_FAILED)))
            return False

        logger.info("registered %s", email.strip())
        self.switch_mode(AuthMode.LOGIN)
        self._message.show(success(REGISTER_OK))
        return True

    def submit_login(self, email: str, password: str) -> bool:
        """Log in; on success persist the session and go to the dashboard."""
        try:
            data = self._api.login(email.strip(), password.strip())
        except TaskApiNetworkError as exc:
            self._message.show(failure(f"{NETWORK_FAILED}: {exc}"))
            return False

        token = data.get("token") if isinstance(data, Mapping) else None
        if not token:
            self._message.show(failure(server_text(data, LOGIN_FAILED)))
            return False

        self._session.set_session(token, data.get("user"))
        navigator = self._session.navigator
        if navigator is not None:
            navigator.redirect(Page.DASHBOARD)
        return True


__all__ = ["AuthController", "AuthMode"]
