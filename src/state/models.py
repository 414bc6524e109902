from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from common.models import User


class Session(BaseModel):
    """
    Client-held authentication state, persisted as one JSON document.

    Fields
    - token: opaque bearer token issued by the task service at login.
    - user: profile returned alongside the token (id, name, email).

    Notes
    - Both fields are written together by `set_session` and removed together by
      `clear_session`; a half-populated document is treated as no session by
      the dashboard.
    """

    token: Optional[str] = Field(default=None, description="Bearer token")
    user: Optional[User] = Field(default=None, description="Logged-in user profile")

    @classmethod
    def empty(cls) -> "Session":
        """Convenience constructor for a signed-out session."""
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None
