from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional


STYLE_SUCCESS = "success"
STYLE_FAILURE = "failure"

Clock = Callable[[], float]


@dataclass(frozen=True)
class StatusMessage:
    """A one-line message under a form. `expires_at` is a clock reading, or None to persist."""

    text: str
    style: str
    expires_at: Optional[float] = None

    @property
    def is_failure(self) -> bool:
        return self.style == STYLE_FAILURE

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


def success(text: str, *, expires_at: Optional[float] = None) -> StatusMessage:
    return StatusMessage(text=text, style=STYLE_SUCCESS, expires_at=expires_at)


def failure(text: str) -> StatusMessage:
    return StatusMessage(text=text, style=STYLE_FAILURE)


def server_text(data: Any, default: str) -> str:
    """Pick the server's own wording out of an error-shaped body, else `default`."""
    if isinstance(data, Mapping):
        for key in ("message", "error"):
            val = data.get(key)
            if isinstance(val, str) and val.strip():
                return val
    return default


class MessageSlot:
    """Holds the current message for one form; expired messages read as None."""

    def __init__(self, *, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._message: Optional[StatusMessage] = None

    @property
    def current(self) -> Optional[StatusMessage]:
        msg = self._message
        if msg is not None and msg.expired(self._clock()):
            self._message = None
            return None
        return msg

    def show(self, message: StatusMessage) -> None:
        self._message = message

    def flash(self, text: str, seconds: float) -> None:
        self._message = success(text, expires_at=self._clock() + seconds)

    def clear(self) -> None:
        self._message = None


__all__ = [
    "MessageSlot",
    "STYLE_FAILURE",
    "STYLE_SUCCESS",
    "StatusMessage",
    "failure",
    "server_text",
    "success",
]
