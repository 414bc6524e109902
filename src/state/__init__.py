"""
Session state for the task client.

`Session` is the token/user pair; stores persist it (encrypted with Fernet on
disk, or in memory) and `SessionContext` is the object passed to controllers.
"""

from .models import Session
from .session_store import FileSessionStore, MemorySessionStore, SessionContext

__all__ = ["FileSessionStore", "MemorySessionStore", "Session", "SessionContext"]
