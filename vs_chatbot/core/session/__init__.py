"""Session store module."""

from vs_chatbot.core.session.store import (
    InMemorySessionStore,
    SessionStore,
    SQLiteSessionStore,
    create_session_store,
)

__all__ = [
    "InMemorySessionStore",
    "SQLiteSessionStore",
    "SessionStore",
    "create_session_store",
]
