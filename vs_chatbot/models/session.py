"""
Session and conversation data models.
These models represent the per-connection dialog state and memory turns.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionState(str, Enum):
    """Dialog state machine positions."""

    START = "start"  # Post-purge, before any new interaction
    CHAT = "chat"
    AUTH = "auth"  # Proof request sent, waiting for submission


class Session(BaseModel):
    """Persisted dialog state for one connection."""

    connection_id: str = Field(..., min_length=1, frozen=True)
    state: SessionState = SessionState.CHAT
    lang: str | None = None
    is_authenticated: bool = False
    user_name: str = ""

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def purge_user_data(self) -> None:
        """Reset to START and drop user-specific fields, keeping language."""
        self.state = SessionState.START
        self.is_authenticated = False
        self.user_name = ""

    def mark_authenticated(self, user_name: str) -> None:
        """Record a successful credential proof and return to chat."""
        self.is_authenticated = True
        self.user_name = user_name
        self.state = SessionState.CHAT


class ChatRole(str, Enum):
    """Role of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """Single turn kept in conversation memory."""

    role: ChatRole
    content: str
