"""Data models for the chatbot core."""

from vs_chatbot.models.events import (
    BaseEvent,
    ConnectionCloseEvent,
    ConnectionOpenEvent,
    InboundEvent,
    MenuSelectEvent,
    ProfileEvent,
    ProofClaim,
    ProofSubmitEvent,
    SubmittedProofItem,
    TextEvent,
    UnknownEvent,
    parse_event,
)
from vs_chatbot.models.menu import MenuAction, MenuItem, MenuOption, VisibleWhen
from vs_chatbot.models.session import ChatMessage, ChatRole, Session, SessionState

__all__ = [
    # Session models
    "ChatMessage",
    "ChatRole",
    "Session",
    "SessionState",
    # Event models
    "BaseEvent",
    "ConnectionCloseEvent",
    "ConnectionOpenEvent",
    "InboundEvent",
    "MenuSelectEvent",
    "ProfileEvent",
    "ProofClaim",
    "ProofSubmitEvent",
    "SubmittedProofItem",
    "TextEvent",
    "UnknownEvent",
    "parse_event",
    # Menu models
    "MenuAction",
    "MenuItem",
    "MenuOption",
    "VisibleWhen",
]
