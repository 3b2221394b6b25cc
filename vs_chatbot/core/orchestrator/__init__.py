"""Dialog orchestrator module."""

from vs_chatbot.core.orchestrator.dialog_orchestrator import DialogOrchestrator
from vs_chatbot.core.orchestrator.locks import KeyedLock

__all__ = [
    "DialogOrchestrator",
    "KeyedLock",
]
