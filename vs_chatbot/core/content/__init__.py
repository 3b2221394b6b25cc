"""Content resolver module."""

from vs_chatbot.core.content.resolver import (
    AuthFlowConfig,
    ContentResolver,
    WelcomeFlowConfig,
)
from vs_chatbot.core.content.translations import BASELINE_LANGUAGE

__all__ = [
    "AuthFlowConfig",
    "BASELINE_LANGUAGE",
    "ContentResolver",
    "WelcomeFlowConfig",
]
