"""Conversation memory module."""

from vs_chatbot.core.memory.backends import (
    ConversationMemory,
    InMemoryBackend,
    RedisMemoryBackend,
    create_conversation_memory,
)

__all__ = [
    "ConversationMemory",
    "InMemoryBackend",
    "RedisMemoryBackend",
    "create_conversation_memory",
]
