"""
Conversation memory backends.

Both backends keep an ordered, oldest-first window of at most ``window``
turns per connection and evict the oldest turn first.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from collections import deque

import structlog
from redis.asyncio import Redis

from vs_chatbot.models import ChatMessage, ChatRole

logger = structlog.get_logger(__name__)


class ConversationMemory(ABC):
    """Abstract sliding-window history store."""

    def __init__(self, window: int) -> None:
        if window < 1:
            raise ValueError(f"Memory window must be at least 1, got {window}")
        self.window = window

    @abstractmethod
    async def get_history(self, connection_id: str) -> list[ChatMessage]:
        """Return stored turns, oldest first."""

    @abstractmethod
    async def add_message(self, connection_id: str, role: ChatRole, content: str) -> None:
        """Append a turn, evicting the oldest ones beyond the window."""

    @abstractmethod
    async def clear(self, connection_id: str) -> None:
        """Drop all turns for a connection."""

    async def close(self) -> None:
        """Release backing resources."""


class InMemoryBackend(ConversationMemory):
    """Process-local history. Lost on restart, not shared across processes."""

    def __init__(self, window: int) -> None:
        super().__init__(window)
        self._memory: dict[str, deque[ChatMessage]] = {}
        self._lock = asyncio.Lock()

    async def get_history(self, connection_id: str) -> list[ChatMessage]:
        return list(self._memory.get(connection_id, ()))

    async def add_message(self, connection_id: str, role: ChatRole, content: str) -> None:
        async with self._lock:
            history = self._memory.setdefault(connection_id, deque(maxlen=self.window))
            history.append(ChatMessage(role=role, content=content))

    async def clear(self, connection_id: str) -> None:
        async with self._lock:
            self._memory.pop(connection_id, None)


class RedisMemoryBackend(ConversationMemory):
    """
    Shared history in a Redis list per connection.

    Every append refreshes the key TTL, so history of abandoned
    connections expires on its own.
    """

    KEY_PREFIX = "chat:history:"

    def __init__(self, window: int, client: Redis, ttl_seconds: int = 4 * 60 * 60) -> None:
        super().__init__(window)
        self.ttl_seconds = ttl_seconds
        self._redis = client

    @classmethod
    def from_url(cls, window: int, url: str, ttl_seconds: int = 4 * 60 * 60) -> "RedisMemoryBackend":
        return cls(window, Redis.from_url(url, decode_responses=True), ttl_seconds)

    def _key(self, connection_id: str) -> str:
        return f"{self.KEY_PREFIX}{connection_id}"

    async def get_history(self, connection_id: str) -> list[ChatMessage]:
        items = await self._redis.lrange(self._key(connection_id), 0, -1)
        return [ChatMessage.model_validate(json.loads(item)) for item in items]

    async def add_message(self, connection_id: str, role: ChatRole, content: str) -> None:
        key = self._key(connection_id)
        message = ChatMessage(role=role, content=content).model_dump_json()
        # Trim to the window in the same MULTI/EXEC as the append
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.rpush(key, message)
            pipe.ltrim(key, -self.window, -1)
            pipe.expire(key, self.ttl_seconds)
            await pipe.execute()

    async def clear(self, connection_id: str) -> None:
        await self._redis.delete(self._key(connection_id))

    async def close(self) -> None:
        await self._redis.aclose()


def create_conversation_memory(
    backend: str,
    window: int,
    redis_url: str | None = None,
    ttl_seconds: int = 4 * 60 * 60,
) -> ConversationMemory:
    """Build the memory backend selected by configuration."""
    if backend == "redis":
        if not redis_url:
            raise ValueError("Redis memory backend requires a Redis URL")
        logger.info("conversation_memory_backend", backend=backend, window=window, ttl=ttl_seconds)
        return RedisMemoryBackend.from_url(window, redis_url, ttl_seconds)
    if backend == "memory":
        logger.info("conversation_memory_backend", backend=backend, window=window)
        return InMemoryBackend(window)
    raise ValueError(f"Unknown memory backend: {backend}")
