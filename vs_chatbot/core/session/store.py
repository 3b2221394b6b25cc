"""
Session store.

Durable mapping from connection id to session record. CRUD only: the
dialog rules live in the orchestrator. ``save`` replaces the whole record;
callers mutate their own copy and hand it back.
"""

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import aiosqlite
import structlog

from vs_chatbot.models import Session, SessionState
from vs_chatbot.models.session import utcnow

logger = structlog.get_logger(__name__)


class SessionStore(ABC):
    """Abstract session store."""

    @abstractmethod
    async def get(self, connection_id: str) -> Session | None:
        """Return the session for a connection, if one exists."""

    @abstractmethod
    async def create(
        self,
        connection_id: str,
        state: SessionState = SessionState.CHAT,
    ) -> Session:
        """
        Create a session in ``state``.

        If a record already exists for the connection it is returned as is.
        """

    @abstractmethod
    async def save(self, session: Session) -> Session:
        """Upsert the full record and return the stored copy."""

    async def get_or_create(self, connection_id: str) -> Session:
        """Load the session, creating a fresh CHAT session on first contact."""
        session = await self.get(connection_id)
        if session is None:
            session = await self.create(connection_id, SessionState.CHAT)
        return session

    async def initialize(self) -> None:
        """Prepare the backing storage."""


class InMemorySessionStore(SessionStore):
    """Process-local store. Records are copied in and out."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()

    async def get(self, connection_id: str) -> Session | None:
        session = self._sessions.get(connection_id)
        return session.model_copy(deep=True) if session else None

    async def create(
        self,
        connection_id: str,
        state: SessionState = SessionState.CHAT,
    ) -> Session:
        async with self._lock:
            existing = self._sessions.get(connection_id)
            if existing is None:
                existing = Session(connection_id=connection_id, state=state)
                self._sessions[connection_id] = existing
                logger.info("session_created", connection_id=connection_id, state=state.value)
            return existing.model_copy(deep=True)

    async def get_or_create(self, connection_id: str) -> Session:
        # create() returns the existing record when there is one
        return await self.create(connection_id, SessionState.CHAT)

    async def save(self, session: Session) -> Session:
        stored = session.model_copy(deep=True, update={"updated_at": utcnow()})
        async with self._lock:
            previous = self._sessions.get(session.connection_id)
            if previous is not None:
                stored.created_at = previous.created_at
            self._sessions[session.connection_id] = stored
        session.updated_at = stored.updated_at
        return stored.model_copy(deep=True)


_SCHEMA = """CREATE TABLE IF NOT EXISTS sessions (
    connection_id TEXT PRIMARY KEY,
    state TEXT NOT NULL,
    lang TEXT,
    is_authenticated INTEGER NOT NULL DEFAULT 0,
    user_name TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)"""


class SQLiteSessionStore(SessionStore):
    """Relational store backed by SQLite through aiosqlite."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    @asynccontextmanager
    async def _acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection; commits on success, rolls back on exception."""
        async with aiosqlite.connect(self._db_path) as conn:
            conn.row_factory = aiosqlite.Row
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                logger.exception("session_store_transaction_failed")
                raise

    async def initialize(self) -> None:
        async with self._acquire() as conn:
            await conn.execute(_SCHEMA)
        logger.info("session_store_initialized", path=self._db_path)

    async def get(self, connection_id: str) -> Session | None:
        async with self._acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM sessions WHERE connection_id = ?",
                (connection_id,),
            )
        return self._row_to_session(rows[0]) if rows else None

    async def create(
        self,
        connection_id: str,
        state: SessionState = SessionState.CHAT,
    ) -> Session:
        session = Session(connection_id=connection_id, state=state)
        async with self._acquire() as conn:
            cursor = await conn.execute(
                """INSERT OR IGNORE INTO sessions
                   (connection_id, state, lang, is_authenticated, user_name,
                    created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                self._session_to_row(session),
            )
            created = cursor.rowcount == 1
            rows = await conn.execute_fetchall(
                "SELECT * FROM sessions WHERE connection_id = ?",
                (connection_id,),
            )
        if created:
            logger.info("session_created", connection_id=connection_id, state=state.value)
        return self._row_to_session(rows[0])

    async def save(self, session: Session) -> Session:
        session.updated_at = utcnow()
        async with self._acquire() as conn:
            await conn.execute(
                """INSERT INTO sessions
                   (connection_id, state, lang, is_authenticated, user_name,
                    created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(connection_id) DO UPDATE SET
                     state = excluded.state,
                     lang = excluded.lang,
                     is_authenticated = excluded.is_authenticated,
                     user_name = excluded.user_name,
                     updated_at = excluded.updated_at""",
                self._session_to_row(session),
            )
        return session.model_copy(deep=True)

    @staticmethod
    def _session_to_row(session: Session) -> tuple:
        return (
            session.connection_id,
            session.state.value,
            session.lang,
            int(session.is_authenticated),
            session.user_name,
            session.created_at.isoformat(),
            session.updated_at.isoformat(),
        )

    @staticmethod
    def _row_to_session(row: aiosqlite.Row) -> Session:
        return Session(
            connection_id=row["connection_id"],
            state=SessionState(row["state"]),
            lang=row["lang"],
            is_authenticated=bool(row["is_authenticated"]),
            user_name=row["user_name"] or "",
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


def create_session_store(backend: str, db_path: str = "sessions.db") -> SessionStore:
    """Build the session store selected by configuration."""
    if backend == "sqlite":
        return SQLiteSessionStore(db_path)
    if backend == "memory":
        return InMemorySessionStore()
    raise ValueError(f"Unknown session store backend: {backend}")
