"""
In-memory store of in-progress booking sessions.

Only conversations inside the booking flow have an entry; everything else
loads as ``IDLE``. Each conversation also gets a turn lock so a turn can
load, decide, reply and persist without another turn for the same chat
interleaving across an ``await``.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncIterator

from src.scheduling import Clock
from src.schemas.session_schema import IDLE, ActiveSession, Idle, SessionState

logger = logging.getLogger(__name__)


class SessionStore:
    """Conversation id -> ActiveSession, plus per-conversation turn locks."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._sessions: dict[str, ActiveSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    def load(self, conversation_id: str) -> SessionState:
        return self._sessions.get(conversation_id, IDLE)

    def save(self, conversation_id: str, session: SessionState) -> None:
        """Store an active session; saving IDLE deletes the entry."""
        if isinstance(session, Idle):
            self.delete(conversation_id)
            return
        session.last_activity = self._clock.now()
        self._sessions[conversation_id] = session

    def delete(self, conversation_id: str) -> None:
        self._sessions.pop(conversation_id, None)

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def prune_idle(self, max_age: timedelta) -> int:
        """Drop sessions with no activity for longer than ``max_age``."""
        cutoff = self._clock.now() - max_age
        stale = [cid for cid, s in self._sessions.items() if s.last_activity < cutoff]
        for conversation_id in stale:
            del self._sessions[conversation_id]
        if stale:
            logger.info("Pruned %d abandoned booking sessions", len(stale))
        return len(stale)

    @asynccontextmanager
    async def turn_lock(self, conversation_id: str) -> AsyncIterator[None]:
        """Serialize turns of one conversation; other chats are unaffected."""
        lock = self._locks.setdefault(conversation_id, asyncio.Lock())
        self._lock_users[conversation_id] = self._lock_users.get(conversation_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[conversation_id] -= 1
            if self._lock_users[conversation_id] == 0:
                del self._lock_users[conversation_id]
                del self._locks[conversation_id]
