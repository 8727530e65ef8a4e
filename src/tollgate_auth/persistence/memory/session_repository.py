"""In-memory implementation of SessionRepository.

All mutations happen under one asyncio.Lock, which makes rotate() an
atomic compare-and-delete within the process.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from tollgate_auth.repositories import SessionData, SessionRepository
from tollgate_auth.schemas import SessionMetadata
from tollgate_auth.shared.identifiers import new_session_id
from tollgate_auth.shared.time import utc_now

logger = logging.getLogger(__name__)


class InMemorySessionRepository(SessionRepository):
    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._sessions: dict[str, SessionData] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    async def create(
        self,
        user_id: str,
        metadata: SessionMetadata,
        expires_at: datetime,
        family_id: str | None = None,
    ) -> SessionData:
        session_id = new_session_id()
        session = SessionData(
            id=session_id,
            user_id=user_id,
            family_id=family_id or session_id,
            expires_at=expires_at,
            created_at=self._clock(),
            user_agent=metadata.user_agent,
            ip_address=metadata.ip_address,
        )
        async with self._lock:
            self._sessions[session.id] = session
        return session

    async def get(self, session_id: str) -> SessionData | None:
        session = self._sessions.get(session_id)
        if session is None or session.is_expired(self._clock()):
            return None
        return session

    async def delete(self, session_id: str) -> bool:
        async with self._lock:
            return self._sessions.pop(session_id, None) is not None

    async def delete_all_for_user(self, user_id: str) -> int:
        async with self._lock:
            return self._remove_where(lambda s: s.user_id == user_id)

    async def list_active_for_user(self, user_id: str) -> list[SessionData]:
        now = self._clock()
        sessions = [
            s
            for s in self._sessions.values()
            if s.user_id == user_id and not s.is_expired(now)
        ]
        return sorted(sessions, key=lambda s: (s.created_at, s.id), reverse=True)

    async def rotate(self, session_id: str, expires_at: datetime) -> SessionData | None:
        async with self._lock:
            current = self._sessions.pop(session_id, None)
            if current is None or current.is_expired(self._clock()):
                return None
            successor = replace(
                current,
                id=new_session_id(),
                expires_at=expires_at,
                created_at=self._clock(),
            )
            self._sessions[successor.id] = successor
            return successor

    async def delete_family(self, family_id: str) -> int:
        async with self._lock:
            return self._remove_where(lambda s: s.family_id == family_id)

    async def purge_expired(self) -> int:
        now = self._clock()
        async with self._lock:
            removed = self._remove_where(lambda s: s.is_expired(now))
        if removed:
            logger.info("Purged %d expired sessions", removed)
        return removed

    def _remove_where(self, predicate: Callable[[SessionData], bool]) -> int:
        doomed = [sid for sid, s in self._sessions.items() if predicate(s)]
        for sid in doomed:
            del self._sessions[sid]
        return len(doomed)
