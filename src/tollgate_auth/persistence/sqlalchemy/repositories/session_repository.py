"""SQLAlchemy implementation of SessionRepository.

Rotation relies on the row count of a conditional DELETE: of two
transactions deleting the same row only one sees a count of one, so only
one of them goes on to insert a successor.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tollgate_auth.persistence.sqlalchemy.errors import store_errors
from tollgate_auth.persistence.sqlalchemy.models import SessionModel
from tollgate_auth.repositories import SessionData, SessionRepository
from tollgate_auth.schemas import SessionMetadata
from tollgate_auth.shared.identifiers import new_session_id
from tollgate_auth.shared.time import ensure_tz_aware, utc_now

logger = logging.getLogger(__name__)


class SessionRepositorySQLAlchemy(SessionRepository):
    """SQLAlchemy implementation of SessionRepository.

    Writes are flushed, not committed; the unit of work belongs to the
    caller that owns the AsyncSession.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session = session
        self._clock = clock

    def _to_data(self, model: SessionModel) -> SessionData:
        return SessionData(
            id=model.id,
            user_id=model.user_id,
            family_id=model.family_id,
            expires_at=ensure_tz_aware(model.expires_at),
            created_at=ensure_tz_aware(model.created_at),
            user_agent=model.user_agent,
            ip_address=model.ip_address,
        )

    async def create(
        self,
        user_id: str,
        metadata: SessionMetadata,
        expires_at: datetime,
        family_id: str | None = None,
    ) -> SessionData:
        session_id = new_session_id()
        model = SessionModel(
            id=session_id,
            user_id=user_id,
            family_id=family_id or session_id,
            user_agent=metadata.user_agent,
            ip_address=metadata.ip_address,
            expires_at=expires_at,
            created_at=self._clock(),
        )
        with store_errors("session create"):
            self._session.add(model)
            await self._session.flush()
        logger.debug("Created session %s for user: %s", session_id, user_id)
        return self._to_data(model)

    async def get(self, session_id: str) -> SessionData | None:
        stmt = select(SessionModel).where(
            SessionModel.id == session_id,
            SessionModel.expires_at > self._clock(),
        )
        with store_errors("session lookup"):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_data(model) if model else None

    async def delete(self, session_id: str) -> bool:
        stmt = delete(SessionModel).where(SessionModel.id == session_id)
        with store_errors("session delete"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def delete_all_for_user(self, user_id: str) -> int:
        stmt = delete(SessionModel).where(SessionModel.user_id == user_id)
        with store_errors("session delete"):
            result = await self._session.execute(stmt)
        logger.info("Deleted %d sessions for user: %s", result.rowcount, user_id)
        return result.rowcount

    async def list_active_for_user(self, user_id: str) -> list[SessionData]:
        stmt = (
            select(SessionModel)
            .where(
                SessionModel.user_id == user_id,
                SessionModel.expires_at > self._clock(),
            )
            .order_by(SessionModel.created_at.desc(), SessionModel.id.desc())
        )
        with store_errors("session listing"):
            result = await self._session.execute(stmt)
        return [self._to_data(model) for model in result.scalars().all()]

    async def rotate(self, session_id: str, expires_at: datetime) -> SessionData | None:
        with store_errors("session rotation"):
            result = await self._session.execute(
                select(SessionModel).where(SessionModel.id == session_id),
            )
            current = result.scalar_one_or_none()
            if current is None:
                return None

            now = self._clock()
            previous = self._to_data(current)
            removed = await self._session.execute(
                delete(SessionModel)
                .where(SessionModel.id == session_id)
                .execution_options(synchronize_session=False),
            )
            self._session.expunge(current)
            if removed.rowcount != 1 or previous.is_expired(now):
                return None

            successor = SessionModel(
                id=new_session_id(),
                user_id=previous.user_id,
                family_id=previous.family_id,
                user_agent=previous.user_agent,
                ip_address=previous.ip_address,
                expires_at=expires_at,
                created_at=now,
            )
            self._session.add(successor)
            await self._session.flush()
        return self._to_data(successor)

    async def delete_family(self, family_id: str) -> int:
        stmt = delete(SessionModel).where(SessionModel.family_id == family_id)
        with store_errors("session family delete"):
            result = await self._session.execute(stmt)
        return result.rowcount

    async def purge_expired(self) -> int:
        stmt = delete(SessionModel).where(SessionModel.expires_at <= self._clock())
        with store_errors("session purge"):
            result = await self._session.execute(stmt)
        if result.rowcount:
            logger.info("Purged %d expired sessions", result.rowcount)
        return result.rowcount
