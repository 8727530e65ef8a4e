"""SQLAlchemy implementation of UserCredentialRepository.

Provides data access for UserCredentialModel with security-focused
operations like account lockout management.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tollgate_auth.persistence.sqlalchemy.errors import store_errors
from tollgate_auth.persistence.sqlalchemy.models import UserCredentialModel
from tollgate_auth.repositories import UserCredentialData, UserCredentialRepository
from tollgate_auth.shared.time import ensure_tz_aware, utc_now

logger = logging.getLogger(__name__)


class UserCredentialRepositorySQLAlchemy(UserCredentialRepository):
    """
    SQLAlchemy implementation of UserCredentialRepository.

    Provides CRUD operations plus security-specific methods for
    account lockout management using SQLAlchemy as the ORM.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize repository with database session.

        Parameters
        ----------
        session
            SQLAlchemy async session
        clock
            Source of the current time for lockout and last-login stamps
        """
        self._session = session
        self._clock = clock

    def _to_data(self, model: UserCredentialModel) -> UserCredentialData:
        """Map SQLAlchemy model to data transfer object."""
        locked_until = model.locked_until
        last_login_at = model.last_login_at
        return UserCredentialData(
            user_id=model.user_id,
            password_hash=model.password_hash,
            failed_login_attempts=model.failed_login_attempts,
            locked_until=ensure_tz_aware(locked_until) if locked_until else None,
            last_login_at=ensure_tz_aware(last_login_at) if last_login_at else None,
        )

    async def _find_model_by_user_id(self, user_id: str) -> UserCredentialModel | None:
        """Internal helper to find the concrete model for modification."""
        stmt = select(UserCredentialModel).where(
            UserCredentialModel.user_id == user_id,
        )
        with store_errors("credential lookup"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, user_id: str, password_hash: str) -> UserCredentialData:
        existing = await self._find_model_by_user_id(user_id)

        with store_errors("credential save"):
            if existing:
                existing.password_hash = password_hash
                existing.updated_at = self._clock()
                await self._session.flush()
                logger.debug("Updated credentials for user: %s", user_id)
                return self._to_data(existing)

            model = UserCredentialModel(
                user_id=user_id,
                password_hash=password_hash,
                failed_login_attempts=0,
            )
            self._session.add(model)
            await self._session.flush()
        logger.info("Created credentials for user: %s", user_id)
        return self._to_data(model)

    async def find_by_user_id(self, user_id: str) -> UserCredentialData | None:
        model = await self._find_model_by_user_id(user_id)
        return self._to_data(model) if model else None

    async def increment_failed_attempts(self, user_id: str) -> int:
        """
        Increment failed login attempts for a user.

        Automatically locks the account if max attempts exceeded.
        """
        credential = await self._find_model_by_user_id(user_id)
        if not credential:
            return 0

        now = self._clock()
        credential.failed_login_attempts += 1
        credential.updated_at = now

        if credential.failed_login_attempts >= self.MAX_FAILED_ATTEMPTS:
            credential.locked_until = now + timedelta(
                minutes=self.LOCKOUT_DURATION_MINUTES,
            )
            logger.warning(
                "Account locked for user %s due to %d failed attempts",
                user_id,
                credential.failed_login_attempts,
            )

        with store_errors("failed attempt update"):
            await self._session.flush()
        return credential.failed_login_attempts

    async def reset_failed_attempts(self, user_id: str) -> None:
        credential = await self._find_model_by_user_id(user_id)
        if credential:
            credential.failed_login_attempts = 0
            credential.locked_until = None
            credential.updated_at = self._clock()
            with store_errors("failed attempt reset"):
                await self._session.flush()

    async def update_last_login(self, user_id: str) -> None:
        credential = await self._find_model_by_user_id(user_id)
        if credential:
            now = self._clock()
            credential.last_login_at = now
            credential.updated_at = now
            with store_errors("last login update"):
                await self._session.flush()

    async def is_account_locked(self, user_id: str) -> tuple[bool, datetime | None]:
        credential = await self.find_by_user_id(user_id)
        if credential is None or not credential.is_locked(self._clock()):
            return False, None
        return True, credential.locked_until

    async def delete(self, user_id: str) -> bool:
        stmt = delete(UserCredentialModel).where(
            UserCredentialModel.user_id == user_id,
        )
        with store_errors("credential delete"):
            result = await self._session.execute(stmt)
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted credentials for user: %s", user_id)
        return deleted
