"""SQLAlchemy implementation of UserRepository."""

import logging
from typing import Union

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tollgate_auth.exceptions import EmailTakenError
from tollgate_auth.persistence.sqlalchemy.errors import store_errors
from tollgate_auth.shared.time import ensure_tz_aware
from tollgate_identity.domain.user import (
    Email,
    User,
    UserRepository,
    normalize_email,
)
from tollgate_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: str) -> User | None:
        model = await self._find_model_by_id(user_id)

        if model is None:
            return None

        return self._map_to_domain(model)

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        if isinstance(email, Email):
            email_value = email.value
        else:
            email_value = normalize_email(email)

        stmt = select(UserModel).where(UserModel.email == email_value)
        with store_errors("user lookup"):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        user = await self.find_by_email(email)
        return user is not None

    async def save(self, user: User) -> None:
        existing = await self._find_model_by_id(user.id)

        try:
            with store_errors("user save"):
                if existing:
                    self._update_model(existing, user)
                    logger.debug("Updated user: %s", user.id)
                else:
                    model = self._map_to_model(user)
                    self._session.add(model)
                    logger.info("Created user: %s", user.id)

                await self._session.flush()
        except IntegrityError as e:
            if "UNIQUE constraint failed" in str(e) or "unique" in str(e).lower():
                raise EmailTakenError(user.email) from e
            raise

    async def delete(self, user_id: str) -> bool:
        stmt = delete(UserModel).where(UserModel.id == user_id)
        with store_errors("user delete"):
            result = await self._session.execute(stmt)
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted user: %s", user_id)
        return deleted

    async def count(self) -> int:
        stmt = select(func.count()).select_from(UserModel)
        with store_errors("user count"):
            result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _find_model_by_id(self, user_id: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        with store_errors("user lookup"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            email=model.email,
            name=model.name,
            role=model.role,
            email_verified=model.email_verified,
            avatar_url=model.avatar_url,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role.value,
            email_verified=user.email_verified,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def _update_model(self, model: UserModel, user: User) -> None:
        model.email = user.email
        model.name = user.name
        model.role = user.role.value
        model.email_verified = user.email_verified
        model.avatar_url = user.avatar_url
        model.updated_at = user.updated_at
