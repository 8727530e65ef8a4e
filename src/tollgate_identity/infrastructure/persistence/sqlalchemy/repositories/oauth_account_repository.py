"""SQLAlchemy implementation of OAuthAccountRepository."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tollgate_auth.exceptions import OAuthAccountConflictError
from tollgate_auth.persistence.sqlalchemy.errors import store_errors
from tollgate_auth.shared.time import ensure_tz_aware
from tollgate_identity.domain.oauth import (
    OAuthAccount,
    OAuthAccountRepository,
    OAuthProvider,
)
from tollgate_identity.infrastructure.persistence.sqlalchemy.models import (
    OAuthAccountModel,
)

logger = logging.getLogger(__name__)


class OAuthAccountRepositorySQLAlchemy(OAuthAccountRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_provider_account(
        self,
        provider: OAuthProvider,
        provider_account_id: str,
    ) -> OAuthAccount | None:
        stmt = select(OAuthAccountModel).where(
            OAuthAccountModel.provider == provider.value,
            OAuthAccountModel.provider_account_id == provider_account_id,
        )
        return await self._find_one(stmt)

    async def find_by_user_and_provider(
        self,
        user_id: str,
        provider: OAuthProvider,
    ) -> OAuthAccount | None:
        stmt = select(OAuthAccountModel).where(
            OAuthAccountModel.user_id == user_id,
            OAuthAccountModel.provider == provider.value,
        )
        return await self._find_one(stmt)

    async def list_for_user(self, user_id: str) -> list[OAuthAccount]:
        stmt = (
            select(OAuthAccountModel)
            .where(OAuthAccountModel.user_id == user_id)
            .order_by(OAuthAccountModel.created_at)
        )
        with store_errors("oauth account listing"):
            result = await self._session.execute(stmt)
        return [self._map_to_domain(m) for m in result.scalars().all()]

    async def save(self, account: OAuthAccount) -> None:
        with store_errors("oauth account lookup"):
            existing = await self._session.get(OAuthAccountModel, account.id)

        try:
            with store_errors("oauth account save"):
                if existing:
                    existing.expires_at = account.expires_at
                    existing.updated_at = account.updated_at
                else:
                    self._session.add(self._map_to_model(account))
                    logger.info(
                        "Linked %s account for user: %s",
                        account.provider.value,
                        account.user_id,
                    )
                await self._session.flush()
        except IntegrityError as e:
            raise OAuthAccountConflictError from e

    async def delete_all_for_user(self, user_id: str) -> int:
        stmt = delete(OAuthAccountModel).where(OAuthAccountModel.user_id == user_id)
        with store_errors("oauth account delete"):
            result = await self._session.execute(stmt)
        return result.rowcount

    async def _find_one(self, stmt) -> OAuthAccount | None:
        with store_errors("oauth account lookup"):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._map_to_domain(model) if model else None

    def _map_to_domain(self, model: OAuthAccountModel) -> OAuthAccount:
        return OAuthAccount.reconstitute(
            id=model.id,
            user_id=model.user_id,
            provider=model.provider,
            provider_account_id=model.provider_account_id,
            expires_at=ensure_tz_aware(model.expires_at) if model.expires_at else None,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, account: OAuthAccount) -> OAuthAccountModel:
        return OAuthAccountModel(
            id=account.id,
            user_id=account.user_id,
            provider=account.provider.value,
            provider_account_id=account.provider_account_id,
            expires_at=account.expires_at,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
