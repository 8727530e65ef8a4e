"""In-memory implementation of OAuthAccountRepository."""

from tollgate_auth.exceptions import OAuthAccountConflictError
from tollgate_identity.domain.oauth import (
    OAuthAccount,
    OAuthAccountRepository,
    OAuthProvider,
)


class InMemoryOAuthAccountRepository(OAuthAccountRepository):
    def __init__(self) -> None:
        self._accounts: dict[str, OAuthAccount] = {}

    async def find_by_provider_account(
        self,
        provider: OAuthProvider,
        provider_account_id: str,
    ) -> OAuthAccount | None:
        return next(
            (
                a
                for a in self._accounts.values()
                if a.provider == provider
                and a.provider_account_id == provider_account_id
            ),
            None,
        )

    async def find_by_user_and_provider(
        self,
        user_id: str,
        provider: OAuthProvider,
    ) -> OAuthAccount | None:
        return next(
            (
                a
                for a in self._accounts.values()
                if a.user_id == user_id and a.provider == provider
            ),
            None,
        )

    async def list_for_user(self, user_id: str) -> list[OAuthAccount]:
        return sorted(
            (a for a in self._accounts.values() if a.user_id == user_id),
            key=lambda a: a.created_at,
        )

    async def save(self, account: OAuthAccount) -> None:
        for other in self._accounts.values():
            if other.id == account.id or other.provider != account.provider:
                continue
            if (
                other.provider_account_id == account.provider_account_id
                or other.user_id == account.user_id
            ):
                raise OAuthAccountConflictError
        self._accounts[account.id] = account

    async def delete_all_for_user(self, user_id: str) -> int:
        doomed = [a.id for a in self._accounts.values() if a.user_id == user_id]
        for account_id in doomed:
            del self._accounts[account_id]
        return len(doomed)
