"""OAuth account repository interface."""

from abc import ABC, abstractmethod

from tollgate_identity.domain.oauth.aggregates import OAuthAccount
from tollgate_identity.domain.oauth.value_objects import OAuthProvider


class OAuthAccountRepository(ABC):
    """Repository interface for OAuthAccount entities."""

    @abstractmethod
    async def find_by_provider_account(
        self,
        provider: OAuthProvider,
        provider_account_id: str,
    ) -> OAuthAccount | None:
        """Find the account a provider identity is linked to."""

    @abstractmethod
    async def find_by_user_and_provider(
        self,
        user_id: str,
        provider: OAuthProvider,
    ) -> OAuthAccount | None:
        """Find the account a user holds at a provider."""

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[OAuthAccount]:
        """List every linked provider account of a user."""

    @abstractmethod
    async def save(self, account: OAuthAccount) -> None:
        """Save or update an account.

        Raises OAuthAccountConflictError if the provider identity or the
        (user, provider) pair is already linked elsewhere.
        """

    @abstractmethod
    async def delete_all_for_user(self, user_id: str) -> int:
        """Delete every linked account of a user."""
