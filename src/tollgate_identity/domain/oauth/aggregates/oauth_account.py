"""OAuthAccount entity linking a provider identity to a user."""

from datetime import datetime
from typing import Union

from tollgate_auth.shared.identifiers import new_oauth_account_id
from tollgate_auth.shared.time import utc_now
from tollgate_identity.domain.oauth.value_objects import OAuthProvider


class OAuthAccount:
    """
    A user's account at an OAuth provider.

    (provider, provider_account_id) identifies the account globally and a
    user holds at most one account per provider. Provider tokens are never
    stored.
    """

    def __init__(  # noqa: PLR0913
        self,
        user_id: str,
        provider: Union[str, OAuthProvider],
        provider_account_id: str,
        expires_at: datetime | None = None,
        id: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._id = id or new_oauth_account_id()
        self._user_id = user_id
        self._provider = OAuthProvider(provider)
        self._provider_account_id = provider_account_id
        self._expires_at = expires_at
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or self._created_at

    @property
    def id(self) -> str:
        return self._id

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def provider(self) -> OAuthProvider:
        return self._provider

    @property
    def provider_account_id(self) -> str:
        return self._provider_account_id

    @property
    def expires_at(self) -> datetime | None:
        return self._expires_at

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def touch(self, expires_at: datetime | None) -> None:
        """Record a successful sign-in through this account."""
        self._expires_at = expires_at
        self._updated_at = utc_now()

    @classmethod
    def link(
        cls,
        user_id: str,
        provider: OAuthProvider,
        provider_account_id: str,
        expires_at: datetime | None = None,
    ) -> "OAuthAccount":
        return cls(
            user_id=user_id,
            provider=provider,
            provider_account_id=provider_account_id,
            expires_at=expires_at,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: str,
        user_id: str,
        provider: Union[str, OAuthProvider],
        provider_account_id: str,
        expires_at: datetime | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "OAuthAccount":
        return cls(
            id=id,
            user_id=user_id,
            provider=provider,
            provider_account_id=provider_account_id,
            expires_at=expires_at,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OAuthAccount):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"OAuthAccount(id={self._id}, provider={self._provider.value}, "
            f"user_id={self._user_id})"
        )
