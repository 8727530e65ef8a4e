"""OAuth authorization-code flow: state handling, code exchange and linking."""

from __future__ import annotations

import base64
import hashlib
import logging
import secrets
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Union

from tollgate_auth import (
    EmailTakenError,
    InvalidStateError,
    OAuthAccountConflictError,
    OAuthExchangeError,
    ValidationError,
)
from tollgate_auth.shared.time import utc_now
from tollgate_identity.domain.oauth import (
    OAuthAccount,
    OAuthIdentity,
    OAuthProvider,
    OAuthStateData,
    OAuthUrl,
)
from tollgate_identity.domain.user import Email, User, UserRole
from tollgate_identity.domain.user.aggregates.user import MAX_NAME_LENGTH

if TYPE_CHECKING:
    from tollgate_identity.domain.oauth import OAuthAccountRepository, OAuthStateStore
    from tollgate_identity.domain.user import UserRepository
    from tollgate_identity.infrastructure.oauth import OAuthProviderClient

logger = logging.getLogger(__name__)

DEFAULT_STATE_TTL = timedelta(minutes=10)


def code_challenge_for(code_verifier: str) -> str:
    """PKCE S256 challenge: unpadded base64url of the verifier's SHA-256."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def _provider_value(provider: Union[str, OAuthProvider]) -> str:
    if isinstance(provider, OAuthProvider):
        return provider.value
    return str(provider).strip().lower()


def _display_name(identity: OAuthIdentity) -> str:
    name = (identity.name or "").strip() or (identity.email or "").split("@")[0]
    return name[:MAX_NAME_LENGTH]


class OAuthFlowManager:
    """
    Runs one OAuth sign-in attempt from authorization URL to local user.

    A state is generated per attempt, stored with its PKCE verifier and
    consumed exactly once on callback, whatever the outcome.

    Linking rules for a provider identity:
    - already linked: sign in the linked user
    - a user with the same (provider-verified) email exists: link when the
      user is verified or unverified linking is allowed, else EMAIL_TAKEN
    - nobody holds the email: create a new user and link it
    """

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        oauth_account_repository: OAuthAccountRepository,
        state_store: OAuthStateStore,
        providers: Mapping[OAuthProvider, OAuthProviderClient],
        state_ttl: timedelta = DEFAULT_STATE_TTL,
        link_unverified_accounts: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._user_repo = user_repository
        self._account_repo = oauth_account_repository
        self._states = state_store
        self._providers = dict(providers)
        self._state_ttl = state_ttl
        self._link_unverified = link_unverified_accounts
        self._clock = clock

    @property
    def configured_providers(self) -> list[OAuthProvider]:
        return list(self._providers)

    async def generate_auth_url(self, provider: Union[str, OAuthProvider]) -> OAuthUrl:
        """Start an attempt and return the provider URL to redirect to.

        Raises
        ------
        ValidationError
            If the provider is unknown or not configured
        """
        client = self._client_for(provider)
        state = secrets.token_urlsafe(32)
        code_verifier = secrets.token_urlsafe(64)
        now = self._clock()

        await self._states.save(
            OAuthStateData(
                state=state,
                provider=client.provider,
                code_verifier=code_verifier,
                created_at=now,
                expires_at=now + self._state_ttl,
            ),
        )
        url = client.authorization_url(state, code_challenge_for(code_verifier))
        return OAuthUrl(url=url, state=state)

    async def handle_callback(
        self,
        provider: Union[str, OAuthProvider],
        code: str,
        state: str,
    ) -> User:
        """Complete an attempt and return the local user.

        Raises
        ------
        InvalidStateError
            Unknown, expired, reused or provider-mismatched state
        OAuthExchangeError
            The provider rejected the code or returned no usable identity
        EmailTakenError
            The email belongs to a user that may not be linked automatically
        OAuthAccountConflictError
            The user already holds a different account at this provider
        """
        data = await self._states.consume(state) if state else None
        if data is None or data.provider.value != _provider_value(provider):
            logger.warning(
                "Rejected OAuth callback with invalid state for %s",
                _provider_value(provider),
            )
            raise InvalidStateError

        client = self._client_for(data.provider)
        if not code:
            raise OAuthExchangeError

        tokens = await client.exchange_code(code, data.code_verifier)
        identity = await client.fetch_identity(tokens)
        return await self._resolve_user(identity)

    async def _resolve_user(self, identity: OAuthIdentity) -> User:
        account = await self._account_repo.find_by_provider_account(
            identity.provider,
            identity.provider_account_id,
        )
        if account is not None:
            user = await self._user_repo.find_by_id(account.user_id)
            if user is None:
                # Dangling link left by a partial delete
                logger.error("OAuth account %s points to a missing user", account.id)
                raise OAuthExchangeError
            account.touch(identity.expires_at)
            await self._account_repo.save(account)
            logger.info("OAuth login via %s: %s", identity.provider.value, user.id)
            return user

        if not identity.email or not Email.is_valid(identity.email):
            logger.error("%s identity has no usable email", identity.provider.value)
            raise OAuthExchangeError

        existing = await self._user_repo.find_by_email(identity.email)
        if existing is not None:
            return await self._link_existing(existing, identity)

        return await self._create_user(identity)

    async def _link_existing(self, user: User, identity: OAuthIdentity) -> User:
        if not identity.email_verified:
            raise EmailTakenError(user.email)
        if not (user.email_verified or self._link_unverified):
            raise EmailTakenError(user.email)

        held = await self._account_repo.find_by_user_and_provider(
            user.id,
            identity.provider,
        )
        if held is not None:
            raise OAuthAccountConflictError

        await self._account_repo.save(
            OAuthAccount.link(
                user_id=user.id,
                provider=identity.provider,
                provider_account_id=identity.provider_account_id,
                expires_at=identity.expires_at,
            ),
        )
        if not user.email_verified:
            user.mark_email_verified()
            await self._user_repo.save(user)
        logger.info("Linked %s account to user: %s", identity.provider.value, user.id)
        return user

    async def _create_user(self, identity: OAuthIdentity) -> User:
        role = UserRole.ADMIN if await self._user_repo.count() == 0 else UserRole.USER
        user = User.create(
            email=identity.email or "",
            name=_display_name(identity),
            role=role,
            email_verified=identity.email_verified,
            avatar_url=identity.avatar_url,
        )
        await self._user_repo.save(user)
        await self._account_repo.save(
            OAuthAccount.link(
                user_id=user.id,
                provider=identity.provider,
                provider_account_id=identity.provider_account_id,
                expires_at=identity.expires_at,
            ),
        )
        logger.info("User registered via %s: %s", identity.provider.value, user.id)
        return user

    def _client_for(self, provider: Union[str, OAuthProvider]) -> OAuthProviderClient:
        value = _provider_value(provider)
        client = next(
            (c for p, c in self._providers.items() if p.value == value),
            None,
        )
        if client is None:
            raise ValidationError.for_field(
                "provider",
                f"Unsupported OAuth provider: {value}",
            )
        return client
