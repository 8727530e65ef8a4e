"""Contract shared by the OAuth provider clients."""

from dataclasses import dataclass
from typing import Protocol

from tollgate_identity.domain.oauth import OAuthIdentity, OAuthProvider


@dataclass(frozen=True)
class OAuthTokens:
    """Token response of a provider. Used for the identity lookup only."""

    access_token: str
    expires_in: int | None = None
    refresh_token: str | None = None


class OAuthProviderClient(Protocol):
    """Authorization-code client for one provider."""

    provider: OAuthProvider

    def authorization_url(self, state: str, code_challenge: str) -> str:
        """URL the browser is sent to, embedding state and the S256 challenge."""
        ...

    async def exchange_code(self, code: str, code_verifier: str) -> OAuthTokens:
        """Exchange an authorization code. Raises OAuthExchangeError."""
        ...

    async def fetch_identity(self, tokens: OAuthTokens) -> OAuthIdentity:
        """Look up the signed-in account. Raises OAuthExchangeError."""
        ...
