"""Google sign-in (OpenID Connect, authorization code with PKCE)."""

import httpx

from tollgate_auth.shared.time import utc_now
from tollgate_identity.domain.oauth import OAuthIdentity, OAuthProvider
from tollgate_identity.infrastructure.oauth import transport
from tollgate_identity.infrastructure.oauth.protocol import OAuthTokens

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPE = "openid email profile"


class GoogleOAuthClient:
    provider = OAuthProvider.GOOGLE

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._http = http_client

    def authorization_url(self, state: str, code_challenge: str) -> str:
        return transport.build_url(
            AUTH_URL,
            {
                "client_id": self._client_id,
                "redirect_uri": self._redirect_uri,
                "response_type": "code",
                "scope": SCOPE,
                "state": state,
                "code_challenge": code_challenge,
                "code_challenge_method": "S256",
                "prompt": "select_account",
            },
        )

    async def exchange_code(self, code: str, code_verifier: str) -> OAuthTokens:
        return await transport.request_tokens(
            self._http,
            self.provider.value,
            TOKEN_URL,
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._redirect_uri,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "code_verifier": code_verifier,
            },
        )

    async def fetch_identity(self, tokens: OAuthTokens) -> OAuthIdentity:
        info = await transport.get_json(
            self._http,
            self.provider.value,
            USERINFO_URL,
            tokens.access_token,
        )
        # OIDC userinfo uses "sub"; the legacy v2 endpoint "id"
        account_id = transport.require_account_id(
            self.provider.value,
            info.get("sub") or info.get("id"),
        )
        verified = info.get("email_verified", info.get("verified_email", False))
        return OAuthIdentity(
            provider=self.provider,
            provider_account_id=account_id,
            email=info.get("email"),
            email_verified=verified is True or verified == "true",
            name=info.get("name"),
            avatar_url=info.get("picture"),
            expires_at=transport.expires_at_from(tokens, utc_now()),
        )
