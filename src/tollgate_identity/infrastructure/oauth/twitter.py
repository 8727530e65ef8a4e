"""X/Twitter OAuth 2.0 (authorization code with PKCE, confidential client)."""

import httpx

from tollgate_auth.shared.time import utc_now
from tollgate_identity.domain.oauth import OAuthIdentity, OAuthProvider
from tollgate_identity.infrastructure.oauth import transport
from tollgate_identity.infrastructure.oauth.protocol import OAuthTokens

AUTH_URL = "https://twitter.com/i/oauth2/authorize"
TOKEN_URL = "https://api.twitter.com/2/oauth2/token"
ME_URL = "https://api.twitter.com/2/users/me"
SCOPE = "users.read tweet.read users.email"


class TwitterOAuthClient:
    """
    The token endpoint takes the client credentials as HTTP basic auth.
    ``confirmed_email`` is only present when the app was granted the
    users.email scope; an address reported there is verified.
    """

    provider = OAuthProvider.TWITTER

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
                "code_verifier": code_verifier,
            },
            auth=(self._client_id, self._client_secret),
        )

    async def fetch_identity(self, tokens: OAuthTokens) -> OAuthIdentity:
        body = await transport.get_json(
            self._http,
            self.provider.value,
            ME_URL,
            tokens.access_token,
            params={"user.fields": "id,name,profile_image_url,confirmed_email"},
        )
        info = body.get("data") if isinstance(body.get("data"), dict) else {}
        email = info.get("confirmed_email")
        account_id = transport.require_account_id(self.provider.value, info.get("id"))
        return OAuthIdentity(
            provider=self.provider,
            provider_account_id=account_id,
            email=email,
            email_verified=bool(email),
            name=info.get("name"),
            avatar_url=info.get("profile_image_url"),
            expires_at=transport.expires_at_from(tokens, utc_now()),
        )
