"""Facebook Login (Graph API)."""

import httpx

from tollgate_auth.shared.time import utc_now
from tollgate_identity.domain.oauth import OAuthIdentity, OAuthProvider
from tollgate_identity.infrastructure.oauth import transport
from tollgate_identity.infrastructure.oauth.protocol import OAuthTokens

GRAPH_VERSION = "v19.0"
AUTH_URL = f"https://www.facebook.com/{GRAPH_VERSION}/dialog/oauth"
TOKEN_URL = f"https://graph.facebook.com/{GRAPH_VERSION}/oauth/access_token"
ME_URL = f"https://graph.facebook.com/{GRAPH_VERSION}/me"
SCOPE = "email,public_profile"


class FacebookOAuthClient:
    """
    Facebook does not state whether the returned address was verified, so
    identities from Facebook are always reported as unverified.
    """

    provider = OAuthProvider.FACEBOOK

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
            ME_URL,
            tokens.access_token,
            params={"fields": "id,name,email,picture.type(large)"},
        )
        picture = info.get("picture")
        avatar_url = None
        if isinstance(picture, dict) and isinstance(picture.get("data"), dict):
            avatar_url = picture["data"].get("url")
        account_id = transport.require_account_id(self.provider.value, info.get("id"))
        return OAuthIdentity(
            provider=self.provider,
            provider_account_id=account_id,
            email=info.get("email"),
            email_verified=False,
            name=info.get("name"),
            avatar_url=avatar_url,
            expires_at=transport.expires_at_from(tokens, utc_now()),
        )
