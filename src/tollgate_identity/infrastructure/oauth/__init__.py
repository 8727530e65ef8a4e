"""OAuth provider clients."""

from tollgate_identity.infrastructure.oauth.facebook import FacebookOAuthClient
from tollgate_identity.infrastructure.oauth.factory import build_provider_clients
from tollgate_identity.infrastructure.oauth.google import GoogleOAuthClient
from tollgate_identity.infrastructure.oauth.protocol import (
    OAuthProviderClient,
    OAuthTokens,
)
from tollgate_identity.infrastructure.oauth.twitter import TwitterOAuthClient

__all__ = [
    "FacebookOAuthClient",
    "GoogleOAuthClient",
    "OAuthProviderClient",
    "OAuthTokens",
    "TwitterOAuthClient",
    "build_provider_clients",
]
