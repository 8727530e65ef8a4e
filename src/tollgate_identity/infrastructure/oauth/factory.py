"""Build provider clients from settings."""

import logging

import httpx

from tollgate_config import Settings
from tollgate_identity.domain.oauth import OAuthProvider
from tollgate_identity.infrastructure.oauth.facebook import FacebookOAuthClient
from tollgate_identity.infrastructure.oauth.google import GoogleOAuthClient
from tollgate_identity.infrastructure.oauth.protocol import OAuthProviderClient
from tollgate_identity.infrastructure.oauth.twitter import TwitterOAuthClient

logger = logging.getLogger(__name__)

_CLIENT_CLASSES = {
    OAuthProvider.GOOGLE: GoogleOAuthClient,
    OAuthProvider.FACEBOOK: FacebookOAuthClient,
    OAuthProvider.TWITTER: TwitterOAuthClient,
}


def build_provider_clients(
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> dict[OAuthProvider, OAuthProviderClient]:
    """Create a client for every provider with both client id and secret set."""
    clients: dict[OAuthProvider, OAuthProviderClient] = {}
    base = settings.oauth_redirect_base_url.rstrip("/")

    for provider, client_class in _CLIENT_CLASSES.items():
        client_id: str = getattr(settings, f"oauth_{provider.value}_client_id")
        secret = getattr(settings, f"oauth_{provider.value}_client_secret")
        if not client_id or secret is None:
            continue
        clients[provider] = client_class(
            client_id=client_id,
            client_secret=secret.get_secret_value(),
            redirect_uri=f"{base}/{provider.value}/callback",
            http_client=http_client,
        )

    logger.debug("Configured OAuth providers: %s", [p.value for p in clients])
    return clients
