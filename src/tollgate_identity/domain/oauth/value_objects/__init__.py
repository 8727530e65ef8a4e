from tollgate_identity.domain.oauth.value_objects.oauth_identity import (
    OAuthIdentity,
    OAuthUrl,
)
from tollgate_identity.domain.oauth.value_objects.oauth_provider import OAuthProvider

__all__ = ["OAuthIdentity", "OAuthProvider", "OAuthUrl"]
