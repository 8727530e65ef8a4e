"""OAuth domain: provider accounts linked to users and in-flight state."""

from tollgate_identity.domain.oauth.aggregates import OAuthAccount
from tollgate_identity.domain.oauth.repositories import (
    OAuthAccountRepository,
    OAuthStateData,
    OAuthStateStore,
)
from tollgate_identity.domain.oauth.value_objects import (
    OAuthIdentity,
    OAuthProvider,
    OAuthUrl,
)

__all__ = [
    "OAuthAccount",
    "OAuthAccountRepository",
    "OAuthIdentity",
    "OAuthProvider",
    "OAuthStateData",
    "OAuthStateStore",
    "OAuthUrl",
]
