from tollgate_identity.domain.oauth.repositories.oauth_account_repository import (
    OAuthAccountRepository,
)
from tollgate_identity.domain.oauth.repositories.oauth_state_store import (
    OAuthStateData,
    OAuthStateStore,
)

__all__ = ["OAuthAccountRepository", "OAuthStateData", "OAuthStateStore"]
