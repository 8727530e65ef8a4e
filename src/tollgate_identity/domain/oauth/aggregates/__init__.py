from tollgate_identity.domain.oauth.aggregates.oauth_account import OAuthAccount

__all__ = ["OAuthAccount"]
