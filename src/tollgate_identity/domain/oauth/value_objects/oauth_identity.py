"""Provider-independent results of an OAuth exchange."""

from dataclasses import dataclass
from datetime import datetime

from tollgate_identity.domain.oauth.value_objects.oauth_provider import OAuthProvider


@dataclass(frozen=True)
class OAuthIdentity:
    """The identity a provider vouched for after a code exchange.

    email is None when the provider did not disclose one; email_verified
    is only True when the provider asserts it.
    """

    provider: OAuthProvider
    provider_account_id: str
    email: str | None
    email_verified: bool
    name: str | None = None
    avatar_url: str | None = None
    expires_at: datetime | None = None


@dataclass(frozen=True)
class OAuthUrl:
    """Authorization URL to redirect the browser to, with its state."""

    url: str
    state: str
