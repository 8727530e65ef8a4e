"""Storage for in-flight OAuth authorization attempts."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from tollgate_identity.domain.oauth.value_objects import OAuthProvider


@dataclass(frozen=True)
class OAuthStateData:
    """Anti-forgery state of one authorization attempt.

    code_verifier is the PKCE secret whose S256 challenge went into the
    authorization URL.
    """

    state: str
    provider: OAuthProvider
    code_verifier: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class OAuthStateStore(ABC):
    """Single-use store for OAuth state values."""

    @abstractmethod
    async def save(self, data: OAuthStateData) -> None:
        """Remember a freshly generated state."""

    @abstractmethod
    async def consume(self, state: str) -> OAuthStateData | None:
        """
        Atomically remove and return a state.

        Returns None for unknown, already consumed or expired states. Of
        several concurrent callers with the same value at most one gets it.
        """

    @abstractmethod
    async def purge_expired(self) -> int:
        """Drop expired states."""
