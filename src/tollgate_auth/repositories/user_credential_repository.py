"""Abstract repository interface for user credentials.

This interface defines the contract for password credential persistence.
Users created through an OAuth provider have no credential record.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserCredentialData:
    """Immutable credential data returned by repository."""

    user_id: str
    password_hash: str
    failed_login_attempts: int
    locked_until: datetime | None
    last_login_at: datetime | None

    def is_locked(self, now: datetime) -> bool:
        return self.locked_until is not None and self.locked_until > now


class UserCredentialRepository(ABC):
    """
    Abstract repository interface for user authentication credentials.

    Implementations must provide methods for:
    - Saving/updating password hashes
    - Managing failed login attempts and account lockout
    - Tracking last login
    """

    # Default lockout settings (can be overridden by implementations)
    MAX_FAILED_ATTEMPTS: int = 5
    LOCKOUT_DURATION_MINUTES: int = 15

    @abstractmethod
    async def save(self, user_id: str, password_hash: str) -> UserCredentialData:
        """
        Create or update credentials for a user.

        Parameters
        ----------
        user_id
            The user's identifier
        password_hash
            The bcrypt password hash

        Returns
        -------
        The saved credential data
        """

    @abstractmethod
    async def find_by_user_id(self, user_id: str) -> UserCredentialData | None:
        """Find credentials by user ID, None if the user has no password."""

    @abstractmethod
    async def increment_failed_attempts(self, user_id: str) -> int:
        """
        Increment failed login attempts for a user.

        Should automatically lock the account if max attempts exceeded.

        Returns
        -------
        The new count of failed attempts
        """

    @abstractmethod
    async def reset_failed_attempts(self, user_id: str) -> None:
        """Reset failed login attempts and clear any lockout."""

    @abstractmethod
    async def update_last_login(self, user_id: str) -> None:
        """Update last login timestamp."""

    @abstractmethod
    async def is_account_locked(self, user_id: str) -> tuple[bool, datetime | None]:
        """
        Check if an account is locked.

        Returns
        -------
        Tuple of (is_locked, locked_until) where locked_until is None
        if not locked
        """

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """Delete credentials for a user. True if deleted, False if not found."""
