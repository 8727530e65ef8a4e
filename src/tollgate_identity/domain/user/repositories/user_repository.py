"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union

from tollgate_identity.domain.user.aggregates.user import User
from tollgate_identity.domain.user.value_objects.email import Email


class UserRepository(ABC):
    """Repository interface for User aggregates."""

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find a user by their (normalized) email address."""

    @abstractmethod
    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        """Check if a user exists with the given email."""

    @abstractmethod
    async def save(self, user: User) -> None:
        """Save or update a user.

        Raises EmailTakenError if another user holds the email address.
        """

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """Delete a user by ID. True if a user was removed."""

    @abstractmethod
    async def count(self) -> int:
        """Count total users."""
