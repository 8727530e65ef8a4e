"""Abstract repository interface for sessions.

A session anchors refresh tokens to a user and makes them revocable.
Refresh-token rotation replaces a session by a successor in the same
family; the replacement must be atomic so that two concurrent refreshes
of one token cannot both succeed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from tollgate_auth.schemas import SessionMetadata


@dataclass(frozen=True)
class SessionData:
    """Immutable session record."""

    id: str
    user_id: str
    family_id: str
    expires_at: datetime
    created_at: datetime
    user_agent: str | None = None
    ip_address: str | None = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionRepository(ABC):
    """Repository interface for session records.

    Deletes are idempotent: deleting an absent session is not an error.
    Reads never return expired sessions (lazy expiry).
    """

    @abstractmethod
    async def create(
        self,
        user_id: str,
        metadata: SessionMetadata,
        expires_at: datetime,
        family_id: str | None = None,
    ) -> SessionData:
        """Create a session. A new session starts its own family unless given one."""

    @abstractmethod
    async def get(self, session_id: str) -> SessionData | None:
        """Return the live session, or None if absent or expired."""

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """Delete a session. True if a record was removed."""

    @abstractmethod
    async def delete_all_for_user(self, user_id: str) -> int:
        """Delete every session of a user and return how many were removed."""

    @abstractmethod
    async def list_active_for_user(self, user_id: str) -> list[SessionData]:
        """List unexpired sessions of a user, newest first."""

    @abstractmethod
    async def rotate(self, session_id: str, expires_at: datetime) -> SessionData | None:
        """
        Atomically replace a live session by a successor.

        The old record is deleted and a new one with the same user, family
        and audit metadata is created. Returns None if the session was
        already gone (or expired), in which case nothing is created.
        """

    @abstractmethod
    async def delete_family(self, family_id: str) -> int:
        """Delete every session of a rotation family."""

    @abstractmethod
    async def purge_expired(self) -> int:
        """Remove expired records for storage reclamation."""
