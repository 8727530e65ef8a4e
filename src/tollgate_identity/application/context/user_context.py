"""User context for request-scoped user identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tollgate_identity.domain.user import UserRole

if TYPE_CHECKING:
    from tollgate_auth import TokenPayload


@dataclass(frozen=True)
class UserContext:
    """Immutable context for the current authenticated request.

    Built from a verified access token, so it reflects the user's email
    and role at token issue time.
    """

    user_id: str
    email: str
    role: UserRole
    session_id: str

    @classmethod
    def from_token(cls, payload: TokenPayload) -> UserContext:
        return cls(
            user_id=payload.sub,
            email=payload.email,
            role=UserRole(payload.role),
            session_id=payload.sid,
        )

    def __str__(self) -> str:
        return f"UserContext({self.email})"
