"""Repository interfaces for tollgate_auth.

This package defines abstract repository interfaces that can be implemented
by different persistence technologies. Implementations live under
tollgate_auth.persistence.
"""

from tollgate_auth.repositories.session_repository import (
    SessionData,
    SessionRepository,
)
from tollgate_auth.repositories.user_credential_repository import (
    UserCredentialData,
    UserCredentialRepository,
)

__all__ = [
    "SessionData",
    "SessionRepository",
    "UserCredentialData",
    "UserCredentialRepository",
]
