"""In-process repository implementations.

Suitable for tests and single-process deployments; state is lost on exit.
"""

from tollgate_auth.persistence.memory.session_repository import (
    InMemorySessionRepository,
)
from tollgate_auth.persistence.memory.user_credential_repository import (
    InMemoryUserCredentialRepository,
)

__all__ = ["InMemorySessionRepository", "InMemoryUserCredentialRepository"]
