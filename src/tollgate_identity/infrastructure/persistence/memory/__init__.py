# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""In-memory identity persistence for single-process deployments and tests."""

from tollgate_identity.infrastructure.persistence.memory.oauth_account_repository import (
    InMemoryOAuthAccountRepository,
)
from tollgate_identity.infrastructure.persistence.memory.oauth_state_store import (
    InMemoryOAuthStateStore,
)
from tollgate_identity.infrastructure.persistence.memory.user_repository import (
    InMemoryUserRepository,
)

__all__ = [
    "InMemoryOAuthAccountRepository",
    "InMemoryOAuthStateStore",
    "InMemoryUserRepository",
]
