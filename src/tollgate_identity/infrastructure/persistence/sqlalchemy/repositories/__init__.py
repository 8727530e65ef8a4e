# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy repository implementations for identity management."""

from tollgate_identity.infrastructure.persistence.sqlalchemy.repositories.oauth_account_repository import (
    OAuthAccountRepositorySQLAlchemy,
)
from tollgate_identity.infrastructure.persistence.sqlalchemy.repositories.user_repository import (
    UserRepositorySQLAlchemy,
)

__all__ = [
    "OAuthAccountRepositorySQLAlchemy",
    "UserRepositorySQLAlchemy",
]
