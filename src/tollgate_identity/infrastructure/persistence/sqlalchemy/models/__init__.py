# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy models for identity management."""

from tollgate_identity.infrastructure.persistence.sqlalchemy.models.oauth_account_model import (
    OAuthAccountModel,
)
from tollgate_identity.infrastructure.persistence.sqlalchemy.models.user_model import (
    UserModel,
)

__all__ = [
    "OAuthAccountModel",
    "UserModel",
]
