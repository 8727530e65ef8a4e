"""SQLAlchemy implementation for tollgate_identity persistence.

Provides:
- IdentityBase: Declarative base for identity models (shared with auth)
- UserModel: SQLAlchemy model for users
- OAuthAccountModel: SQLAlchemy model for linked provider accounts
- UserRepositorySQLAlchemy: Repository implementation for users
- OAuthAccountRepositorySQLAlchemy: Repository implementation for OAuth accounts
"""

from tollgate_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from tollgate_identity.infrastructure.persistence.sqlalchemy.models import (
    OAuthAccountModel,
    UserModel,
)
from tollgate_identity.infrastructure.persistence.sqlalchemy.repositories import (
    OAuthAccountRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

__all__ = [
    "IdentityBase",
    "OAuthAccountModel",
    "OAuthAccountRepositorySQLAlchemy",
    "UserModel",
    "UserRepositorySQLAlchemy",
]
