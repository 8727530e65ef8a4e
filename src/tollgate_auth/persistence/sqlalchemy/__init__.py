"""SQLAlchemy implementation for tollgate_auth persistence.

Provides:
- AuthBase: Declarative base shared by all tollgate models
- SessionModel, UserCredentialModel: SQLAlchemy models
- SessionRepositorySQLAlchemy, UserCredentialRepositorySQLAlchemy

Examples
--------
# In your Alembic env.py or migration setup:
from tollgate_auth.persistence.sqlalchemy import AuthBase
target_metadata = AuthBase.metadata
"""

from tollgate_auth.persistence.sqlalchemy.base import AuthBase, TimestampMixin
from tollgate_auth.persistence.sqlalchemy.models import (
    SessionModel,
    UserCredentialModel,
)
from tollgate_auth.persistence.sqlalchemy.repositories import (
    SessionRepositorySQLAlchemy,
    UserCredentialRepositorySQLAlchemy,
)

__all__ = [
    "AuthBase",
    "SessionModel",
    "SessionRepositorySQLAlchemy",
    "TimestampMixin",
    "UserCredentialModel",
    "UserCredentialRepositorySQLAlchemy",
]
