# ruff: noqa: E501 - Long import paths in __init__.py re-exports
from tollgate_auth.persistence.sqlalchemy.repositories.session_repository import (
    SessionRepositorySQLAlchemy,
)
from tollgate_auth.persistence.sqlalchemy.repositories.user_credential_repository import (
    UserCredentialRepositorySQLAlchemy,
)

__all__ = ["SessionRepositorySQLAlchemy", "UserCredentialRepositorySQLAlchemy"]
