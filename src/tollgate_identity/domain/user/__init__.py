"""User domain manages user identity only.

This domain handles:
- User aggregate (identity: id, email, name, role, verification)
- Public projection of a user
- Email validation and normalization
"""

from tollgate_identity.domain.user.aggregates import PublicUser, User, validate_name
from tollgate_identity.domain.user.exceptions import InvalidEmailError, InvalidNameError
from tollgate_identity.domain.user.repositories import UserRepository
from tollgate_identity.domain.user.value_objects import (
    Email,
    UserRole,
    normalize_email,
)

__all__ = [
    "Email",
    "InvalidEmailError",
    "InvalidNameError",
    "PublicUser",
    "User",
    "UserRepository",
    "UserRole",
    "normalize_email",
    "validate_name",
]
