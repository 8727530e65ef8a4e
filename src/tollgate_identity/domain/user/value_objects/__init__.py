"""Value objects for the user domain."""

from tollgate_identity.domain.user.value_objects.email import Email, normalize_email
from tollgate_identity.domain.user.value_objects.user_role import UserRole

__all__ = [
    "Email",
    "UserRole",
    "normalize_email",
]
