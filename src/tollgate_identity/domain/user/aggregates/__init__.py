from tollgate_identity.domain.user.aggregates.user import (
    PublicUser,
    User,
    validate_name,
)

__all__ = ["PublicUser", "User", "validate_name"]
