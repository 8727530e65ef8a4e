from enum import Enum


class UserRole(str, Enum):
    """User roles. Carried in every token's ``role`` claim."""

    USER = "user"
    ADMIN = "admin"
    MODERATOR = "moderator"
