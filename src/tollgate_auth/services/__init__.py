"""Authentication services.

Provides password hashing, JWT signing and the session-bound token service.
"""

from tollgate_auth.services.jwt_service import JWTService
from tollgate_auth.services.password_service import (
    PasswordHasher,
    PasswordHashingService,
)
from tollgate_auth.services.token_service import RefreshPolicy, TokenService

__all__ = [
    "JWTService",
    "PasswordHasher",
    "PasswordHashingService",
    "RefreshPolicy",
    "TokenService",
]
