"""Tollgate Auth - Generic authentication infrastructure.

This package provides authentication infrastructure that is independent
of any specific identity model. It handles:
- Password hashing (bcrypt)
- JWT token creation and verification
- Session-bound token issuing, refresh and rotation
- Session and credential storage (with pluggable persistence)

Architecture:
    tollgate_auth/
    ├── services/           # Password hashing, JWT, token lifecycle
    ├── repositories/       # Abstract interfaces
    ├── persistence/        # Implementations by technology
    │   ├── memory/         # In-process implementation
    │   └── sqlalchemy/     # SQLAlchemy implementation
    ├── shared/             # Identifiers, time, retry helpers
    ├── schemas.py          # Data classes
    └── exceptions.py       # Error taxonomy

Usage:
    from tollgate_auth import JWTService, TokenService, PasswordHashingService

    from tollgate_auth.persistence.sqlalchemy import (
        SessionRepositorySQLAlchemy,
        UserCredentialRepositorySQLAlchemy,
        AuthBase,
    )
"""

from tollgate_auth.exceptions import (
    AccountLockedError,
    AuthError,
    EmailTakenError,
    EmailUnverifiedError,
    ErrorCode,
    InvalidCredentialsError,
    InvalidStateError,
    NotFoundError,
    OAuthAccountConflictError,
    OAuthExchangeError,
    StoreUnavailableError,
    TokenError,
    TokenExpiredError,
    TokenMalformedError,
    TokenRevokedError,
    ValidationError,
    WeakPasswordError,
    WrongTokenTypeError,
)
from tollgate_auth.repositories import (
    SessionData,
    SessionRepository,
    UserCredentialData,
    UserCredentialRepository,
)
from tollgate_auth.schemas import (
    RefreshResult,
    SessionMetadata,
    TokenPair,
    TokenPayload,
    TokenSubject,
    TokenType,
)
from tollgate_auth.services import (
    JWTService,
    PasswordHasher,
    PasswordHashingService,
    RefreshPolicy,
    TokenService,
)

__all__ = [
    # Services
    "JWTService",
    "PasswordHasher",
    "PasswordHashingService",
    "RefreshPolicy",
    "TokenService",
    # Repositories (interfaces)
    "SessionData",
    "SessionRepository",
    "UserCredentialData",
    "UserCredentialRepository",
    # Schemas
    "RefreshResult",
    "SessionMetadata",
    "TokenPair",
    "TokenPayload",
    "TokenSubject",
    "TokenType",
    # Exceptions
    "AccountLockedError",
    "AuthError",
    "EmailTakenError",
    "EmailUnverifiedError",
    "ErrorCode",
    "InvalidCredentialsError",
    "InvalidStateError",
    "NotFoundError",
    "OAuthAccountConflictError",
    "OAuthExchangeError",
    "StoreUnavailableError",
    "TokenError",
    "TokenExpiredError",
    "TokenMalformedError",
    "TokenRevokedError",
    "ValidationError",
    "WeakPasswordError",
    "WrongTokenTypeError",
]
