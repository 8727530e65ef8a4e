"""Tollgate Identity - Users, OAuth accounts and the authentication use cases.

This package handles all identity-related concerns:
- User management (registration, roles, public profile)
- Password login through the credential verifier
- OAuth sign-in and account linking
- Session-bound token issuing via tollgate_auth

The generic pieces (hashing, JWT, sessions, error codes) live in
tollgate_auth; this package only adds the identity model on top.
"""

from tollgate_identity.application.context import UserContext
from tollgate_identity.application.services import (
    AuthenticationService,
    AuthResult,
    CredentialVerifier,
    OAuthFlowManager,
)
from tollgate_identity.domain.oauth import (
    OAuthAccount,
    OAuthAccountRepository,
    OAuthIdentity,
    OAuthProvider,
    OAuthStateData,
    OAuthStateStore,
    OAuthUrl,
)
from tollgate_identity.domain.user import (
    Email,
    InvalidEmailError,
    InvalidNameError,
    PublicUser,
    User,
    UserRepository,
    UserRole,
)

__all__ = [
    # Domain - User
    "Email",
    "InvalidEmailError",
    "InvalidNameError",
    "PublicUser",
    "User",
    "UserRepository",
    "UserRole",
    # Domain - OAuth
    "OAuthAccount",
    "OAuthAccountRepository",
    "OAuthIdentity",
    "OAuthProvider",
    "OAuthStateData",
    "OAuthStateStore",
    "OAuthUrl",
    # Application
    "AuthResult",
    "AuthenticationService",
    "CredentialVerifier",
    "OAuthFlowManager",
    "UserContext",
]
