"""Application services for identity management."""

from tollgate_identity.application.services.authentication_service import (
    AuthenticationService,
    AuthResult,
)
from tollgate_identity.application.services.credential_verifier import (
    CredentialVerifier,
)
from tollgate_identity.application.services.oauth_flow_manager import (
    OAuthFlowManager,
    code_challenge_for,
)

__all__ = [
    "AuthResult",
    "AuthenticationService",
    "CredentialVerifier",
    "OAuthFlowManager",
    "code_challenge_for",
]
