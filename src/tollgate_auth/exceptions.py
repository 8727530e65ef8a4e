"""Authentication exceptions and stable error codes.

Every failure of the authentication core is raised as a subclass of
AuthError carrying an ErrorCode. The presentation layer maps the code to
an HTTP status and an ApiError body; messages of credential and token
errors are fixed strings so that nothing internal leaks to clients.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_TAKEN = "EMAIL_TAKEN"
    EMAIL_UNVERIFIED = "EMAIL_UNVERIFIED"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    INVALID_STATE = "INVALID_STATE"
    OAUTH_EXCHANGE_FAILED = "OAUTH_EXCHANGE_FAILED"
    OAUTH_ACCOUNT_CONFLICT = "OAUTH_ACCOUNT_CONFLICT"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_MALFORMED = "TOKEN_MALFORMED"
    TOKEN_REVOKED = "TOKEN_REVOKED"
    WRONG_TOKEN_TYPE = "WRONG_TOKEN_TYPE"
    NOT_FOUND = "NOT_FOUND"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AuthError(Exception):
    """Base exception for all authentication errors.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    code
        Stable error code for programmatic handling
    details
        Field name to list of messages, only used for validation failures
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_message: str = "Authentication error"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, list[str]] | None = None,
    ):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class ValidationError(AuthError):
    """Raised when request input is malformed."""

    code = ErrorCode.VALIDATION_ERROR
    default_message = "Validation failed"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, details={field: [message]})


class WeakPasswordError(ValidationError):
    """Raised when a password doesn't meet strength requirements."""

    default_message = "Password does not meet requirements"

    def __init__(self, message: str | None = None):
        message = message or self.default_message
        super().__init__(message, details={"password": [message]})


class InvalidCredentialsError(AuthError):
    """Raised when email or password is incorrect during login."""

    code = ErrorCode.INVALID_CREDENTIALS
    default_message = "Invalid email or password"

    def __init__(self) -> None:
        super().__init__()


class EmailTakenError(AuthError):
    """Raised when an email address is already registered."""

    code = ErrorCode.EMAIL_TAKEN
    default_message = "Email address is already registered"

    def __init__(self, email: str | None = None):
        self.email = email
        super().__init__()


class EmailUnverifiedError(AuthError):
    """Raised when login requires a verified email address."""

    code = ErrorCode.EMAIL_UNVERIFIED
    default_message = "Email address has not been verified"


class AccountLockedError(AuthError):
    """Raised when an account is locked due to too many failed login attempts."""

    code = ErrorCode.ACCOUNT_LOCKED
    default_message = "Account is locked due to too many failed login attempts"

    def __init__(self, locked_until: str | None = None):
        self.locked_until = locked_until
        message = self.default_message
        if locked_until:
            message = f"{message}. Try again after {locked_until}"
        super().__init__(message)


class InvalidStateError(AuthError):
    """Raised when an OAuth state is unknown, expired, reused or mismatched."""

    code = ErrorCode.INVALID_STATE
    default_message = "Invalid or expired OAuth state"


class OAuthExchangeError(AuthError):
    """Raised when the provider rejects the code or returns an unusable identity."""

    code = ErrorCode.OAUTH_EXCHANGE_FAILED
    default_message = "Could not complete sign-in with the provider"


class OAuthAccountConflictError(AuthError):
    """Raised when a user already has a different account linked for a provider."""

    code = ErrorCode.OAUTH_ACCOUNT_CONFLICT
    default_message = "A different account from this provider is already linked"


class TokenError(AuthError):
    """Base class for JWT verification failures."""

    default_message = "Invalid token"


class TokenExpiredError(TokenError):
    code = ErrorCode.TOKEN_EXPIRED
    default_message = "Token has expired"


class TokenMalformedError(TokenError):
    code = ErrorCode.TOKEN_MALFORMED
    default_message = "Invalid token"


class TokenRevokedError(TokenError):
    code = ErrorCode.TOKEN_REVOKED
    default_message = "Token has been revoked"


class WrongTokenTypeError(TokenError):
    code = ErrorCode.WRONG_TOKEN_TYPE
    default_message = "Invalid token type"


class NotFoundError(AuthError):
    """Raised when a user or session does not exist."""

    code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"


class StoreUnavailableError(AuthError):
    """Raised when the persistence backend cannot be reached.

    This is the only error kind that may be retried, and only for reads.
    """

    code = ErrorCode.STORE_UNAVAILABLE
    default_message = "Service temporarily unavailable"

    def __init__(self, message: str | None = None, cause: Any = None):
        self.cause = cause
        super().__init__(message)
