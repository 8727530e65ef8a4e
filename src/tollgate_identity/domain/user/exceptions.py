"""User domain exceptions.

Validation failures reuse the shared error taxonomy so that they reach
API clients as VALIDATION_ERROR with per-field details.
"""

from tollgate_auth.exceptions import ValidationError


class InvalidEmailError(ValidationError):
    """Raised when email format is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message, details={"email": [message]})


class InvalidNameError(ValidationError):
    """Raised when a display name is empty or too long."""

    def __init__(self, message: str) -> None:
        super().__init__(message, details={"name": [message]})
