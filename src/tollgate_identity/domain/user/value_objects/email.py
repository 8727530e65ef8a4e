"""Email value object.

Provides validated, normalized email addresses for user identification.
"""

import re
from dataclasses import dataclass

from tollgate_identity.domain.user.exceptions import InvalidEmailError

# Minimal shape check: something@something.something without whitespace
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MAX_EMAIL_LENGTH = 255


def normalize_email(value: str) -> str:
    """Trim and lower-case an email address without validating it."""
    return (value or "").strip().lower()


@dataclass(frozen=True)
class Email:
    """Value object representing a validated email address."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            msg = "Email cannot be empty"
            raise InvalidEmailError(msg)

        normalized = normalize_email(self.value)

        if len(normalized) > MAX_EMAIL_LENGTH or not EMAIL_PATTERN.match(normalized):
            msg = "Invalid email address"
            raise InvalidEmailError(msg)

        # Replace value with normalized version (frozen dataclass workaround)
        object.__setattr__(self, "value", normalized)

    @classmethod
    def is_valid(cls, value: str) -> bool:
        try:
            cls(value)
        except InvalidEmailError:
            return False
        return True

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email('{self.value}')"
