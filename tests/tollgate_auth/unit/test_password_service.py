"""Unit tests for PasswordHashingService."""

import pytest

from tollgate_auth.exceptions import WeakPasswordError
from tollgate_auth.services import PasswordHashingService


class TestPasswordHashingService:
    """Tests for password hashing and verification."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = PasswordHashingService(rounds=4)  # Low rounds for fast tests

    def test_hash_returns_bcrypt_format(self):
        """Hash returns a bcrypt hash with the configured work factor."""
        hashed = self.service.hash("secure_password123")

        assert hashed.startswith("$2")
        assert "$04$" in hashed

    def test_verify_correct_password(self):
        """Verify returns True for the correct password."""
        hashed = self.service.hash("my_secret_password")

        assert self.service.verify("my_secret_password", hashed) is True

    def test_verify_incorrect_password(self):
        """Verify returns False for a wrong password."""
        hashed = self.service.hash("my_secret_password")

        assert self.service.verify("wrong_password", hashed) is False

    def test_verify_invalid_hash_returns_false(self):
        """Malformed hashes never verify."""
        assert self.service.verify("password", "not_a_valid_hash") is False
        assert self.service.verify("password", "") is False

    def test_hash_produces_different_hashes(self):
        """Random salts give different hashes that both verify."""
        hash1 = self.service.hash("same_password")
        hash2 = self.service.hash("same_password")

        assert hash1 != hash2
        assert self.service.verify("same_password", hash1)
        assert self.service.verify("same_password", hash2)

    def test_verify_dummy_does_not_raise(self):
        """The dummy check runs for any input."""
        self.service.verify_dummy("whatever-password")
        self.service.verify_dummy("")

    def test_needs_rehash_on_other_work_factor(self):
        """Hashes from another work factor are flagged for rehash."""
        hashed = self.service.hash("secure_password123")
        stronger = PasswordHashingService(rounds=5)

        assert self.service.needs_rehash(hashed) is False
        assert stronger.needs_rehash(hashed) is True
        assert self.service.needs_rehash("garbage") is True


class TestPasswordValidation:
    """Tests for password strength validation."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = PasswordHashingService(rounds=4)

    def test_valid_password_passes(self):
        """An 8 character password is accepted."""
        self.service.validate_strength("abcdefgh")

    def test_empty_password_rejected(self):
        """Empty passwords are rejected."""
        with pytest.raises(WeakPasswordError, match="empty"):
            self.service.validate_strength("")

    def test_short_password_rejected(self):
        """Passwords under 8 characters are rejected."""
        with pytest.raises(WeakPasswordError, match="at least 8"):
            self.service.validate_strength("short")

    def test_password_over_72_bytes_rejected(self):
        """bcrypt only reads 72 bytes, longer passwords are rejected."""
        with pytest.raises(WeakPasswordError, match="72 bytes"):
            self.service.validate_strength("a" * 73)

    def test_multibyte_password_counted_in_bytes(self):
        """The byte limit applies to the UTF-8 encoding."""
        # 25 characters, 75 bytes
        with pytest.raises(WeakPasswordError):
            self.service.validate_strength("€" * 25)

    def test_weak_password_error_has_field_details(self):
        """The error carries the password field for the API body."""
        with pytest.raises(WeakPasswordError) as exc_info:
            self.service.validate_strength("short")

        assert list(exc_info.value.details) == ["password"]

    def test_hash_validates_strength(self):
        """Hashing refuses weak passwords."""
        with pytest.raises(WeakPasswordError):
            self.service.hash("short")
