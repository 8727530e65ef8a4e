"""
Pytest configuration for tollgate_identity tests.

This conftest provides fixtures specific to the identity domain
(users, OAuth accounts).
"""

import pytest

from tollgate_identity.domain.user import User, UserRole


@pytest.fixture
def test_user() -> User:
    """Create a standard test user."""
    return User.create("test@example.com", name="Test User")


@pytest.fixture
def admin_user() -> User:
    """Create an admin test user."""
    return User.create("admin@example.com", name="Admin", role=UserRole.ADMIN)


@pytest.fixture
def verified_user() -> User:
    """Create a user whose email address is verified."""
    return User.create("verified@example.com", name="Verified", email_verified=True)
