"""Root pytest configuration.

Test Structure:
    tests/
    ├── tollgate_auth/         # Tokens, passwords, sessions, credentials
    │   ├── unit/
    │   └── integration/       # SQLAlchemy repositories on SQLite
    ├── tollgate_identity/     # Users, OAuth, application services
    │   ├── unit/
    │   └── integration/
    ├── tollgate/              # HTTP API and CLI
    └── shared/                # Shared fixtures and utilities

Environment Variables:
    TOLLGATE_ENV_FILE    Optional .env file loaded by the settings
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from tollgate_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")

# Settings refuse to load without a signing secret
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-for-testing-only")


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that verify database/persistence behavior",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second",
    )


@pytest.fixture(scope="session", autouse=True)
def configure_app_settings():
    """Ensure no settings cached by an import leak into the tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()
