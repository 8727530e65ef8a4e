"""Pytest fixtures for API integration tests.

The API runs against a SQLite file per test. TestClient drives each
request on its own event loop, so the engine uses NullPool and never
hands a connection from one loop to the next.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Import models to register them with AuthBase.metadata
import tollgate_identity.infrastructure.persistence.sqlalchemy.models  # noqa: F401
from tollgate.presentation.api.app import API_V1_PREFIX, create_app
from tollgate.presentation.api.dependencies import (
    get_db_session,
    get_oauth_state_store,
)
from tollgate_auth.persistence.sqlalchemy import AuthBase
from tollgate_config import Settings, get_settings

TEST_PASSWORD = "SecurePassword123!"


@pytest.fixture
def api_v1_prefix() -> str:
    """Get the API v1 prefix for building URLs."""
    return API_V1_PREFIX


@pytest.fixture
def api_settings(tmp_path) -> Settings:
    """Test API settings with debug enabled and Google sign-in configured."""
    return Settings(
        jwt_secret_key=SecretStr("test-jwt-secret-for-testing-only"),
        database_url_override=f"sqlite+aiosqlite:///{tmp_path}/test.db",
        debug=True,
        api_cors_origins="http://localhost:3000",
        password_hash_rounds=4,  # bcrypt minimum, keeps tests fast
        oauth_google_client_id="google-client-id",
        oauth_google_client_secret=SecretStr("google-client-secret"),
    )


@pytest.fixture
def test_db_engine(api_settings):
    """Create the test database with all tables."""
    engine = create_async_engine(api_settings.database_url, poolclass=NullPool)

    async def _create_all():
        async with engine.begin() as conn:
            await conn.run_sync(AuthBase.metadata.create_all)

    loop = asyncio.new_event_loop()
    loop.run_until_complete(_create_all())

    yield engine

    loop.run_until_complete(engine.dispose())
    loop.close()


@pytest.fixture
def test_app(api_settings, test_db_engine):
    """Create the app with database and settings dependencies overridden."""
    get_oauth_state_store.cache_clear()
    app = create_app(settings=api_settings)

    test_session_maker = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db_session():
        async with test_session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_settings] = lambda: api_settings

    yield app

    get_oauth_state_store.cache_clear()


@pytest.fixture
def test_client(test_app) -> TestClient:
    """Create a test client; the lifespan is not run."""
    return TestClient(test_app)


@pytest.fixture
def registered_user_data() -> dict:
    """Test user registration data."""
    return {
        "email": "test@example.com",
        "password": TEST_PASSWORD,
        "name": "Test User",
    }


@pytest.fixture
def registered_user(test_client, registered_user_data, api_v1_prefix) -> dict:
    """Register the test user and return the response data."""
    response = test_client.post(
        f"{api_v1_prefix}/auth/register",
        json=registered_user_data,
    )
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
def auth_headers(registered_user) -> dict:
    """Get auth headers for a registered user."""
    return {"Authorization": f"Bearer {registered_user['accessToken']}"}
