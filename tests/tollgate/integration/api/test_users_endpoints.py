"""Integration tests for user profile endpoints and error rendering."""

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from tollgate.presentation.api.dependencies import get_db_session


class TestPublicProfile:
    """Tests for GET /api/v1/users/{user_id}."""

    def test_public_profile_hides_private_fields(
        self,
        test_client: TestClient,
        registered_user: dict,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        """Only id, name, avatar and creation time are exposed."""
        user_id = registered_user["user"]["id"]

        response = test_client.get(
            f"{api_v1_prefix}/users/{user_id}",
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == user_id
        assert data["name"] == "Test User"
        assert "email" not in data
        assert "role" not in data

    def test_unknown_user(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        response = test_client.get(
            f"{api_v1_prefix}/users/user_01h455vb4pex5vsknk084sn02q",
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_requires_authentication(
        self,
        test_client: TestClient,
        registered_user: dict,
        api_v1_prefix: str,
    ):
        user_id = registered_user["user"]["id"]

        response = test_client.get(f"{api_v1_prefix}/users/{user_id}")

        assert response.status_code == 401


class TestUnhandledErrors:
    """Unexpected exceptions become a generic 500 body."""

    def test_internal_error_hides_details(self, test_app):
        @test_app.get("/boom")
        async def boom():
            msg = "secret connection string"
            raise RuntimeError(msg)

        client = TestClient(test_app, raise_server_exceptions=False)

        response = client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body == {
            "success": False,
            "error": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }


class TestStoreUnavailable:
    """An unreachable database is reported as 503, not as a server error."""

    def test_login_with_database_down(self, test_app, tmp_path, api_v1_prefix: str):
        # SQLite cannot create the missing directory, so every connect fails
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path}/missing/down.db",
            poolclass=NullPool,
        )
        session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        async def unreachable_db_session():
            async with session_maker() as session:
                yield session

        test_app.dependency_overrides[get_db_session] = unreachable_db_session
        client = TestClient(test_app, raise_server_exceptions=False)

        response = client.post(
            f"{api_v1_prefix}/auth/login",
            json={"email": "test@example.com", "password": "SecurePassword123!"},
        )

        assert response.status_code == 503
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "STORE_UNAVAILABLE"
        assert "missing" not in body["error"]
