"""Unit tests for AuthenticationService wired with in-memory stores."""

import pytest

from tollgate_auth import (
    EmailTakenError,
    InvalidCredentialsError,
    JWTService,
    NotFoundError,
    PasswordHashingService,
    SessionMetadata,
    TokenRevokedError,
    TokenService,
    TokenType,
    ValidationError,
    WeakPasswordError,
)
from tollgate_auth.persistence.memory import (
    InMemorySessionRepository,
    InMemoryUserCredentialRepository,
)
from tollgate_identity.application.services import (
    AuthenticationService,
    CredentialVerifier,
)
from tollgate_identity.domain.user import UserRole
from tollgate_identity.infrastructure.persistence.memory import (
    InMemoryOAuthAccountRepository,
    InMemoryUserRepository,
)

TEST_EMAIL = "user@example.com"
TEST_PASSWORD = "secure-password-123"


class AuthenticationServiceTestBase:
    def setup_method(self):
        """Set up test fixtures."""
        self.users = InMemoryUserRepository()
        self.credentials = InMemoryUserCredentialRepository()
        self.sessions = InMemorySessionRepository()
        self.oauth_accounts = InMemoryOAuthAccountRepository()
        self.password_service = PasswordHashingService(rounds=4)
        self.jwt_service = JWTService(secret_key="test-secret-key-for-unit-tests")
        self.token_service = TokenService(self.jwt_service, self.sessions)
        self.service = AuthenticationService(
            user_repository=self.users,
            credential_repository=self.credentials,
            session_repository=self.sessions,
            oauth_account_repository=self.oauth_accounts,
            password_service=self.password_service,
            token_service=self.token_service,
            credential_verifier=CredentialVerifier(
                user_repository=self.users,
                credential_repository=self.credentials,
                password_hasher=self.password_service,
            ),
        )


class TestRegister(AuthenticationServiceTestBase):
    """Tests for registration."""

    @pytest.mark.asyncio
    async def test_register_creates_user_session_and_tokens(self):
        """Registration signs the new user in."""
        metadata = SessionMetadata(user_agent="pytest", ip_address="127.0.0.1")

        result = await self.service.register(
            TEST_EMAIL,
            TEST_PASSWORD,
            "Test User",
            metadata=metadata,
        )

        assert result.user.email == TEST_EMAIL
        assert result.session.user_id == result.user.id
        assert result.session.user_agent == "pytest"
        payload = self.jwt_service.decode(result.tokens.access_token, TokenType.ACCESS)
        assert payload.sub == result.user.id
        assert payload.sid == result.session.id

    @pytest.mark.asyncio
    async def test_register_stores_hash_not_password(self):
        """Only the bcrypt hash is persisted."""
        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD, "Test User")

        credential = await self.credentials.find_by_user_id(result.user.id)
        assert credential.password_hash != TEST_PASSWORD
        assert self.password_service.verify(TEST_PASSWORD, credential.password_hash)

    @pytest.mark.asyncio
    async def test_first_user_is_admin(self):
        """The first registered user gets the admin role."""
        first = await self.service.register(TEST_EMAIL, TEST_PASSWORD, "First")
        second = await self.service.register(
            "other@example.com",
            TEST_PASSWORD,
            "Second",
        )

        assert first.user.role is UserRole.ADMIN
        assert second.user.role is UserRole.USER

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self):
        """Emails are unique after normalization."""
        await self.service.register(TEST_EMAIL, TEST_PASSWORD, "Test User")

        with pytest.raises(EmailTakenError):
            await self.service.register(
                "  USER@Example.com ",
                TEST_PASSWORD,
                "Someone Else",
            )

    @pytest.mark.asyncio
    async def test_invalid_fields_reported_together(self):
        """Every invalid field is listed in the error details."""
        with pytest.raises(ValidationError) as exc_info:
            await self.service.register("not-an-email", "short", "   ")

        assert set(exc_info.value.details) == {"email", "password", "name"}
        assert await self.users.count() == 0

    @pytest.mark.asyncio
    async def test_weak_password_only(self):
        """A lone password problem is still a validation error on that field."""
        with pytest.raises(ValidationError) as exc_info:
            await self.service.register(TEST_EMAIL, "short", "Test User")

        assert list(exc_info.value.details) == ["password"]


class TestLoginAndTokens(AuthenticationServiceTestBase):
    """Tests for login, refresh and access token verification."""

    async def _register(self):
        return await self.service.register(TEST_EMAIL, TEST_PASSWORD, "Test User")

    @pytest.mark.asyncio
    async def test_login_opens_new_session(self):
        """Each login creates its own session."""
        registered = await self._register()

        result = await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        assert result.user == registered.user
        assert result.session.id != registered.session.id
        sessions = await self.service.list_sessions(registered.user.id)
        assert len(sessions) == 2

    @pytest.mark.asyncio
    async def test_login_wrong_password(self):
        """Wrong passwords fail with the generic credentials error."""
        await self._register()

        with pytest.raises(InvalidCredentialsError):
            await self.service.login(TEST_EMAIL, "wrong-password")

    @pytest.mark.asyncio
    async def test_verify_access_token(self):
        """Access tokens verify to their claims."""
        registered = await self._register()

        payload = await self.service.verify_access_token(
            registered.tokens.access_token,
        )

        assert payload.user_id == registered.user.id
        assert payload.role == UserRole.ADMIN.value

    @pytest.mark.asyncio
    async def test_refresh_rotates_session(self):
        """Refreshing returns new tokens bound to a successor session."""
        registered = await self._register()

        refreshed = await self.service.refresh(registered.tokens.refresh_token)

        assert refreshed.refresh_token is not None
        assert refreshed.session.id != registered.session.id
        assert refreshed.session.family_id == registered.session.family_id
        assert await self.sessions.get(registered.session.id) is None

    @pytest.mark.asyncio
    async def test_refresh_picks_up_role_change(self):
        """Refreshed tokens carry the stored role, not the presented claim."""
        registered = await self._register()
        user = await self.users.find_by_id(registered.user.id)
        user.change_role(UserRole.MODERATOR)
        await self.users.save(user)

        refreshed = await self.service.refresh(registered.tokens.refresh_token)

        access = await self.service.verify_access_token(refreshed.access_token)
        rotated = self.jwt_service.decode(refreshed.refresh_token, TokenType.REFRESH)
        assert access.role == UserRole.MODERATOR.value
        assert rotated.role == UserRole.MODERATOR.value

    @pytest.mark.asyncio
    async def test_refresh_for_deleted_user_revokes_family(self):
        """A refresh token outliving its user is revoked with its family."""
        registered = await self._register()
        other = await self.service.login(TEST_EMAIL, TEST_PASSWORD)
        await self.users.delete(registered.user.id)

        with pytest.raises(TokenRevokedError):
            await self.service.refresh(registered.tokens.refresh_token)

        assert await self.sessions.get(registered.session.id) is None
        assert await self.sessions.get(other.session.id) is not None

    @pytest.mark.asyncio
    async def test_logout_revokes_refresh_token(self):
        """A logged out session cannot be refreshed."""
        registered = await self._register()

        await self.service.logout(registered.session.id)

        with pytest.raises(TokenRevokedError):
            await self.service.refresh(registered.tokens.refresh_token)

    @pytest.mark.asyncio
    async def test_logout_twice_is_harmless(self):
        """Logging out an ended session does nothing."""
        registered = await self._register()

        await self.service.logout(registered.session.id)
        await self.service.logout(registered.session.id)

    @pytest.mark.asyncio
    async def test_logout_all_revokes_every_session(self):
        """logout_all ends all sessions and reports how many."""
        first = await self._register()
        second = await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        removed = await self.service.logout_all(first.user.id)

        assert removed == 2
        for result in (first, second):
            with pytest.raises(TokenRevokedError):
                await self.service.refresh(result.tokens.refresh_token)


class TestAccountManagement(AuthenticationServiceTestBase):
    """Tests for get_user, change_password and delete_account."""

    @pytest.mark.asyncio
    async def test_get_unknown_user(self):
        """Unknown ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await self.service.get_user("usr_missing")

    @pytest.mark.asyncio
    async def test_change_password_ends_sessions(self):
        """After a password change the old password fails and sessions end."""
        registered = await self.service.register(
            TEST_EMAIL,
            TEST_PASSWORD,
            "Test User",
        )

        await self.service.change_password(
            registered.user.id,
            TEST_PASSWORD,
            "new-secure-password",
        )

        assert await self.sessions.get(registered.session.id) is None
        with pytest.raises(InvalidCredentialsError):
            await self.service.login(TEST_EMAIL, TEST_PASSWORD)
        result = await self.service.login(TEST_EMAIL, "new-secure-password")
        assert result.user == registered.user

    @pytest.mark.asyncio
    async def test_change_password_requires_current(self):
        """A wrong current password leaves everything untouched."""
        registered = await self.service.register(
            TEST_EMAIL,
            TEST_PASSWORD,
            "Test User",
        )

        with pytest.raises(InvalidCredentialsError):
            await self.service.change_password(
                registered.user.id,
                "wrong-password",
                "new-secure-password",
            )

        assert await self.sessions.get(registered.session.id) is not None

    @pytest.mark.asyncio
    async def test_change_password_validates_new(self):
        """The new password must meet the strength rules."""
        registered = await self.service.register(
            TEST_EMAIL,
            TEST_PASSWORD,
            "Test User",
        )

        with pytest.raises(WeakPasswordError):
            await self.service.change_password(registered.user.id, TEST_PASSWORD, "x")

    @pytest.mark.asyncio
    async def test_delete_account_removes_everything(self):
        """Deleting a user removes credentials and sessions."""
        registered = await self.service.register(
            TEST_EMAIL,
            TEST_PASSWORD,
            "Test User",
        )

        await self.service.delete_account(registered.user.id)

        assert await self.users.find_by_id(registered.user.id) is None
        assert await self.credentials.find_by_user_id(registered.user.id) is None
        assert await self.sessions.get(registered.session.id) is None


class TestOAuthNotConfigured(AuthenticationServiceTestBase):
    """Without provider clients OAuth operations are rejected."""

    @pytest.mark.asyncio
    async def test_generate_url(self):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.generate_oauth_url("google")

        assert "provider" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_callback(self):
        with pytest.raises(ValidationError):
            await self.service.login_with_oauth("google", "code", "state")

    def test_no_providers_listed(self):
        assert self.service.oauth_providers() == []
