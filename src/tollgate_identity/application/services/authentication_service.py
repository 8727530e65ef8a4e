"""Authentication service: the entry point for every auth use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from tollgate_auth import (
    EmailTakenError,
    InvalidCredentialsError,
    NotFoundError,
    SessionMetadata,
    TokenSubject,
    TokenType,
    ValidationError,
    WeakPasswordError,
)
from tollgate_auth.shared.retry import retry_store_read
from tollgate_identity.domain.user import (
    Email,
    InvalidEmailError,
    InvalidNameError,
    User,
    UserRole,
    validate_name,
)

if TYPE_CHECKING:
    from tollgate_auth import (
        PasswordHashingService,
        RefreshResult,
        SessionData,
        SessionRepository,
        TokenPair,
        TokenPayload,
        TokenService,
        UserCredentialRepository,
    )
    from tollgate_identity.application.services.credential_verifier import (
        CredentialVerifier,
    )
    from tollgate_identity.application.services.oauth_flow_manager import (
        OAuthFlowManager,
    )
    from tollgate_identity.domain.oauth import (
        OAuthAccountRepository,
        OAuthProvider,
        OAuthUrl,
    )
    from tollgate_identity.domain.user import UserRepository

logger = logging.getLogger(__name__)


def _subject_for(user: User) -> TokenSubject:
    return TokenSubject(user_id=user.id, email=user.email, role=user.role.value)


@dataclass(frozen=True)
class AuthResult:
    """A signed-in user with the session and tokens issued for it."""

    user: User
    session: SessionData
    tokens: TokenPair


class AuthenticationService:
    """
    Application service for user authentication.

    Orchestrates tollgate_auth infrastructure (password hashing, tokens,
    sessions) with the identity domain to provide:
    - Registration and password login
    - OAuth login
    - Token refresh with rotation
    - Logout of one or all sessions
    - Password change and account deletion

    Every successful login creates a session first and then mints tokens
    bound to it. A failure in between leaves an unused session behind,
    which simply expires.
    """

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        credential_repository: UserCredentialRepository,
        session_repository: SessionRepository,
        oauth_account_repository: OAuthAccountRepository,
        password_service: PasswordHashingService,
        token_service: TokenService,
        credential_verifier: CredentialVerifier,
        oauth_flow_manager: OAuthFlowManager | None = None,
    ):
        self._user_repo = user_repository
        self._credential_repo = credential_repository
        self._session_repo = session_repository
        self._oauth_account_repo = oauth_account_repository
        self._password_service = password_service
        self._token_service = token_service
        self._verifier = credential_verifier
        self._oauth = oauth_flow_manager

    async def _open_session(
        self,
        user: User,
        metadata: SessionMetadata | None,
    ) -> AuthResult:
        session = await self._session_repo.create(
            user_id=user.id,
            metadata=metadata or SessionMetadata(),
            expires_at=self._token_service.session_expiry(),
        )
        tokens = self._token_service.issue(_subject_for(user), session)
        return AuthResult(user=user, session=session, tokens=tokens)

    def _validate_registration(self, email: str, password: str, name: str) -> Email:
        details: dict[str, list[str]] = {}
        email_obj = None
        try:
            email_obj = Email(email)
        except InvalidEmailError as e:
            details.update(e.details)
        try:
            self._password_service.validate_strength(password)
        except WeakPasswordError as e:
            details.update(e.details)
        try:
            validate_name(name)
        except InvalidNameError as e:
            details.update(e.details)

        if details or email_obj is None:
            raise ValidationError(details=details)
        return email_obj

    async def register(
        self,
        email: str,
        password: str,
        name: str,
        metadata: SessionMetadata | None = None,
    ) -> AuthResult:
        """Create a password user and sign them in.

        Raises
        ------
        ValidationError
            With per-field details for email, password and name
        EmailTakenError
            If the normalized email is already registered
        """
        email_obj = self._validate_registration(email, password, name)

        if await self._user_repo.exists_by_email(email_obj):
            raise EmailTakenError(email_obj.value)

        # First user becomes admin
        user_count = await self._user_repo.count()
        role = UserRole.ADMIN if user_count == 0 else UserRole.USER

        password_hash = self._password_service.hash(password)
        user = User.create(email_obj, name=name, role=role)
        await self._user_repo.save(user)
        await self._credential_repo.save(user_id=user.id, password_hash=password_hash)

        result = await self._open_session(user, metadata)
        logger.info("User registered: %s (role: %s)", user.id, role.value)
        return result

    async def login(
        self,
        email: str,
        password: str,
        metadata: SessionMetadata | None = None,
    ) -> AuthResult:
        user = await self._verifier.verify(email, password)
        result = await self._open_session(user, metadata)
        logger.info("User logged in: %s", user.id)
        return result

    def oauth_providers(self) -> list[OAuthProvider]:
        if self._oauth is None:
            return []
        return self._oauth.configured_providers

    async def generate_oauth_url(self, provider: Union[str, OAuthProvider]) -> OAuthUrl:
        return await self._require_oauth().generate_auth_url(provider)

    async def login_with_oauth(
        self,
        provider: Union[str, OAuthProvider],
        code: str,
        state: str,
        metadata: SessionMetadata | None = None,
    ) -> AuthResult:
        user = await self._require_oauth().handle_callback(provider, code, state)
        return await self._open_session(user, metadata)

    async def refresh(self, refresh_token: str) -> RefreshResult:
        """Refresh with the user's current email and role.

        A token whose user no longer exists revokes its session family.
        """
        return await self._token_service.refresh(
            refresh_token,
            resolve_subject=self._current_subject,
        )

    async def _current_subject(self, payload: TokenPayload) -> TokenSubject | None:
        user = await retry_store_read(lambda: self._user_repo.find_by_id(payload.sub))
        return _subject_for(user) if user is not None else None

    async def verify_access_token(self, token: str) -> TokenPayload:
        return await self._token_service.verify(token, TokenType.ACCESS)

    async def logout(self, session_id: str) -> None:
        """End one session. Logging out twice is not an error."""
        if await self._session_repo.delete(session_id):
            logger.debug("Session ended: %s", session_id)

    async def logout_all(self, user_id: str) -> int:
        removed = await self._session_repo.delete_all_for_user(user_id)
        logger.info("Ended %d sessions for user: %s", removed, user_id)
        return removed

    async def list_sessions(self, user_id: str) -> list[SessionData]:
        return await retry_store_read(
            lambda: self._session_repo.list_active_for_user(user_id),
        )

    async def get_user(self, user_id: str) -> User:
        user = await retry_store_read(lambda: self._user_repo.find_by_id(user_id))
        if user is None:
            msg = "User not found"
            raise NotFoundError(msg)
        return user

    async def change_password(
        self,
        user_id: str,
        current_password: str,
        new_password: str,
    ) -> None:
        """Replace the password and end every session of the user.

        Raises
        ------
        InvalidCredentialsError
            If the user has no password or current_password is wrong
        WeakPasswordError
            If new_password doesn't meet requirements
        """
        credential = await self._credential_repo.find_by_user_id(user_id)
        if credential is None:
            raise InvalidCredentialsError
        if not self._password_service.verify(
            current_password,
            credential.password_hash,
        ):
            raise InvalidCredentialsError

        new_hash = self._password_service.hash(new_password)
        await self._credential_repo.save(user_id=user_id, password_hash=new_hash)
        await self.logout_all(user_id)

        logger.info("Password changed for user: %s", user_id)

    async def delete_account(self, user_id: str) -> None:
        """Delete a user with sessions, OAuth accounts and credentials."""
        await self.get_user(user_id)

        await self._session_repo.delete_all_for_user(user_id)
        await self._oauth_account_repo.delete_all_for_user(user_id)
        await self._credential_repo.delete(user_id)
        await self._user_repo.delete(user_id)

        logger.info("Deleted user and all associated data: %s", user_id)

    def _require_oauth(self) -> OAuthFlowManager:
        if self._oauth is None:
            msg = "OAuth sign-in is not configured"
            raise ValidationError.for_field("provider", msg)
        return self._oauth
