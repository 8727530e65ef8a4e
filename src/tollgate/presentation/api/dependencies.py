"""FastAPI dependency injection for the Tollgate API.

Provides dependencies for:
- Database sessions and the per-request unit of work
- Authentication (current user from the bearer token)
- Service instances built from settings
"""

import ipaddress
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tollgate_auth import (
    InvalidCredentialsError,
    JWTService,
    PasswordHashingService,
    RefreshPolicy,
    SessionMetadata,
    TokenMalformedError,
    TokenRevokedError,
    TokenService,
)
from tollgate_auth.persistence.sqlalchemy import (
    AuthBase,
    SessionRepositorySQLAlchemy,
    UserCredentialRepositorySQLAlchemy,
)
from tollgate_config import Settings, get_settings
from tollgate_identity.application.context import UserContext
from tollgate_identity.application.services import (
    AuthenticationService,
    CredentialVerifier,
    OAuthFlowManager,
)
from tollgate_identity.domain.oauth import OAuthStateStore
from tollgate_identity.infrastructure.oauth import build_provider_clients
from tollgate_identity.infrastructure.persistence.memory import (
    InMemoryOAuthStateStore,
)
from tollgate_identity.infrastructure.persistence.sqlalchemy import (
    OAuthAccountRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

# Security scheme for JWT Bearer tokens
security = HTTPBearer(auto_error=False)

# Errors whose side effects (failed-attempt counters, family revocation)
# must be committed before the error reaches the client.
COMMIT_ON_ERRORS = (InvalidCredentialsError, TokenRevokedError)


@lru_cache()
def get_database_url() -> str:
    """
    Get database URL from application settings.

    Returns
    -------
    Database URL string
    """
    url = get_settings().database_url

    # Ensure data directory exists for SQLite
    if url.startswith("sqlite") and ":memory:" not in url:
        db_path = url.split("///")[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return url


# -----------------------------------------------------------------------------
# Database Engine & Session (Singleton)
# -----------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """
    Get the shared async database engine (singleton).

    Returns
    -------
    AsyncEngine instance
    """
    return create_async_engine(
        get_database_url(),
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Yields
    ------
    AsyncSession for database operations
    """
    async with get_session_maker()() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncGenerator[None, None]:
    """Commit the request's writes on success, roll them back on failure.

    Credential and revocation failures are committed too, then re-raised.
    """
    try:
        yield
    except COMMIT_ON_ERRORS:
        await session.commit()
        raise
    except Exception:
        await session.rollback()
        raise
    await session.commit()


# -----------------------------------------------------------------------------
# Database Schema Management
# -----------------------------------------------------------------------------


async def create_tables() -> None:
    """
    Create all database tables (idempotent).

    Only missing tables are created. Existing tables and their data are
    never modified or deleted.
    """
    engine = get_engine()
    logger.info("Ensuring all database tables exist...")

    async with engine.begin() as conn:
        await conn.run_sync(AuthBase.metadata.create_all)

    logger.info("Database schema is up to date (missing tables created if needed)")


# -----------------------------------------------------------------------------
# Authentication Services
# -----------------------------------------------------------------------------


def get_jwt_service(settings: Settings = Depends(get_settings)) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
        previous_secret_keys=settings.previous_jwt_secret_keys,
        algorithm=settings.jwt_algorithm,
    )


def get_password_service(
    settings: Settings = Depends(get_settings),
) -> PasswordHashingService:
    """Get password hashing service."""
    return PasswordHashingService(rounds=settings.password_hash_rounds)


@lru_cache(maxsize=1)
def get_oauth_state_store() -> OAuthStateStore:
    """
    Get the process-wide OAuth state store (singleton).

    States live in memory, so a callback must reach the process that
    issued the authorization URL.
    """
    return InMemoryOAuthStateStore()


async def get_authentication_service(
    session: DBSession,
    settings: Settings = Depends(get_settings),
    jwt_service: JWTService = Depends(get_jwt_service),
    password_service: PasswordHashingService = Depends(get_password_service),
    state_store: OAuthStateStore = Depends(get_oauth_state_store),
) -> AuthenticationService:
    """
    Get authentication service with all dependencies.

    This service orchestrates registration, login, OAuth and token
    management over repositories bound to the request's session.
    """
    user_repo = UserRepositorySQLAlchemy(session)
    credential_repo = UserCredentialRepositorySQLAlchemy(session)
    session_repo = SessionRepositorySQLAlchemy(session)
    oauth_account_repo = OAuthAccountRepositorySQLAlchemy(session)

    token_service = TokenService(
        jwt_service=jwt_service,
        session_repository=session_repo,
        policy=RefreshPolicy(settings.refresh_token_policy),
    )
    verifier = CredentialVerifier(
        user_repository=user_repo,
        credential_repository=credential_repo,
        password_hasher=password_service,
        require_verified_email=settings.require_verified_email,
    )

    providers = build_provider_clients(settings)
    oauth_flow_manager = None
    if providers:
        oauth_flow_manager = OAuthFlowManager(
            user_repository=user_repo,
            oauth_account_repository=oauth_account_repo,
            state_store=state_store,
            providers=providers,
            state_ttl=timedelta(minutes=settings.oauth_state_ttl_minutes),
            link_unverified_accounts=settings.oauth_link_unverified_accounts,
        )

    return AuthenticationService(
        user_repository=user_repo,
        credential_repository=credential_repo,
        session_repository=session_repo,
        oauth_account_repository=oauth_account_repo,
        password_service=password_service,
        token_service=token_service,
        credential_verifier=verifier,
        oauth_flow_manager=oauth_flow_manager,
    )


# Type alias for injected auth service
AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]


# -----------------------------------------------------------------------------
# Request Metadata
# -----------------------------------------------------------------------------


MAX_USER_AGENT_LENGTH = 512
MAX_CLIENT_IP_LENGTH = 64


def _parse_ip(value: str | None) -> str | None:
    value = (value or "").strip()
    if not value or len(value) > MAX_CLIENT_IP_LENGTH:
        return None
    try:
        return str(ipaddress.ip_address(value))
    except ValueError:
        return None


def get_client_ip(request: Request, settings: Settings) -> str | None:
    """Client address, from proxy headers only when they are trusted.

    Forwarded values that are not a valid IP address are ignored.
    """
    if settings.api_trust_proxy_headers:
        forwarded = request.headers.get("x-forwarded-for", "")
        real_ip = request.headers.get("x-real-ip")
        for candidate in (forwarded.split(",")[0], real_ip):
            ip = _parse_ip(candidate)
            if ip is not None:
                return ip
        if forwarded or real_ip:
            logger.debug("Ignoring invalid forwarded client address")

    if request.client is None:
        return None
    return request.client.host[:MAX_CLIENT_IP_LENGTH]


def get_session_metadata(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> SessionMetadata:
    """Audit metadata recorded on sessions created by this request."""
    user_agent = request.headers.get("user-agent")
    return SessionMetadata(
        user_agent=user_agent[:MAX_USER_AGENT_LENGTH] if user_agent else None,
        ip_address=get_client_ip(request, settings),
    )


RequestMetadata = Annotated[SessionMetadata, Depends(get_session_metadata)]


# -----------------------------------------------------------------------------
# Current User (JWT Authentication)
# -----------------------------------------------------------------------------


async def get_current_user(
    auth_service: AuthService,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> UserContext:
    """
    FastAPI dependency to get the current authenticated user from JWT.

    Access tokens are verified without touching the session store, so a
    logged-out session keeps working until its access token expires.

    Returns
    -------
    UserContext built from the token claims

    Raises
    ------
    TokenMalformedError
        If the token is missing or invalid
    TokenExpiredError
        If the token has expired
    WrongTokenTypeError
        If a refresh token is presented
    """
    if credentials is None:
        msg = "Authentication required"
        raise TokenMalformedError(msg)

    payload = await auth_service.verify_access_token(credentials.credentials)
    return UserContext.from_token(payload)


# Type alias for injected current user
CurrentUser = Annotated[UserContext, Depends(get_current_user)]
