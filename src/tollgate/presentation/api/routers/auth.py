"""Authentication router for registration, login, OAuth and token management."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status

from tollgate.presentation.api.dependencies import (
    AuthService,
    CurrentUser,
    DBSession,
    RequestMetadata,
    unit_of_work,
)
from tollgate.presentation.api.schemas import (
    ApiResponse,
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    OAuthProvidersResponse,
    OAuthUrlResponse,
    PaginatedResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    RegisterRequest,
    SessionResponse,
    UserResponse,
)
from tollgate_identity.application.services import AuthResult
from tollgate_identity.domain.user import User

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_PAGE_SIZE = 100


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        avatar_url=user.avatar_url,
        role=user.role.value,
        email_verified=user.email_verified,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _auth_response(result: AuthResult) -> ApiResponse[AuthResponse]:
    return ApiResponse[AuthResponse](
        data=AuthResponse(
            user=_user_response(result.user),
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
            expires_in=result.tokens.expires_in,
        ),
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        201: {"description": "User registered successfully"},
        400: {"description": "Invalid email, password or name"},
        409: {"description": "Email already registered"},
    },
)
async def register(
    request: RegisterRequest,
    auth_service: AuthService,
    session: DBSession,
    metadata: RequestMetadata,
) -> ApiResponse[AuthResponse]:
    """
    Register a new user with email and password.

    The first user to register becomes an administrator.
    """
    async with unit_of_work(session):
        result = await auth_service.register(
            email=request.email,
            password=request.password,
            name=request.name,
            metadata=metadata,
        )
    return _auth_response(result)


@router.post(
    "/login",
    summary="Authenticate user",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
        403: {"description": "Email address not verified"},
        423: {"description": "Account locked"},
    },
)
async def login(
    request: LoginRequest,
    auth_service: AuthService,
    session: DBSession,
    metadata: RequestMetadata,
) -> ApiResponse[AuthResponse]:
    """
    Authenticate with email and password.

    Account will be locked after multiple failed attempts.
    """
    async with unit_of_work(session):
        result = await auth_service.login(
            email=request.email,
            password=request.password,
            metadata=metadata,
        )
    return _auth_response(result)


@router.post(
    "/refresh",
    summary="Refresh access token",
    responses={
        200: {"description": "Tokens refreshed successfully"},
        401: {"description": "Invalid, expired or revoked refresh token"},
    },
)
async def refresh_token(
    request: RefreshTokenRequest,
    auth_service: AuthService,
    session: DBSession,
) -> ApiResponse[RefreshTokenResponse]:
    """
    Get a new access token using a valid refresh token.

    With single-use refresh tokens the response carries a new refresh
    token and the presented one stops working.
    """
    async with unit_of_work(session):
        result = await auth_service.refresh(request.refresh_token)
    return ApiResponse[RefreshTokenResponse](
        data=RefreshTokenResponse(
            access_token=result.access_token,
            expires_in=result.expires_in,
            refresh_token=result.refresh_token,
        ),
    )


@router.get(
    "/oauth/providers",
    summary="List OAuth providers",
    responses={200: {"description": "Configured providers"}},
)
async def oauth_providers(
    auth_service: AuthService,
) -> ApiResponse[OAuthProvidersResponse]:
    providers = auth_service.oauth_providers()
    return ApiResponse[OAuthProvidersResponse](
        data=OAuthProvidersResponse(providers=[p.value for p in providers]),
    )


@router.get(
    "/oauth/{provider}/url",
    summary="Start OAuth sign-in",
    responses={
        200: {"description": "Authorization URL created"},
        400: {"description": "Unsupported or unconfigured provider"},
    },
)
async def oauth_url(
    provider: str,
    auth_service: AuthService,
) -> ApiResponse[OAuthUrlResponse]:
    """Create the provider authorization URL to redirect the browser to."""
    oauth = await auth_service.generate_oauth_url(provider)
    return ApiResponse[OAuthUrlResponse](
        data=OAuthUrlResponse(url=oauth.url, state=oauth.state),
    )


@router.get(
    "/oauth/{provider}/callback",
    summary="Complete OAuth sign-in",
    responses={
        200: {"description": "Login successful"},
        400: {"description": "Invalid or expired state"},
        409: {"description": "Email or provider account conflict"},
        502: {"description": "Provider exchange failed"},
    },
)
async def oauth_callback(  # noqa: PLR0913
    provider: str,
    auth_service: AuthService,
    session: DBSession,
    metadata: RequestMetadata,
    code: str = "",
    state: str = "",
) -> ApiResponse[AuthResponse]:
    """
    Exchange the authorization code and sign the user in.

    The user is created or linked on first sign-in.
    """
    async with unit_of_work(session):
        result = await auth_service.login_with_oauth(
            provider,
            code=code,
            state=state,
            metadata=metadata,
        )
    return _auth_response(result)


@router.post(
    "/logout",
    summary="Logout current session",
    responses={
        200: {"description": "Logged out"},
        401: {"description": "Not authenticated"},
    },
)
async def logout(
    current_user: CurrentUser,
    auth_service: AuthService,
    session: DBSession,
) -> ApiResponse[None]:
    """End the session the access token belongs to."""
    async with unit_of_work(session):
        await auth_service.logout(current_user.session_id)
    return ApiResponse[None](message="Logged out successfully")


@router.post(
    "/logout-all",
    summary="Logout everywhere",
    responses={
        200: {"description": "All sessions ended"},
        401: {"description": "Not authenticated"},
    },
)
async def logout_all(
    current_user: CurrentUser,
    auth_service: AuthService,
    session: DBSession,
) -> ApiResponse[None]:
    """End every session of the current user."""
    async with unit_of_work(session):
        removed = await auth_service.logout_all(current_user.user_id)
    return ApiResponse[None](message=f"Ended {removed} sessions")


@router.get(
    "/me",
    summary="Get current user",
    responses={
        200: {"description": "Current user profile"},
        401: {"description": "Not authenticated"},
        404: {"description": "User no longer exists"},
    },
)
async def get_me(
    current_user: CurrentUser,
    auth_service: AuthService,
) -> ApiResponse[UserResponse]:
    user = await auth_service.get_user(current_user.user_id)
    return ApiResponse[UserResponse](data=_user_response(user))


@router.get(
    "/sessions",
    summary="List active sessions",
    responses={
        200: {"description": "Active sessions, newest first"},
        401: {"description": "Not authenticated"},
    },
)
async def list_sessions(
    current_user: CurrentUser,
    auth_service: AuthService,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = 20,
) -> PaginatedResponse[SessionResponse]:
    sessions = await auth_service.list_sessions(current_user.user_id)
    start = (page - 1) * limit
    items = [
        SessionResponse.model_validate(s) for s in sessions[start : start + limit]
    ]
    return PaginatedResponse[SessionResponse].create(
        items=items,
        total=len(sessions),
        page=page,
        limit=limit,
    )


@router.post(
    "/change-password",
    summary="Change password",
    responses={
        200: {"description": "Password changed, all sessions ended"},
        400: {"description": "New password doesn't meet requirements"},
        401: {"description": "Current password is incorrect"},
    },
)
async def change_password(
    request: ChangePasswordRequest,
    current_user: CurrentUser,
    auth_service: AuthService,
    session: DBSession,
) -> ApiResponse[None]:
    """
    Change the current user's password.

    Every session is ended, so the client must sign in again.
    """
    async with unit_of_work(session):
        await auth_service.change_password(
            user_id=current_user.user_id,
            current_password=request.current_password,
            new_password=request.new_password,
        )
    return ApiResponse[None](message="Password changed successfully")
