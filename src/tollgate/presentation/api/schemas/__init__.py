"""Pydantic schemas for the HTTP API."""

from tollgate.presentation.api.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    OAuthProvidersResponse,
    OAuthUrlResponse,
    PublicUserResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    RegisterRequest,
    SessionResponse,
    UserResponse,
)
from tollgate.presentation.api.schemas.common import (
    ApiError,
    ApiResponse,
    HealthResponse,
    PaginatedResponse,
    Pagination,
)

__all__ = [
    "ApiError",
    "ApiResponse",
    "AuthResponse",
    "ChangePasswordRequest",
    "HealthResponse",
    "LoginRequest",
    "OAuthProvidersResponse",
    "OAuthUrlResponse",
    "PaginatedResponse",
    "Pagination",
    "PublicUserResponse",
    "RefreshTokenRequest",
    "RefreshTokenResponse",
    "RegisterRequest",
    "SessionResponse",
    "UserResponse",
]
