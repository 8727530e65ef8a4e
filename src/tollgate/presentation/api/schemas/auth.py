"""Authentication schemas for request/response models."""

from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field

from tollgate.presentation.api.schemas.common import ApiModel


class RegisterRequest(ApiModel):
    """Request schema for user registration.

    Password and name rules are enforced by the service so that every
    violation is reported under its field in one response.
    """

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="Password (8 characters to 72 bytes)")
    name: str = Field(..., description="Display name")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "securepassword123",
                "name": "Ada Lovelace",
            },
        },
    )


class LoginRequest(ApiModel):
    """Request schema for user login."""

    email: str
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "securepassword123",
            },
        },
    )


class RefreshTokenRequest(ApiModel):
    refresh_token: str = Field(..., min_length=1)


class ChangePasswordRequest(ApiModel):
    """Request schema for changing a user's password."""

    current_password: str
    new_password: str


class UserResponse(ApiModel):
    """Response schema for user data."""

    id: str
    email: str
    name: str
    avatar_url: str | None = None
    role: str
    email_verified: bool
    created_at: datetime
    updated_at: datetime


class PublicUserResponse(ApiModel):
    id: str
    name: str
    avatar_url: str | None = None
    created_at: datetime


class SessionResponse(ApiModel):
    """A signed-in device or browser."""

    id: str
    user_id: str
    user_agent: str | None = None
    ip_address: str | None = None
    expires_at: datetime
    created_at: datetime


class AuthResponse(ApiModel):
    """Response schema for authentication (register, login, OAuth callback)."""

    user: UserResponse
    access_token: str
    refresh_token: str
    expires_in: int = Field(..., description="Seconds until the access token expires")


class RefreshTokenResponse(ApiModel):
    """Response schema for token refresh.

    refresh_token is only set when the presented token was rotated.
    """

    access_token: str
    expires_in: int
    refresh_token: str | None = None


class OAuthUrlResponse(ApiModel):
    url: str
    state: str


class OAuthProvidersResponse(ApiModel):
    """Providers available for sign-in. Empty when OAuth is not configured."""

    providers: list[str]
