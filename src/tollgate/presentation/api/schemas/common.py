"""Response envelopes shared across API endpoints.

Every body is camelCase on the wire; Python code uses snake_case field
names (populate_by_name).
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for API schemas: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(ApiModel, Generic[T]):
    """Successful response envelope."""

    success: bool = True
    data: T | None = None
    message: str | None = None


class ApiError(ApiModel):
    """Error response envelope."""

    success: bool = False
    error: str = Field(..., description="Human-readable error message")
    code: str | None = Field(None, description="Stable error code")
    details: dict[str, list[str]] | None = Field(
        None,
        description="Field name to validation messages",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": "Invalid email or password",
                "code": "INVALID_CREDENTIALS",
            },
        },
    )


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PaginatedResponse(ApiModel, Generic[T]):
    """Paginated list envelope."""

    success: bool = True
    data: list[T]
    pagination: Pagination

    @classmethod
    def create(
        cls,
        items: list[T],
        total: int,
        page: int,
        limit: int,
    ) -> "PaginatedResponse[T]":
        """Create a paginated response."""
        total_pages = (total + limit - 1) // limit if total > 0 else 1
        return cls(
            data=items,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=total_pages,
            ),
        )


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
