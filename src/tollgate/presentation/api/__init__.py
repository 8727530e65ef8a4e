"""REST API presentation layer for Tollgate.

This package provides a FastAPI-based REST API for the authentication core.

Structure:
    api/
    ├── app.py                # FastAPI application factory
    ├── dependencies.py       # Dependency injection and unit of work
    ├── exception_handlers.py # AuthError to ApiError mapping
    ├── routers/              # API route handlers
    └── schemas/              # Pydantic request/response schemas
"""

from tollgate.presentation.api.app import create_app

__all__ = ["create_app"]
