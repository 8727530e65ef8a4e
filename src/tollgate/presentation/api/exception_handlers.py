"""Centralized exception handlers for the FastAPI application.

Every AuthError is mapped to an HTTP status by its error code and
rendered as one ApiError body, so clients can branch on ``code``.

Error Response Format:
    {
        "success": false,
        "error": "Human-readable error message",
        "code": "MACHINE_READABLE_ERROR_CODE",
        "details": {"field": ["message", ...]}
    }

Usage:
    from tollgate.presentation.api.exception_handlers import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tollgate.presentation.api.schemas.common import ApiError
from tollgate_auth.exceptions import AuthError, ErrorCode, TokenError

logger = logging.getLogger(__name__)


# =============================================================================
# Error Code to HTTP Status Mapping
# =============================================================================

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    # 400 Bad Request
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_STATE: status.HTTP_400_BAD_REQUEST,
    # 401 Unauthorized
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.TOKEN_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.TOKEN_MALFORMED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.TOKEN_REVOKED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.WRONG_TOKEN_TYPE: status.HTTP_401_UNAUTHORIZED,
    # 403 Forbidden
    ErrorCode.EMAIL_UNVERIFIED: status.HTTP_403_FORBIDDEN,
    # 404 Not Found
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    # 409 Conflict
    ErrorCode.EMAIL_TAKEN: status.HTTP_409_CONFLICT,
    ErrorCode.OAUTH_ACCOUNT_CONFLICT: status.HTTP_409_CONFLICT,
    # 423 Locked
    ErrorCode.ACCOUNT_LOCKED: status.HTTP_423_LOCKED,
    # 502 Bad Gateway - the identity provider failed
    ErrorCode.OAUTH_EXCHANGE_FAILED: status.HTTP_502_BAD_GATEWAY,
    # 503 Service Unavailable
    ErrorCode.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    # 500 Internal Server Error
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _create_error_response(
    status_code: int,
    message: str,
    code: str,
    details: dict[str, list[str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    body = ApiError(error=message, code=code, details=details or None)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


def _validation_details(exc: RequestValidationError) -> dict[str, list[str]]:
    details: dict[str, list[str]] = {}
    for error in exc.errors():
        # loc is ("body", "field", ...) or ("query", "name")
        loc = [
            str(part)
            for part in error.get("loc", ())
            if part not in ("body", "query", "path")
        ]
        field = ".".join(loc) or "body"
        details.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return details


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(AuthError)
    async def auth_exception_handler(
        request: Request,
        exc: AuthError,
    ) -> JSONResponse:
        """Handle all authentication errors with structured response."""
        status_code = ERROR_CODE_TO_STATUS.get(
            exc.code,
            status.HTTP_400_BAD_REQUEST,
        )

        log = logger.error if status_code >= 500 else logger.info
        log(
            "Auth error on %s %s: %s (code=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.code.value,
        )

        headers = None
        if isinstance(exc, TokenError):
            headers = {"WWW-Authenticate": "Bearer"}

        return _create_error_response(
            status_code=status_code,
            message=exc.message,
            code=exc.code.value,
            details=exc.details,
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        details = _validation_details(exc)
        logger.info(
            "Request validation failed on %s %s: %s",
            request.method,
            request.url.path,
            list(details),
        )
        return _create_error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            message="Validation failed",
            code=ErrorCode.VALIDATION_ERROR.value,
            details=details,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions with consistent error format.

        The exception text never reaches the client.
        """
        logger.exception(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            type(exc).__name__,
        )
        return _create_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="An unexpected error occurred",
            code=ErrorCode.INTERNAL_ERROR.value,
        )
