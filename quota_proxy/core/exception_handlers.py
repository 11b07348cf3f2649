"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return consistent JSON responses with proper
HTTP status codes and traceability.

Design:
- AppError subclasses → appropriate HTTP status (405, 429, 500)
- Unexpected Exception → generic 500 (safety net)
- All responses include request_id for log correlation
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from quota_proxy.core.errors import (
    AppError,
    MethodNotAllowedAppError,
    QuotaExceededAppError,
)
from quota_proxy.core.logging import get_request_id

logger = logging.getLogger(__name__)


def status_code_for(exc: AppError) -> int:
    """Map a domain error to its HTTP status code."""
    if isinstance(exc, MethodNotAllowedAppError):
        return 405
    if isinstance(exc, QuotaExceededAppError):
        return 429
    # ConfigurationAppError, UpstreamAppError and anything unclassified
    return 500


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Routes domain errors to HTTP status codes:
    - MethodNotAllowedAppError → 405 Method Not Allowed
    - QuotaExceededAppError → 429 Too Many Requests
    - ConfigurationAppError, UpstreamAppError and any other AppError → 500

    All responses include:
    - error.type / error.code: Machine-readable error code
    - error.message: Human-readable message
    - error.request_id: For log correlation
    - error.details: Optional structured context

    Quota exhaustion additionally carries error.remaining_time_hours.
    """
    status_code = status_code_for(exc)

    # Quota exhaustion is an expected outcome, not an operational error
    log_level = logging.WARNING
    if isinstance(exc, QuotaExceededAppError):
        log_level = logging.INFO
    elif status_code >= 500:
        log_level = logging.ERROR

    logger.log(
        log_level,
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )

    error_content = {
        "type": exc.code,
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }
    if isinstance(exc, QuotaExceededAppError):
        error_content["remaining_time_hours"] = exc.remaining_time_hours

    if exc.details:
        error_content["details"] = exc.details

    headers = None
    if isinstance(exc, MethodNotAllowedAppError) and exc.details:
        allowed = exc.details.get("allowed_methods")
        if allowed:
            headers = {"Allow": ", ".join(allowed)}

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
        headers=headers,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic
    message. No stack traces reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "type": "internal_server_error",
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
