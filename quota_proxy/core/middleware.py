"""HTTP middleware for request ID propagation and CORS.

Every request/response pair carries a correlation id:
- The incoming X-Request-ID header is reused, otherwise a UUID is generated
- The id is stored in contextvars so log records pick it up
- The id and the total handling time are echoed in response headers

CORS is delegated to Starlette's CORSMiddleware, configured from settings, with
preflights answered by an empty 200.

Usage:
    app.middleware("http")(request_id_middleware)
    app.add_middleware(PreflightCORSMiddleware, **cors_options())
"""

from __future__ import annotations

import time
import uuid
from typing import Any

from fastapi import Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.datastructures import Headers

from quota_proxy.core.config import settings
from quota_proxy.core.logging import clear_request_id, set_request_id

USES_REMAINING_HEADER = "X-Uses-Remaining"


def parse_origins(origins: str | None) -> list[str]:
    """Parse a comma-separated origin list.

    Examples:
        >>> parse_origins("https://a.example, https://b.example")
        ['https://a.example', 'https://b.example']
        >>> parse_origins("")
        ['*']
    """
    if not origins:
        return ["*"]

    parsed = [origin.strip() for origin in origins.split(",") if origin.strip()]
    return parsed or ["*"]


def cors_options() -> dict[str, Any]:
    """Keyword arguments for PreflightCORSMiddleware.

    Methods and request headers are wildcards so a preflight never fails on
    what it asks for; browsers may read back the remaining-uses header.
    """
    return {
        "allow_origins": parse_origins(settings.app.cors_allow_origins),
        "allow_methods": ["*"],
        "allow_headers": ["*"],
        "expose_headers": [USES_REMAINING_HEADER, settings.log.request_id_header],
    }


class PreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose preflight answer is always 200 with an empty body."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers=request_headers)
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)


async def request_id_middleware(request: Request, call_next) -> Response:
    """Attach a correlation id and duration header to every response.

    Side Effects:
        - Sets request_id in contextvars (accessible via get_request_id())
        - Clears request_id from contextvars after request completes
        - Adds X-Request-ID and X-Request-Duration-ms headers to the response
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
