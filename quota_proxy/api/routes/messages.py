"""Proxy endpoint for the upstream Messages API with per-client quotas."""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from quota_proxy.adapters.upstream.factory import create_upstream_client
from quota_proxy.core.errors import MethodNotAllowedAppError
from quota_proxy.core.middleware import USES_REMAINING_HEADER
from quota_proxy.core.rate_limit import get_quota_limiter, resolve_client_id
from quota_proxy.services.proxy_service import ProxyService

router = APIRouter(tags=["Proxy"])

ALLOWED_METHODS = ["POST", "OPTIONS"]


@router.post(
    "/messages",
    responses={
        200: {
            "description": "Upstream reply, relayed verbatim.",
            "headers": {
                USES_REMAINING_HEADER: {
                    "description": "Successful calls left in the current window.",
                    "schema": {"type": "integer"},
                }
            },
        },
        429: {"description": "Daily limit reached."},
        500: {"description": "Upstream not configured or unreachable."},
    },
)
async def proxy_messages(request: Request) -> Response:
    """Forward a Messages API request, enforcing the caller's daily quota.

    The request body is passed upstream untouched. Only successful upstream
    replies count against the quota; error replies are relayed as-is.

    Returns:
        Response: Upstream status and body, plus X-Uses-Remaining on success.

    Raises:
        ConfigurationAppError: 500 when ANTHROPIC_API_KEY is not set.
        QuotaExceededAppError: 429 when the client's quota is used up.
        UpstreamAppError: 500 when the upstream API cannot be reached.
    """
    upstream = create_upstream_client()
    client_id = resolve_client_id(request)

    service = ProxyService(limiter=get_quota_limiter(), upstream=upstream)
    result = await service.relay(client_id, await request.body())

    response = Response(
        content=result.upstream.content,
        status_code=result.upstream.status_code,
        headers=result.upstream.headers,
        media_type=result.upstream.media_type,
    )
    if result.uses_remaining is not None:
        response.headers[USES_REMAINING_HEADER] = str(result.uses_remaining)
    return response


@router.api_route(
    "/messages",
    methods=["GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def reject_messages_method(request: Request) -> Response:
    raise MethodNotAllowedAppError(
        code="method_not_allowed",
        message="Method not allowed",
        details={"method": request.method, "allowed_methods": ALLOWED_METHODS},
    )


@router.options("/messages", include_in_schema=False)
async def messages_preflight() -> Response:
    """CORS preflight; never touches the quota."""
    return Response(status_code=200)
