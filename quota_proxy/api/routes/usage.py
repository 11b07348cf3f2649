from __future__ import annotations

from fastapi import APIRouter, Request, Response

from quota_proxy.core.config import settings
from quota_proxy.core.errors import MethodNotAllowedAppError
from quota_proxy.schemas.usage import UsageSnapshotResponse

router = APIRouter(tags=["Usage"])

USAGE_NOTE = "Usage is tracked on each request"
ALLOWED_METHODS = ["GET", "POST", "OPTIONS"]


@router.get("/usage", response_model=UsageSnapshotResponse)
@router.post("/usage", response_model=UsageSnapshotResponse)
async def usage_snapshot() -> UsageSnapshotResponse:
    """Report an optimistic quota snapshot.

    The usage store lives with the proxy endpoint and is not shared with this
    one (separate workers keep separate stores), so it always reports the full
    quota. Real enforcement happens on /messages, which returns
    X-Uses-Remaining after every successful call.
    """
    return UsageSnapshotResponse(
        uses_remaining=settings.app.max_free_uses,
        reset_time_hours=0,
        note=USAGE_NOTE,
    )


@router.api_route(
    "/usage",
    methods=["PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def reject_usage_method(request: Request) -> Response:
    raise MethodNotAllowedAppError(
        code="method_not_allowed",
        message="Method not allowed",
        details={"method": request.method, "allowed_methods": ALLOWED_METHODS},
    )


@router.options("/usage", include_in_schema=False)
async def usage_preflight() -> Response:
    return Response(status_code=200)
