from __future__ import annotations

from fastapi import APIRouter

from quota_proxy.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check.

    Reports whether the upstream credential is present without revealing it.
    The service stays up without one; /messages answers 500 until it is set.

    Returns:
        dict: ``status`` ("ok") and ``upstream_configured`` (bool).
    """

    return {
        "status": "ok",
        "upstream_configured": bool(settings.upstream.api_key),
    }
