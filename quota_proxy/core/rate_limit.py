"""Quota wiring for the HTTP layer.

This module owns the process-wide usage store and quota limiter, and
resolves which quota bucket a request belongs to.

Client identity (in order of preference):
- The caller-supplied client id header (``x-client-id``)
- The forwarded-address header (``x-forwarded-for``)
- A shared ``anonymous`` bucket for everyone else
"""

from __future__ import annotations

import logging

from fastapi import Request

from quota_proxy.adapters.rate_limit.in_memory import InMemoryUsageStore
from quota_proxy.core.config import settings
from quota_proxy.services.quota_service import QuotaLimiter

logger = logging.getLogger(__name__)


_limiter: QuotaLimiter | None = None
_limiter_config: tuple[int, int] | None = None


def get_quota_limiter() -> QuotaLimiter:
    """Return the process-wide quota limiter.

    The instance is cached in-module so usage survives across requests. If
    the quota configuration changes (primarily in tests), the limiter and its
    store are rebuilt.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.max_free_uses,
        settings.app.quota_window_seconds,
    )

    if _limiter is None or _limiter_config != config:
        store = InMemoryUsageStore(window_seconds=settings.app.quota_window_seconds)
        _limiter = QuotaLimiter(
            store,
            max_uses=settings.app.max_free_uses,
            window_seconds=settings.app.quota_window_seconds,
        )
        _limiter_config = config
        logger.info(
            "quota.limiter_created",
            extra={
                "limit": settings.app.max_free_uses,
                "window_s": settings.app.quota_window_seconds,
            },
        )

    return _limiter


def reset_quota_limiter() -> None:
    """Drop the cached limiter; the next request starts from an empty store."""

    global _limiter, _limiter_config
    _limiter = None
    _limiter_config = None


def resolve_client_id(request: Request) -> str:
    """Pick the quota key for the current request.

    Unidentified clients all share the anonymous bucket.
    """

    client_id = request.headers.get(settings.app.client_id_header)
    if client_id:
        return client_id

    forwarded_for = request.headers.get(settings.app.forwarded_for_header)
    if forwarded_for:
        return forwarded_for

    return settings.app.anonymous_client_id
