"""Quota-enforcing relay to the upstream API.

One call to ``ProxyService.relay`` covers the quota part of a proxied
request:
- Reject the client with QuotaExceededAppError when its quota is used up
- Forward the body verbatim to the upstream API
- Pass non-success upstream replies through untouched, without charging quota
- On success, charge one use and report the uses left

Transport failures raised by the upstream client propagate unchanged and
leave the client's usage as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from quota_proxy.adapters.upstream.base import AbstractUpstreamClient, UpstreamResponse
from quota_proxy.core.errors import QuotaExceededAppError
from quota_proxy.core.logging import hash_client_id
from quota_proxy.services.quota_service import QuotaLimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProxyResult:
    """Upstream reply plus the caller's remaining uses (set on success only)."""

    upstream: UpstreamResponse
    uses_remaining: int | None = None


class ProxyService:
    """Forward requests upstream on behalf of clients with quota left."""

    def __init__(self, limiter: QuotaLimiter, upstream: AbstractUpstreamClient) -> None:
        self._limiter = limiter
        self._upstream = upstream

    async def relay(self, client_id: str, body: bytes) -> ProxyResult:
        """Relay ``body`` upstream if ``client_id`` still has quota.

        Args:
            client_id: Resolved quota key for the caller.
            body: Raw request body, forwarded without modification.

        Returns:
            ProxyResult with the upstream reply. ``uses_remaining`` is only
            set when the upstream call succeeded and was charged.

        Raises:
            QuotaExceededAppError: If the client has no uses left.
            UpstreamAppError: If the upstream API cannot be reached.
        """
        client_hash = hash_client_id(client_id)

        check = self._limiter.check_quota(client_id)
        if not check.allowed:
            logger.info(
                "quota.exceeded",
                extra={
                    "client_hash": client_hash,
                    "limit": self._limiter.max_uses,
                    "reset_hours": check.reset_hours,
                },
            )
            raise QuotaExceededAppError(
                code="rate_limit_exceeded",
                message="Daily limit reached",
                remaining_time_hours=check.reset_hours,
            )

        logger.info(
            "quota.allowed",
            extra={
                "client_hash": client_hash,
                "limit": self._limiter.max_uses,
                "remaining": check.remaining,
            },
        )

        upstream_response = await self._upstream.send(body)

        if not upstream_response.is_success:
            logger.warning(
                "proxy.upstream_error",
                extra={
                    "client_hash": client_hash,
                    "status_code": upstream_response.status_code,
                },
            )
            return ProxyResult(upstream=upstream_response)

        self._limiter.record_use(client_id)
        updated = self._limiter.check_quota(client_id)

        logger.info(
            "proxy.success",
            extra={
                "client_hash": client_hash,
                "status_code": upstream_response.status_code,
                "remaining": updated.remaining,
            },
        )
        return ProxyResult(upstream=upstream_response, uses_remaining=updated.remaining)
