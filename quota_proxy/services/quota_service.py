"""Per-client daily quota decisions.

Each client gets ``max_uses`` successful upstream calls per window. The
window is a sliding reset from first use: a client's first recorded call
opens its own window, and the record is dropped once the window has passed.

Quota is consumed on success only, so callers check first and record after
the upstream call succeeded. The check and the record are separate steps;
two concurrent requests from one client can both pass the check before
either is recorded. That over-admission is accepted for a soft quota.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from quota_proxy.adapters.rate_limit.base import AbstractUsageStore
from quota_proxy.core.config import DEFAULT_MAX_FREE_USES, DEFAULT_QUOTA_WINDOW_SECONDS
from quota_proxy.core.logging import hash_client_id

logger = logging.getLogger(__name__)

MAX_FREE_USES = DEFAULT_MAX_FREE_USES
WINDOW_SECONDS = DEFAULT_QUOTA_WINDOW_SECONDS

_SECONDS_PER_HOUR = 60 * 60


@dataclass(frozen=True)
class QuotaCheck:
    """Outcome of a quota check.

    Attributes:
        allowed: Whether the client may make another upstream call.
        remaining: Uses left in the current window (0 when blocked).
        reset_hours: Hours until the window resets, rounded to 0.1. None for
            clients without an open window.
    """

    allowed: bool
    remaining: int
    reset_hours: float | None = None


class QuotaLimiter:
    """Admit or reject requests against per-client usage records."""

    def __init__(
        self,
        store: AbstractUsageStore,
        *,
        max_uses: int = MAX_FREE_USES,
        window_seconds: float = WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Usage store shared by every request in this process.
            max_uses: Successful calls allowed per window.
            window_seconds: Window length in seconds.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If max_uses or window_seconds are invalid.
        """
        if max_uses < 1:
            raise ValueError("max_uses must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._store = store
        self._max_uses = max_uses
        self._window_seconds = window_seconds
        self._clock = clock

    @property
    def max_uses(self) -> int:
        return self._max_uses

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def store(self) -> AbstractUsageStore:
        return self._store

    def _fresh(self) -> QuotaCheck:
        return QuotaCheck(allowed=True, remaining=self._max_uses)

    def check_quota(self, client_id: str, now: float | None = None) -> QuotaCheck:
        """Report whether ``client_id`` may make another call.

        Sweeps expired records first, so the store never grows past the set of
        clients seen within one window.

        Args:
            client_id: Quota key.
            now: UNIX time in seconds; defaults to the limiter clock.

        Returns:
            QuotaCheck for the client at ``now``.
        """
        now = self._clock() if now is None else now
        self._store.sweep(now)

        record = self._store.get(client_id)
        if record is None:
            return self._fresh()

        elapsed = now - record.first_use
        if elapsed > self._window_seconds:
            self._store.delete(client_id)
            return self._fresh()

        remaining = max(0, self._max_uses - record.count)
        reset_hours = round((self._window_seconds - elapsed) / _SECONDS_PER_HOUR, 1)
        return QuotaCheck(allowed=remaining > 0, remaining=remaining, reset_hours=reset_hours)

    def record_use(self, client_id: str, now: float | None = None) -> None:
        """Consume one use for ``client_id``.

        Only call this after the upstream call succeeded.
        """
        now = self._clock() if now is None else now
        record = self._store.upsert(client_id, now)
        logger.debug(
            "quota.recorded",
            extra={
                "client_hash": hash_client_id(client_id),
                "count": record.count,
                "limit": self._max_uses,
            },
        )
