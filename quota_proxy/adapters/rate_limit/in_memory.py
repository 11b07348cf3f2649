"""In-memory usage store.

Notes:
- Per-process only: running multiple workers multiplies the effective quota,
  and every restart empties the store.
- Thread-safe: uses a lock around shared state, so each operation is atomic.
- No background expiry: callers sweep before reading.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace

from quota_proxy.adapters.rate_limit.base import AbstractUsageStore, UsageRecord

logger = logging.getLogger(__name__)


class InMemoryUsageStore(AbstractUsageStore):
    """Dictionary-backed usage store with sweep-on-access expiry.

    Important:
        This store is per-process only. If the proxy runs with multiple
        workers, each worker tracks its own independent usage.
    """

    def __init__(self, *, window_seconds: float) -> None:
        """Initialize an empty store.

        Args:
            window_seconds: Lifetime of a record measured from its first use.

        Raises:
            ValueError: If window_seconds is not positive.
        """
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._window_seconds = window_seconds
        self._lock = threading.RLock()
        self._records: dict[str, UsageRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, client_id: object) -> bool:
        with self._lock:
            return client_id in self._records

    def sweep(self, now: float) -> None:
        with self._lock:
            expired = [
                client_id
                for client_id, record in self._records.items()
                if now - record.first_use > self._window_seconds
            ]
            for client_id in expired:
                del self._records[client_id]

        if expired:
            logger.debug(
                "usage_store.swept",
                extra={"evicted": len(expired), "size": len(self)},
            )

    def get(self, client_id: str) -> UsageRecord | None:
        with self._lock:
            record = self._records.get(client_id)
            # Hand out a copy so callers can't mutate shared state
            return replace(record) if record is not None else None

    def upsert(self, client_id: str, now: float) -> UsageRecord:
        if not client_id:
            raise ValueError("client_id must be a non-empty string")

        with self._lock:
            record = self._records.get(client_id)
            if record is None:
                record = UsageRecord(count=1, first_use=now)
                self._records[client_id] = record
            else:
                record.count += 1
            return replace(record)

    def delete(self, client_id: str) -> None:
        with self._lock:
            self._records.pop(client_id, None)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
