"""Usage store interfaces.

The quota limiter depends on this abstraction (not the concrete store) so
the in-memory map can later be swapped for a shared backend (e.g., Redis)
with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class UsageRecord:
    """Usage of one client within its current window.

    Attributes:
        count: Successful upstream calls consumed since ``first_use`` (>= 1).
        first_use: UNIX time in seconds when the window opened.
    """

    count: int
    first_use: float


class AbstractUsageStore(ABC):
    """Interface for per-client usage storage."""

    @abstractmethod
    def sweep(self, now: float) -> None:
        """Remove every record whose window has expired at ``now``."""
        raise NotImplementedError

    @abstractmethod
    def get(self, client_id: str) -> UsageRecord | None:
        """Return the usage record for ``client_id``, if any."""
        raise NotImplementedError

    @abstractmethod
    def upsert(self, client_id: str, now: float) -> UsageRecord:
        """Create a record opening a window at ``now``, or increment the count.

        Args:
            client_id: Quota key.
            now: UNIX time in seconds, used only when the record is created.

        Returns:
            A snapshot of the record after the update.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, client_id: str) -> None:
        """Drop the record for ``client_id`` if present."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Remove all records."""
        raise NotImplementedError
