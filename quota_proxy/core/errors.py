"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    method: str
    allowed_methods: list[str]
    setting: str
    error_type: str


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ConfigurationAppError(AppError):
    """Raised when the service is missing required configuration."""


class MethodNotAllowedAppError(AppError):
    """Raised when an endpoint is called with an unsupported HTTP method."""


@dataclass
class QuotaExceededAppError(AppError):
    """Raised when a client has used up its quota for the current window."""

    remaining_time_hours: float | None = None


class UpstreamAppError(AppError):
    """Raised when the upstream API cannot be reached."""
