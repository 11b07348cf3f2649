"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment variables are seeded here, before the settings module is
imported anywhere, so every test sees the same configuration.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ.setdefault("ANTHROPIC_BASE_URL", "https://upstream.test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import Mock

import httpx
import pytest

from quota_proxy.adapters.rate_limit.in_memory import InMemoryUsageStore
from quota_proxy.adapters.upstream.anthropic_client import AnthropicMessagesClient
from quota_proxy.core.rate_limit import reset_quota_limiter
from quota_proxy.services.quota_service import QuotaLimiter

HOUR = 60 * 60
DAY = 24 * HOUR

UPSTREAM_URL = "https://upstream.test/v1/messages"


@pytest.fixture(autouse=True)
def _fresh_quota_limiter():
    """Start every test with an empty process-wide usage store."""
    reset_quota_limiter()
    yield
    reset_quota_limiter()


@pytest.fixture
def clock() -> Mock:
    """Controllable time source; tests move time with clock.return_value."""
    return Mock(return_value=1_000_000.0)


@pytest.fixture
def limiter(clock: Mock) -> QuotaLimiter:
    store = InMemoryUsageStore(window_seconds=DAY)
    return QuotaLimiter(store, max_uses=10, window_seconds=DAY, clock=clock)


@pytest.fixture
def make_upstream():
    """Build a real upstream client backed by an httpx MockTransport."""

    def _make(handler) -> AnthropicMessagesClient:
        return AnthropicMessagesClient(
            api_key="test-anthropic-key",
            url=UPSTREAM_URL,
            transport=httpx.MockTransport(handler),
        )

    return _make
