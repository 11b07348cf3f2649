"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from quota_proxy.core.errors import (
    AppError,
    ConfigurationAppError,
    MethodNotAllowedAppError,
    QuotaExceededAppError,
    UpstreamAppError,
)
from quota_proxy.core.exception_handlers import (
    general_exception_handler,
    setup_exception_handlers,
    status_code_for,
)


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_quota_exceeded_returns_429_with_reset_time(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        @app_with_handlers.get("/test-quota")
        async def test_endpoint():
            raise QuotaExceededAppError(
                code="rate_limit_exceeded",
                message="Daily limit reached",
                remaining_time_hours=23.0,
            )

        response = client.get("/test-quota")

        assert response.status_code == 429
        error = response.json()["error"]
        assert error["type"] == "rate_limit_exceeded"
        assert error["message"] == "Daily limit reached"
        assert error["remaining_time_hours"] == 23.0
        assert "details" not in error

    def test_configuration_error_returns_500(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-config")
        async def test_endpoint():
            raise ConfigurationAppError(
                code="upstream_not_configured",
                message="Server not configured. Please set ANTHROPIC_API_KEY environment variable.",
                details={"setting": "ANTHROPIC_API_KEY"},
            )

        response = client.get("/test-config")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "upstream_not_configured"
        assert error["details"] == {"setting": "ANTHROPIC_API_KEY"}

    def test_upstream_error_passes_message_through(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        @app_with_handlers.post("/test-upstream")
        async def test_endpoint():
            raise UpstreamAppError(code="upstream_transport_error", message="Name or service not known")

        response = client.post("/test-upstream")

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "Name or service not known"

    def test_method_not_allowed_sets_allow_header(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        @app_with_handlers.get("/test-method")
        async def test_endpoint():
            raise MethodNotAllowedAppError(
                code="method_not_allowed",
                message="Method not allowed",
                details={"method": "GET", "allowed_methods": ["POST", "OPTIONS"]},
            )

        response = client.get("/test-method")

        assert response.status_code == 405
        assert response.headers["Allow"] == "POST, OPTIONS"

    def test_error_response_format_is_consistent(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-format")
        async def test_endpoint():
            raise AppError(code="test", message="test")

        response = client.get("/test-format")
        data = response.json()

        assert response.status_code == 500
        for key in ("type", "code", "message", "request_id"):
            assert key in data["error"]


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (MethodNotAllowedAppError(code="m", message="m"), 405),
        (QuotaExceededAppError(code="q", message="q"), 429),
        (ConfigurationAppError(code="c", message="c"), 500),
        (UpstreamAppError(code="u", message="u"), 500),
        (AppError(code="a", message="a"), 500),
    ],
)
def test_status_code_mapping(exc: AppError, expected: int) -> None:
    assert status_code_for(exc) == expected


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI):
        assert Exception in app_with_handlers.exception_handlers
        assert AppError in app_with_handlers.exception_handlers

    def test_general_exception_handler_never_leaks_details(self):
        request = AsyncMock()
        request.url.path = "/messages"
        request.method = "POST"

        exc = RuntimeError("store corrupted: key sk-ant-secret")
        response = asyncio.run(general_exception_handler(request, exc))

        response_text = bytes(response.body).decode()
        data = json.loads(response_text)
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "sk-ant-secret" not in response_text
        assert "Traceback" not in response_text
        assert "RuntimeError" not in response_text
