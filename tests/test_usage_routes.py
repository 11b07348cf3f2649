"""Tests for the /usage snapshot and /health endpoints."""

import pytest
from fastapi.testclient import TestClient

from quota_proxy.core.config import settings
from quota_proxy.core.rate_limit import get_quota_limiter
from quota_proxy.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


class TestUsageSnapshot:
    """The snapshot is optimistic and never reads the usage store."""

    @pytest.mark.parametrize("method", ["GET", "POST"])
    def test_reports_full_quota(self, client: TestClient, method: str) -> None:
        response = client.request(method, "/usage")

        assert response.status_code == 200
        assert response.json() == {
            "uses_remaining": 10,
            "reset_time_hours": 0,
            "note": "Usage is tracked on each request",
        }

    def test_ignores_recorded_usage(self, client: TestClient) -> None:
        limiter = get_quota_limiter()
        for _ in range(10):
            limiter.record_use("abc")

        response = client.get("/usage", headers={"x-client-id": "abc"})

        assert response.json()["uses_remaining"] == 10

    def test_follows_configured_quota(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.app, "max_free_uses", 25)

        assert client.get("/usage").json()["uses_remaining"] == 25

    def test_options_returns_empty_200(self, client: TestClient) -> None:
        response = client.options("/usage")

        assert response.status_code == 200
        assert response.content == b""

    @pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE"])
    def test_other_methods_use_error_envelope(self, client: TestClient, method: str) -> None:
        response = client.request(method, "/usage")

        assert response.status_code == 405
        assert response.headers["Allow"] == "GET, POST, OPTIONS"
        error = response.json()["error"]
        assert error["code"] == "method_not_allowed"
        assert error["message"] == "Method not allowed"
        assert error["details"]["method"] == method

    def test_browser_preflight_for_any_method(self, client: TestClient) -> None:
        response = client.options(
            "/usage",
            headers={
                "Origin": "https://frontend.example",
                "Access-Control-Request-Method": "PUT",
            },
        )

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"

    def test_unaffected_by_missing_credential(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings.upstream, "api_key", None)

        assert client.get("/usage").status_code == 200


class TestHealthCheck:
    def test_health_check_returns_ok(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "upstream_configured": True}

    def test_health_reports_missing_credential(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings.upstream, "api_key", None)

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["upstream_configured"] is False


class TestOpenAPI:
    def test_documents_client_id_header_and_tags(self, client: TestClient) -> None:
        schema = client.get("/openapi.json").json()

        params = schema["paths"]["/messages"]["post"]["parameters"]
        assert any(p["name"] == "x-client-id" and p["in"] == "header" for p in params)
        assert {t["name"] for t in schema["tags"]} >= {"Proxy", "Usage", "Health"}
        assert "X-Uses-Remaining" in schema["paths"]["/messages"]["post"]["responses"]["200"]["headers"]
