"""Integration tests for health check endpoints and request middleware."""

from unittest.mock import patch

from fastapi.testclient import TestClient


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_healthy_status(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["timestamp"] is not None
        assert data["version"] == "0.1.0"

    def test_health_reports_latency_summary(self, client: TestClient) -> None:
        """Test that recent request latency is reported once requests were served."""
        client.get("/api/v1/catalog")

        data = client.get("/health").json()

        assert data["latency"] is not None
        assert data["latency"]["total_requests"] >= 1

    def test_health_does_not_need_session(self, client: TestClient) -> None:
        response = client.get("/health")

        assert "set-cookie" not in response.headers


class TestReadinessEndpoint:
    """Tests for /health/ready endpoint."""

    def test_readiness_when_database_reachable(self, client: TestClient) -> None:
        response = client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        db_check = next(c for c in data["checks"] if c["name"] == "database")
        assert db_check["healthy"] is True
        assert db_check["latency_ms"] is not None

    def test_readiness_returns_503_when_database_unhealthy(self, client: TestClient) -> None:
        with patch(
            "src.api.routes.health.check_database_connection",
            return_value={"healthy": False, "error": "Connection timeout"},
        ):
            response = client.get("/health/ready")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        db_check = next(c for c in data["checks"] if c["name"] == "database")
        assert db_check["error"] == "Connection timeout"


class TestAuthenticatedHealth:
    """Tests for /health/auth endpoint."""

    def test_requires_token(self, client: TestClient) -> None:
        response = client.get("/health/auth")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"


class TestErrorResponses:
    """Tests for error responses rendered by middleware."""

    def test_unknown_route(self, client: TestClient) -> None:
        response = client.get("/nonexistent-endpoint")

        assert response.status_code == 404

    def test_oversized_body_rejected(self, client: TestClient, test_settings) -> None:
        body = b"x" * (test_settings.max_request_body_size + 1)

        response = client.post(
            "/api/v1/cart/plan",
            content=body,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 413
        assert "error" in response.json()

    def test_oversized_chunked_body_rejected(self, client: TestClient, test_settings) -> None:
        def chunks():
            for _ in range(100):
                yield b"x" * 1024

        response = client.post(
            "/api/v1/webhooks/stripe",
            content=chunks(),
            headers={"stripe-signature": "t=1,v1=valid"},
        )

        assert response.status_code == 413
        assert response.json()["error"] == "request_too_large"

    def test_unhandled_exception_uses_error_format(self) -> None:
        from src.main import app

        with patch(
            "src.api.routes.health.check_database_connection",
            side_effect=RuntimeError("boom"),
        ), TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.get("/health/ready")

        assert response.status_code == 500
        data = response.json()
        assert data["error"]
        assert "timestamp" in data
