"""
Unit Tests for Health Check Endpoint

Tests the /api/v1/health endpoint.
"""

from fastapi.testclient import TestClient

from askdb.api.main import app, app_state


class TestHealthEndpoint:
    """Test suite for health check endpoint."""

    def test_health_returns_correct_structure(self, client):
        response = client.get("/api/v1/health")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert isinstance(data["timestamp"], str)
        assert data["checks"] == {
            "services": True,
            "llm_configured": True,
            "session_store": False,
        }

    def test_health_without_services(self):
        original_state = app_state.copy()
        app_state["services"] = None
        try:
            response = TestClient(app).get("/api/v1/health")
        finally:
            app_state.update(original_state)

        assert response.status_code == 200
        assert response.json()["checks"]["services"] is False

    def test_root(self, client):
        response = client.get("/")

        assert response.json()["name"] == "AskDB API"
