"""
Unit tests for the FastAPI application.

These tests verify that the app mounts every router, serves the health
endpoint and publishes its OpenAPI schema.
"""

import pytest
from fastapi.testclient import TestClient


class TestAppHealth:
    """Tests for the health endpoint."""

    def test_health_endpoint_returns_ok(self, test_client):
        """The /health endpoint should return status ok."""
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_endpoint_includes_service_name(self, test_client):
        """The /health endpoint should include the service name."""
        response = test_client.get("/health")

        assert "service" in response.json()


class TestAppRouterMounting:
    """Tests that every feature router is mounted."""

    @pytest.mark.parametrize(
        "path",
        ["/claimSets/{claim_set_id}", "/claimSets/validate", "/claimSets/{claim_set_id}/validate",
         "/claimSets/{claim_set_id}/resourceClaimActions/validate", "/applications", "/applications/{application_id}",
         "/odsInstances", "/odsInstances/{ods_instance_id}"],
    )
    def test_route_is_registered(self, test_client, path):
        response = test_client.get("/openapi.json")

        assert path in response.json()["paths"]


class TestAppOpenAPI:
    """Tests for OpenAPI documentation."""

    def test_openapi_schema_available(self, test_client):
        """The OpenAPI schema should be accessible at /openapi.json."""
        response = test_client.get("/openapi.json")

        assert response.status_code == 200
        assert "openapi" in response.json()

    def test_docs_endpoint_available(self, test_client):
        """The Swagger UI should be accessible at /docs."""
        response = test_client.get("/docs")

        assert response.status_code == 200


# --- Fixtures ---


@pytest.fixture
def test_client():
    """
    Provides a TestClient for the FastAPI app.
    """
    from app.main import app

    return TestClient(app)
