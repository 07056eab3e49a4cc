"""
Integration tests for health and status endpoints.

These tests verify the API is responding correctly.
"""

import pytest
from unittest.mock import AsyncMock

from app.services.healthcheck import (
    CheckResult,
    HealthReport,
    HealthStatus,
    get_health_checker,
)


@pytest.fixture
def checker_report(app):
    """Serve a canned report from the health checker dependency."""
    checker = AsyncMock()
    app.dependency_overrides[get_health_checker] = lambda: checker

    def _set(*checks):
        results = [CheckResult(name=name, status=status) for name, status in checks]
        status = (
            HealthStatus.HEALTHY
            if all(s == HealthStatus.HEALTHY for _, s in checks)
            else HealthStatus.DEGRADED
        )
        checker.run_all_checks.return_value = HealthReport(status=status, checks=results)

    yield _set
    app.dependency_overrides.pop(get_health_checker, None)


class TestHealthEndpoints:

    @pytest.mark.integration
    def test_health_endpoint(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.integration
    def test_health_detailed(self, client):
        """Detailed health endpoint should return system info."""
        response = client.get("/health/detailed")
        assert response.status_code == 200
        data = response.json()
        assert "system" in data
        assert "memory" in data

    @pytest.mark.integration
    def test_liveness(self, client):
        response = client.get("/health/live")
        assert response.status_code == 200
        assert response.json()["live"] is True

    @pytest.mark.integration
    def test_services_report(self, client, checker_report):
        checker_report(("api", HealthStatus.HEALTHY), ("supabase", HealthStatus.HEALTHY))

        response = client.get("/health/services")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert [c["name"] for c in data["checks"]] == ["api", "supabase"]

    @pytest.mark.integration
    def test_ready_when_database_up(self, client, checker_report):
        checker_report(
            ("api", HealthStatus.HEALTHY),
            ("supabase", HealthStatus.HEALTHY),
            ("ingredient_categories", HealthStatus.DEGRADED),
        )

        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["ready"] is True

    @pytest.mark.integration
    def test_not_ready_when_database_down(self, client, checker_report):
        checker_report(("api", HealthStatus.HEALTHY), ("supabase", HealthStatus.UNHEALTHY))

        response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["ready"] is False

    @pytest.mark.integration
    def test_root_endpoint(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "shopping" in response.json()["endpoints"]


class TestAPIStructure:

    @pytest.mark.integration
    def test_404_on_unknown_route(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404

    @pytest.mark.integration
    def test_user_id_required(self, client, override_db):
        response = client.get("/api/shopping/items")
        assert response.status_code == 422

    @pytest.mark.integration
    def test_blank_user_id_rejected(self, client, override_db):
        response = client.get("/api/shopping/items", params={"user_id": "  "})
        assert response.status_code == 400

    @pytest.mark.integration
    def test_cors_headers(self, client):
        response = client.get("/health", headers={"Origin": "http://localhost:3000"})
        assert "access-control-allow-origin" in response.headers
