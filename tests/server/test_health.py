"""Tests for health and info endpoints.

This module tests the core API endpoints including health checks,
system information, and root endpoint.
"""

from datetime import datetime
from unittest.mock import patch

from fastapi import status
from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient):
    """GET /health reports healthy when the database answers."""
    with patch("src.server.main.check_database_connection", return_value=True):
        response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database_connected"] is True
    datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))


def test_health_endpoint_degraded(client: TestClient):
    with patch("src.server.main.check_database_connection", return_value=False):
        response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "degraded"


def test_root_endpoint(client: TestClient):
    response = client.get("/")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert "Wheel Tracker API" in data["message"]
    assert data["docs"] == "/docs"
    assert data["health"] == "/health"
    assert data["api"] == "/api/v1/info"


def test_api_v1_info_endpoint(client: TestClient):
    """GET /api/v1/info returns name, version and database status."""
    with patch("src.server.api.v1.router.check_database_connection", return_value=True):
        response = client.get("/api/v1/info")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert set(data.keys()) == {
        "app_name",
        "version",
        "status",
        "database_connected",
        "timestamp",
    }
    assert data["app_name"] == "Wheel Tracker API"
    assert data["version"] == "1.0.0"
    assert data["status"] == "running"
    assert data["database_connected"] is True


def test_openapi_lists_resource_paths(client: TestClient):
    response = client.get("/openapi.json")
    assert response.status_code == status.HTTP_200_OK

    paths = response.json()["paths"]
    for path in (
        "/health",
        "/api/v1/trades",
        "/api/v1/trades/roll",
        "/api/v1/chains",
        "/api/v1/positions",
        "/api/v1/stocks",
        "/api/v1/fund-transactions",
        "/api/v1/accounts",
        "/api/v1/stats",
        "/api/v1/portfolio/stats",
        "/api/v1/prices/batch",
        "/api/v1/settings",
    ):
        assert path in paths


def test_cors_headers_present(client: TestClient):
    with patch("src.server.main.check_database_connection", return_value=True):
        response = client.get("/health", headers={"Origin": "http://localhost:3000"})

    assert response.status_code == status.HTTP_200_OK
    assert "access-control-allow-origin" in response.headers
