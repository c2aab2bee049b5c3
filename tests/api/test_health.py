"""Tests for health endpoints."""

from unittest.mock import patch

from httpx import AsyncClient

from batchtrace.infrastructure.storage.sqlite import connection as conn_module


async def test_root_health_check(api_client: AsyncClient):
    """Test root health endpoint."""
    response = await api_client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data


async def test_api_health_check(api_client: AsyncClient):
    response = await api_client.get("/api/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert "uptime_seconds" in data


async def test_request_id_echoed(api_client: AsyncClient):
    response = await api_client.get("/api/health", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"
    assert "X-Response-Time" in response.headers


async def test_db_health(api_client: AsyncClient, tmp_path):
    settings = conn_module.get_settings().model_copy(deep=True)
    settings.storage.data_dir = tmp_path
    conn_module._pool = None

    with patch.object(conn_module, "get_settings", return_value=settings):
        try:
            response = await api_client.get("/api/health/db")
        finally:
            await conn_module.close_pool()

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"]["available"] is True
