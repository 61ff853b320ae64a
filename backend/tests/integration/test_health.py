"""Tests for the health check endpoint."""

import pytest
from httpx import ASGITransport, AsyncClient

from sourcerag.main import app, create_app


@pytest.mark.asyncio
async def test_health_check_returns_200():
    """Health endpoint should return 200 with status, version, and environment."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert "environment" in data
    assert data["collection"] == "rag_collection"


@pytest.mark.asyncio
async def test_health_reports_ready_index(tenant_index):
    """Health needs no tenant header and reports the index once it has connected."""
    await tenant_index.connect()
    transport = ASGITransport(app=create_app(tenant_index=tenant_index))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["index"] == "ready"


@pytest.mark.asyncio
async def test_health_reports_unreachable_index(make_tenant_index):
    """An attached index whose setup never succeeded is not reported as ready."""
    transport = ASGITransport(app=create_app(tenant_index=make_tenant_index()))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["index"] == "unavailable"
