"""
Tests for Health Endpoints
==========================

Tests for:
- GET /health
- GET /ready
- GET /live
- GET /
- request timeout and access logging
"""

import asyncio
import logging

import pytest
from httpx import AsyncClient, ASGITransport

from main import create_app


@pytest.mark.asyncio
async def test_health_check(anon_client: AsyncClient):
    """Test health check endpoint."""
    response = await anon_client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "healthy"
    assert data["environment"] == "test"
    assert "version" in data
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_ready_check(anon_client: AsyncClient):
    """Test readiness check endpoint."""
    response = await anon_client.get("/ready")
    assert response.status_code == 200

    data = response.json()
    assert data["ready"] is True
    assert data["checks"] == {"database": True}


@pytest.mark.asyncio
async def test_live_check(anon_client: AsyncClient):
    """Test liveness check endpoint."""
    response = await anon_client.get("/live")
    assert response.status_code == 200
    assert response.json() == {"alive": True}


@pytest.mark.asyncio
async def test_root_endpoint(anon_client: AsyncClient):
    """Test root endpoint returns API info."""
    response = await anon_client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert data["name"] == "ScoutMe API"
    assert data["api"]["matches"] == "/match"


@pytest.mark.asyncio
async def test_response_headers(anon_client: AsyncClient):
    """Timing and request id headers are added."""
    response = await anon_client.get("/")
    assert "x-response-time" in response.headers
    assert "x-request-id" in response.headers


@pytest.mark.asyncio
async def test_slow_request_times_out(settings, database, token_verifier):
    """Requests running past the configured timeout get a 504."""
    app = create_app(
        settings=settings.model_copy(update={"request_timeout_seconds": 0.2}),
        database=database,
        token_verifier=token_verifier,
    )

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(2)
        return {"done": True}

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/slow")

    assert response.status_code == 504
    assert response.json() == {"detail": "Request timed out"}


@pytest.mark.asyncio
async def test_access_log_carries_caller_uid(client: AsyncClient, caplog):
    caplog.set_level(logging.INFO, logger="scoutme.middleware")

    response = await client.get("/match")
    assert response.status_code == 200

    lines = [r.getMessage() for r in caplog.records if r.name == "scoutme.middleware"]
    assert any("GET /match -> 200" in line and "uid=firebase-uid-coach" in line for line in lines)


@pytest.mark.asyncio
async def test_access_log_anonymous_caller(anon_client: AsyncClient, caplog):
    caplog.set_level(logging.INFO, logger="scoutme.middleware")

    response = await anon_client.get("/match")
    assert response.status_code == 401

    warnings = [r for r in caplog.records if r.name == "scoutme.middleware" and r.levelno == logging.WARNING]
    assert any("uid=-" in r.getMessage() for r in warnings)
