"""Unit tests for health, info, metrics and error rendering."""

import pytest
from httpx import ASGITransport, AsyncClient


@pytest.mark.asyncio
async def test_health_check(test_client):
    """Test the health check endpoint."""
    response = await test_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert "version" in data


@pytest.mark.asyncio
async def test_ready_check(test_client):
    """Readiness includes the database round trip."""
    response = await test_client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["database"] is True


@pytest.mark.asyncio
async def test_info_endpoint(test_client):
    response = await test_client.get("/info")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "indus-tours-api"
    assert data["features"]["idempotency"] is True
    assert data["features"]["background_workers"] is False
    assert data["endpoints"]["metrics"] == "/metrics"
    assert data["workers"] == {"deal_expiry": False, "idempotency_cleanup": False}


@pytest.mark.asyncio
async def test_health_ping_rpc(test_client):
    """Test the RPC-style health ping endpoint."""
    response = await test_client.post("/v1/health/ping", json={})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_request_id_echoed(test_client):
    response = await test_client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_metrics_endpoint(test_client, booking_payload):
    """Business counters appear in the Prometheus scrape once exercised."""
    await test_client.post("/v1/bookings", json=booking_payload)

    response = await test_client.get("/metrics")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "bookings_created_total" in response.text
    assert "http_requests_total" in response.text


@pytest.mark.asyncio
async def test_unknown_route_is_problem_details(test_client):
    response = await test_client.get("/v1/nowhere")

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("application/problem+json")
    data = response.json()
    assert data["status"] == 404
    assert data["instance"] == "/v1/nowhere"


@pytest.mark.asyncio
async def test_unhandled_error_returns_500_problem(test_app):
    @test_app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    # Starlette re-raises after the handler responds; keep the response instead
    transport = ASGITransport(app=test_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/boom")

    assert response.status_code == 500
    data = response.json()
    assert data["title"] == "Internal Server Error"
    assert "error_id" in data
    assert "kaboom" not in response.text
