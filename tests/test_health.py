"""Health endpoints and cross-cutting middleware (request id, security headers, size limit)."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_readiness_checks_database(client: AsyncClient) -> None:
    """GET /api/v1/health/ready answers 200 when the database responds."""
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


async def test_security_headers_present(client: AsyncClient) -> None:
    """Every response carries the standard security headers."""
    response = await client.get("/api/v1/health")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert "strict-transport-security" not in response.headers


async def test_request_id_generated(client: AsyncClient) -> None:
    """A request without X-Request-ID gets one generated."""
    response = await client.get("/api/v1/health")
    assert response.headers.get("x-request-id")


async def test_request_id_forwarded(client: AsyncClient) -> None:
    """A safe client-provided X-Request-ID is echoed back."""
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["x-request-id"] == "abc-123"


async def test_request_id_sanitized(client: AsyncClient) -> None:
    """An unsafe X-Request-ID is replaced instead of echoed into logs."""
    response = await client.get(
        "/api/v1/health", headers={"X-Request-ID": "bad id;drop"}
    )
    assert response.headers["x-request-id"] != "bad id;drop"


async def test_oversized_body_rejected(client: AsyncClient) -> None:
    """Bodies above MAX_REQUEST_BYTES are refused with 413 before routing."""
    response = await client.post(
        "/api/v1/auth/login",
        content=b"x" * (5 * 1024 * 1024 + 1),
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 413
    assert response.json()["success"] is False


async def test_unknown_route_uses_error_envelope(client: AsyncClient) -> None:
    response = await client.get("/api/v1/does-not-exist")
    assert response.status_code == 404
    assert response.json()["success"] is False
