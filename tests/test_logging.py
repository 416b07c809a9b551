"""Tests for request logging middleware."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_request_id_is_generated(notification_client: AsyncClient) -> None:
    """Test every response carries a request id and its processing time."""
    first = await notification_client.get("/notifications/1")
    second = await notification_client.get("/notifications/1")

    assert first.headers["x-request-id"]
    assert first.headers["x-request-id"] != second.headers["x-request-id"]
    assert float(first.headers["x-process-time"]) >= 0


@pytest.mark.asyncio
async def test_request_id_is_propagated(notification_client: AsyncClient) -> None:
    """Test a caller-supplied request id is kept."""
    response = await notification_client.get(
        "/notifications/1",
        headers={"X-Request-ID": "trace-abc-123"},
    )

    assert response.headers["x-request-id"] == "trace-abc-123"


@pytest.mark.asyncio
async def test_request_id_on_error_responses(auth_client: AsyncClient) -> None:
    """Test error responses carry the request id too."""
    response = await auth_client.get("/profile", headers={"X-Request-ID": "trace-401"})

    assert response.status_code == 401
    assert response.headers["x-request-id"] == "trace-401"
