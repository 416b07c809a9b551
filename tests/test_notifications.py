"""Tests for notification endpoints."""

from unittest.mock import patch

import pytest
from httpx import AsyncClient


async def create_notification(client: AsyncClient, user_id: int, message: str) -> dict:
    response = await client.post("/notifications", json={"userId": user_id, "message": message})
    assert response.status_code == 201
    return response.json()["notification"]


@pytest.mark.asyncio
async def test_liveness(notification_client: AsyncClient) -> None:
    """Test the notification service liveness probe."""
    response = await notification_client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Notification Service is running!"


@pytest.mark.asyncio
async def test_create_notification(notification_client: AsyncClient) -> None:
    """Test creating a notification."""
    response = await notification_client.post(
        "/notifications",
        json={"userId": 5, "message": "Welcome to SafeTrack"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Notification created successfully."
    notification = data["notification"]
    assert isinstance(notification["id"], int)
    assert notification["user_id"] == 5
    assert notification["message"] == "Welcome to SafeTrack"
    assert notification["is_read"] is False
    assert "created_at" in notification


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"message": "hello"},
        {"userId": 5},
        {"userId": 5, "message": ""},
    ],
)
async def test_create_notification_missing_fields(
    notification_client: AsyncClient,
    payload: dict,
) -> None:
    """Test creating a notification without a recipient or text."""
    response = await notification_client.post("/notifications", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "userId and message are required."


@pytest.mark.asyncio
async def test_create_notification_message_too_long(notification_client: AsyncClient) -> None:
    """Test notification text length is bounded."""
    response = await notification_client.post(
        "/notifications",
        json={"userId": 5, "message": "x" * 2001},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_notifications_newest_first(notification_client: AsyncClient) -> None:
    """Test a user's notifications are listed most recent first."""
    first = await create_notification(notification_client, 5, "first")
    second = await create_notification(notification_client, 5, "second")
    await create_notification(notification_client, 6, "someone else")

    response = await notification_client.get("/notifications/5")

    assert response.status_code == 200
    data = response.json()
    assert [item["id"] for item in data] == [second["id"], first["id"]]
    assert all(item["user_id"] == 5 for item in data)


@pytest.mark.asyncio
async def test_list_notifications_empty(notification_client: AsyncClient) -> None:
    """Test a user without notifications gets an empty list."""
    response = await notification_client.get("/notifications/42")

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_list_notifications_invalid_user_id(notification_client: AsyncClient) -> None:
    """Test a non-numeric user id is rejected."""
    response = await notification_client.get("/notifications/abc")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_storage_failure_returns_generic_error(notification_client: AsyncClient) -> None:
    """Test unexpected failures return a generic 500 without internal detail."""
    with patch(
        "safetrack.api.endpoints.notifications.NotificationService.list_for_user",
        side_effect=RuntimeError("connection reset by peer"),
    ):
        response = await notification_client.get("/notifications/5")

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "InternalServerError"
    assert data["message"] == "An unexpected error occurred"
    assert "connection reset" not in response.text
