"""Notification endpoints."""

from fastapi import APIRouter, status

from safetrack.dependencies import DatabaseSession
from safetrack.schemas.notifications import (
    NotificationCreate,
    NotificationCreateResponse,
    NotificationRecord,
)
from safetrack.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.post(
    "",
    response_model=NotificationCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a notification",
)
async def create_notification(
    request: NotificationCreate,
    db: DatabaseSession,
) -> NotificationCreateResponse:
    """Store a notification in a user's inbox."""
    notification = await NotificationService.create(db, request.user_id, request.message)

    return NotificationCreateResponse(
        message="Notification created successfully.",
        notification=NotificationRecord.model_validate(notification),
    )


@router.get(
    "/{user_id}",
    response_model=list[NotificationRecord],
    status_code=status.HTTP_200_OK,
    summary="List a user's notifications",
)
async def list_notifications(user_id: int, db: DatabaseSession) -> list[NotificationRecord]:
    """
    List all notifications of a user, newest first.

    A user without notifications gets an empty list.
    """
    records = await NotificationService.list_for_user(db, user_id)
    return [NotificationRecord.model_validate(record) for record in records]
