"""Notification service for the per-user inbox."""

import structlog
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from safetrack.core.exceptions import InvalidInputException
from safetrack.models.notifications import notifications

logger = structlog.get_logger(__name__)


class NotificationService:
    """Service for storing and listing notifications."""

    @staticmethod
    async def create(
        db: AsyncSession,
        user_id: int | None,
        message: str | None,
    ) -> dict:
        """
        Store a notification for a user.

        Args:
            db: Database session
            user_id: Recipient user ID
            message: Notification text

        Returns:
            Stored notification with server-assigned id and created_at

        Raises:
            InvalidInputException: If user_id or message is missing
        """
        if user_id is None or not message:
            raise InvalidInputException("userId and message are required.")

        query = (
            notifications.insert()
            .values(user_id=user_id, message=message)
            .returning(notifications)
        )
        result = await db.execute(query)
        notification = dict(result.mappings().one())
        await db.commit()

        logger.info(
            "notification_created",
            notification_id=notification["id"],
            user_id=user_id,
        )
        return notification

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: int) -> list[dict]:
        """
        Get all notifications for a user, most recent first.

        Args:
            db: Database session
            user_id: User ID

        Returns:
            Notifications ordered by creation time descending; empty if none exist
        """
        query = (
            select(notifications)
            .where(notifications.c.user_id == user_id)
            .order_by(desc(notifications.c.created_at), desc(notifications.c.id))
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]
