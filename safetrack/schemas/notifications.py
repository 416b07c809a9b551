"""Notification schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationCreate(BaseModel):
    """Schema for creating a notification."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int | None = Field(default=None, alias="userId")
    message: str | None = Field(default=None, max_length=2000)


class NotificationRecord(BaseModel):
    """Schema for notification record."""

    id: int
    user_id: int
    message: str
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationCreateResponse(BaseModel):
    """Schema for notification create response."""

    message: str
    notification: NotificationRecord
