"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationCreate(_CamelModel):
    """Payload used to create a notification.

    Leaving ``target_user_id`` empty creates a broadcast notification.
    """

    title: str = Field(..., description="Short headline")
    message: str = Field(..., description="Notification body")
    type: str = Field("info", description="One of info, warning, success, error")
    category: str | None = Field(
        None, description="One of complaint, leave, mess, announcement, system"
    )
    action_url: str | None = Field(None, description="Link opened from the notification")
    target_user_id: int | None = Field(None, description="Recipient; empty for broadcasts")


class NotificationRead(_CamelModel):
    """Representation of a notification delivered to the client."""

    id: int
    title: str
    message: str
    type: str
    category: str | None = None
    action_url: str | None = None
    target_user_id: int | None = None
    read: bool = False
    read_at: datetime | None = None
    created_at: datetime


class NotificationPageRead(_CamelModel):
    """Page of notifications with pagination totals."""

    items: list[NotificationRead]
    page: int
    limit: int
    total: int
    pages: int


class UnreadCountRead(_CamelModel):
    unread: int


class MarkAllReadResponse(_CamelModel):
    updated: int


__all__ = [
    "MarkAllReadResponse",
    "NotificationCreate",
    "NotificationPageRead",
    "NotificationRead",
    "UnreadCountRead",
]
