"""Aggregate application use cases."""

from .notifications import (
    count_unread_notifications,
    create_notification,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)

__all__ = [
    "count_unread_notifications",
    "create_notification",
    "delete_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]
