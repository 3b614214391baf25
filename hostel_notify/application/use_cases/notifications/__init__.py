"""Use cases for managing notifications."""

from .count_unread_notifications import count_unread_notifications
from .create_notification import create_notification
from .delete_notification import delete_notification
from .events import (
    announce_menu_updated,
    notify_complaint_updated,
    notify_leave_request_reviewed,
    publish_announcement,
)
from .list_notifications import list_notifications
from .mark_all_notifications_read import mark_all_notifications_read
from .mark_notification_read import mark_notification_read

__all__ = [
    "announce_menu_updated",
    "count_unread_notifications",
    "create_notification",
    "delete_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "notify_complaint_updated",
    "notify_leave_request_reviewed",
    "publish_announcement",
]
