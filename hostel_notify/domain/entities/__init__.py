"""Domain entities exposed by the application."""

from .actor import Actor
from .notification import (
    NOTIFICATION_CATEGORIES,
    NOTIFICATION_TYPES,
    Notification,
    NotificationPage,
)

__all__ = [
    "Actor",
    "NOTIFICATION_CATEGORIES",
    "NOTIFICATION_TYPES",
    "Notification",
    "NotificationPage",
]
