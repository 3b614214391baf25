"""ORM models used by the application infrastructure."""

from .notification import NotificationModel, NotificationReceiptModel

__all__ = ["NotificationModel", "NotificationReceiptModel"]
