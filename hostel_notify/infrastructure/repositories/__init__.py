"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository, NotificationScope

__all__ = ["NotificationRepository", "NotificationScope"]
