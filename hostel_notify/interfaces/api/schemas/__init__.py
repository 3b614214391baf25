from .notification import (
    MarkAllReadResponse,
    NotificationCreate,
    NotificationPageRead,
    NotificationRead,
    UnreadCountRead,
)

__all__ = [
    "MarkAllReadResponse",
    "NotificationCreate",
    "NotificationPageRead",
    "NotificationRead",
    "UnreadCountRead",
]
