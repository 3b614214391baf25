"""Domain entity representing a portal notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

NOTIFICATION_TYPES = ("info", "warning", "success", "error")
NOTIFICATION_CATEGORIES = ("complaint", "leave", "mess", "announcement", "system")


@dataclass
class Notification:
    """Message delivered to one user or, without a target, to everyone.

    ``read`` and ``read_at`` describe the read state from the point of view of
    the actor that loaded the notification: targeted notifications carry a
    single read timestamp while broadcasts keep one receipt per user.
    """

    id: int | None
    title: str
    message: str
    type: str = "info"
    category: str | None = None
    action_url: str | None = None
    target_user_id: int | None = None
    created_at: datetime | None = None
    read_at: datetime | None = None

    @property
    def read(self) -> bool:
        return self.read_at is not None

    @property
    def is_broadcast(self) -> bool:
        return self.target_user_id is None


@dataclass
class NotificationPage:
    """One page of notifications plus the numbers needed to paginate."""

    items: list[Notification]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 0
        return -(-self.total // self.limit)


__all__ = [
    "NOTIFICATION_CATEGORIES",
    "NOTIFICATION_TYPES",
    "Notification",
    "NotificationPage",
]
