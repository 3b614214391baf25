"""Rendering helpers for the notification dropdown and page."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence

from hostel_notify.domain.entities import Notification
from hostel_notify.utils import ensure_app_timezone, now_in_app_timezone

RECENT_LIMIT = 5
BADGE_OVERFLOW = 9


@dataclass(frozen=True)
class NotificationVisual:
    icon: str
    color: str


_VISUALS = {
    "success": NotificationVisual(icon="🟢", color="green"),
    "warning": NotificationVisual(icon="🟡", color="yellow"),
    "error": NotificationVisual(icon="🔴", color="red"),
}
_DEFAULT_VISUAL = NotificationVisual(icon="🔵", color="blue")


@dataclass(frozen=True)
class NotificationSummary:
    total: int
    unread: int
    read: int
    today: int


def visual_for(notification_type: str | None) -> NotificationVisual:
    return _VISUALS.get((notification_type or "").lower(), _DEFAULT_VISUAL)


def recent_notifications(
    items: Sequence[Notification], limit: int = RECENT_LIMIT
) -> list[Notification]:
    """Return the newest ``limit`` entries for the dropdown."""

    return list(items[:limit])


def unread_badge_label(count: int) -> str:
    if count <= 0:
        return ""
    if count > BADGE_OVERFLOW:
        return f"{BADGE_OVERFLOW}+"
    return str(count)


def format_time_ago(created_at: datetime | None, now: datetime | None = None) -> str:
    """Format ``created_at`` as ``Just now``, ``3h ago`` or ``2d ago``."""

    if created_at is None:
        return ""
    now = ensure_app_timezone(now) if now else now_in_app_timezone()
    elapsed_hours = int((now - ensure_app_timezone(created_at)).total_seconds() // 3600)
    if elapsed_hours < 1:
        return "Just now"
    if elapsed_hours < 24:
        return f"{elapsed_hours}h ago"
    return f"{elapsed_hours // 24}d ago"


def group_by_category(items: Iterable[Notification]) -> "OrderedDict[str, list[Notification]]":
    """Group notifications for the category tabs; ``all`` always comes first."""

    groups: OrderedDict[str, list[Notification]] = OrderedDict(all=[])
    for item in items:
        groups["all"].append(item)
        groups.setdefault(item.category or "system", []).append(item)
    return groups


def summarize(items: Sequence[Notification], now: datetime | None = None) -> NotificationSummary:
    now = ensure_app_timezone(now) if now else now_in_app_timezone()
    unread = sum(1 for item in items if not item.read)
    today = sum(
        1
        for item in items
        if item.created_at is not None
        and ensure_app_timezone(item.created_at).date() == now.date()
    )
    return NotificationSummary(
        total=len(items), unread=unread, read=len(items) - unread, today=today
    )


__all__ = [
    "NotificationSummary",
    "NotificationVisual",
    "format_time_ago",
    "group_by_category",
    "recent_notifications",
    "summarize",
    "unread_badge_label",
    "visual_for",
]
