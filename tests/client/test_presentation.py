"""Tests for the notification rendering helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from hostel_notify.client.presentation import (
    NotificationVisual,
    format_time_ago,
    group_by_category,
    recent_notifications,
    summarize,
    unread_badge_label,
    visual_for,
)
from hostel_notify.domain.entities import Notification

NOW = datetime(2024, 1, 15, 18, 0, tzinfo=timezone.utc)


def _notification(notification_id, *, category=None, read=False, age=timedelta(0)):
    created = NOW - age
    return Notification(
        id=notification_id,
        title=f"Notice {notification_id}",
        message="Body",
        category=category,
        created_at=created,
        read_at=created if read else None,
    )


@pytest.mark.parametrize(
    "notification_type,expected",
    [
        ("success", NotificationVisual("🟢", "green")),
        ("warning", NotificationVisual("🟡", "yellow")),
        ("error", NotificationVisual("🔴", "red")),
        ("info", NotificationVisual("🔵", "blue")),
        (None, NotificationVisual("🔵", "blue")),
    ],
)
def test_visual_for_type(notification_type, expected) -> None:
    assert visual_for(notification_type) == expected


@pytest.mark.parametrize("count,label", [(0, ""), (1, "1"), (9, "9"), (10, "9+"), (57, "9+")])
def test_unread_badge_label(count, label) -> None:
    assert unread_badge_label(count) == label


@pytest.mark.parametrize(
    "age,label",
    [
        (timedelta(minutes=10), "Just now"),
        (timedelta(hours=3, minutes=59), "3h ago"),
        (timedelta(hours=23), "23h ago"),
        (timedelta(days=2, hours=5), "2d ago"),
    ],
)
def test_format_time_ago(age, label) -> None:
    assert format_time_ago(NOW - age, NOW) == label


def test_recent_notifications_keeps_newest_five() -> None:
    items = [_notification(index) for index in range(8, 0, -1)]

    assert [item.id for item in recent_notifications(items)] == [8, 7, 6, 5, 4]


def test_group_by_category_and_summary() -> None:
    items = [
        _notification(4, category="complaint"),
        _notification(3, category="mess", read=True),
        _notification(2, category="complaint", age=timedelta(days=1)),
        _notification(1, age=timedelta(days=3), read=True),
    ]

    groups = group_by_category(items)

    assert list(groups) == ["all", "complaint", "mess", "system"]
    assert [item.id for item in groups["complaint"]] == [4, 2]
    assert len(groups["all"]) == 4

    summary = summarize(items, NOW)
    assert (summary.total, summary.unread, summary.read, summary.today) == (4, 2, 2, 2)
