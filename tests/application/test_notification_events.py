"""Tests for the notifications raised by other portal modules."""

from __future__ import annotations

import pytest

from conftest import ADMIN, ALICE
from hostel_notify.application.use_cases.notifications import (
    announce_menu_updated,
    notify_complaint_updated,
    notify_leave_request_reviewed,
    publish_announcement,
)
from hostel_notify.domain.errors import ForbiddenError


def test_complaint_update_targets_the_student(session) -> None:
    notification = notify_complaint_updated(
        session, user_id=ALICE.id, complaint_title="AC repair", status="in_progress"
    )

    assert notification.target_user_id == ALICE.id
    assert notification.message == "Your AC repair complaint has been marked as in-progress"
    assert (notification.type, notification.category) == ("info", "complaint")
    assert notification.action_url == "/dashboard/complaints"


def test_complaint_update_rejects_unknown_status(session) -> None:
    with pytest.raises(ValueError):
        notify_complaint_updated(session, user_id=ALICE.id, complaint_title="Wifi", status="lost")


@pytest.mark.parametrize("status,expected_type", [("APPROVED", "success"), ("rejected", "error")])
def test_leave_review_outcomes(session, status, expected_type) -> None:
    notification = notify_leave_request_reviewed(
        session, user_id=ALICE.id, period="Jan 20-25", status=status
    )

    assert notification.title == f"Leave Request {status.title()}"
    assert notification.message == f"Your leave request for Jan 20-25 has been {status.lower()}"
    assert notification.type == expected_type
    assert notification.category == "leave"


def test_pending_is_not_a_leave_review_outcome(session) -> None:
    with pytest.raises(ValueError):
        notify_leave_request_reviewed(session, user_id=ALICE.id, period="Feb 1", status="PENDING")


def test_menu_update_is_broadcast(session) -> None:
    notification = announce_menu_updated(session, day="Tomorrow", meal="lunch")

    assert notification.is_broadcast
    assert notification.message == "Tomorrow's lunch menu has been updated with new items"
    assert notification.category == "mess"


def test_announcements_require_a_privileged_actor(session) -> None:
    notification = publish_announcement(
        session, actor=ADMIN, title="Hostel Meeting", message="Meeting at 7 PM", type="warning"
    )
    assert notification.is_broadcast
    assert notification.category == "announcement"

    with pytest.raises(ForbiddenError):
        publish_announcement(session, actor=ALICE, title="Party", message="Room 12 at 9")
