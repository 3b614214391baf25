"""Notifications raised by other portal modules (complaints, leave, mess)."""

from __future__ import annotations

from sqlalchemy.orm import Session

from hostel_notify.domain.entities import Actor, Notification

from .create_notification import create_notification

COMPLAINT_STATUSES = ("PENDING", "IN_PROGRESS", "RESOLVED", "CLOSED")
LEAVE_STATUSES = ("PENDING", "APPROVED", "REJECTED")

_COMPLAINT_TYPES = {
    "PENDING": "info",
    "IN_PROGRESS": "info",
    "RESOLVED": "success",
    "CLOSED": "success",
}
_LEAVE_TYPES = {"PENDING": "info", "APPROVED": "success", "REJECTED": "error"}


def _status_label(status: str) -> str:
    return status.replace("_", "-").lower()


def notify_complaint_updated(
    session: Session, *, user_id: int, complaint_title: str, status: str
) -> Notification:
    """Tell a student that the status of their complaint changed."""

    status = status.upper()
    if status not in COMPLAINT_STATUSES:
        raise ValueError(f"Unknown complaint status '{status}'")
    return create_notification(
        session,
        title="Complaint Update",
        message=f"Your {complaint_title} complaint has been marked as {_status_label(status)}",
        type=_COMPLAINT_TYPES[status],
        category="complaint",
        action_url="/dashboard/complaints",
        target_user_id=user_id,
    )


def notify_leave_request_reviewed(
    session: Session, *, user_id: int, period: str, status: str
) -> Notification:
    """Tell a student that their leave request was approved or rejected."""

    status = status.upper()
    if status not in LEAVE_STATUSES or status == "PENDING":
        raise ValueError(f"Leave request status '{status}' is not a review outcome")
    return create_notification(
        session,
        title=f"Leave Request {status.title()}",
        message=f"Your leave request for {period} has been {status.lower()}",
        type=_LEAVE_TYPES[status],
        category="leave",
        action_url="/dashboard/leave",
        target_user_id=user_id,
    )


def announce_menu_updated(session: Session, *, day: str, meal: str) -> Notification:
    """Broadcast that the mess menu changed."""

    return create_notification(
        session,
        title="Menu Updated",
        message=f"{day}'s {meal} menu has been updated with new items",
        category="mess",
        action_url="/dashboard/mess",
    )


def publish_announcement(
    session: Session,
    *,
    actor: Actor,
    title: str,
    message: str,
    type: str = "info",
) -> Notification:
    """Broadcast an announcement on behalf of a privileged user."""

    return create_notification(
        session,
        title=title,
        message=message,
        type=type,
        category="announcement",
        actor=actor,
    )


__all__ = [
    "COMPLAINT_STATUSES",
    "LEAVE_STATUSES",
    "announce_menu_updated",
    "notify_complaint_updated",
    "notify_leave_request_reviewed",
    "publish_announcement",
]
