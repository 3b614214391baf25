"""Use case for creating a notification and announcing it in realtime."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from hostel_notify.domain.access_policy import AccessPolicy, get_access_policy
from hostel_notify.domain.entities import Actor, Notification
from hostel_notify.domain.errors import ForbiddenError
from hostel_notify.infrastructure.notifications import dispatch_notification
from hostel_notify.infrastructure.repositories import NotificationRepository
from hostel_notify.utils import now_in_app_timezone

from .validators import (
    MESSAGE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    normalize_text,
    validate_action_url,
    validate_category,
    validate_type,
)

logger = logging.getLogger(__name__)


def create_notification(
    session: Session,
    *,
    title: str,
    message: str,
    type: str = "info",
    category: str | None = None,
    action_url: str | None = None,
    target_user_id: int | None = None,
    actor: Actor | None = None,
    policy: AccessPolicy | None = None,
) -> Notification:
    """Persist a new unread notification, then push it to connected clients.

    ``actor`` is ``None`` for system actions. The realtime event is only
    dispatched once the record is committed.
    """

    policy = policy or get_access_policy()
    notification = Notification(
        id=None,
        title=normalize_text(title, field="title", max_length=TITLE_MAX_LENGTH),
        message=normalize_text(message, field="message", max_length=MESSAGE_MAX_LENGTH),
        type=validate_type(type),
        category=validate_category(category),
        action_url=validate_action_url(action_url),
        target_user_id=target_user_id,
        created_at=now_in_app_timezone(),
        read_at=None,
    )
    if not policy.can_create(actor, target_user_id):
        raise ForbiddenError("Not allowed to create this notification")

    saved = NotificationRepository(session).create(notification)
    logger.info(
        "Notification %s created for %s",
        saved.id,
        "everyone" if saved.is_broadcast else f"user {saved.target_user_id}",
    )
    dispatch_notification(saved)
    return saved
