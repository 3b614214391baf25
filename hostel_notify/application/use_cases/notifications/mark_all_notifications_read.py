"""Use case for marking every visible notification as read."""

import logging

from sqlalchemy.orm import Session

from hostel_notify.domain.access_policy import AccessPolicy, get_access_policy
from hostel_notify.domain.entities import Actor
from hostel_notify.infrastructure.repositories import NotificationRepository

from .access import build_scope

logger = logging.getLogger(__name__)


def mark_all_notifications_read(
    session: Session, actor: Actor, *, policy: AccessPolicy | None = None
) -> int:
    """Mark all unread notifications visible to ``actor`` as read.

    Applied as bulk statements in a single transaction; returns how many
    notifications changed state.
    """

    policy = policy or get_access_policy()
    updated = NotificationRepository(session).mark_all_as_read(build_scope(actor, policy))
    logger.info("Marked %s notifications as read for user %s", updated, actor.id)
    return updated
