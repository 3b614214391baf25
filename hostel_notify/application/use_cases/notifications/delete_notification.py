"""Use case for deleting a notification."""

import logging

from sqlalchemy.orm import Session

from hostel_notify.domain.access_policy import AccessPolicy, get_access_policy
from hostel_notify.domain.entities import Actor
from hostel_notify.domain.errors import ForbiddenError
from hostel_notify.infrastructure.repositories import NotificationRepository

from .access import load_notification

logger = logging.getLogger(__name__)


def delete_notification(
    session: Session,
    actor: Actor,
    notification_id: int,
    *,
    policy: AccessPolicy | None = None,
) -> None:
    """Permanently remove the notification if ``actor`` owns it or is privileged."""

    policy = policy or get_access_policy()
    repository = NotificationRepository(session)
    notification = load_notification(repository, notification_id, actor=actor, policy=policy)
    if not policy.can_delete(actor, notification):
        raise ForbiddenError("Not allowed to delete this notification")
    repository.delete(notification_id)
    logger.info("Notification %s deleted by user %s", notification_id, actor.id)
