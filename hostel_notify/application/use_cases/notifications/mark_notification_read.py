"""Use case for marking a single notification as read."""

from sqlalchemy.orm import Session

from hostel_notify.domain.access_policy import AccessPolicy, get_access_policy
from hostel_notify.domain.entities import Actor, Notification
from hostel_notify.domain.errors import ForbiddenError
from hostel_notify.infrastructure.repositories import NotificationRepository

from .access import build_scope, load_notification


def mark_notification_read(
    session: Session,
    actor: Actor,
    notification_id: int,
    *,
    policy: AccessPolicy | None = None,
) -> Notification:
    """Mark the notification as read for ``actor`` and return its new state.

    Marking an already read notification is a no-op.
    """

    policy = policy or get_access_policy()
    repository = NotificationRepository(session)
    notification = load_notification(repository, notification_id, actor=actor, policy=policy)
    if not policy.can_mark_read(actor, notification):
        raise ForbiddenError("Not allowed to update this notification")
    if not notification.read:
        repository.mark_as_read(notification, user_id=actor.id)
        notification = repository.get_for_actor(notification_id, build_scope(actor, policy))
    return notification
