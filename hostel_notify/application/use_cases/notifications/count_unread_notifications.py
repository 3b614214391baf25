"""Use case for counting unread notifications."""

from sqlalchemy.orm import Session

from hostel_notify.domain.access_policy import AccessPolicy, get_access_policy
from hostel_notify.domain.entities import Actor
from hostel_notify.infrastructure.repositories import NotificationRepository

from .access import build_scope


def count_unread_notifications(
    session: Session, actor: Actor, *, policy: AccessPolicy | None = None
) -> int:
    """Return how many visible notifications ``actor`` has not read yet."""

    policy = policy or get_access_policy()
    return NotificationRepository(session).count_unread_for_actor(build_scope(actor, policy))
