"""Shared lookups that apply the access policy before a mutation."""

from __future__ import annotations

from hostel_notify.domain.access_policy import AccessPolicy
from hostel_notify.domain.entities import Actor, Notification
from hostel_notify.domain.errors import NotFoundError
from hostel_notify.infrastructure.repositories import NotificationRepository, NotificationScope


def build_scope(actor: Actor, policy: AccessPolicy) -> NotificationScope:
    """Translate the policy into the repository's visibility scope for ``actor``."""

    return NotificationScope(
        actor,
        privileged=policy.is_privileged(actor),
        include_broadcasts=policy.broadcasts_visible_to(actor),
    )


def load_notification(
    repository: NotificationRepository,
    notification_id: int,
    *,
    actor: Actor,
    policy: AccessPolicy,
) -> Notification:
    """Return the notification or raise :class:`NotFoundError`.

    Broadcasts hidden from ``actor`` are reported as missing.
    """

    notification = repository.get_for_actor(notification_id, build_scope(actor, policy))
    if notification is None:
        raise NotFoundError(f"Notification {notification_id} not found")
    if notification.is_broadcast and not policy.can_view(actor, notification):
        raise NotFoundError(f"Notification {notification_id} not found")
    return notification


__all__ = ["build_scope", "load_notification"]
