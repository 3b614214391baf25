"""Authorization rules for reading and managing notifications."""

from __future__ import annotations

from typing import Literal

from hostel_notify.config import get_settings
from hostel_notify.domain.entities import Actor, Notification

BroadcastVisibility = Literal["all", "privileged"]

BROADCAST_VISIBLE_TO_ALL: BroadcastVisibility = "all"
BROADCAST_VISIBLE_TO_PRIVILEGED: BroadcastVisibility = "privileged"


class AccessPolicy:
    """Decide what an :class:`Actor` may do with a :class:`Notification`.

    Owners and privileged roles have full control over targeted notifications.
    Broadcasts are either visible read-only to every user or hidden from
    non-privileged users, depending on ``broadcast_visibility``; only
    privileged actors may delete or create them.
    """

    def __init__(
        self,
        privileged_roles: frozenset[str],
        broadcast_visibility: BroadcastVisibility = BROADCAST_VISIBLE_TO_ALL,
    ) -> None:
        self.privileged_roles = privileged_roles
        self.broadcast_visibility = broadcast_visibility

    def is_privileged(self, actor: Actor) -> bool:
        return actor.is_privileged(self.privileged_roles)

    def broadcasts_visible_to(self, actor: Actor) -> bool:
        """Return ``True`` when ``actor`` may see broadcast notifications."""

        if self.is_privileged(actor):
            return True
        return self.broadcast_visibility == BROADCAST_VISIBLE_TO_ALL

    def is_owner(self, actor: Actor, notification: Notification) -> bool:
        return (
            notification.target_user_id is not None
            and notification.target_user_id == actor.id
        )

    def can_view(self, actor: Actor, notification: Notification) -> bool:
        if notification.is_broadcast:
            return self.broadcasts_visible_to(actor)
        return self.is_owner(actor, notification) or self.is_privileged(actor)

    def can_mark_read(self, actor: Actor, notification: Notification) -> bool:
        # Marking a broadcast only touches the actor's own receipt.
        return self.can_view(actor, notification)

    def can_delete(self, actor: Actor, notification: Notification) -> bool:
        if self.is_privileged(actor):
            return True
        return self.is_owner(actor, notification)

    def can_create(self, actor: Actor | None, target_user_id: int | None) -> bool:
        """Return ``True`` when ``actor`` may create a notification for the target.

        ``actor`` is ``None`` for system actions (complaint updates, leave
        reviews) which may notify anyone.
        """

        if actor is None or self.is_privileged(actor):
            return True
        return target_user_id is not None and target_user_id == actor.id


def get_access_policy() -> AccessPolicy:
    """Build the policy from the current application settings."""

    settings = get_settings()
    return AccessPolicy(
        privileged_roles=settings.privileged_role_set,
        broadcast_visibility=settings.broadcast_visibility,
    )


__all__ = [
    "AccessPolicy",
    "BroadcastVisibility",
    "BROADCAST_VISIBLE_TO_ALL",
    "BROADCAST_VISIBLE_TO_PRIVILEGED",
    "get_access_policy",
]
