"""Use case for listing the notifications visible to an actor."""

from __future__ import annotations

from sqlalchemy.orm import Session

from hostel_notify.config import get_settings
from hostel_notify.domain.access_policy import AccessPolicy, get_access_policy
from hostel_notify.domain.entities import Actor, NotificationPage
from hostel_notify.infrastructure.repositories import NotificationRepository

from .access import build_scope


def list_notifications(
    session: Session,
    actor: Actor,
    *,
    unread_only: bool = False,
    page: int = 1,
    limit: int | None = None,
    policy: AccessPolicy | None = None,
) -> NotificationPage:
    """Return a newest-first page of notifications visible to ``actor``.

    ``limit`` is clamped to the configured maximum page size.
    """

    settings = get_settings()
    policy = policy or get_access_policy()
    page = max(page, 1)
    if limit is None:
        limit = settings.notifications_default_page_size
    limit = min(max(limit, 1), settings.notifications_max_page_size)

    items, total = NotificationRepository(session).list_for_actor(
        build_scope(actor, policy),
        unread_only=unread_only,
        offset=(page - 1) * limit,
        limit=limit,
    )
    return NotificationPage(items=items, page=page, limit=limit, total=total)
