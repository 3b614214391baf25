"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import DateTime, Integer, and_, case, exists, insert, literal, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from hostel_notify.domain.entities import Actor, Notification
from hostel_notify.infrastructure.models import NotificationModel, NotificationReceiptModel
from hostel_notify.utils import (
    ensure_app_timezone,
    now_in_app_timezone,
    storage_now,
    to_storage_datetime,
)

logger = logging.getLogger(__name__)


class NotificationScope:
    """Visibility of the notification table for one actor.

    ``privileged`` actors see every row; everybody else sees the rows targeted
    at them plus, when ``include_broadcasts`` is set, the broadcast rows.
    """

    def __init__(self, actor: Actor, *, privileged: bool, include_broadcasts: bool) -> None:
        self.actor = actor
        self.privileged = privileged
        self.include_broadcasts = include_broadcasts or privileged

    def visibility_clause(self):
        if self.privileged:
            return None
        own = NotificationModel.target_user_id == self.actor.id
        if self.include_broadcasts:
            return or_(own, NotificationModel.target_user_id.is_(None))
        return own


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    The read state returned with every entity is the one seen by the actor in
    ``scope``: the row's ``read_at`` for targeted notifications and the actor's
    receipt for broadcasts.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_actor(
        self,
        scope: NotificationScope,
        *,
        unread_only: bool = False,
        offset: int = 0,
        limit: int | None = 20,
    ) -> tuple[list[Notification], int]:
        """Return one page of visible notifications and the total match count."""

        query = self._scoped_query(scope, unread_only=unread_only)
        total = query.order_by(None).count()
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        items = [self._to_entity(model, read_at) for model, read_at in query.all()]
        return items, total

    def count_unread_for_actor(self, scope: NotificationScope) -> int:
        return self._scoped_query(scope, unread_only=True).order_by(None).count()

    def get_for_actor(self, notification_id: int, scope: NotificationScope) -> Notification | None:
        """Return the notification with the actor's read state, ignoring visibility."""

        row = (
            self._base_query(scope.actor)
            .filter(NotificationModel.id == notification_id)
            .one_or_none()
        )
        if row is None:
            return None
        model, read_at = row
        return self._to_entity(model, read_at)

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        model.created_at = to_storage_datetime(
            notification.created_at or now_in_app_timezone()
        )
        model.target_user_id = notification.target_user_id
        model.title = notification.title
        model.message = notification.message
        model.type = notification.type
        model.category = notification.category
        model.action_url = notification.action_url
        model.read_at = None
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model, None)

    def mark_as_read(self, notification: Notification, *, user_id: int) -> bool:
        """Flip the read state seen by ``user_id``; return ``False`` if already read."""

        if notification.id is None:
            raise ValueError("Notification id is required to mark it as read")
        now = storage_now()
        if not notification.is_broadcast:
            updated = (
                self.session.query(NotificationModel)
                .filter(
                    NotificationModel.id == notification.id,
                    NotificationModel.read_at.is_(None),
                )
                .update({NotificationModel.read_at: now}, synchronize_session=False)
            )
            self.session.commit()
            return bool(updated)

        self.session.add(
            NotificationReceiptModel(
                notification_id=notification.id, user_id=user_id, read_at=now
            )
        )
        try:
            self.session.commit()
        except IntegrityError:
            # A receipt already exists: the broadcast was read before.
            self.session.rollback()
            return False
        return True

    def mark_all_as_read(self, scope: NotificationScope) -> int:
        """Mark every visible unread notification as read in one transaction."""

        try:
            return self._bulk_mark_read(scope)
        except IntegrityError:
            # A concurrent call inserted some of the same receipts first.
            self.session.rollback()
            logger.info("Retrying bulk mark-read for user %s after a receipt conflict", scope.actor.id)
            return self._bulk_mark_read(scope)

    def delete(self, notification_id: int) -> None:
        self.session.query(NotificationReceiptModel).filter(
            NotificationReceiptModel.notification_id == notification_id
        ).delete(synchronize_session=False)
        self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id
        ).delete(synchronize_session=False)
        self.session.commit()

    def _bulk_mark_read(self, scope: NotificationScope) -> int:
        now = storage_now()
        targeted = self.session.query(NotificationModel).filter(
            NotificationModel.target_user_id.is_not(None),
            NotificationModel.read_at.is_(None),
        )
        if not scope.privileged:
            targeted = targeted.filter(NotificationModel.target_user_id == scope.actor.id)
        updated = targeted.update(
            {NotificationModel.read_at: now}, synchronize_session=False
        )

        receipts = 0
        if scope.include_broadcasts:
            missing_receipt = ~exists().where(
                NotificationReceiptModel.notification_id == NotificationModel.id,
                NotificationReceiptModel.user_id == scope.actor.id,
            )
            statement = insert(NotificationReceiptModel).from_select(
                ["notification_id", "user_id", "read_at"],
                select(
                    NotificationModel.id,
                    literal(scope.actor.id, Integer()),
                    literal(now, DateTime()),
                ).where(NotificationModel.target_user_id.is_(None), missing_receipt),
            )
            receipts = self.session.execute(statement).rowcount or 0

        self.session.commit()
        return (updated or 0) + receipts

    def _base_query(self, actor: Actor) -> Query:
        receipt_join = and_(
            NotificationReceiptModel.notification_id == NotificationModel.id,
            NotificationReceiptModel.user_id == actor.id,
        )
        effective_read_at = case(
            (NotificationModel.target_user_id.is_(None), NotificationReceiptModel.read_at),
            else_=NotificationModel.read_at,
        ).label("effective_read_at")
        return self.session.query(NotificationModel, effective_read_at).outerjoin(
            NotificationReceiptModel, receipt_join
        )

    def _scoped_query(self, scope: NotificationScope, *, unread_only: bool) -> Query:
        query = self._base_query(scope.actor)
        clause = scope.visibility_clause()
        if clause is not None:
            query = query.filter(clause)
        if unread_only:
            query = query.filter(
                or_(
                    and_(
                        NotificationModel.target_user_id.is_(None),
                        NotificationReceiptModel.id.is_(None),
                    ),
                    and_(
                        NotificationModel.target_user_id.is_not(None),
                        NotificationModel.read_at.is_(None),
                    ),
                )
            )
        return query

    @staticmethod
    def _to_entity(model: NotificationModel, read_at: datetime | None) -> Notification:
        return Notification(
            id=model.id,
            title=model.title,
            message=model.message,
            type=model.type,
            category=model.category,
            action_url=model.action_url,
            target_user_id=model.target_user_id,
            created_at=ensure_app_timezone(model.created_at),
            read_at=ensure_app_timezone(read_at),
        )


__all__ = ["NotificationRepository", "NotificationScope"]
