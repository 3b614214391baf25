"""SQLAlchemy models for persisted notifications and their read receipts."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from hostel_notify.infrastructure.database import Base
from hostel_notify.utils import storage_now


class NotificationModel(Base):
    """Database representation for portal notifications.

    ``read_at`` only applies to targeted notifications; broadcast read state
    lives in :class:`NotificationReceiptModel`.
    """

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_created_at_id", "created_at", "id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    target_user_id = Column(Integer, nullable=True, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="info")
    category = Column(String(30), nullable=True)
    action_url = Column(String(255), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=storage_now)
    read_at = Column(DateTime(), nullable=True)


class NotificationReceiptModel(Base):
    """Per-user read marker for broadcast notifications."""

    __tablename__ = "notification_receipt"
    __table_args__ = (
        UniqueConstraint("notification_id", "user_id", name="uq_notification_receipt"),
    )

    id = Column(Integer, primary_key=True)
    notification_id = Column(
        Integer,
        ForeignKey("notification.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(Integer, nullable=False, index=True)
    read_at = Column(DateTime(), nullable=False, default=storage_now)


__all__ = ["NotificationModel", "NotificationReceiptModel"]
