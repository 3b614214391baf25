"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from hostel_notify.domain.entities import Notification

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)

EVENT_NAME = "notification"


class NotificationPublisher:
    """Serialize notifications and schedule their delivery.

    Delivery is best effort: there is no acknowledgement, no retry and no
    queue for clients that are offline when the event is pushed.
    """

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> frozenset[asyncio.Task]:
        """Deliveries scheduled on the running loop that have not finished."""

        return frozenset(self._tasks)

    def dispatch(self, notification: Notification) -> None:
        """Schedule ``notification`` to be announced to its audience."""

        message = {"type": EVENT_NAME, "data": self._serialize(notification)}
        if notification.is_broadcast:
            self._schedule(self._manager.broadcast, message)
        else:
            self._schedule(
                self._send_targeted, notification.target_user_id, message
            )

    async def _send_targeted(self, user_id: int, message: dict[str, Any]) -> None:
        await self._manager.send_to_user(user_id, message, include_privileged=True)

    def _schedule(self, func, *args: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(func, *args)
            except RuntimeError:
                logger.debug("No event loop available; realtime notification dropped")
        else:
            task = loop.create_task(func(*args))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    @staticmethod
    def _serialize(notification: Notification) -> dict[str, Any]:
        return {
            "title": notification.title,
            "message": notification.message,
            "type": notification.type,
            "category": notification.category,
            "actionUrl": notification.action_url,
        }


notification_publisher = NotificationPublisher(notification_manager)


def dispatch_notification(notification: Notification) -> None:
    """Public helper that delegates to the shared publisher instance."""

    notification_publisher.dispatch(notification)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return NotificationPublisher._serialize(notification)


__all__ = [
    "EVENT_NAME",
    "NotificationPublisher",
    "notification_publisher",
    "dispatch_notification",
    "serialize_notification",
]
