"""In-memory mirror of one user's notifications with optimistic updates."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable

from hostel_notify.domain.entities import Notification
from hostel_notify.domain.errors import NotFoundError, NotificationError
from hostel_notify.utils import now_in_app_timezone

from .errors import GatewayError
from .gateway import NotificationGateway
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

_PENDING_READ = "read"
_PENDING_DELETE = "delete"


class CacheState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class CacheSnapshot:
    """Immutable view handed to subscribers after every change."""

    state: CacheState
    items: tuple[Notification, ...]
    unread_count: int
    error: NotificationError | None
    pending: frozenset[int]


Listener = Callable[[CacheSnapshot], None]


class NotificationCache:
    """Hold the first page of a user's notifications and keep it consistent.

    Mutations are applied locally first, tracked as pending, sent to the
    store and rolled back if the store rejects them. Fetch responses that
    arrive after a newer fetch has already been applied are discarded.

    The unread count is derived from the cached entries plus the number of
    unread notifications the server reported beyond the cached page.
    """

    def __init__(
        self,
        gateway: NotificationGateway,
        *,
        page_size: int = 20,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._gateway = gateway
        self._page_size = page_size
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

        self._state = CacheState.IDLE
        self._items: list[Notification] = []
        self._hidden_unread = 0
        self._error: NotificationError | None = None
        self._pending: dict[int, str] = {}
        self._pending_mark_all = False
        self._requested_generation = 0
        self._applied_generation = 0
        self._failed_generation = 0

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def items(self) -> list[Notification]:
        with self._lock:
            return list(self._items)

    @property
    def error(self) -> NotificationError | None:
        return self._error

    @property
    def unread_count(self) -> int:
        with self._lock:
            return self._unread_locked()

    def snapshot(self) -> CacheSnapshot:
        with self._lock:
            return CacheSnapshot(
                state=self._state,
                items=tuple(self._items),
                unread_count=self._unread_locked(),
                error=self._error,
                pending=frozenset(self._pending),
            )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def refresh(self) -> bool:
        """Fetch the first page and the unread count from the store.

        Transient :class:`GatewayError` failures are retried with backoff.
        Returns ``False`` when the response was discarded because a newer
        fetch had already been applied or had already failed.
        """

        with self._lock:
            self._requested_generation += 1
            generation = self._requested_generation
            self._state = CacheState.FETCHING
        self._notify()

        try:
            page, server_unread = self._retry_policy.call(
                self._fetch, retry_on=(GatewayError,), sleep=self._sleep
            )
        except NotificationError as exc:
            with self._lock:
                if generation != self._requested_generation:
                    logger.debug("Ignoring failure of superseded fetch %s", generation)
                    return False
                self._failed_generation = generation
                self._state = CacheState.ERROR
                self._error = exc
            logger.warning("Notification refresh failed: %s", exc)
            self._notify()
            raise

        with self._lock:
            newest_outcome = max(self._applied_generation, self._failed_generation)
            if generation < newest_outcome:
                logger.debug(
                    "Discarding fetch %s; fetch %s already completed", generation, newest_outcome
                )
                return False
            self._applied_generation = generation
            self._apply_page(page.items, server_unread)
            if generation == self._requested_generation:
                self._state = CacheState.READY
            self._error = None
        self._notify()
        return True

    def resync_unread_count(self) -> int:
        """Ask the store for the unread count and fold it into the cache."""

        server_unread = self._retry_policy.call(
            self._gateway.count_unread, retry_on=(GatewayError,), sleep=self._sleep
        )
        with self._lock:
            cached_unread = sum(1 for item in self._items if not item.read)
            self._hidden_unread = max(server_unread - cached_unread, 0)
            unread = self._unread_locked()
        self._notify()
        return unread

    def mark_as_read(self, notification_id: int) -> Notification | None:
        """Mark one notification read locally and in the store.

        A store rejection restores the previous entry; a ``NotFoundError``
        drops the entry since the store no longer has it.
        """

        with self._lock:
            index, previous = self._find(notification_id)
            if previous is not None and previous.read:
                return previous
            if previous is not None:
                self._items[index] = replace(previous, read_at=now_in_app_timezone())
                self._pending[notification_id] = _PENDING_READ
        if previous is None:
            # Not cached (e.g. opened from a realtime toast): update the store
            # and reconcile the count from the server.
            updated = self._gateway.mark_read(notification_id)
            self.resync_unread_count()
            return updated
        self._notify()

        try:
            updated = self._gateway.mark_read(notification_id)
        except NotFoundError as exc:
            with self._lock:
                self._pending.pop(notification_id, None)
                self._remove(notification_id)
                self._error = exc
            self._notify()
            raise
        except NotificationError as exc:
            with self._lock:
                self._pending.pop(notification_id, None)
                current_index, current = self._find(notification_id)
                if current is not None:
                    self._items[current_index] = previous
                self._error = exc
            logger.warning("Rolled back read state of notification %s: %s", notification_id, exc)
            self._notify()
            raise

        with self._lock:
            self._pending.pop(notification_id, None)
            current_index, current = self._find(notification_id)
            if current is not None:
                self._items[current_index] = updated
        self._notify()
        return updated

    def delete_notification(self, notification_id: int) -> None:
        """Remove a notification locally and in the store, restoring it on failure.

        Ids outside the cached page are deleted in the store directly and the
        unread count is resynced.
        """

        with self._lock:
            index, previous = self._find(notification_id)
            if previous is not None:
                del self._items[index]
                self._pending[notification_id] = _PENDING_DELETE
        if previous is None:
            self._gateway.delete(notification_id)
            self.resync_unread_count()
            return
        self._notify()

        try:
            self._gateway.delete(notification_id)
        except NotFoundError:
            # Already gone from the store; local state matches.
            with self._lock:
                self._pending.pop(notification_id, None)
        except NotificationError as exc:
            with self._lock:
                self._pending.pop(notification_id, None)
                if self._find(notification_id)[1] is None:
                    self._insert_sorted(previous)
                self._error = exc
            logger.warning("Restored notification %s after failed delete: %s", notification_id, exc)
            self._notify()
            raise
        self._notify()

    def mark_all_as_read(self) -> int:
        """Mark everything read locally and through the store's bulk endpoint."""

        with self._lock:
            previous_read_at = {
                item.id: item.read_at for item in self._items if not item.read
            }
            previous_hidden = self._hidden_unread
            now = now_in_app_timezone()
            self._items = [
                item if item.read else replace(item, read_at=now) for item in self._items
            ]
            self._hidden_unread = 0
            self._pending_mark_all = True
        self._notify()

        try:
            updated = self._gateway.mark_all_read()
        except NotificationError as exc:
            with self._lock:
                self._pending_mark_all = False
                self._items = [
                    replace(item, read_at=None)
                    if item.id in previous_read_at and self._pending.get(item.id) != _PENDING_READ
                    else item
                    for item in self._items
                ]
                self._hidden_unread = previous_hidden
                self._error = exc
            logger.warning("Rolled back mark-all-read: %s", exc)
            self._notify()
            raise

        with self._lock:
            self._pending_mark_all = False
        self._notify()
        return updated

    def handle_push(self, event: dict[str, Any] | None = None) -> bool:
        """React to a realtime event by re-fetching from the store.

        The pushed payload is only a hint; the store stays the source of truth.
        """

        logger.debug("Realtime hint received: %s", (event or {}).get("title"))
        try:
            return self.refresh()
        except NotificationError as exc:
            logger.warning("Refresh after realtime hint failed: %s", exc)
            return False

    def _fetch(self):
        page = self._gateway.list(page=1, limit=self._page_size)
        return page, self._gateway.count_unread()

    def _apply_page(self, items: list[Notification], server_unread: int) -> None:
        fetched_unread = sum(1 for item in items if not item.read)
        self._hidden_unread = max(server_unread - fetched_unread, 0)

        merged: list[Notification] = []
        now = now_in_app_timezone()
        for item in items:
            pending = self._pending.get(item.id)
            if pending == _PENDING_DELETE:
                continue
            if not item.read and (pending == _PENDING_READ or self._pending_mark_all):
                item = replace(item, read_at=now)
            merged.append(item)
        if self._pending_mark_all:
            self._hidden_unread = 0
        self._items = merged

    def _unread_locked(self) -> int:
        return sum(1 for item in self._items if not item.read) + self._hidden_unread

    def _find(self, notification_id: int) -> tuple[int, Notification | None]:
        for index, item in enumerate(self._items):
            if item.id == notification_id:
                return index, item
        return -1, None

    def _remove(self, notification_id: int) -> None:
        self._items = [item for item in self._items if item.id != notification_id]

    def _insert_sorted(self, notification: Notification) -> None:
        self._items.append(notification)
        self._items.sort(key=_newest_first_key)

    def _notify(self) -> None:
        snapshot = self.snapshot()
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot)


def _newest_first_key(notification: Notification):
    created = notification.created_at.timestamp() if notification.created_at else 0.0
    return (-created, -(notification.id or 0))


__all__ = ["CacheSnapshot", "CacheState", "NotificationCache"]
