"""Connection management helpers for notification websockets."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Iterable, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Manage active websocket connections grouped by user.

    Connections opened by privileged users are also tracked separately so
    targeted notifications can reach administrators watching every user.
    """

    def __init__(self) -> None:
        self._connections: DefaultDict[int, Set[WebSocket]] = defaultdict(set)
        self._privileged: Set[WebSocket] = set()

    @property
    def connection_count(self) -> int:
        return sum(len(connections) for connections in self._connections.values())

    async def connect(
        self, user_id: int, websocket: WebSocket, *, privileged: bool = False
    ) -> None:
        """Accept the websocket connection and register it for ``user_id``."""

        await websocket.accept()
        self._connections[user_id].add(websocket)
        if privileged:
            self._privileged.add(websocket)
        logger.debug("Realtime client connected for user %s", user_id)

    def disconnect(self, user_id: int, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the pool for ``user_id``."""

        self._privileged.discard(websocket)
        connections = self._connections.get(user_id)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._connections.pop(user_id, None)
        logger.debug("Realtime client disconnected for user %s", user_id)

    async def send_to_user(
        self,
        user_id: int,
        message: dict[str, Any],
        *,
        include_privileged: bool = False,
    ) -> None:
        """Send ``message`` to every active connection for ``user_id``."""

        targets = [(user_id, connection) for connection in self._connections.get(user_id, set())]
        if include_privileged:
            targets.extend(
                (owner, connection)
                for owner, connection in self._iter_connections()
                if connection in self._privileged and owner != user_id
            )
        await self._send_all(targets, message)

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send ``message`` to every connected client."""

        await self._send_all(list(self._iter_connections()), message)

    def _iter_connections(self) -> Iterable[tuple[int, WebSocket]]:
        for user_id, connections in list(self._connections.items()):
            for connection in list(connections):
                yield user_id, connection

    async def _send_all(
        self, targets: list[tuple[int, WebSocket]], message: dict[str, Any]
    ) -> None:
        for user_id, connection in targets:
            try:
                await connection.send_json(message)
            except Exception:
                logger.info("Dropping realtime connection for user %s after a failed send", user_id)
                self.disconnect(user_id, connection)


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
