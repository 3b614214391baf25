"""Client side of the realtime hint channel."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable
from urllib.parse import urlencode

import websockets
from websockets.exceptions import WebSocketException

from .retry import RetryPolicy

logger = logging.getLogger(__name__)

EVENT_NAME = "notification"

RECONNECT_POLICY = RetryPolicy(max_attempts=1, base_delay=1.0, max_delay=30.0)


class RealtimeListener:
    """Keep a websocket open and forward ``notification`` events.

    The channel is a wake-up signal: events missed while disconnected are not
    replayed, so ``on_event`` should trigger a re-fetch rather than trust the
    payload.
    """

    def __init__(
        self,
        url: str,
        token: str,
        on_event: Callable[[dict[str, Any]], Any],
        *,
        reconnect_policy: RetryPolicy = RECONNECT_POLICY,
        connect: Callable[[str], Any] | None = None,
    ) -> None:
        self.url = f"{url}?{urlencode({'token': token})}"
        self._on_event = on_event
        self._reconnect_policy = reconnect_policy
        self._connect = connect or websockets.connect
        self.connections = 0

    async def run(self, stop: asyncio.Event | None = None) -> None:
        """Listen until ``stop`` is set, reconnecting after every disconnect."""

        stop = stop or asyncio.Event()
        failures = 0
        while not stop.is_set():
            try:
                async with self._connect(self.url) as connection:
                    self.connections += 1
                    failures = 0
                    logger.info("Realtime channel connected")
                    if await self._listen(connection, stop):
                        logger.info("Realtime channel stopped")
                        return
            except (OSError, WebSocketException) as exc:
                logger.info("Realtime channel dropped: %s", exc)
            if stop.is_set():
                break
            failures += 1
            delay = self._reconnect_policy.delay_for(failures)
            try:
                await asyncio.wait_for(stop.wait(), timeout=delay)
            except asyncio.TimeoutError:
                continue

    async def _listen(self, connection: Any, stop: asyncio.Event) -> bool:
        """Forward frames until the connection ends or ``stop`` is set.

        Returns ``True`` when ``stop`` ended the wait. Errors raised while
        receiving propagate to the reconnect loop.
        """

        receiving = asyncio.ensure_future(self._receive(connection))
        stopping = asyncio.ensure_future(stop.wait())
        try:
            await asyncio.wait({receiving, stopping}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (receiving, stopping):
                if not task.done():
                    task.cancel()
            await asyncio.gather(receiving, stopping, return_exceptions=True)
        if receiving.done() and not receiving.cancelled():
            receiving.result()
        return stop.is_set()

    async def _receive(self, connection: Any) -> None:
        async for raw in connection:
            self._dispatch(raw)

    def _dispatch(self, raw: str | bytes) -> None:
        try:
            message = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring malformed realtime frame")
            return
        if not isinstance(message, dict) or message.get("type") != EVENT_NAME:
            return
        data = message.get("data")
        self._on_event(data if isinstance(data, dict) else {})


__all__ = ["RealtimeListener"]
