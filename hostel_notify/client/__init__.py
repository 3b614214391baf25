"""Client-side helpers used by the portal front-end process.

``NotificationCache`` mirrors one user's notifications, ``RealtimeListener``
keeps the websocket hint channel open and ``presentation`` turns the cached
state into what the notification dropdown renders.
"""

from .cache import CacheSnapshot, CacheState, NotificationCache
from .errors import GatewayError
from .gateway import HttpNotificationGateway, NotificationGateway
from .realtime import RealtimeListener
from .retry import RetryPolicy

__all__ = [
    "CacheSnapshot",
    "CacheState",
    "GatewayError",
    "HttpNotificationGateway",
    "NotificationCache",
    "NotificationGateway",
    "RealtimeListener",
    "RetryPolicy",
]
