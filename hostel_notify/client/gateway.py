"""Access to the notification store from a client process."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Protocol

import requests

from hostel_notify.domain.entities import Notification, NotificationPage
from hostel_notify.domain.errors import ForbiddenError, NotFoundError, ValidationError

from .errors import GatewayError

logger = logging.getLogger(__name__)


class NotificationGateway(Protocol):
    """Store verbs the cache relies on, already bound to one user."""

    def list(self, *, page: int = 1, limit: int = 20, unread_only: bool = False) -> NotificationPage:
        ...

    def count_unread(self) -> int:
        ...

    def mark_read(self, notification_id: int) -> Notification:
        ...

    def mark_all_read(self) -> int:
        ...

    def delete(self, notification_id: int) -> None:
        ...


class HttpNotificationGateway:
    """Call the ``/notifications`` REST API with a bearer token.

    ``session`` only needs the ``requests.Session`` request methods, so a
    FastAPI ``TestClient`` works as well.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        session: Any | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._headers = {"Authorization": f"Bearer {token}"}

    def list(self, *, page: int = 1, limit: int = 20, unread_only: bool = False) -> NotificationPage:
        params = {"page": page, "limit": limit}
        if unread_only:
            params["unreadOnly"] = "true"
        body = self._request("GET", "/notifications/", params=params)
        return NotificationPage(
            items=[notification_from_payload(item) for item in body.get("items", [])],
            page=int(body.get("page", page)),
            limit=int(body.get("limit", limit)),
            total=int(body.get("total", 0)),
        )

    def count_unread(self) -> int:
        return int(self._request("GET", "/notifications/unread-count")["unread"])

    def mark_read(self, notification_id: int) -> Notification:
        body = self._request("PUT", f"/notifications/{notification_id}/read")
        return notification_from_payload(body)

    def mark_all_read(self) -> int:
        return int(self._request("PUT", "/notifications/read-all")["updated"])

    def delete(self, notification_id: int) -> None:
        self._request("DELETE", f"/notifications/{notification_id}")

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(
                method, url, headers=self._headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as exc:
            raise GatewayError(f"{method} {path} failed: {exc}") from exc

        status_code = response.status_code
        if status_code == 204:
            return {}
        if status_code < 400:
            return response.json()

        detail = _error_detail(response)
        if status_code == 404:
            raise NotFoundError(detail)
        if status_code in (401, 403):
            raise ForbiddenError(detail)
        if status_code in (400, 422):
            raise ValidationError(detail)
        logger.warning("%s %s answered %s: %s", method, path, status_code, detail)
        raise GatewayError(detail, status_code=status_code)


def notification_from_payload(payload: dict[str, Any]) -> Notification:
    """Build a :class:`Notification` from the API's camelCase JSON."""

    read_at = _parse_datetime(payload.get("readAt"))
    if read_at is None and payload.get("read"):
        # Only the flag was sent; keep the entry read.
        read_at = _parse_datetime(payload.get("createdAt"))
    return Notification(
        id=payload.get("id"),
        title=payload.get("title", ""),
        message=payload.get("message", ""),
        type=payload.get("type", "info"),
        category=payload.get("category"),
        action_url=payload.get("actionUrl"),
        target_user_id=payload.get("targetUserId"),
        created_at=_parse_datetime(payload.get("createdAt")),
        read_at=read_at,
    )


def _parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _error_detail(response: Any) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return f"HTTP {response.status_code}"


__all__ = ["HttpNotificationGateway", "NotificationGateway", "notification_from_payload"]
