"""Endpoints and websocket handler for portal notifications."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from hostel_notify.application.use_cases.notifications import (
    count_unread_notifications as count_unread_uc,
    create_notification as create_notification_uc,
    delete_notification as delete_notification_uc,
    list_notifications as list_notifications_uc,
    mark_all_notifications_read as mark_all_read_uc,
    mark_notification_read as mark_read_uc,
)
from hostel_notify.domain.access_policy import AccessPolicy
from hostel_notify.domain.entities import Actor, Notification
from hostel_notify.domain.errors import (
    ForbiddenError,
    NotFoundError,
    NotificationError,
    ValidationError,
)
from hostel_notify.infrastructure.database import get_db
from hostel_notify.infrastructure.notifications import notification_manager
from hostel_notify.interfaces.api.dependencies import (
    get_current_actor,
    get_policy,
    resolve_actor,
)
from hostel_notify.interfaces.api.schemas import (
    MarkAllReadResponse,
    NotificationCreate,
    NotificationPageRead,
    NotificationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

WS_POLICY_VIOLATION = 1008


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        title=notification.title,
        message=notification.message,
        type=notification.type,
        category=notification.category,
        action_url=notification.action_url,
        target_user_id=notification.target_user_id,
        read=notification.read,
        read_at=notification.read_at,
        created_at=notification.created_at,
    )


def _to_http_error(exc: NotificationError) -> HTTPException:
    if isinstance(exc, ValidationError):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ForbiddenError):
        code = status.HTTP_403_FORBIDDEN
    else:  # pragma: no cover - every concrete error is mapped above
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))


@router.get("/", response_model=NotificationPageRead)
def list_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_policy),
) -> NotificationPageRead:
    """Return a newest-first page of the notifications visible to the caller."""

    result = list_notifications_uc(
        db,
        current_actor,
        unread_only=unread_only,
        page=page,
        limit=limit,
        policy=policy,
    )
    return NotificationPageRead(
        items=[_notification_to_schema(item) for item in result.items],
        page=result.page,
        limit=result.limit,
        total=result.total,
        pages=result.pages,
    )


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_policy),
) -> UnreadCountRead:
    """Return how many visible notifications the caller has not read."""

    return UnreadCountRead(unread=count_unread_uc(db, current_actor, policy=policy))


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    notification_in: NotificationCreate,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_policy),
) -> NotificationRead:
    """Create a notification and announce it to connected clients."""

    try:
        notification = create_notification_uc(
            db,
            title=notification_in.title,
            message=notification_in.message,
            type=notification_in.type,
            category=notification_in.category,
            action_url=notification_in.action_url,
            target_user_id=notification_in.target_user_id,
            actor=current_actor,
            policy=policy,
        )
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return _notification_to_schema(notification)


@router.put("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_policy),
) -> MarkAllReadResponse:
    """Mark every notification visible to the caller as read."""

    return MarkAllReadResponse(updated=mark_all_read_uc(db, current_actor, policy=policy))


@router.put("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_policy),
) -> NotificationRead:
    """Mark a single notification as read for the caller."""

    try:
        notification = mark_read_uc(db, current_actor, notification_id, policy=policy)
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return _notification_to_schema(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_actor: Actor = Depends(get_current_actor),
    policy: AccessPolicy = Depends(get_policy),
) -> Response:
    """Permanently delete a notification."""

    try:
        delete_notification_uc(db, current_actor, notification_id, policy=policy)
    except NotificationError as exc:
        raise _to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint announcing new notifications to the caller.

    Events are only sent while the connection is open; nothing is replayed on
    (re)connect.
    """

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=WS_POLICY_VIOLATION)
        return

    try:
        actor = resolve_actor(token)
    except HTTPException:
        await websocket.close(code=WS_POLICY_VIOLATION)
        return

    privileged = get_policy().is_privileged(actor)
    await notification_manager.connect(actor.id, websocket, privileged=privileged)
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        notification_manager.disconnect(actor.id, websocket)
    except Exception:
        notification_manager.disconnect(actor.id, websocket)
        logger.exception("Realtime connection for user %s failed", actor.id)
        raise
