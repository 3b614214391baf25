"""Tests for the notification store use cases."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
import threading

import pytest
from sqlalchemy import event

from conftest import ADMIN, ALICE, BOB
from hostel_notify.application.use_cases.notifications import (
    count_unread_notifications,
    create_notification,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from hostel_notify.domain.entities import Actor, Notification
from hostel_notify.domain.errors import ForbiddenError, NotFoundError, ValidationError
from hostel_notify.infrastructure.database import SessionLocal, engine
from hostel_notify.infrastructure.models import NotificationModel
from hostel_notify.infrastructure.repositories import NotificationRepository

MAX_LIMIT = 100


def _create(session, policy, *, title="Water supply", target=None, actor=None, **extra):
    return create_notification(
        session,
        title=title,
        message=extra.pop("message", "Water will be off from 2 to 4 PM"),
        target_user_id=target,
        actor=actor,
        policy=policy,
        **extra,
    )


def test_create_sets_server_fields_and_unread(session, open_policy) -> None:
    notification = _create(session, open_policy, target=ALICE.id, type="warning", category="mess")

    assert notification.id is not None
    assert notification.created_at is not None
    assert notification.read is False
    assert notification.type == "warning"
    assert notification.category == "mess"


@pytest.mark.parametrize("title,message", [("", "body"), ("   ", "body"), ("Title", "")])
def test_create_rejects_empty_text_before_writing(session, open_policy, title, message) -> None:
    with pytest.raises(ValidationError):
        _create(session, open_policy, title=title, message=message, target=ALICE.id)

    assert session.query(NotificationModel).count() == 0


def test_create_rejects_unknown_type(session, open_policy) -> None:
    with pytest.raises(ValidationError):
        _create(session, open_policy, target=ALICE.id, type="urgent")


def test_create_permissions(session, open_policy) -> None:
    with pytest.raises(ForbiddenError):
        _create(session, open_policy, actor=ALICE)
    with pytest.raises(ForbiddenError):
        _create(session, open_policy, actor=ALICE, target=BOB.id)

    assert _create(session, open_policy, actor=ALICE, target=ALICE.id).target_user_id == ALICE.id
    assert _create(session, open_policy, actor=ADMIN).is_broadcast
    assert _create(session, open_policy, target=BOB.id).target_user_id == BOB.id


def test_list_returns_visible_notifications_newest_first(session, open_policy) -> None:
    first = _create(session, open_policy, title="First", target=ALICE.id)
    _create(session, open_policy, title="For Bob", target=BOB.id)
    broadcast = _create(session, open_policy, title="Broadcast")
    last = _create(session, open_policy, title="Last", target=ALICE.id)

    page = list_notifications(session, ALICE, policy=open_policy)

    assert [item.id for item in page.items] == [last.id, broadcast.id, first.id]
    assert page.total == 3
    assert page.pages == 1


def test_list_breaks_timestamp_ties_by_insertion_order(session, open_policy) -> None:
    repository = NotificationRepository(session)
    created_at = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    ids = [
        repository.create(
            Notification(
                id=None,
                title=f"Tie {index}",
                message="Same timestamp",
                target_user_id=ALICE.id,
                created_at=created_at,
            )
        ).id
        for index in range(3)
    ]

    page = list_notifications(session, ALICE, policy=open_policy)

    assert [item.id for item in page.items] == list(reversed(ids))


def test_list_paginates_and_clamps_limit(session, open_policy) -> None:
    for index in range(5):
        _create(session, open_policy, title=f"Menu {index}", target=ALICE.id)

    second_page = list_notifications(session, ALICE, page=2, limit=2, policy=open_policy)
    clamped = list_notifications(session, ALICE, limit=5000, policy=open_policy)

    assert [item.title for item in second_page.items] == ["Menu 2", "Menu 1"]
    assert (second_page.page, second_page.limit, second_page.total, second_page.pages) == (2, 2, 5, 3)
    assert clamped.limit == MAX_LIMIT


@pytest.mark.parametrize("actor", [ADMIN, ALICE, BOB])
def test_count_unread_matches_unread_listing(session, open_policy, actor: Actor) -> None:
    _create(session, open_policy, target=ALICE.id)
    read_one = _create(session, open_policy, target=ALICE.id)
    _create(session, open_policy, target=BOB.id)
    _create(session, open_policy)
    mark_notification_read(session, ALICE, read_one.id, policy=open_policy)

    unread_page = list_notifications(
        session, actor, unread_only=True, limit=MAX_LIMIT, policy=open_policy
    )

    assert count_unread_notifications(session, actor, policy=open_policy) == unread_page.total
    assert all(not item.read for item in unread_page.items)


def test_mark_read_is_idempotent(session, open_policy) -> None:
    notification = _create(session, open_policy, target=ALICE.id)

    first = mark_notification_read(session, ALICE, notification.id, policy=open_policy)
    second = mark_notification_read(session, ALICE, notification.id, policy=open_policy)

    assert first.read and second.read
    assert first.read_at == second.read_at
    assert count_unread_notifications(session, ALICE, policy=open_policy) == 0


def test_mark_read_of_other_users_notification_is_forbidden(session, open_policy) -> None:
    notification = _create(session, open_policy, target=ALICE.id)

    with pytest.raises(ForbiddenError):
        mark_notification_read(session, BOB, notification.id, policy=open_policy)
    with pytest.raises(ForbiddenError):
        delete_notification(session, BOB, notification.id, policy=open_policy)

    assert mark_notification_read(session, ADMIN, notification.id, policy=open_policy).read


def test_mark_all_read_only_touches_visible_notifications(session, open_policy) -> None:
    _create(session, open_policy, target=ALICE.id)
    _create(session, open_policy, target=ALICE.id)
    _create(session, open_policy)
    bob_notification = _create(session, open_policy, target=BOB.id)

    updated = mark_all_notifications_read(session, ALICE, policy=open_policy)

    assert updated == 3
    assert count_unread_notifications(session, ALICE, policy=open_policy) == 0
    bob_view = list_notifications(session, BOB, policy=open_policy)
    assert {item.id: item.read for item in bob_view.items}[bob_notification.id] is False
    assert count_unread_notifications(session, BOB, policy=open_policy) == 2
    assert mark_all_notifications_read(session, ALICE, policy=open_policy) == 0


def test_mark_all_read_uses_bulk_statements(session, open_policy) -> None:
    for _ in range(4):
        _create(session, open_policy, target=ALICE.id)
    for _ in range(3):
        _create(session, open_policy)
    statements: list[str] = []

    def record(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith(("UPDATE", "INSERT")):
            statements.append(statement)

    event.listen(engine, "before_cursor_execute", record)
    try:
        assert mark_all_notifications_read(session, ALICE, policy=open_policy) == 7
    finally:
        event.remove(engine, "before_cursor_execute", record)

    assert len(statements) == 2


def test_delete_makes_later_operations_fail_with_not_found(session, open_policy) -> None:
    notification = _create(session, open_policy, target=ALICE.id)

    delete_notification(session, ALICE, notification.id, policy=open_policy)

    assert list_notifications(session, ALICE, policy=open_policy).total == 0
    with pytest.raises(NotFoundError):
        mark_notification_read(session, ALICE, notification.id, policy=open_policy)
    with pytest.raises(NotFoundError):
        delete_notification(session, ALICE, notification.id, policy=open_policy)


def test_broadcast_read_state_is_tracked_per_user(session, open_policy) -> None:
    broadcast = _create(session, open_policy, actor=ADMIN, title="Hostel Meeting")

    admin_view = list_notifications(session, ADMIN, policy=open_policy)
    assert [(item.id, item.read) for item in admin_view.items] == [(broadcast.id, False)]

    mark_notification_read(session, ADMIN, broadcast.id, policy=open_policy)

    assert count_unread_notifications(session, ADMIN, policy=open_policy) == 0
    assert count_unread_notifications(session, ALICE, policy=open_policy) == 1


def test_broadcast_visible_read_only_to_regular_users(session, open_policy) -> None:
    broadcast = _create(session, open_policy, actor=ADMIN)

    bob_view = list_notifications(session, BOB, policy=open_policy)
    assert [item.id for item in bob_view.items] == [broadcast.id]

    assert mark_notification_read(session, BOB, broadcast.id, policy=open_policy).read
    with pytest.raises(ForbiddenError):
        delete_notification(session, BOB, broadcast.id, policy=open_policy)
    assert count_unread_notifications(session, ALICE, policy=open_policy) == 1


def test_broadcast_hidden_from_regular_users_when_restricted(session, restricted_policy) -> None:
    broadcast = _create(session, restricted_policy, actor=ADMIN)

    assert list_notifications(session, BOB, policy=restricted_policy).total == 0
    assert count_unread_notifications(session, BOB, policy=restricted_policy) == 0
    assert mark_all_notifications_read(session, BOB, policy=restricted_policy) == 0
    with pytest.raises(NotFoundError):
        mark_notification_read(session, BOB, broadcast.id, policy=restricted_policy)
    with pytest.raises(NotFoundError):
        delete_notification(session, BOB, broadcast.id, policy=restricted_policy)

    assert list_notifications(session, ADMIN, policy=restricted_policy).total == 1
    delete_notification(session, ADMIN, broadcast.id, policy=restricted_policy)


def test_concurrent_mark_all_read_racing_with_create(open_policy) -> None:
    with SessionLocal() as setup:
        prior_ids = [_create(setup, open_policy, target=ALICE.id).id for _ in range(5)]
        prior_ids += [_create(setup, open_policy).id for _ in range(2)]

    barrier = threading.Barrier(3)

    def mark_all() -> int:
        barrier.wait()
        with SessionLocal() as worker_session:
            return mark_all_notifications_read(worker_session, ALICE, policy=open_policy)

    def create_during_bulk_update() -> int:
        barrier.wait()
        with SessionLocal() as worker_session:
            return _create(worker_session, open_policy, target=ALICE.id, title="Late notice").id

    with ThreadPoolExecutor(max_workers=3) as executor:
        mark_futures = [executor.submit(mark_all) for _ in range(2)]
        create_future = executor.submit(create_during_bulk_update)
        results = [future.result() for future in mark_futures]
        fresh_id = create_future.result()

    with SessionLocal() as check:
        page = list_notifications(check, ALICE, limit=MAX_LIMIT, policy=open_policy)
        after = _create(check, open_policy, target=ALICE.id, title="After the update")
        unread_after = count_unread_notifications(check, ALICE, policy=open_policy)

    states = {item.id: item.read for item in page.items}
    assert all(states[notification_id] for notification_id in prior_ids)
    # The racing notification is read only if one of the bulk updates saw it.
    assert sum(results) == len(prior_ids) + (1 if states[fresh_id] else 0)
    assert after.read is False
    assert unread_after == (0 if states[fresh_id] else 1) + 1
