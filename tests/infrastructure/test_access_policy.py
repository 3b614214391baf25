"""Tests for the notification access policy and actor tokens."""

from __future__ import annotations

import pytest

from conftest import ADMIN, ALICE, BOB
from hostel_notify.domain.access_policy import AccessPolicy
from hostel_notify.domain.entities import Actor, Notification
from hostel_notify.infrastructure.security import (
    actor_from_token,
    create_access_token,
    create_actor_token,
)

PRIVILEGED = frozenset({"admin", "warden"})


def _notification(target_user_id=None) -> Notification:
    return Notification(id=1, title="t", message="m", target_user_id=target_user_id)


@pytest.mark.parametrize(
    ("visibility", "actor", "target", "view", "mark", "delete"),
    [
        ("all", ALICE, ALICE.id, True, True, True),
        ("all", BOB, ALICE.id, False, False, False),
        ("all", ADMIN, ALICE.id, True, True, True),
        ("all", BOB, None, True, True, False),
        ("privileged", BOB, None, False, False, False),
        ("privileged", ADMIN, None, True, True, True),
        ("privileged", Actor(id=9, role="Warden"), None, True, True, True),
    ],
)
def test_policy_decisions(visibility, actor, target, view, mark, delete) -> None:
    policy = AccessPolicy(PRIVILEGED, visibility)
    notification = _notification(target)

    assert policy.can_view(actor, notification) is view
    assert policy.can_mark_read(actor, notification) is mark
    assert policy.can_delete(actor, notification) is delete


def test_create_rules() -> None:
    policy = AccessPolicy(PRIVILEGED)

    assert policy.can_create(None, None)
    assert policy.can_create(ADMIN, None)
    assert policy.can_create(ALICE, ALICE.id)
    assert not policy.can_create(ALICE, None)
    assert not policy.can_create(ALICE, BOB.id)


def test_actor_token_round_trip() -> None:
    assert actor_from_token(create_actor_token(ALICE)) == ALICE


@pytest.mark.parametrize(
    "claims", [{"sub": "2"}, {"sub": "alice", "role": "student"}, {"role": "admin"}]
)
def test_tokens_without_actor_claims_are_rejected(claims) -> None:
    with pytest.raises(ValueError):
        actor_from_token(create_access_token(claims))


def test_garbage_token_is_rejected() -> None:
    with pytest.raises(ValueError):
        actor_from_token("not-a-token")
