"""Shared fixtures: a throwaway sqlite database and a few portal actors."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "hostel_notify_tests.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ["PRIVILEGED_ROLES"] = "admin,warden"
os.environ["BROADCAST_VISIBILITY"] = "all"

from hostel_notify.config import get_settings  # noqa: E402

get_settings.cache_clear()

from hostel_notify.domain.access_policy import AccessPolicy  # noqa: E402
from hostel_notify.domain.entities import Actor  # noqa: E402
from hostel_notify.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from hostel_notify.infrastructure.security import create_actor_token  # noqa: E402

ADMIN = Actor(id=1, role="admin")
ALICE = Actor(id=2, role="student")
BOB = Actor(id=3, role="student")


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def open_policy() -> AccessPolicy:
    """Broadcasts visible read-only to every user."""

    return AccessPolicy(frozenset({"admin", "warden"}), "all")


@pytest.fixture()
def restricted_policy() -> AccessPolicy:
    """Broadcasts visible to privileged users only."""

    return AccessPolicy(frozenset({"admin", "warden"}), "privileged")


def auth_headers(actor: Actor) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_actor_token(actor)}"}
