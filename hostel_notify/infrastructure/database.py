"""Database configuration and session management."""

from __future__ import annotations

from collections.abc import Generator

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from hostel_notify.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


settings = get_settings()

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict[str, object]:
    """Return driver specific keyword arguments for ``create_engine``."""

    options: dict[str, object] = {"pool_pre_ping": True}
    if make_url(database_url).get_backend_name() == "sqlite":
        # Sessions are used from FastAPI's threadpool and from the websocket loop.
        options["connect_args"] = {"check_same_thread": False, "timeout": 30}
    return options


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database() -> None:
    """Ensure all ORM models have corresponding database tables."""

    from hostel_notify.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database schema ready on %s", engine.url.render_as_string(hide_password=True))


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
