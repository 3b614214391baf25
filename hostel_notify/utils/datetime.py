"""Timezone handling for stored and displayed notification timestamps.

Database columns are plain ``DATETIME``: values are written as naive
datetimes in the application timezone and made aware again when read.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from hostel_notify.config import get_settings


def resolve_timezone(name: str | None) -> tzinfo:
    """Return the zone called ``name``, or UTC when it is blank or unknown."""

    name = (name or "").strip()
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    return resolve_timezone(get_settings().app_timezone)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in the app timezone; naive values are assumed to be in it."""

    if value is None:
        return None
    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def to_storage_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` as the naive app-timezone datetime kept in the database."""

    localized = ensure_app_timezone(value)
    return localized.replace(tzinfo=None) if localized is not None else None


def storage_now() -> datetime:
    return datetime.now(tz=get_app_timezone()).replace(tzinfo=None)
