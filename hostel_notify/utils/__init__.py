"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_timezone,
    get_app_timezone,
    now_in_app_timezone,
    resolve_timezone,
    storage_now,
    to_storage_datetime,
)
from .logging_config import configure_logging

__all__ = [
    "configure_logging",
    "ensure_app_timezone",
    "get_app_timezone",
    "now_in_app_timezone",
    "resolve_timezone",
    "storage_now",
    "to_storage_datetime",
]
