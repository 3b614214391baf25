"""Validation helpers for notification payloads."""

from __future__ import annotations

from hostel_notify.domain.entities import NOTIFICATION_CATEGORIES, NOTIFICATION_TYPES
from hostel_notify.domain.errors import ValidationError

TITLE_MAX_LENGTH = 200
MESSAGE_MAX_LENGTH = 1000
ACTION_URL_MAX_LENGTH = 255


def normalize_text(value: str | None, *, field: str, max_length: int) -> str:
    """Return ``value`` stripped, rejecting empty or oversized text."""

    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"The notification {field} cannot be empty")
    if len(cleaned) > max_length:
        raise ValidationError(
            f"The notification {field} cannot exceed {max_length} characters"
        )
    return cleaned


def validate_type(value: str | None) -> str:
    normalized = (value or "info").strip().lower()
    if normalized not in NOTIFICATION_TYPES:
        raise ValidationError(
            f"Unknown notification type '{value}'. Expected one of: "
            + ", ".join(NOTIFICATION_TYPES)
        )
    return normalized


def validate_category(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    normalized = value.strip().lower()
    if normalized not in NOTIFICATION_CATEGORIES:
        raise ValidationError(
            f"Unknown notification category '{value}'. Expected one of: "
            + ", ".join(NOTIFICATION_CATEGORIES)
        )
    return normalized


def validate_action_url(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    cleaned = value.strip()
    if len(cleaned) > ACTION_URL_MAX_LENGTH:
        raise ValidationError(
            f"The action URL cannot exceed {ACTION_URL_MAX_LENGTH} characters"
        )
    return cleaned


__all__ = [
    "ACTION_URL_MAX_LENGTH",
    "MESSAGE_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "normalize_text",
    "validate_action_url",
    "validate_category",
    "validate_type",
]
