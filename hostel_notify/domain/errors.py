"""Errors raised by the notification use cases."""


class NotificationError(ValueError):
    """Base class for notification failures surfaced to callers."""


class ValidationError(NotificationError):
    """The create payload is invalid; nothing was written."""


class NotFoundError(NotificationError):
    """The notification does not exist or is not visible to the actor."""


class ForbiddenError(NotificationError):
    """The actor is not allowed to perform the operation."""


__all__ = ["NotificationError", "ValidationError", "NotFoundError", "ForbiddenError"]
