"""Client-side error types."""

from hostel_notify.domain.errors import NotificationError


class GatewayError(NotificationError):
    """The notification API could not be reached or failed unexpectedly.

    These failures are transient and safe to retry.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = ["GatewayError"]
