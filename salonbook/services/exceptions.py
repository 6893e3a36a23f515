from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from salonbook.schemas.slot import Slot


class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class DownstreamServiceError(ServiceError):
    """Raised when the booking API returns an error response or cannot be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.status_code = status_code


class NotFoundError(ServiceError):
    """Raised when a branch, employee or appointment does not exist."""


class BookingValidationError(ServiceError):
    """Raised before any network call when a booking request is incomplete."""


class BookingConflictError(ServiceError):
    """The requested interval is no longer free for the employee.

    ``slots`` holds the freshly recomputed slot list for the same
    employee/service/day so callers can refresh instead of retrying.
    """

    def __init__(
        self,
        message: str,
        *,
        reason: str | None = None,
        slots: List["Slot"] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.reason = reason
        self.slots = slots or []
