from fastapi import HTTPException

from salonbook.schemas.booking import BookingConflictResponse
from salonbook.services.exceptions import (
    BookingConflictError,
    BookingValidationError,
    DownstreamServiceError,
    NotFoundError,
    ServiceError,
)


def http_error(exc: ServiceError) -> HTTPException:
    """Translate a service failure into the HTTP response the UI expects."""

    if isinstance(exc, BookingValidationError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, BookingConflictError):
        body = BookingConflictResponse(message=str(exc), reason=exc.reason, slots=exc.slots)
        return HTTPException(status_code=409, detail=body.model_dump(mode="json"))
    if isinstance(exc, DownstreamServiceError) and exc.status_code and 400 <= exc.status_code < 500:
        return HTTPException(status_code=exc.status_code, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc) or "Booking service unavailable")
