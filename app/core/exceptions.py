"""Domain errors raised by the booking engine.

Services raise these instead of ``HTTPException`` so they stay usable outside
a request. ``app.main`` renders them as ``{"detail": ..., "code": ...}`` with
the status code carried by the class.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse


class BookingError(Exception):
    """Base class for business-rule failures."""
    code = "booking_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Malformed input, e.g. a time that is not HH:MM."""
    code = "validation_error"


class NotFoundError(BookingError):
    """Missing record, or a record the caller does not own."""
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class UnavailableError(BookingError):
    """Provider does not work on the requested day, date or time."""
    code = "unavailable"


class ConflictError(BookingError):
    """Requested slot overlaps an existing booking."""
    code = "conflict"


class InvalidStateError(BookingError):
    """Status transition not allowed from the appointment's current state."""
    code = "invalid_state"


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )
