# backend/tablebook/routers/errors.py

from fastapi import HTTPException, status

from ..services.errors import (
    BookingError,
    NotFound,
    SlotClosed,
    SlotFull,
    StorageError,
    ValidationError,
)

STATUS_CODES = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    SlotClosed: status.HTTP_409_CONFLICT,
    SlotFull: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def http_error(exc: BookingError) -> HTTPException:
    """Translate a domain error into the API error body."""
    if isinstance(exc, ValidationError):
        detail = {"error": exc.code, "details": exc.errors}
    else:
        detail = {"error": exc.code, "message": exc.message}
    return HTTPException(
        status_code=STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST),
        detail=detail,
    )
