# backend/tablebook/services/errors.py
"""
Domain errors raised by the booking services.

Routers translate them to HTTP responses; every error carries a stable
machine-readable ``code``.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class BookingError(Exception):
    code = "booking_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Input shape/range violations, all of them at once."""
    code = "validation_error"

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class NotFound(BookingError):
    code = "not_found"

    def __init__(self, resource: str, id: str):
        super().__init__(f"{resource} {id!r} not found")
        self.resource = resource
        self.id = id


class SlotClosed(BookingError):
    code = "slot_closed"

    def __init__(self, date: str, time: str):
        super().__init__("This time slot is closed.")
        self.date = date
        self.time = time


class SlotFull(BookingError):
    code = "slot_full"

    def __init__(self, date: str, time: str, capacity: int):
        super().__init__("This time slot already has a reservation.")
        self.date = date
        self.time = time
        self.capacity = capacity


class StorageError(BookingError):
    code = "storage_error"


@contextmanager
def storage_guard(db: Session, action: str):
    """Roll back and re-raise database failures as StorageError."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Storage failure while trying to {action}")
        raise StorageError(f"Could not {action}") from exc
