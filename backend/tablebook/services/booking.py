# backend/tablebook/services/booking.py
"""
Booking engine: the only place reservations are created or changed.

A placement is legal when
  (a) the slot is open (SlotCalculator.is_slot_open)
  (b) active reservations at the slot < max_per_slot

Both checks and the write run under a lock keyed by (date, time), so two
requests in this process cannot both take the last seat of a slot.
"""

import logging
import re
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..models import Reservations as DBReservations
from ..schemas.settings import HHMM_PATTERN, ClosedDays, RestaurantSettings, is_calendar_date
from .errors import NotFound, SlotClosed, SlotFull, ValidationError
from .reservations import CANCELLED, ReservationRepository
from .slots import SlotCalculator

logger = logging.getLogger(__name__)

STATUSES = ("waiting", "confirmed", "cancelled")
MIN_GUESTS = 1
MAX_GUESTS = 50


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SlotLocks:
    """
    Per-slot locks, created on first use.

    An entry lives only while some caller holds or waits on it, so the
    registry stays as large as the number of slots in use.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # (date, time) -> [lock, holders and waiters]
        self._locks: dict[tuple[str, str], list] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @contextmanager
    def hold(self, date: str, time: str):
        key = (date, time)
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


# Shared by every engine in the process
slot_locks = SlotLocks()


# ── Validation ───────────────────────────────────────────────────────────


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _guests(value) -> Optional[int]:
    """Integer party size, or None when the value is not an integer."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = _text(value)
    if re.fullmatch(r"[+-]?\d+", text):
        return int(text)
    return None


def validate_reservation(data: dict) -> dict:
    """
    Normalise raw reservation fields.

    Collects every problem before raising, so the caller sees them all
    in one ValidationError.
    """
    errors: list[str] = []
    end_time = data.get("end_time")
    if end_time is None:
        end_time = data.get("endTime")

    out = {
        "id": _text(data.get("id")) or str(uuid.uuid4()),
        "name": _text(data.get("name")),
        "phone": _text(data.get("phone")),
        "date": _text(data.get("date")),
        "time": _text(data.get("time")),
        "end_time": _text(end_time) or None,
        "guests": _guests(data.get("guests")),
        "status": _text(data.get("status")).lower() or "waiting",
        "notes": _text(data.get("notes")),
    }

    if not out["name"]:
        errors.append("name is required")
    if not out["phone"]:
        errors.append("phone is required")
    if not is_calendar_date(out["date"]):
        errors.append("date must be YYYY-MM-DD")
    if not re.match(HHMM_PATTERN, out["time"]):
        errors.append("time must be HH:MM")
    if out["end_time"] is not None and not re.match(HHMM_PATTERN, out["end_time"]):
        errors.append("endTime must be HH:MM")
    if out["guests"] is None or not MIN_GUESTS <= out["guests"] <= MAX_GUESTS:
        errors.append(f"guests must be between {MIN_GUESTS} and {MAX_GUESTS}")
    if out["status"] not in STATUSES:
        errors.append("status must be waiting|confirmed|cancelled")

    if errors:
        raise ValidationError(errors)
    return out


def validate_slot(date, time) -> tuple[str, str]:
    errors = []
    date, time = _text(date), _text(time)
    if not is_calendar_date(date):
        errors.append("date must be YYYY-MM-DD")
    if not re.match(HHMM_PATTERN, time):
        errors.append("time must be HH:MM")
    if errors:
        raise ValidationError(errors)
    return date, time


# ── Engine ───────────────────────────────────────────────────────────────


class BookingEngine:
    def __init__(
        self,
        db: Session,
        settings: RestaurantSettings,
        closed: ClosedDays,
        locks: Optional[SlotLocks] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings
        self.repository = ReservationRepository(db)
        self.calculator = SlotCalculator(settings, closed)
        self.locks = locks or slot_locks
        self.clock = clock or utc_now

    def _timestamp(self) -> str:
        return self.clock().isoformat()

    def _check_slot(self, date: str, time: str, excluding_id: Optional[str] = None) -> None:
        """Raise SlotClosed / SlotFull; call with the slot lock held."""
        if not self.calculator.is_slot_open(date, time):
            logger.info(f"Slot rejected (closed): {date} {time}")
            raise SlotClosed(date, time)

        capacity = self.settings.max_per_slot
        active = self.repository.count_active_at(date, time, excluding_id)
        if active >= capacity:
            logger.info(f"Slot rejected (full {active}/{capacity}): {date} {time}")
            raise SlotFull(date, time, capacity)

    def create(self, data: dict) -> DBReservations:
        fields = validate_reservation(data)

        with self.locks.hold(fields["date"], fields["time"]):
            if self.repository.exists(fields["id"]):
                raise ValidationError(["id already exists"])

            self._check_slot(fields["date"], fields["time"])

            now = self._timestamp()
            obj = self.repository.insert({**fields, "created_at": now, "updated_at": now})

        logger.info(f"Reservation created: id={obj.id}, slot={obj.date} {obj.time}")
        return obj

    def update(self, id: str, data: dict) -> DBReservations:
        fields = validate_reservation({**data, "id": id})
        fields.pop("id")

        with self.locks.hold(fields["date"], fields["time"]):
            if not self.repository.exists(id):
                raise NotFound("reservation", id)

            self._check_slot(fields["date"], fields["time"], excluding_id=id)

            obj = self.repository.update(id, {**fields, "updated_at": self._timestamp()})

        logger.info(f"Reservation updated: id={id}, slot={obj.date} {obj.time}")
        return obj

    def move(self, id: str, date, time) -> DBReservations:
        date, time = validate_slot(date, time)

        with self.locks.hold(date, time):
            obj = self.repository.get_by_id(id)
            if obj.date == date and obj.time == time:
                return obj

            self._check_slot(date, time, excluding_id=id)

            obj = self.repository.update(id, {
                "date": date,
                "time": time,
                "updated_at": self._timestamp(),
            })

        logger.info(f"Reservation moved: id={id}, slot={date} {time}")
        return obj

    def cancel(self, id: str) -> DBReservations:
        # Cancelled reservations never occupy capacity, so no slot checks
        obj = self.repository.update(id, {
            "status": CANCELLED,
            "updated_at": self._timestamp(),
        })
        logger.info(f"Reservation cancelled: id={id}")
        return obj

    def delete(self, id: str) -> DBReservations:
        obj = self.repository.delete(id)
        logger.info(f"Reservation deleted: id={id}, slot={obj.date} {obj.time}")
        return obj
