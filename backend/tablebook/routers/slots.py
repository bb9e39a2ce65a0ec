# backend/tablebook/routers/slots.py
"""
Slots API: occupancy of every slot of a day, for the calendar view.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.settings import is_calendar_date
from ..schemas.slots import SlotsDayResponse, SlotStatus
from ..services.errors import BookingError
from ..services.reservations import ReservationRepository
from ..services.settings_store import ClosureStore, SettingsStore
from ..services.slots import SlotCalculator
from .errors import http_error

router = APIRouter(prefix="/api/slots", tags=["slots"])


@router.get("", response_model=SlotsDayResponse)
def get_slots_day(
    target_date: str = Query(..., alias="date"),
    db: Session = Depends(get_db),
):
    """Slot grid of a day with booked/remaining counts."""
    if not is_calendar_date(target_date):
        raise HTTPException(
            status_code=400,
            detail={"error": "validation_error", "details": ["date must be YYYY-MM-DD"]},
        )

    try:
        settings = SettingsStore(db).get()
        calculator = SlotCalculator(settings, ClosureStore(db).get())
        booked = ReservationRepository(db).count_active_by_time(target_date)
    except BookingError as e:
        raise http_error(e)

    return SlotsDayResponse(
        date=target_date,
        closed=calculator.is_date_closed(target_date),
        opening_hour=settings.opening_hour,
        closing_hour=settings.closing_hour,
        slot_minutes=settings.slot_minutes,
        max_per_slot=settings.max_per_slot,
        slots=[SlotStatus(**slot) for slot in calculator.day_overview(target_date, booked)],
    )
