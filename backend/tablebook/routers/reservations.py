# backend/tablebook/routers/reservations.py

import re
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.reservations import (
    ReservationMove,
    ReservationPayload,
    ReservationRead,
    ReservationRemoved,
)
from ..schemas.settings import DATE_PATTERN
from ..services.booking import BookingEngine
from ..services.errors import BookingError
from ..services.reservations import ReservationRepository
from ..services.settings_store import ClosureStore, SettingsStore
from .errors import http_error

router = APIRouter(prefix="/api/reservations", tags=["reservations"])


def get_booking_engine(db: Session = Depends(get_db)) -> BookingEngine:
    try:
        return BookingEngine(db, SettingsStore(db).get(), ClosureStore(db).get())
    except BookingError as e:
        raise http_error(e)


def _date_filter(value: Optional[str]) -> Optional[str]:
    # Malformed bounds are ignored rather than rejected
    if value and re.match(DATE_PATTERN, value):
        return value
    return None


@router.get("", response_model=list[ReservationRead])
def list_reservations(
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    try:
        return ReservationRepository(db).list_by_range(
            _date_filter(date_from),
            _date_filter(date_to),
            status_filter,
        )
    except BookingError as e:
        raise http_error(e)


@router.get("/{id}", response_model=ReservationRead)
def get_reservation(id: str, db: Session = Depends(get_db)):
    try:
        return ReservationRepository(db).get_by_id(id)
    except BookingError as e:
        raise http_error(e)


@router.post("", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationPayload,
    engine: BookingEngine = Depends(get_booking_engine),
):
    try:
        return engine.create(data.model_dump())
    except BookingError as e:
        raise http_error(e)


@router.put("/{id}", response_model=ReservationRead)
def update_reservation(
    id: str,
    data: ReservationPayload,
    engine: BookingEngine = Depends(get_booking_engine),
):
    try:
        return engine.update(id, data.model_dump())
    except BookingError as e:
        raise http_error(e)


@router.post("/{id}/move", response_model=ReservationRead)
def move_reservation(
    id: str,
    data: ReservationMove,
    engine: BookingEngine = Depends(get_booking_engine),
):
    try:
        return engine.move(id, data.date, data.time)
    except BookingError as e:
        raise http_error(e)


@router.post("/{id}/cancel", response_model=ReservationRead)
def cancel_reservation(id: str, engine: BookingEngine = Depends(get_booking_engine)):
    try:
        return engine.cancel(id)
    except BookingError as e:
        raise http_error(e)


@router.delete("/{id}", response_model=ReservationRemoved)
def delete_reservation(id: str, engine: BookingEngine = Depends(get_booking_engine)):
    try:
        removed = engine.delete(id)
    except BookingError as e:
        raise http_error(e)
    return ReservationRemoved(removed=ReservationRead.model_validate(removed))
