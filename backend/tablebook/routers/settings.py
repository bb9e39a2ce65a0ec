# backend/tablebook/routers/settings.py
"""
Restaurant configuration and closure calendar.

PUT and PATCH behave the same: a shallow merge over the stored document.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.settings import ClosedDays, RestaurantSettings
from ..services.errors import BookingError
from ..services.settings_store import ClosureStore, SettingsStore
from .errors import http_error

router = APIRouter(prefix="/api", tags=["settings"])


@router.get("/settings", response_model=RestaurantSettings)
def get_settings(db: Session = Depends(get_db)):
    try:
        return SettingsStore(db).get()
    except BookingError as e:
        raise http_error(e)


@router.put("/settings", response_model=RestaurantSettings)
@router.patch("/settings", response_model=RestaurantSettings)
def patch_settings(data: Optional[dict] = Body(None), db: Session = Depends(get_db)):
    try:
        return SettingsStore(db).patch(data)
    except BookingError as e:
        raise http_error(e)


@router.get("/closed", response_model=ClosedDays)
def get_closed(db: Session = Depends(get_db)):
    try:
        return ClosureStore(db).get()
    except BookingError as e:
        raise http_error(e)


@router.put("/closed", response_model=ClosedDays)
@router.patch("/closed", response_model=ClosedDays)
def patch_closed(data: Optional[dict] = Body(None), db: Session = Depends(get_db)):
    try:
        return ClosureStore(db).patch(data)
    except BookingError as e:
        raise http_error(e)
