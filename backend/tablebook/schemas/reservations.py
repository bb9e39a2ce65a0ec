# backend/tablebook/schemas/reservations.py

from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, Field


class ReservationPayload(BaseModel):
    """
    Raw reservation fields as sent by the dashboard.

    Types are deliberately loose: shape checks happen in the booking
    engine so that every problem is reported in a single response.
    """
    id: Any = None
    name: Any = None
    phone: Any = None
    date: Any = None
    time: Any = None
    end_time: Any = Field(
        None,
        validation_alias=AliasChoices("endTime", "end_time", "endtime"),
    )
    guests: Any = None
    status: Any = None
    notes: Any = None

    model_config = {"populate_by_name": True, "extra": "ignore"}


class ReservationMove(BaseModel):
    date: Any = None
    time: Any = None


class ReservationRead(BaseModel):
    id: str
    name: str
    phone: str
    date: str
    time: str
    end_time: Optional[str] = Field(None, serialization_alias="endTime")
    guests: int
    status: str
    notes: Optional[str] = None

    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class ReservationRemoved(BaseModel):
    ok: bool = True
    removed: ReservationRead
