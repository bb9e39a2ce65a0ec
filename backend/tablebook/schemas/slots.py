# backend/tablebook/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from pydantic import BaseModel, Field


class SlotStatus(BaseModel):
    """Occupancy of a single slot."""
    time: str  # "HH:MM"
    open: bool
    booked: int = 0
    remaining: int = 0


class SlotsDayResponse(BaseModel):
    """All slots of a day with their occupancy."""
    date: str
    closed: bool = Field(description="Whole day closed (one-off date or weekly closure)")
    opening_hour: str
    closing_hour: str
    slot_minutes: int
    max_per_slot: int
    slots: list[SlotStatus]
