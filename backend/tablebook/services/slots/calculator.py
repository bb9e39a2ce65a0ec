# backend/tablebook/services/slots/calculator.py
"""
Slot legality for a restaurant day.

A slot (date, time) is open when:
✓ the date is not a one-off closed date
✓ the weekday is not closed
✓ opening_hour <= time <= closing_hour (closing time itself is bookable)

Capacity is NOT checked here (see booking engine).
"""

import re

from ...schemas.settings import HHMM_PATTERN, ClosedDays, RestaurantSettings, is_calendar_date
from .config import minutes_to_time_str, time_str_to_minutes


class SlotCalculator:
    """Answers "is this slot open?" for one settings/closures snapshot."""

    def __init__(self, settings: RestaurantSettings, closed: ClosedDays):
        self.settings = settings
        self.closed = closed

    def is_date_closed(self, date_str: str) -> bool:
        # Unparseable dates never have open slots
        if not is_calendar_date(date_str):
            return True
        return self.closed.is_date_closed(date_str)

    def is_slot_open(self, date_str: str, time_str: str) -> bool:
        if self.is_date_closed(date_str):
            return False
        if not re.match(HHMM_PATTERN, time_str):
            return False

        minutes = time_str_to_minutes(time_str)
        if minutes < time_str_to_minutes(self.settings.opening_hour):
            return False
        if minutes > time_str_to_minutes(self.settings.closing_hour):
            return False
        return True

    def enumerate_slots(self, date_str: str) -> list[str]:
        """
        Slot grid from opening to closing (inclusive), slot_minutes apart.

        Closed days still return their grid; openness of each slot is
        answered separately by is_slot_open().
        """
        if not is_calendar_date(date_str):
            return []

        start = time_str_to_minutes(self.settings.opening_hour)
        end = time_str_to_minutes(self.settings.closing_hour)
        step = self.settings.slot_minutes

        slots = []
        t = start
        while t <= end:
            slots.append(minutes_to_time_str(t))
            t += step
        return slots

    def day_overview(self, date_str: str, booked_by_time: dict[str, int]) -> list[dict]:
        """
        Per-slot occupancy for a calendar view.

        booked_by_time: active reservation count per "HH:MM" for the day.
        """
        capacity = self.settings.max_per_slot
        overview = []
        for time_str in self.enumerate_slots(date_str):
            is_open = self.is_slot_open(date_str, time_str)
            booked = booked_by_time.get(time_str, 0)
            overview.append({
                "time": time_str,
                "open": is_open,
                "booked": booked,
                "remaining": max(capacity - booked, 0) if is_open else 0,
            })
        return overview
