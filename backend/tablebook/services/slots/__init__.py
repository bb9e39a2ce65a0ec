# backend/tablebook/services/slots/__init__.py
"""
Slots calculation module.

Opening hours and closures decide whether a slot is open; capacity is
enforced by the booking engine against stored reservations.
"""

from .config import time_str_to_minutes, minutes_to_time_str
from .calculator import SlotCalculator

__all__ = [
    "time_str_to_minutes",
    "minutes_to_time_str",
    "SlotCalculator",
]
