# backend/tablebook/services/slots/config.py
"""
"HH:MM" arithmetic for the slot grid.
"""


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time_str(total: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{total // 60:02d}:{total % 60:02d}"
