# backend/tablebook/schemas/settings.py
"""
Restaurant configuration and closure calendar documents.

Both are stored as JSON in the kv table and patched with shallow-merge
semantics: only supplied fields overwrite the stored document.
"""

import re
from datetime import date
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def is_calendar_date(value: str) -> bool:
    """True for an existing YYYY-MM-DD calendar day."""
    if not re.match(DATE_PATTERN, value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _check_dates(values: list[str]) -> list[str]:
    """Validate YYYY-MM-DD strings and drop duplicates, keeping order."""
    seen: list[str] = []
    for value in values:
        if not is_calendar_date(value):
            raise ValueError(f"closed date {value!r} must be YYYY-MM-DD")
        if value not in seen:
            seen.append(value)
    return seen


# ── Configuration ────────────────────────────────────────────────────────


def _either(name: str, camel: str) -> AliasChoices:
    """Accept the dashboard's camelCase key as well as the field name."""
    return AliasChoices(name, camel)


class RestaurantSettings(BaseModel):
    restaurant_name: str = Field("RestBurger", validation_alias=_either("restaurant_name", "restaurantName"))
    support_whatsapp: str = Field("+447785314195", validation_alias=_either("support_whatsapp", "supportWhatsApp"))
    support_message: str = Field(
        "Hi! I need help with the reservation system.",
        validation_alias=_either("support_message", "supportMessage"),
    )
    timezone: str = "Europe/London"
    opening_hour: str = Field("11:00", pattern=HHMM_PATTERN, validation_alias=_either("opening_hour", "openingHour"))
    closing_hour: str = Field("23:00", pattern=HHMM_PATTERN, validation_alias=_either("closing_hour", "closingHour"))
    slot_minutes: int = Field(30, gt=0, validation_alias=_either("slot_minutes", "slotMinutes"))
    max_per_slot: int = Field(1, ge=1, validation_alias=_either("max_per_slot", "maxPerSlot"))

    model_config = {"from_attributes": True}


class RestaurantSettingsUpdate(BaseModel):
    restaurant_name: Optional[str] = Field(None, validation_alias=_either("restaurant_name", "restaurantName"))
    support_whatsapp: Optional[str] = Field(None, validation_alias=_either("support_whatsapp", "supportWhatsApp"))
    support_message: Optional[str] = Field(None, validation_alias=_either("support_message", "supportMessage"))
    timezone: Optional[str] = None
    opening_hour: Optional[str] = Field(
        None, pattern=HHMM_PATTERN, validation_alias=_either("opening_hour", "openingHour"),
    )
    closing_hour: Optional[str] = Field(
        None, pattern=HHMM_PATTERN, validation_alias=_either("closing_hour", "closingHour"),
    )
    slot_minutes: Optional[int] = Field(None, gt=0, validation_alias=_either("slot_minutes", "slotMinutes"))
    max_per_slot: Optional[int] = Field(None, ge=1, validation_alias=_either("max_per_slot", "maxPerSlot"))

    model_config = {"extra": "ignore"}


# ── Closures ─────────────────────────────────────────────────────────────


class WeeklyClosed(BaseModel):
    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False

    def is_closed(self, weekday: int) -> bool:
        """weekday: 0 = Monday, 6 = Sunday."""
        return getattr(self, WEEKDAYS[weekday])


class ClosedDays(BaseModel):
    closed_dates: list[str] = Field(default_factory=list, validation_alias=_either("closed_dates", "closedDates"))
    weekly_closed: WeeklyClosed = Field(
        default_factory=WeeklyClosed,
        validation_alias=_either("weekly_closed", "weeklyClosed"),
    )

    @field_validator("closed_dates")
    @classmethod
    def validate_closed_dates(cls, v: list[str]) -> list[str]:
        return _check_dates(v)

    def is_date_closed(self, value: str) -> bool:
        """
        One-off closed date OR closed weekday.

        A single date that falls on a closed weekday cannot be re-opened.
        """
        if value in self.closed_dates:
            return True
        return self.weekly_closed.is_closed(date.fromisoformat(value).weekday())


class ClosedDaysUpdate(BaseModel):
    closed_dates: Optional[list[str]] = Field(None, validation_alias=_either("closed_dates", "closedDates"))
    weekly_closed: Optional[WeeklyClosed] = Field(None, validation_alias=_either("weekly_closed", "weeklyClosed"))

    model_config = {"extra": "ignore"}

    @field_validator("closed_dates")
    @classmethod
    def validate_closed_dates(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        return _check_dates(v)
