"""Availability and overbooking policy models with their documented defaults."""

import re
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from stylash.utils import weekday_index

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

# Fixed-width 24h label; opening hours compare lexically against slot labels
_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WorkingHours(_CamelModel):
    """Opening hours for one weekday (0 = Sunday)."""

    day: int = Field(ge=0, le=6)
    is_open: bool = True
    open_time: str = "09:00"
    close_time: str = "17:00"

    @field_validator("open_time", "close_time")
    @classmethod
    def _zero_padded(cls, value: str) -> str:
        if not _HHMM.match(value):
            raise ValueError(f"time must be zero-padded HH:MM, got {value!r}")
        return value


def _default_working_hours() -> list[WorkingHours]:
    return [WorkingHours(day=d) for d in range(7)]


class AvailabilitySettings(_CamelModel):
    """Weekly hours, blocked dates, lead time, and per-slot capacity."""

    working_hours: list[WorkingHours] = Field(default_factory=_default_working_hours)
    blocked_dates: list[date] = Field(default_factory=list)
    lead_time_days: int = Field(default=1, ge=0)
    max_bookings_per_slot: int = Field(default=1, ge=1)
    buffer_time_minutes: int = Field(default=0, ge=0)

    def hours_for(self, day: date) -> Optional[WorkingHours]:
        """Return the working-hours entry for ``day``'s weekday, if any."""
        index = weekday_index(day)
        for entry in self.working_hours:
            if entry.day == index:
                return entry
        return None


class OverbookingSettings(_CamelModel):
    """Toggles and caps for force-fitting bookings past capacity."""

    enabled: bool = True
    max_overbooked_per_day: int = Field(default=2, ge=0)
    max_overbooked_per_slot: int = Field(default=1, ge=0)
    require_reason: bool = True


DEFAULT_AVAILABILITY = AvailabilitySettings()
DEFAULT_OVERBOOKING = OverbookingSettings()
