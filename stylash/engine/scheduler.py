"""
Slot availability engine.

Decides whether a (date, time slot) pair can take a new booking under the
current availability policy and the existing reservations. Every check is
a pure read and must be repeated at submission time.
"""

import logging
from datetime import date
from typing import Union

from stylash.config import settings
from stylash.schemas.booking_schema import OCCUPYING_STATUSES, Booking
from stylash.storage.repository import BookingRepository, SettingsRepository
from stylash.utils import Clock, local_today, parse_date, utc_now

logger = logging.getLogger(__name__)

TIME_SLOTS: tuple[str, ...] = tuple(
    f"{hour:02d}:{minute:02d}" for hour in range(9, 20) for minute in (0, 30)
)


class Scheduler:
    """Availability pipeline: blocked date, weekday, hours, lead time, capacity."""

    def __init__(
        self,
        bookings: BookingRepository,
        policy: SettingsRepository,
        clock: Clock = utc_now,
        timezone: str = settings.business.timezone,
    ) -> None:
        self.bookings = bookings
        self.policy = policy
        self.clock = clock
        self.timezone = timezone

    def today(self) -> date:
        return local_today(self.clock, self.timezone)

    def is_slot_available(self, day: Union[str, date], time_slot: str) -> bool:
        """Return True iff a new booking may take ``time_slot`` on ``day``."""
        day = parse_date(day)
        availability = self.policy.get_availability()

        if day in availability.blocked_dates:
            logger.debug("%s rejected: blocked date", day)
            return False

        hours = availability.hours_for(day)
        if hours is None or not hours.is_open:
            logger.debug("%s rejected: closed weekday", day)
            return False

        # Fixed-width HH:MM labels compare correctly as strings
        if time_slot < hours.open_time or time_slot >= hours.close_time:
            logger.debug("%s %s rejected: outside %s-%s",
                          day, time_slot, hours.open_time, hours.close_time)
            return False

        days_diff = (day - self.today()).days
        if days_diff < availability.lead_time_days:
            logger.debug("%s rejected: %d day(s) ahead, lead time is %d",
                          day, days_diff, availability.lead_time_days)
            return False

        taken = len(self._occupying(day, time_slot))
        return taken < availability.max_bookings_per_slot

    def get_booked_slots(self, day: Union[str, date]) -> list[str]:
        """Time slots held by slot-occupying bookings on ``day``."""
        day = parse_date(day)
        return [
            b.time_slot for b in self.bookings.all()
            if b.date == day and b.status in OCCUPYING_STATUSES
        ]

    def get_available_slots(self, day: Union[str, date]) -> list[str]:
        """All standard time slots that can still be booked on ``day``."""
        return [slot for slot in TIME_SLOTS if self.is_slot_available(day, slot)]

    def _occupying(self, day: date, time_slot: str) -> list[Booking]:
        return [
            b for b in self.bookings.all()
            if b.date == day and b.time_slot == time_slot and b.status in OCCUPYING_STATUSES
        ]
