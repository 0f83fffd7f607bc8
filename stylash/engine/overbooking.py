"""Overbooking policy checks: the enabled flag, reason rule, and daily/slot caps."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from stylash.schemas.booking_schema import BookingStatus, OverbookReason
from stylash.storage.repository import BookingRepository, SettingsRepository
from stylash.utils import parse_date

logger = logging.getLogger(__name__)


@dataclass
class OverbookingCheck:
    """Outcome of an overbooking policy check."""
    allowed: bool
    message: Optional[str] = None
    overbooked_on_day: int = 0
    overbooked_in_slot: int = 0


class OverbookingPolicy:
    """Counts existing overbookings against the configured caps."""

    def __init__(self, bookings: BookingRepository, policy: SettingsRepository) -> None:
        self.bookings = bookings
        self.policy = policy

    def check(
        self,
        day: Union[str, date],
        time_slot: str,
        reason: Optional[OverbookReason] = None,
        exclude_id: Optional[str] = None,
    ) -> OverbookingCheck:
        """
        Report whether one more overbooking fits at (day, time_slot).

        ``exclude_id`` leaves the booking being marked out of the counts.
        """
        day = parse_date(day)
        rules = self.policy.get_overbooking()

        overbooked = [
            b for b in self.bookings.all()
            if b.date == day and b.status == BookingStatus.OVERBOOKED and b.id != exclude_id
        ]
        on_day = len(overbooked)
        in_slot = sum(1 for b in overbooked if b.time_slot == time_slot)

        def result(allowed: bool, message: Optional[str] = None) -> OverbookingCheck:
            return OverbookingCheck(allowed, message, on_day, in_slot)

        if not rules.enabled:
            return result(False, "Overbooking is disabled.")
        if rules.require_reason and reason is None:
            return result(False, "An overbooking reason is required.")
        if on_day >= rules.max_overbooked_per_day:
            return result(
                False,
                f"{day} already has {on_day} overbooked booking(s) "
                f"(limit {rules.max_overbooked_per_day}).",
            )
        if in_slot >= rules.max_overbooked_per_slot:
            return result(
                False,
                f"{day} {time_slot} already has {in_slot} overbooked booking(s) "
                f"(limit {rules.max_overbooked_per_slot}).",
            )
        return result(True)
