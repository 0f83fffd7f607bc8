"""
Read-only projections over the booking store.

Statistics are recomputed on every call; revenue counts booking fees of
paid bookings only, never the full service price.
"""

import logging
from dataclasses import dataclass

from stylash.config import settings
from stylash.schemas.booking_schema import Booking, BookingStatus, PaymentStatus
from stylash.storage.repository import BookingRepository
from stylash.tools.services import format_price
from stylash.utils import Clock, local_today, utc_now

logger = logging.getLogger(__name__)


@dataclass
class BookingStats:
    """Aggregate counts and revenue for the admin dashboard."""

    total: int = 0
    pending_payment: int = 0
    awaiting_verification: int = 0
    confirmed: int = 0
    completed: int = 0
    cancelled: int = 0
    overbooked: int = 0
    today: int = 0
    revenue: float = 0.0


class BookingReporter:
    """Statistics and free-text search."""

    def __init__(
        self,
        bookings: BookingRepository,
        clock: Clock = utc_now,
        timezone: str = settings.business.timezone,
    ) -> None:
        self.bookings = bookings
        self.clock = clock
        self.timezone = timezone

    def get_booking_stats(self) -> BookingStats:
        """Single pass over every booking."""
        today = local_today(self.clock, self.timezone)
        stats = BookingStats()
        for booking in self.bookings.all():
            stats.total += 1
            field_name = BookingStatus(booking.status).value
            setattr(stats, field_name, getattr(stats, field_name) + 1)
            if booking.date == today:
                stats.today += 1
            if booking.payment_status == PaymentStatus.PAID:
                stats.revenue += booking.booking_fee
        return stats

    def search_bookings(self, query: str) -> list[Booking]:
        """Case-insensitive match on id, name, email, service; raw match on phone."""
        needle = query.lower()
        return [
            b for b in self.bookings.all()
            if needle in b.id.lower()
            or needle in b.customer_name.lower()
            or needle in b.customer_email.lower()
            or query in b.customer_phone
            or needle in b.service_name.lower()
        ]

    def format_report(self, stats: BookingStats) -> str:
        """Format statistics into a human-readable report."""
        lines = [
            "=" * 44,
            f"{settings.business.name.upper()} BOOKINGS",
            "=" * 44,
            f"  Total:                  {stats.total}",
            f"  Today:                  {stats.today}",
            "",
            "BY STATUS",
            f"  Pending payment:        {stats.pending_payment}",
            f"  Awaiting verification:  {stats.awaiting_verification}",
            f"  Confirmed:              {stats.confirmed}",
            f"  Completed:              {stats.completed}",
            f"  Cancelled:              {stats.cancelled}",
            f"  Overbooked:             {stats.overbooked}",
            "",
            f"  Revenue (fees paid):    {format_price(stats.revenue)}",
            "=" * 44,
        ]
        return "\n".join(lines)
