"""
Admin console for the booking engine.

Reads and edits the persisted record set. The console defaults to the json
backend in STORAGE_DIR (.stylash) so edits outlive the process; pass
--backend / --storage-dir, or set STORAGE_BACKEND, to point it elsewhere.

Usage:
    python main.py stats
    python main.py --storage-dir /srv/stylash stats
    python main.py search maria
    python main.py slots 2025-06-10
    python main.py confirm STL-1A2B3C4D
    python main.py cancel STL-1A2B3C4D --reason "Client request"
"""

import argparse
import logging
import os
import sys
from dataclasses import replace
from typing import Optional

from stylash.config import STORAGE_BACKENDS, StorageConfig, settings
from stylash.engine import BookingEngine
from stylash.logging_context import set_session_id
from stylash.schemas.booking_schema import Booking

logger = logging.getLogger(__name__)


def _describe(booking: Booking) -> str:
    return (
        f"{booking.id}  {booking.date} {booking.time_slot}  {booking.service_name:<26}"
        f"  {booking.customer_name:<20}  {booking.status.value}/{booking.payment_status.value}"
    )


def _print_result(booking: Optional[Booking], booking_id: str) -> int:
    if booking is None:
        logger.error("Booking not found: %s", booking_id)
        return 1
    sys.stdout.write(_describe(booking) + "\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f"{settings.business.name} booking admin console."
    )
    parser.add_argument(
        "--session",
        type=str,
        default="ADMIN-CONSOLE",
        help="Admin session id recorded in the audit log.",
    )
    parser.add_argument(
        "--backend",
        choices=STORAGE_BACKENDS,
        default=os.getenv("STORAGE_BACKEND", "json"),
        help="Record store (default: json unless STORAGE_BACKEND is set).",
    )
    parser.add_argument(
        "--storage-dir",
        default=settings.storage.directory,
        help="Directory for the json backend.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("stats", help="Show booking statistics.")

    search = sub.add_parser("search", help="Search bookings by id, name, email, phone, service.")
    search.add_argument("query")

    slots = sub.add_parser("slots", help="List bookable time slots for a date.")
    slots.add_argument("date", help="YYYY-MM-DD")

    confirm = sub.add_parser("confirm", help="Mark a booking's payment as received.")
    confirm.add_argument("booking_id")

    cancel = sub.add_parser("cancel", help="Cancel a booking.")
    cancel.add_argument("booking_id")
    cancel.add_argument("--reason", default=None)

    complete = sub.add_parser("complete", help="Mark a confirmed booking as completed.")
    complete.add_argument("booking_id")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    set_session_id(args.session)
    config = replace(settings, storage=StorageConfig(backend=args.backend, directory=args.storage_dir))
    engine = BookingEngine.create(config=config)

    if args.command == "stats":
        stats = engine.reporting.get_booking_stats()
        sys.stdout.write(engine.reporting.format_report(stats) + "\n")
    elif args.command == "search":
        for booking in engine.reporting.search_bookings(args.query):
            sys.stdout.write(_describe(booking) + "\n")
    elif args.command == "slots":
        available = engine.scheduler.get_available_slots(args.date)
        sys.stdout.write(" ".join(available) if available else "No available slots.")
        sys.stdout.write("\n")
    elif args.command == "confirm":
        return _print_result(engine.lifecycle.mark_payment_received(args.booking_id), args.booking_id)
    elif args.command == "cancel":
        return _print_result(
            engine.lifecycle.cancel_booking(args.booking_id, args.reason), args.booking_id
        )
    elif args.command == "complete":
        return _print_result(engine.lifecycle.complete_booking(args.booking_id), args.booking_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
