"""
Booking lifecycle manager: creation and every named status transition.

Each mutating operation follows the same discipline: load the full record
set, find the booking by id (returning None if it is absent), mutate that
one record, bump ``updated_at``, write the full set back with the version
it was loaded at, then emit exactly one audit entry.
"""

import uuid
from datetime import date, datetime
from typing import Any, Callable, Optional, Union

from stylash.config import EngineConfig, settings
from stylash.errors import OverbookingLimitError, SlotUnavailableError
from stylash.engine.overbooking import OverbookingPolicy
from stylash.engine.scheduler import Scheduler
from stylash.engine.state_machine import BookingAction, BookingStateMachine
from stylash.logging_context import get_session_logger
from stylash.schemas.booking_schema import (
    Booking,
    BookingDraft,
    BookingStatus,
    OverbookReason,
    OverbookResolution,
    PaymentStatus,
)
from stylash.storage.repository import BookingRepository
from stylash.tools.audit import AuditAction, AuditLog
from stylash.tools.services import get_booking_fee, get_numeric_price, get_service_by_id
from stylash.utils import Clock, is_valid_time_slot, parse_date, utc_now

logger = get_session_logger(__name__)

# Status an overbooking resolution forces; PENDING leaves the status alone
RESOLUTION_STATUS: dict[OverbookResolution, BookingStatus] = {
    OverbookResolution.REFUNDED: BookingStatus.CANCELLED,
    OverbookResolution.RESCHEDULED: BookingStatus.CONFIRMED,
    OverbookResolution.COMPLETED_WITH_COMPENSATION: BookingStatus.COMPLETED,
}

Mutation = Callable[[Booking, datetime], None]


class BookingLifecycleManager:
    """Creates bookings and drives them through their status transitions."""

    def __init__(
        self,
        bookings: BookingRepository,
        scheduler: Scheduler,
        overbooking: OverbookingPolicy,
        audit: AuditLog,
        clock: Clock = utc_now,
        config: EngineConfig = settings.engine,
    ) -> None:
        self.bookings = bookings
        self.scheduler = scheduler
        self.overbooking = overbooking
        self.audit = audit
        self.clock = clock
        self.config = config

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def get_all_bookings(self) -> list[Booking]:
        return self.bookings.all()

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        return self.bookings.get(booking_id)

    def get_bookings_by_date(self, day: Union[str, date]) -> list[Booking]:
        day = parse_date(day)
        return [b for b in self.bookings.all() if b.date == day]

    def get_bookings_by_status(self, status: BookingStatus) -> list[Booking]:
        return [b for b in self.bookings.all() if b.status == status]

    # ------------------------------------------------------------------ #
    # Creation
    # ------------------------------------------------------------------ #

    def create_booking(self, draft: Union[BookingDraft, dict[str, Any]]) -> Optional[Booking]:
        """
        Snapshot the service price and fee and store a new pending booking.

        Callers must confirm availability with the scheduler first; in strict
        mode the check is repeated here and a taken slot raises
        SlotUnavailableError.

        Returns:
            The stored booking, or None when the service id is unknown.
        """
        if not isinstance(draft, BookingDraft):
            draft = BookingDraft.model_validate(draft)

        service = get_service_by_id(draft.service_id)
        if service is None:
            logger.warning("Booking rejected: unknown service '%s'", draft.service_id)
            return None

        if self.config.enforce_availability and not self.scheduler.is_slot_available(
            draft.date, draft.time_slot
        ):
            raise SlotUnavailableError(f"{draft.date} {draft.time_slot} is not available.")

        snapshot = self.bookings.load()
        now = self.clock()
        booking = Booking(
            id=self._new_id({b.id for b in snapshot.bookings}),
            date=draft.date,
            time_slot=draft.time_slot,
            service_id=service["id"],
            service_name=service["name"],
            service_price=get_numeric_price(service["price"]),
            booking_fee=get_booking_fee(service["category"]),
            customer_name=draft.customer_name,
            customer_email=draft.customer_email,
            customer_phone=draft.customer_phone,
            notes=draft.notes,
            status=BookingStatus.PENDING_PAYMENT,
            payment_status=PaymentStatus.PENDING,
            payment_method=draft.payment_method,
            created_at=now,
            updated_at=now,
        )
        snapshot.bookings.append(booking)
        self.bookings.save(snapshot.bookings, expected_version=snapshot.version)

        logger.info("Booking created: %s for %s on %s at %s",
                    booking.id, booking.customer_name, booking.date, booking.time_slot)
        return booking

    def _new_id(self, existing: set[str]) -> str:
        while True:
            candidate = f"{self.config.booking_id_prefix}-{uuid.uuid4().hex[:8].upper()}"
            if candidate not in existing:
                return candidate

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #

    def update_booking_status(
        self,
        booking_id: str,
        status: BookingStatus,
        payment_status: Optional[PaymentStatus] = None,
    ) -> Optional[Booking]:
        """Generic admin status edit, validated against the transition table."""
        status = BookingStatus(status)

        def mutate(booking: Booking, now: datetime) -> None:
            self._set_status(booking, status, BookingAction.UPDATE_STATUS)
            if payment_status is not None:
                booking.payment_status = PaymentStatus(payment_status)

        return self._apply(booking_id, mutate, AuditAction.UPDATE_BOOKING_STATUS, {
            "booking_id": booking_id,
            "new_status": status.value,
            "new_payment_status": PaymentStatus(payment_status).value if payment_status else None,
        })

    def submit_payment_proof(self, booking_id: str) -> Optional[Booking]:
        """Customer reports a transfer; the booking waits for admin verification."""

        def mutate(booking: Booking, now: datetime) -> None:
            self._set_status(booking, BookingStatus.AWAITING_VERIFICATION,
                             BookingAction.SUBMIT_PAYMENT_PROOF)

        return self._apply(booking_id, mutate, AuditAction.SUBMIT_PAYMENT_PROOF,
                           {"booking_id": booking_id})

    def mark_payment_received(self, booking_id: str) -> Optional[Booking]:
        """Confirm the booking and mark its fee as paid."""

        def mutate(booking: Booking, now: datetime) -> None:
            self._set_status(booking, BookingStatus.CONFIRMED, BookingAction.MARK_PAYMENT_RECEIVED)
            booking.payment_status = PaymentStatus.PAID
            # Re-verifying keeps the first verification time
            booking.verified_at = booking.verified_at or now

        return self._apply(booking_id, mutate, AuditAction.MARK_PAYMENT_RECEIVED,
                           {"booking_id": booking_id})

    def mark_as_overbooked(
        self,
        booking_id: str,
        reason: Optional[OverbookReason],
        notes: Optional[str] = None,
    ) -> Optional[Booking]:
        """
        Tag a booking as placed beyond slot capacity.

        The overbooking caps are only enforced in strict mode; otherwise
        callers are expected to pre-check with OverbookingPolicy.check().
        """
        reason = OverbookReason(reason) if reason is not None else None

        def mutate(booking: Booking, now: datetime) -> None:
            if self.config.enforce_overbooking_limits:
                verdict = self.overbooking.check(
                    booking.date, booking.time_slot, reason, exclude_id=booking.id
                )
                if not verdict.allowed:
                    raise OverbookingLimitError(verdict.message)
            self._set_status(booking, BookingStatus.OVERBOOKED, BookingAction.MARK_OVERBOOKED)
            booking.is_overbooked = True
            booking.overbook_reason = reason
            booking.overbook_notes = notes
            booking.overbooked_at = now
            booking.overbook_resolution = OverbookResolution.PENDING

        return self._apply(booking_id, mutate, AuditAction.MARK_OVERBOOKED, {
            "booking_id": booking_id,
            "reason": reason.value if reason else None,
            "notes": notes,
        })

    def resolve_overbooking(
        self,
        booking_id: str,
        resolution: OverbookResolution,
        compensation_amount: Optional[float] = None,
    ) -> Optional[Booking]:
        """Record how an overbooking was settled and force the matching status."""
        resolution = OverbookResolution(resolution)

        def mutate(booking: Booking, now: datetime) -> None:
            booking.overbook_resolution = resolution
            booking.overbook_resolved_at = now
            booking.compensation_amount = compensation_amount
            target = RESOLUTION_STATUS.get(resolution, booking.status)
            self._set_status(booking, target, BookingAction.RESOLVE_OVERBOOKING)
            if resolution == OverbookResolution.REFUNDED:
                booking.payment_status = PaymentStatus.REFUNDED
            elif resolution == OverbookResolution.COMPLETED_WITH_COMPENSATION:
                booking.completed_at = now

        return self._apply(booking_id, mutate, AuditAction.RESOLVE_OVERBOOKING, {
            "booking_id": booking_id,
            "resolution": resolution.value,
            "compensation_amount": compensation_amount,
        })

    def cancel_booking(self, booking_id: str, reason: Optional[str] = None) -> Optional[Booking]:
        """Cancel and mark refunded, whether or not the fee was ever paid."""

        def mutate(booking: Booking, now: datetime) -> None:
            self._set_status(booking, BookingStatus.CANCELLED, BookingAction.CANCEL)
            booking.payment_status = PaymentStatus.REFUNDED
            booking.cancellation_reason = reason
            booking.cancelled_at = now

        return self._apply(booking_id, mutate, AuditAction.CANCEL_BOOKING,
                           {"booking_id": booking_id, "reason": reason})

    def reschedule_booking(
        self, booking_id: str, new_date: Union[str, date], new_time_slot: str
    ) -> Optional[Booking]:
        """Move a booking in place, keeping its id and every other field."""
        if not is_valid_time_slot(new_time_slot):
            raise ValueError(f"time slot must be a half-hour HH:MM label, got {new_time_slot!r}")
        new_date = parse_date(new_date)
        payload: dict[str, Any] = {
            "booking_id": booking_id,
            "new_date": new_date.isoformat(),
            "new_time_slot": new_time_slot,
        }

        def mutate(booking: Booking, now: datetime) -> None:
            moved = (booking.date, booking.time_slot) != (new_date, new_time_slot)
            if (
                self.config.enforce_availability
                and moved
                and not self.scheduler.is_slot_available(new_date, new_time_slot)
            ):
                raise SlotUnavailableError(f"{new_date} {new_time_slot} is not available.")
            self._set_status(booking, booking.status, BookingAction.RESCHEDULE)
            payload["old_date"] = booking.date.isoformat()
            payload["old_time_slot"] = booking.time_slot
            booking.date = new_date
            booking.time_slot = new_time_slot

        return self._apply(booking_id, mutate, AuditAction.RESCHEDULE_BOOKING, payload)

    def complete_booking(self, booking_id: str) -> Optional[Booking]:
        """Mark a confirmed appointment as delivered."""

        def mutate(booking: Booking, now: datetime) -> None:
            self._set_status(booking, BookingStatus.COMPLETED, BookingAction.COMPLETE)
            booking.completed_at = now

        return self._apply(booking_id, mutate, AuditAction.COMPLETE_BOOKING,
                           {"booking_id": booking_id})

    def clear_all_bookings(self) -> int:
        """Maintenance: drop the whole record set. Returns how many were removed."""
        removed = len(self.bookings.all())
        self.bookings.clear()
        self.audit.log_admin_action(AuditAction.CLEAR_BOOKINGS, {"removed": removed})
        logger.warning("Cleared %d booking(s)", removed)
        return removed

    # ------------------------------------------------------------------ #
    # Shared mutation plumbing
    # ------------------------------------------------------------------ #

    def _set_status(self, booking: Booking, target: BookingStatus, action: BookingAction) -> None:
        if self.config.enforce_transitions:
            BookingStateMachine.check(booking.status, target, action)
        booking.status = target

    def _apply(
        self,
        booking_id: str,
        mutate: Mutation,
        action: AuditAction,
        payload: dict[str, Any],
    ) -> Optional[Booking]:
        snapshot = self.bookings.load()
        booking = next((b for b in snapshot.bookings if b.id == booking_id), None)
        if booking is None:
            logger.info("%s skipped: booking %s not found", action.value, booking_id)
            return None

        now = self.clock()
        mutate(booking, now)
        booking.updated_at = now
        self.bookings.save(snapshot.bookings, expected_version=snapshot.version)

        self.audit.log_admin_action(action, payload)
        logger.info("%s applied to %s (status: %s, payment: %s)",
                    action.value, booking_id, booking.status.value, booking.payment_status.value)
        return booking
