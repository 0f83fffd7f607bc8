"""
Explicit transition table for booking statuses.

Every lifecycle operation names an action; a status change is legal only
if a matching (from_status, to_status, action) transition is listed here.
Operations that keep the status (rescheduling, re-confirming a paid
booking) are listed as self-transitions.

Usage:
    BookingStateMachine.check(BookingStatus.PENDING_PAYMENT,
                              BookingStatus.CONFIRMED,
                              BookingAction.MARK_PAYMENT_RECEIVED)
"""

import logging
from dataclasses import dataclass
from enum import Enum

from stylash.errors import InvalidTransitionError
from stylash.schemas.booking_schema import BookingStatus

logger = logging.getLogger(__name__)


class BookingAction(str, Enum):
    """Lifecycle operations that may change a booking's status."""
    UPDATE_STATUS = "update_status"
    SUBMIT_PAYMENT_PROOF = "submit_payment_proof"
    MARK_PAYMENT_RECEIVED = "mark_payment_received"
    MARK_OVERBOOKED = "mark_overbooked"
    RESOLVE_OVERBOOKING = "resolve_overbooking"
    CANCEL = "cancel"
    RESCHEDULE = "reschedule"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus
    action: BookingAction


_S = BookingStatus
_A = BookingAction

ACTIVE_STATUSES = (
    _S.PENDING_PAYMENT,
    _S.AWAITING_VERIFICATION,
    _S.CONFIRMED,
    _S.OVERBOOKED,
)
TERMINAL_STATUSES = frozenset({_S.COMPLETED, _S.CANCELLED})

# Targets an overbooking resolution can force, including "pending" (no change)
_RESOLUTION_TARGETS = (_S.CANCELLED, _S.CONFIRMED, _S.COMPLETED)


class BookingStateMachine:
    """
    Status transition rules for the lifecycle manager.

    Overbooking resolution is an admin override and is accepted from any
    status. Terminal statuses otherwise only accept self-updates through
    the generic status operation (e.g. correcting the payment status).
    """

    TRANSITIONS: list[Transition] = [
        # --- Customer uploads payment proof ---
        Transition(_S.PENDING_PAYMENT, _S.AWAITING_VERIFICATION, _A.SUBMIT_PAYMENT_PROOF),

        # --- Admin verifies payment ---
        Transition(_S.PENDING_PAYMENT, _S.CONFIRMED, _A.MARK_PAYMENT_RECEIVED),
        Transition(_S.AWAITING_VERIFICATION, _S.CONFIRMED, _A.MARK_PAYMENT_RECEIVED),
        Transition(_S.CONFIRMED, _S.CONFIRMED, _A.MARK_PAYMENT_RECEIVED),

        # --- Overbooking ---
        Transition(_S.PENDING_PAYMENT, _S.OVERBOOKED, _A.MARK_OVERBOOKED),
        Transition(_S.AWAITING_VERIFICATION, _S.OVERBOOKED, _A.MARK_OVERBOOKED),
        Transition(_S.CONFIRMED, _S.OVERBOOKED, _A.MARK_OVERBOOKED),
        *[
            Transition(current, target, _A.RESOLVE_OVERBOOKING)
            for current in BookingStatus
            for target in (*_RESOLUTION_TARGETS, current)
        ],

        # --- Cancellation and rescheduling ---
        *[Transition(current, _S.CANCELLED, _A.CANCEL) for current in ACTIVE_STATUSES],
        *[Transition(current, current, _A.RESCHEDULE) for current in ACTIVE_STATUSES],

        # --- Service delivered ---
        Transition(_S.CONFIRMED, _S.COMPLETED, _A.COMPLETE),

        # --- Generic admin status edits ---
        Transition(_S.PENDING_PAYMENT, _S.AWAITING_VERIFICATION, _A.UPDATE_STATUS),
        Transition(_S.PENDING_PAYMENT, _S.CONFIRMED, _A.UPDATE_STATUS),
        Transition(_S.PENDING_PAYMENT, _S.CANCELLED, _A.UPDATE_STATUS),
        Transition(_S.PENDING_PAYMENT, _S.OVERBOOKED, _A.UPDATE_STATUS),
        Transition(_S.AWAITING_VERIFICATION, _S.PENDING_PAYMENT, _A.UPDATE_STATUS),
        Transition(_S.AWAITING_VERIFICATION, _S.CONFIRMED, _A.UPDATE_STATUS),
        Transition(_S.AWAITING_VERIFICATION, _S.CANCELLED, _A.UPDATE_STATUS),
        Transition(_S.AWAITING_VERIFICATION, _S.OVERBOOKED, _A.UPDATE_STATUS),
        Transition(_S.CONFIRMED, _S.COMPLETED, _A.UPDATE_STATUS),
        Transition(_S.CONFIRMED, _S.CANCELLED, _A.UPDATE_STATUS),
        Transition(_S.CONFIRMED, _S.OVERBOOKED, _A.UPDATE_STATUS),
        Transition(_S.OVERBOOKED, _S.CONFIRMED, _A.UPDATE_STATUS),
        Transition(_S.OVERBOOKED, _S.COMPLETED, _A.UPDATE_STATUS),
        Transition(_S.OVERBOOKED, _S.CANCELLED, _A.UPDATE_STATUS),
        *[Transition(current, current, _A.UPDATE_STATUS) for current in BookingStatus],
    ]

    @classmethod
    def is_allowed(
        cls, current: BookingStatus, target: BookingStatus, action: BookingAction
    ) -> bool:
        return any(
            t.from_status == current and t.to_status == target and t.action == action
            for t in cls.TRANSITIONS
        )

    @classmethod
    def check(
        cls, current: BookingStatus, target: BookingStatus, action: BookingAction
    ) -> BookingStatus:
        """
        Validate a status change.

        Returns:
            The target status.

        Raises:
            InvalidTransitionError: If no matching transition exists.
        """
        current, target, action = BookingStatus(current), BookingStatus(target), BookingAction(action)
        if cls.is_allowed(current, target, action):
            logger.debug(
                "Status transition: %s -> %s (action: %s)",
                current.value, target.value, action.value,
            )
            return target

        valid = sorted({t.to_status.value for t in cls.TRANSITIONS
                        if t.from_status == current and t.action == action})
        raise InvalidTransitionError(
            f"Cannot {action.value} a booking in status '{current.value}' "
            f"to '{target.value}'. Allowed targets: {valid}"
        )

    @classmethod
    def get_valid_actions(cls, current: BookingStatus) -> list[BookingAction]:
        """Return all actions accepted from ``current``, in table order."""
        seen: list[BookingAction] = []
        for t in cls.TRANSITIONS:
            if t.from_status == current and t.action not in seen:
                seen.append(t.action)
        return seen

    @staticmethod
    def is_terminal(status: BookingStatus) -> bool:
        return BookingStatus(status) in TERMINAL_STATUSES
