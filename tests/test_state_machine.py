"""Tests for the booking status transition table."""

import pytest

from stylash.engine.state_machine import BookingAction, BookingStateMachine
from stylash.errors import InvalidTransitionError, PolicyViolationError
from stylash.schemas.booking_schema import BookingStatus

S = BookingStatus
A = BookingAction


class TestAllowedTransitions:
    @pytest.mark.parametrize("current, target, action", [
        (S.PENDING_PAYMENT, S.AWAITING_VERIFICATION, A.SUBMIT_PAYMENT_PROOF),
        (S.PENDING_PAYMENT, S.CONFIRMED, A.MARK_PAYMENT_RECEIVED),
        (S.AWAITING_VERIFICATION, S.CONFIRMED, A.MARK_PAYMENT_RECEIVED),
        (S.CONFIRMED, S.CONFIRMED, A.MARK_PAYMENT_RECEIVED),
        (S.CONFIRMED, S.OVERBOOKED, A.MARK_OVERBOOKED),
        (S.OVERBOOKED, S.CANCELLED, A.CANCEL),
        (S.OVERBOOKED, S.OVERBOOKED, A.RESCHEDULE),
        (S.CONFIRMED, S.COMPLETED, A.COMPLETE),
        (S.COMPLETED, S.COMPLETED, A.UPDATE_STATUS),
    ])
    def test_listed_transition_passes(self, current, target, action):
        assert BookingStateMachine.check(current, target, action) == target

    @pytest.mark.parametrize("current", list(BookingStatus))
    @pytest.mark.parametrize("target", [S.CANCELLED, S.CONFIRMED, S.COMPLETED])
    def test_resolution_accepted_from_every_status(self, current, target):
        assert BookingStateMachine.is_allowed(current, target, A.RESOLVE_OVERBOOKING)

    def test_accepts_raw_string_values(self):
        assert BookingStateMachine.check("pending_payment", "confirmed", "mark_payment_received") == (
            S.CONFIRMED
        )


class TestRejectedTransitions:
    @pytest.mark.parametrize("current, target, action", [
        (S.CANCELLED, S.CONFIRMED, A.MARK_PAYMENT_RECEIVED),
        (S.COMPLETED, S.CANCELLED, A.CANCEL),
        (S.CANCELLED, S.CANCELLED, A.CANCEL),
        (S.PENDING_PAYMENT, S.COMPLETED, A.COMPLETE),
        (S.CONFIRMED, S.AWAITING_VERIFICATION, A.SUBMIT_PAYMENT_PROOF),
        (S.CANCELLED, S.CANCELLED, A.RESCHEDULE),
        (S.OVERBOOKED, S.OVERBOOKED, A.MARK_OVERBOOKED),
        (S.CANCELLED, S.PENDING_PAYMENT, A.UPDATE_STATUS),
        (S.COMPLETED, S.CONFIRMED, A.UPDATE_STATUS),
    ])
    def test_unlisted_transition_raises(self, current, target, action):
        with pytest.raises(InvalidTransitionError):
            BookingStateMachine.check(current, target, action)

    def test_error_is_policy_violation(self):
        with pytest.raises(PolicyViolationError):
            BookingStateMachine.check(S.CANCELLED, S.CONFIRMED, A.UPDATE_STATUS)

    def test_error_lists_allowed_targets(self):
        with pytest.raises(InvalidTransitionError, match="Allowed targets: \\['completed'\\]"):
            BookingStateMachine.check(S.CONFIRMED, S.CANCELLED, A.COMPLETE)


class TestQueries:
    def test_valid_actions_for_cancelled(self):
        assert BookingStateMachine.get_valid_actions(S.CANCELLED) == [
            A.RESOLVE_OVERBOOKING, A.UPDATE_STATUS,
        ]

    def test_valid_actions_for_pending(self):
        actions = BookingStateMachine.get_valid_actions(S.PENDING_PAYMENT)
        assert A.SUBMIT_PAYMENT_PROOF in actions
        assert A.COMPLETE not in actions

    @pytest.mark.parametrize("status, terminal", [
        (S.COMPLETED, True),
        (S.CANCELLED, True),
        (S.CONFIRMED, False),
        (S.OVERBOOKED, False),
    ])
    def test_is_terminal(self, status, terminal):
        assert BookingStateMachine.is_terminal(status) is terminal
