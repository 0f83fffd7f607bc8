"""Tests for the audit log and the settings service that feeds it."""

import logging
from datetime import date

import pytest

from stylash.logging_context import get_session_id, set_session_id
from stylash.schemas.settings_schema import AvailabilitySettings, OverbookingSettings
from stylash.tools.audit import AuditAction, AuditLog
from tests.conftest import FixedClock, book


@pytest.fixture
def session():
    set_session_id("ADMIN-test")
    yield "ADMIN-test"
    set_session_id("NO_SESSION")


class TestAuditLog:
    def test_records_entry(self, session):
        clock = FixedClock()
        log = AuditLog(limit=10, clock=clock)
        log.log_admin_action(AuditAction.CANCEL_BOOKING, {"booking_id": "STL-1"})
        entry = log.entries()[0]
        assert entry.action == AuditAction.CANCEL_BOOKING
        assert entry.payload == {"booking_id": "STL-1"}
        assert entry.timestamp == clock.now
        assert entry.session_id == "ADMIN-test"

    def test_accepts_action_name_string(self):
        log = AuditLog(limit=10)
        log.log_admin_action("MARK_OVERBOOKED", {})
        assert log.entries()[0].action == AuditAction.MARK_OVERBOOKED

    def test_unknown_action_rejected(self):
        with pytest.raises(ValueError):
            AuditLog(limit=10).log_admin_action("DELETE_EVERYTHING", {})

    def test_payload_is_copied(self):
        log = AuditLog(limit=10)
        payload = {"booking_id": "STL-1"}
        log.log_admin_action(AuditAction.CANCEL_BOOKING, payload)
        payload["booking_id"] = "changed"
        assert log.entries()[0].payload["booking_id"] == "STL-1"

    def test_keeps_newest_entries(self):
        log = AuditLog(limit=3)
        for i in range(5):
            log.log_admin_action(AuditAction.CANCEL_BOOKING, {"n": i})
        assert [e.payload["n"] for e in log.entries()] == [2, 3, 4]

    def test_filter_and_reset(self):
        log = AuditLog(limit=10)
        log.log_admin_action(AuditAction.CANCEL_BOOKING, {})
        log.log_admin_action(AuditAction.COMPLETE_BOOKING, {})
        assert len(log.entries(AuditAction.COMPLETE_BOOKING)) == 1
        log.reset()
        assert log.entries() == []


class TestSessionContext:
    def test_default_session(self):
        assert get_session_id() == "NO_SESSION"

    def test_lifecycle_entries_carry_session(self, engine, session):
        booking = book(engine)
        engine.lifecycle.cancel_booking(booking.id, "No-show")
        assert engine.audit.entries()[0].session_id == session

    def test_lifecycle_log_lines_carry_session(self, engine, session, caplog):
        caplog.set_level(logging.INFO, logger="stylash.engine.lifecycle")
        booking = book(engine)
        engine.lifecycle.cancel_booking(booking.id)
        cancel_lines = [r for r in caplog.records if r.getMessage().startswith("CANCEL_BOOKING")]
        assert len(cancel_lines) == 1
        assert cancel_lines[0].session_id == session


class TestOneEntryPerMutation:
    def test_each_operation_logs_once(self, engine):
        booking = book(engine)
        lc = engine.lifecycle
        lc.submit_payment_proof(booking.id)
        lc.mark_payment_received(booking.id)
        lc.mark_as_overbooked(booking.id, "staff_error", "Stylist double-booked")
        lc.resolve_overbooking(booking.id, "rescheduled")
        lc.reschedule_booking(booking.id, "2025-06-12", "13:00")
        lc.complete_booking(booking.id)
        assert [e.action for e in engine.audit.entries()] == [
            AuditAction.SUBMIT_PAYMENT_PROOF,
            AuditAction.MARK_PAYMENT_RECEIVED,
            AuditAction.MARK_OVERBOOKED,
            AuditAction.RESOLVE_OVERBOOKING,
            AuditAction.RESCHEDULE_BOOKING,
            AuditAction.COMPLETE_BOOKING,
        ]

    def test_overbooking_payload(self, engine):
        booking = book(engine)
        engine.lifecycle.mark_as_overbooked(booking.id, "staff_error", "Stylist double-booked")
        engine.lifecycle.resolve_overbooking(booking.id, "completed_with_compensation", 100.0)
        marked, resolved = engine.audit.entries()
        assert marked.payload == {
            "booking_id": booking.id, "reason": "staff_error", "notes": "Stylist double-booked",
        }
        assert resolved.payload == {
            "booking_id": booking.id,
            "resolution": "completed_with_compensation",
            "compensation_amount": 100.0,
        }


class TestPolicySettingsService:
    def test_update_availability_is_persisted_and_audited(self, engine):
        updated = AvailabilitySettings(blocked_dates=[date(2025, 12, 25)], lead_time_days=2)
        engine.policy.update_availability_settings(updated)
        assert engine.policy.get_availability_settings() == updated
        entry = engine.audit.entries(AuditAction.UPDATE_AVAILABILITY)[0]
        assert entry.payload["blocked_dates"] == ["2025-12-25"]
        assert entry.payload["lead_time_days"] == 2

    def test_update_overbooking_is_persisted_and_audited(self, engine):
        engine.policy.update_overbooking_settings(OverbookingSettings(max_overbooked_per_day=4))
        assert engine.policy.get_overbooking_settings().max_overbooked_per_day == 4
        entry = engine.audit.entries(AuditAction.UPDATE_OVERBOOKING_SETTINGS)[0]
        assert entry.payload["max_overbooked_per_day"] == 4

    def test_accepts_plain_mapping(self, engine):
        engine.policy.update_overbooking_settings({"enabled": False, "requireReason": False})
        stored = engine.policy.get_overbooking_settings()
        assert stored.enabled is False
        assert stored.require_reason is False
