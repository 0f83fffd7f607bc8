"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_import_booking_schema(self):
        from stylash.schemas.booking_schema import (
            OCCUPYING_STATUSES, Booking, BookingDraft, BookingStatus,
        )
        assert BookingStatus.PENDING_PAYMENT == "pending_payment"
        assert BookingStatus.OVERBOOKED not in OCCUPYING_STATUSES
        assert Booking is not None and BookingDraft is not None

    def test_import_settings_schema(self):
        from stylash.schemas.settings_schema import DEFAULT_AVAILABILITY, DEFAULT_OVERBOOKING
        assert len(DEFAULT_AVAILABILITY.working_hours) == 7
        assert DEFAULT_AVAILABILITY.lead_time_days == 1
        assert DEFAULT_OVERBOOKING.max_overbooked_per_day == 2


class TestEngineImports:
    def test_engine_reexports(self):
        from stylash.engine import (
            TIME_SLOTS, BookingAction, BookingEngine, BookingLifecycleManager,
            BookingReporter, BookingStateMachine, BookingStats, OverbookingCheck,
            OverbookingPolicy, PolicySettingsService, Scheduler,
        )
        assert "10:00" in TIME_SLOTS
        assert BookingEngine is not None

    def test_create_default_engine(self):
        from stylash.engine import BookingEngine
        from stylash.storage.kv_store import InMemoryKeyValueStore

        engine = BookingEngine.create(store=InMemoryKeyValueStore())
        assert engine.lifecycle.get_all_bookings() == []
        assert engine.lifecycle.audit is engine.audit
        assert engine.policy.audit is engine.audit


class TestToolImports:
    def test_import_tools(self):
        from stylash.tools.audit import AuditAction, AuditLog
        from stylash.tools.services import get_service_by_id

        assert AuditAction.RESCHEDULE_BOOKING == "RESCHEDULE_BOOKING"
        assert AuditLog().entries() == []
        assert get_service_by_id("lashes-classic") is not None

    def test_error_hierarchy(self):
        from stylash.errors import (
            BookingEngineError, InvalidTransitionError, OverbookingLimitError,
            PolicyViolationError, SlotUnavailableError, StaleWriteError,
        )
        for exc in (InvalidTransitionError, OverbookingLimitError, SlotUnavailableError):
            assert issubclass(exc, PolicyViolationError)
        assert issubclass(StaleWriteError, BookingEngineError)
        assert not issubclass(StaleWriteError, PolicyViolationError)
