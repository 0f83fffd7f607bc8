"""Shared test fixtures and helpers."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from stylash.config import AppConfig, BusinessConfig, EngineConfig, StorageConfig
from stylash.engine import BookingEngine
from stylash.schemas.booking_schema import Booking, BookingDraft
from stylash.storage.kv_store import InMemoryKeyValueStore

# 10:00 in Manila on Monday 2025-06-09
TODAY_UTC = datetime(2025, 6, 9, 2, 0, tzinfo=timezone.utc)


class FixedClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, now: datetime = TODAY_UTC) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


def make_config(**engine_overrides: Any) -> AppConfig:
    """AppConfig independent of the caller's environment."""
    engine = {
        "booking_id_prefix": "STL",
        "enforce_transitions": True,
        "enforce_availability": False,
        "enforce_overbooking_limits": False,
        "audit_log_limit": 100,
    }
    engine.update(engine_overrides)
    return AppConfig(
        business=BusinessConfig(name="Stylash", timezone="Asia/Manila", currency_symbol="₱"),
        storage=StorageConfig(backend="memory", directory=".stylash"),
        engine=EngineConfig(**engine),
        log_level="INFO",
    )


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def engine(store, clock):
    return BookingEngine.create(store=store, config=make_config(), clock=clock)


@pytest.fixture
def strict_engine(store, clock):
    return BookingEngine.create(
        store=store,
        config=make_config(enforce_availability=True, enforce_overbooking_limits=True),
        clock=clock,
    )


def make_draft(**overrides: Any) -> BookingDraft:
    """Helper to create a BookingDraft with sensible defaults."""
    data: dict[str, Any] = {
        "date": "2025-06-10",
        "time_slot": "10:00",
        "service_id": "lashes-classic",
        "customer_name": "Maria Santos",
        "customer_email": "maria.santos@email.com",
        "customer_phone": "0917 123 4567",
        "notes": None,
        "payment_method": "gcash",
    }
    data.update(overrides)
    return BookingDraft(**data)


def book(engine: BookingEngine, **overrides: Any) -> Booking:
    """Create a booking through the lifecycle manager and assert it was stored."""
    booking: Optional[Booking] = engine.lifecycle.create_booking(make_draft(**overrides))
    assert booking is not None
    return booking
