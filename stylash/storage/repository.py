"""
Repositories over a key-value store.

The booking record set and the two policy singletons each live under
their own key as a JSON document. An absent key means "use defaults",
never an error.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import TypeAdapter

from stylash.config import AppConfig
from stylash.schemas.booking_schema import Booking
from stylash.schemas.settings_schema import (
    DEFAULT_AVAILABILITY,
    DEFAULT_OVERBOOKING,
    AvailabilitySettings,
    OverbookingSettings,
)
from stylash.storage.kv_store import (
    UNCHECKED,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    content_version,
)

logger = logging.getLogger(__name__)

BOOKINGS_KEY = "stylash_bookings"
AVAILABILITY_KEY = "stylash_availability"
OVERBOOKING_KEY = "stylash_overbooking"

_BOOKING_LIST = TypeAdapter(list[Booking])


@dataclass
class BookingSnapshot:
    """The full record set plus the version it was read at."""

    bookings: list[Booking]
    version: Optional[str]


class BookingRepository:
    """Load-all / store-all access to the booking record set."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def load(self) -> BookingSnapshot:
        raw = self.store.get(BOOKINGS_KEY)
        if raw is None:
            return BookingSnapshot(bookings=[], version=None)
        # Version of the exact text parsed, not a second read
        return BookingSnapshot(
            bookings=_BOOKING_LIST.validate_json(raw),
            version=content_version(raw),
        )

    def all(self) -> list[Booking]:
        return self.load().bookings

    def get(self, booking_id: str) -> Optional[Booking]:
        for booking in self.all():
            if booking.id == booking_id:
                return booking
        return None

    def save(self, bookings: list[Booking], expected_version: object = UNCHECKED) -> None:
        """Write the whole record set, refusing if it changed since ``expected_version``."""
        payload = _BOOKING_LIST.dump_json(bookings, by_alias=True, exclude_none=True)
        self.store.set(BOOKINGS_KEY, payload.decode("utf-8"), expected_version)
        logger.debug("Saved %d booking(s)", len(bookings))

    def clear(self) -> None:
        self.store.delete(BOOKINGS_KEY)


class SettingsRepository:
    """Availability and overbooking policy singletons."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def get_availability(self) -> AvailabilitySettings:
        raw = self.store.get(AVAILABILITY_KEY)
        if raw is None:
            return DEFAULT_AVAILABILITY.model_copy(deep=True)
        return AvailabilitySettings.model_validate_json(raw)

    def save_availability(self, availability: AvailabilitySettings) -> None:
        self.store.set(AVAILABILITY_KEY, availability.model_dump_json(by_alias=True))

    def get_overbooking(self) -> OverbookingSettings:
        raw = self.store.get(OVERBOOKING_KEY)
        if raw is None:
            return DEFAULT_OVERBOOKING.model_copy(deep=True)
        return OverbookingSettings.model_validate_json(raw)

    def save_overbooking(self, overbooking: OverbookingSettings) -> None:
        self.store.set(OVERBOOKING_KEY, overbooking.model_dump_json(by_alias=True))


def build_store(config: AppConfig) -> KeyValueStore:
    """Create the key-value store selected by ``STORAGE_BACKEND``."""
    if config.storage.backend == "json":
        logger.info("Using JSON file storage in %s", config.storage.directory)
        return JsonFileKeyValueStore(config.storage.directory)
    return InMemoryKeyValueStore()
