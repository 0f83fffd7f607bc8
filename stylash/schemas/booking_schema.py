"""Booking data models and status vocabularies."""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from stylash.utils import is_valid_time_slot


class BookingStatus(str, Enum):
    PENDING_PAYMENT = "pending_payment"
    AWAITING_VERIFICATION = "awaiting_verification"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    OVERBOOKED = "overbooked"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    GCASH = "gcash"
    MAYA = "maya"
    BANK_TRANSFER = "bank_transfer"


class OverbookReason(str, Enum):
    DOUBLE_BOOKING = "double_booking"
    STAFF_ERROR = "staff_error"
    SYSTEM_ERROR = "system_error"
    CUSTOMER_REQUEST = "customer_request"
    OTHER = "other"


class OverbookResolution(str, Enum):
    PENDING = "pending"
    RESCHEDULED = "rescheduled"
    REFUNDED = "refunded"
    COMPLETED_WITH_COMPENSATION = "completed_with_compensation"


# Statuses that consume slot capacity
OCCUPYING_STATUSES = frozenset({
    BookingStatus.PENDING_PAYMENT,
    BookingStatus.AWAITING_VERIFICATION,
    BookingStatus.CONFIRMED,
})


class _CamelModel(BaseModel):
    """Persisted with camelCase keys, constructed with snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_time_slot(value: str) -> str:
    if not is_valid_time_slot(value):
        raise ValueError(f"time slot must be a half-hour HH:MM label, got {value!r}")
    return value


TimeSlot = Annotated[str, AfterValidator(_check_time_slot)]


class BookingDraft(_CamelModel):
    """Customer-submitted booking request."""

    date: date
    time_slot: TimeSlot
    service_id: str
    customer_name: str = Field(min_length=1)
    customer_email: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    notes: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.GCASH


class Booking(_CamelModel):
    """A stored reservation with its service snapshot and lifecycle fields."""

    id: str
    date: date
    time_slot: TimeSlot
    service_id: str
    service_name: str
    service_price: float
    booking_fee: float
    customer_name: str
    customer_email: str
    customer_phone: str
    notes: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING_PAYMENT
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.GCASH

    is_overbooked: Optional[bool] = None
    overbook_reason: Optional[OverbookReason] = None
    overbook_notes: Optional[str] = None
    overbooked_at: Optional[datetime] = None
    overbook_resolution: Optional[OverbookResolution] = None
    overbook_resolved_at: Optional[datetime] = None
    compensation_amount: Optional[float] = None

    cancellation_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    verified_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def occupies_slot(self) -> bool:
        return self.status in OCCUPYING_STATUSES
