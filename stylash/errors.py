"""Exceptions raised by the booking engine.

Lookups that miss return ``None`` and availability checks return ``False``;
these exceptions cover the enforced policies and conflicting writes.
"""


class BookingEngineError(Exception):
    """Base class for all booking engine errors."""


class PolicyViolationError(BookingEngineError):
    """An operation would break a configured booking policy."""


class InvalidTransitionError(PolicyViolationError):
    """Raised when a status change is not allowed from the current status."""


class SlotUnavailableError(PolicyViolationError):
    """Raised in strict mode when the requested slot cannot be booked."""


class OverbookingLimitError(PolicyViolationError):
    """Raised in strict mode when an overbooking breaks the overbooking policy."""


class StaleWriteError(BookingEngineError):
    """Raised when a record set changed between load and save."""
