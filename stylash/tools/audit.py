"""
In-process admin audit log.

In production, this would forward entries to a durable audit store
(a database table, a log pipeline, or the hosting platform's audit API).
Here entries are kept in a capped in-memory list and mirrored to logging.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from stylash.config import settings
from stylash.logging_context import get_session_id
from stylash.utils import Clock, utc_now

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    """Fixed vocabulary of mutating admin operations."""

    UPDATE_BOOKING_STATUS = "UPDATE_BOOKING_STATUS"
    SUBMIT_PAYMENT_PROOF = "SUBMIT_PAYMENT_PROOF"
    MARK_PAYMENT_RECEIVED = "MARK_PAYMENT_RECEIVED"
    MARK_OVERBOOKED = "MARK_OVERBOOKED"
    RESOLVE_OVERBOOKING = "RESOLVE_OVERBOOKING"
    CANCEL_BOOKING = "CANCEL_BOOKING"
    RESCHEDULE_BOOKING = "RESCHEDULE_BOOKING"
    COMPLETE_BOOKING = "COMPLETE_BOOKING"
    CLEAR_BOOKINGS = "CLEAR_BOOKINGS"
    UPDATE_AVAILABILITY = "UPDATE_AVAILABILITY"
    UPDATE_OVERBOOKING_SETTINGS = "UPDATE_OVERBOOKING_SETTINGS"


@dataclass
class AuditEntry:
    """One recorded admin action."""

    action: AuditAction
    payload: dict[str, Any]
    timestamp: datetime
    session_id: str = "NO_SESSION"


@dataclass
class AuditLog:
    """Fire-and-forget audit sink, newest entries kept up to ``limit``."""

    limit: int = settings.engine.audit_log_limit
    clock: Clock = utc_now
    _entries: list[AuditEntry] = field(default_factory=list)

    def log_admin_action(self, action: AuditAction, payload: dict[str, Any]) -> None:
        entry = AuditEntry(
            action=AuditAction(action),
            payload=dict(payload),
            timestamp=self.clock(),
            session_id=get_session_id(),
        )
        self._entries.append(entry)
        if len(self._entries) > self.limit:
            del self._entries[: len(self._entries) - self.limit]
        logger.info("Audit %s [%s]: %s", entry.action.value, entry.session_id, entry.payload)

    def entries(self, action: Optional[AuditAction] = None) -> list[AuditEntry]:
        """Return recorded entries, oldest first, optionally filtered by action."""
        if action is None:
            return list(self._entries)
        return [e for e in self._entries if e.action == action]

    def reset(self) -> None:
        """Clear all entries. Used by test fixtures for isolation."""
        self._entries.clear()
