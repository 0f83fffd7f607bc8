"""Admin session context shared by log records and audit entries.

The admin console sets the session once per run (``main.py --session``).
From then on every lifecycle log line carries it as ``%(session_id)s`` and
every ``AuditLog`` entry records it via ``get_session_id()``, so one
admin's confirmations and cancellations can be picked out of a shared log.

Usage:
    from stylash.logging_context import get_session_logger, set_session_id

    set_session_id("ADMIN-7f3a")
    logger = get_session_logger("stylash.engine.lifecycle")
    logger.info("CANCEL_BOOKING applied to STL-1A2B3C4D")
    # record.session_id == "ADMIN-7f3a"; the audit entry logged next
    # by AuditLog.log_admin_action carries the same id
"""

import logging
from contextvars import ContextVar

_session_id: ContextVar[str] = ContextVar("session_id", default="NO_SESSION")


def set_session_id(session_id: str) -> None:
    """Set the admin session ID for the current context."""
    _session_id.set(session_id)


def get_session_id() -> str:
    """Retrieve the current admin session ID."""
    return _session_id.get()


class SessionIdFilter(logging.Filter):
    """Injects session_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def get_session_logger(name: str) -> logging.Logger:
    """Return a logger with the SessionIdFilter attached.

    The filter adds ``session_id`` to each record so formatters can
    include ``%(session_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, SessionIdFilter) for f in logger.filters):
        logger.addFilter(SessionIdFilter())
    return logger
