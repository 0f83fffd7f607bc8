"""
Centralized configuration with environment variable overrides.

Business identity, storage backend, and engine strictness switches are
configurable here. Nothing is hardcoded in the engine or storage logic.
"""

import logging
import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default).strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class BusinessConfig:
    """Salon identity and the timezone that defines "today"."""

    name: str = os.getenv("BUSINESS_NAME", "Stylash")
    timezone: str = os.getenv("BUSINESS_TIMEZONE", "Asia/Manila")
    currency_symbol: str = os.getenv("CURRENCY_SYMBOL", "₱")


@dataclass(frozen=True)
class StorageConfig:
    """Where the booking and settings records live."""

    backend: str = os.getenv("STORAGE_BACKEND", "memory")
    directory: str = os.getenv("STORAGE_DIR", ".stylash")


@dataclass(frozen=True)
class EngineConfig:
    """Booking engine policy switches."""

    booking_id_prefix: str = os.getenv("BOOKING_ID_PREFIX", "STL")
    enforce_transitions: bool = _safe_bool("ENFORCE_STATUS_TRANSITIONS", "true")
    enforce_availability: bool = _safe_bool("ENFORCE_AVAILABILITY", "false")
    enforce_overbooking_limits: bool = _safe_bool("ENFORCE_OVERBOOKING_LIMITS", "false")
    audit_log_limit: int = _safe_int("AUDIT_LOG_LIMIT", "100")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


STORAGE_BACKENDS = ("memory", "json")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    try:
        ZoneInfo(config.business.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"BUSINESS_TIMEZONE is not a known IANA zone, got {config.business.timezone!r}"
        ) from None
    if config.storage.backend not in STORAGE_BACKENDS:
        raise ValueError(
            f"STORAGE_BACKEND must be one of {list(STORAGE_BACKENDS)}, "
            f"got {config.storage.backend!r}"
        )
    if config.storage.backend == "json" and not config.storage.directory.strip():
        raise ValueError("STORAGE_DIR must be set when STORAGE_BACKEND is 'json'")
    if not config.engine.booking_id_prefix.strip():
        raise ValueError("BOOKING_ID_PREFIX must not be empty")
    if config.engine.audit_log_limit < 1:
        raise ValueError(
            f"AUDIT_LOG_LIMIT must be >= 1, got {config.engine.audit_log_limit}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
