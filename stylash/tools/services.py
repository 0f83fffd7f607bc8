"""Service catalog with prices, categories, and category booking fees."""

import logging
import re
from typing import Optional, TypedDict, Union

from stylash.config import settings

logger = logging.getLogger(__name__)


class _ServiceBase(TypedDict):
    id: str
    name: str
    price: str
    category: str
    icon: str


class Service(_ServiceBase, total=False):
    """A bookable salon service."""

    description: str


SERVICES: list[Service] = [
    {
        "id": "lashes-classic",
        "name": "Classic Lash Extensions",
        "price": "₱800",
        "category": "lashes",
        "icon": "👁️",
        "description": "One extension per natural lash for a clean, mascara-like finish.",
    },
    {
        "id": "lashes-hybrid",
        "name": "Hybrid Lash Extensions",
        "price": "₱1,000",
        "category": "lashes",
        "icon": "✨",
        "description": "A mix of classic and volume fans for soft texture.",
    },
    {
        "id": "lashes-volume",
        "name": "Volume Lash Extensions",
        "price": "₱1,200",
        "category": "lashes",
        "icon": "🌟",
        "description": "Handmade fans for a full, dramatic look.",
    },
    {
        "id": "lash-lift",
        "name": "Lash Lift & Tint",
        "price": "₱600",
        "category": "lashes",
        "icon": "🪄",
    },
    {
        "id": "brows-lamination",
        "name": "Brow Lamination",
        "price": "₱700",
        "category": "brows",
        "icon": "🖌️",
        "description": "Brushed-up, set brows that last six to eight weeks.",
    },
    {
        "id": "brows-shaping",
        "name": "Brow Shaping & Tint",
        "price": "₱450",
        "category": "brows",
        "icon": "✏️",
    },
    {
        "id": "nails-gel",
        "name": "Gel Manicure",
        "price": "₱500",
        "category": "nails",
        "icon": "💅",
    },
    {
        "id": "nails-extensions",
        "name": "Soft Gel Extensions",
        "price": "₱900",
        "category": "nails",
        "icon": "💎",
        "description": "Full-cover soft gel tips with a gel polish finish.",
    },
]

BOOKING_FEES: dict[str, float] = {
    "lashes": 200.0,
    "brows": 150.0,
    "nails": 100.0,
}

DEFAULT_BOOKING_FEE = 100.0


def get_all_services() -> list[Service]:
    """Return every service in catalog order."""
    return list(SERVICES)


def get_service_by_id(service_id: str) -> Optional[Service]:
    """Look up a service by exact id. Returns None if unknown."""
    for service in SERVICES:
        if service["id"] == service_id:
            return service
    logger.debug("Unknown service id: %s", service_id)
    return None


def get_numeric_price(price: Union[str, float, int]) -> float:
    """Strip currency symbols and thousands separators from a price label.

    Examples:
        >>> get_numeric_price("₱1,200")
        1200.0
        >>> get_numeric_price(800)
        800.0
    """
    if isinstance(price, (int, float)):
        return float(price)
    cleaned = re.sub(r"[^\d.]", "", price)
    return float(cleaned) if cleaned else 0.0


def get_booking_fee(category: str) -> float:
    """Deposit charged at booking time for a service category."""
    return BOOKING_FEES.get(category, DEFAULT_BOOKING_FEE)


def format_price(price: Union[str, float, int]) -> str:
    """Render a price with the configured currency symbol."""
    amount = get_numeric_price(price)
    return f"{settings.business.currency_symbol}{amount:,.0f}"
