"""
Stockbook Valuation Engine - Reason Classifier
================================================
Maps a stock movement reason code to the financial bucket it feeds.

Fixed rules, no configuration:
- RETURNS_IN          customer returns (inbound only)
- WRITE_OFF           scrapped, destroyed, damaged, expired, lost
- RETURN_TO_SUPPLIER  goods sent back to the supplier (negative purchase)
- PURCHASE            initial stock, any priced inbound, manual increases
- COGS                every other outbound movement

Classification is per event, never per item.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from engines.valuation.events import StockMovementEvent


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class StockChangeReason(Enum):
    INITIAL_STOCK = "INITIAL_STOCK"
    MANUAL_UPDATE = "MANUAL_UPDATE"
    PRICE_CHANGE = "PRICE_CHANGE"
    SOLD = "SOLD"
    SCRAPPED = "SCRAPPED"
    DESTROYED = "DESTROYED"
    DAMAGED = "DAMAGED"
    EXPIRED = "EXPIRED"
    LOST = "LOST"
    RETURNED_TO_SUPPLIER = "RETURNED_TO_SUPPLIER"
    RETURNED_BY_CUSTOMER = "RETURNED_BY_CUSTOMER"

    @classmethod
    def parse(cls, value: "StockChangeReason | str") -> "StockChangeReason":
        """
        Accepts enum members and raw codes in any case, with '-' or ' '
        as separators ("returned-by-customer" == RETURNED_BY_CUSTOMER).
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Reason code must be a non-empty string, got {value!r}.")
        code = value.strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls(code)
        except ValueError as exc:
            raise ValueError(f"Unknown stock change reason '{value}'.") from exc


class ReasonCategory(Enum):
    PURCHASE = "PURCHASE"
    RETURNS_IN = "RETURNS_IN"
    WRITE_OFF = "WRITE_OFF"
    RETURN_TO_SUPPLIER = "RETURN_TO_SUPPLIER"
    COGS = "COGS"


# ══════════════════════════════════════════════════════════════
# LOOKUP TABLE
# ══════════════════════════════════════════════════════════════

WRITE_OFF_REASONS = frozenset({
    StockChangeReason.SCRAPPED,
    StockChangeReason.DESTROYED,
    StockChangeReason.DAMAGED,
    StockChangeReason.EXPIRED,
    StockChangeReason.LOST,
})

_REASON_CATEGORIES = {
    StockChangeReason.RETURNED_BY_CUSTOMER: ReasonCategory.RETURNS_IN,
    StockChangeReason.RETURNED_TO_SUPPLIER: ReasonCategory.RETURN_TO_SUPPLIER,
    StockChangeReason.INITIAL_STOCK: ReasonCategory.PURCHASE,
    **{reason: ReasonCategory.WRITE_OFF for reason in WRITE_OFF_REASONS},
}


def classify_reason(reason: StockChangeReason | str) -> ReasonCategory:
    """Reason-only lookup. Anything unlisted falls into COGS."""
    return _REASON_CATEGORIES.get(StockChangeReason.parse(reason), ReasonCategory.COGS)


def classify_movement(event: "StockMovementEvent") -> ReasonCategory:
    """
    Category for one event, taking its direction and price into account.

    Inbound: customer returns are RETURNS_IN, everything else enters stock
    as a purchase (priced receipts, initial stock, manual increases).
    Outbound: write-offs and supplier returns keep their category,
    all other issues are COGS.
    """
    category = classify_reason(event.reason)
    if event.quantity_delta > 0:
        if category is ReasonCategory.RETURNS_IN:
            return ReasonCategory.RETURNS_IN
        return ReasonCategory.PURCHASE
    if category in (ReasonCategory.WRITE_OFF, ReasonCategory.RETURN_TO_SUPPLIER):
        return category
    return ReasonCategory.COGS
