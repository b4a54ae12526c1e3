"""
Stockbook Valuation Engine - Stock Movement Event
===================================================
Immutable input record for the WAC replay.

The Event Source builds these from storage rows. By the time an event
reaches the engine its values are plain: Decimal prices, int deltas,
timezone-aware timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from engines.valuation.reasons import StockChangeReason


@dataclass(frozen=True)
class StockMovementEvent:
    item_id: str
    quantity_delta: int             # + inbound, - outbound, 0 price change only
    reason: StockChangeReason
    timestamp: datetime
    supplier_id: Optional[str] = None
    unit_price: Optional[Decimal] = None
    event_id: str = ""

    def __post_init__(self) -> None:
        if not self.item_id:
            raise ValueError("item_id is required.")
        if isinstance(self.quantity_delta, bool) or not isinstance(self.quantity_delta, int):
            raise ValueError(
                f"quantity_delta must be an int, got {self.quantity_delta!r}."
            )
        if self.timestamp.tzinfo is None:
            raise ValueError("StockMovementEvent requires a timezone-aware timestamp.")
        object.__setattr__(self, "reason", StockChangeReason.parse(self.reason))
        if self.unit_price is not None:
            price = Decimal(str(self.unit_price))
            if not price.is_finite() or price < 0:
                raise ValueError(
                    f"unit_price must be a finite, non-negative amount, got {price}."
                )
            object.__setattr__(self, "unit_price", price)

    @property
    def is_inbound(self) -> bool:
        return self.quantity_delta > 0

    @property
    def is_outbound(self) -> bool:
        return self.quantity_delta < 0

    @property
    def is_price_change_only(self) -> bool:
        return self.quantity_delta == 0

    @property
    def is_priced(self) -> bool:
        return self.unit_price is not None
