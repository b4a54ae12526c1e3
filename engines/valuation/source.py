"""
Stockbook Valuation Engine - Event Source Contract
====================================================
The engine reads stock movements through StockEventSource only.

Contract:
- events_before   -> timestamp <  starts_at
- events_between  -> starts_at <= timestamp <= ends_at
- ascending timestamp order, equal timestamps in recording order
- supplier_id None = all suppliers, otherwise case-insensitive match

Failures of the source propagate to the caller untouched.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence, Tuple

from engines.valuation.events import StockMovementEvent


# ══════════════════════════════════════════════════════════════
# PROTOCOL
# ══════════════════════════════════════════════════════════════

class StockEventSource(Protocol):
    def events_before(
        self, starts_at: datetime, supplier_id: Optional[str],
    ) -> Iterable[StockMovementEvent]:
        ...  # pragma: no cover

    def events_between(
        self, starts_at: datetime, ends_at: datetime, supplier_id: Optional[str],
    ) -> Iterable[StockMovementEvent]:
        ...  # pragma: no cover


def supplier_matches(event_supplier_id: Optional[str], supplier_id: Optional[str]) -> bool:
    if supplier_id is None:
        return True
    if event_supplier_id is None:
        return False
    return event_supplier_id.strip().lower() == supplier_id.strip().lower()


# ══════════════════════════════════════════════════════════════
# IN-MEMORY IMPLEMENTATION
# ══════════════════════════════════════════════════════════════

class InMemoryStockEventSource:
    """
    Event source over a fixed sequence of events.

    Used by tests and scripts. Events are sorted by timestamp on every
    read; the sort is stable, so equal timestamps keep the order given.
    """

    def __init__(self, events: Sequence[StockMovementEvent] = ()):
        self._events: Tuple[StockMovementEvent, ...] = tuple(events)

    def _scoped(self, supplier_id: Optional[str]) -> list[StockMovementEvent]:
        return sorted(
            (e for e in self._events if supplier_matches(e.supplier_id, supplier_id)),
            key=lambda e: e.timestamp,
        )

    def events_before(
        self, starts_at: datetime, supplier_id: Optional[str],
    ) -> list[StockMovementEvent]:
        return [e for e in self._scoped(supplier_id) if e.timestamp < starts_at]

    def events_between(
        self, starts_at: datetime, ends_at: datetime, supplier_id: Optional[str],
    ) -> list[StockMovementEvent]:
        return [
            e for e in self._scoped(supplier_id)
            if starts_at <= e.timestamp <= ends_at
        ]
