"""
Stockbook Stock History - Event Source Repository
===================================================
Django ORM implementation of the valuation StockEventSource.

Boundary adapter duties:
- deterministic order: created_at ASC, then write order (seq ASC)
- supplier filter is trimmed and case-insensitive
- rows become StockMovementEvent with Decimal prices and aware timestamps
- rows are streamed with QuerySet.iterator()
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterator, Optional

from django.db.models import QuerySet
from django.utils import timezone

from core.stock_history.models import StockHistory
from engines.valuation.events import StockMovementEvent

logger = logging.getLogger("stockbook.stock_history")

_EVENT_FIELDS = (
    "movement_id",
    "item_id",
    "supplier_id",
    "change",
    "reason",
    "created_at",
    "price_at_change",
)


def _scoped_queryset(supplier_id: Optional[str]) -> QuerySet:
    qs = StockHistory.objects.all()
    if supplier_id is not None:
        qs = qs.filter(supplier_id__iexact=supplier_id.strip())
    return qs


def _to_event(row: dict) -> StockMovementEvent:
    created_at: datetime = row["created_at"]
    if timezone.is_naive(created_at):
        created_at = timezone.make_aware(created_at, timezone.get_default_timezone())
    price = row["price_at_change"]
    return StockMovementEvent(
        event_id=row["movement_id"],
        item_id=row["item_id"],
        supplier_id=row["supplier_id"],
        quantity_delta=int(row["change"]),
        reason=row["reason"],
        timestamp=created_at,
        unit_price=Decimal(str(price)) if price is not None else None,
    )


def _stream(qs: QuerySet) -> Iterator[StockMovementEvent]:
    rows = qs.order_by("created_at", "seq").values(*_EVENT_FIELDS)
    for row in rows.iterator():
        yield _to_event(row)


class DjangoStockEventSource:
    """StockEventSource backed by the stock_history table."""

    def events_before(
        self, starts_at: datetime, supplier_id: Optional[str],
    ) -> Iterator[StockMovementEvent]:
        logger.debug("Streaming opening events before %s supplier=%s.", starts_at, supplier_id)
        return _stream(_scoped_queryset(supplier_id).filter(created_at__lt=starts_at))

    def events_between(
        self, starts_at: datetime, ends_at: datetime, supplier_id: Optional[str],
    ) -> Iterator[StockMovementEvent]:
        logger.debug(
            "Streaming period events %s..%s supplier=%s.", starts_at, ends_at, supplier_id,
        )
        return _stream(
            _scoped_queryset(supplier_id).filter(
                created_at__gte=starts_at,
                created_at__lte=ends_at,
            )
        )


def record_movement(
    *,
    item_id: str,
    change: int,
    reason: str,
    created_at: datetime,
    supplier_id: Optional[str] = None,
    price_at_change: Optional[Decimal] = None,
    created_by: str = "",
) -> StockHistory:
    """
    Append one movement row. The only write path for stock history.
    """
    return StockHistory.objects.create(
        item_id=item_id,
        supplier_id=supplier_id,
        change=change,
        reason=reason,
        created_at=created_at,
        price_at_change=price_at_change,
        created_by=created_by,
    )
