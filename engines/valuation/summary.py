"""
Stockbook Valuation Engine - Summary Builder
==============================================
Freezes a finished FinancialBuckets into the public FinancialSummary.

Monetary totals are rounded to currency precision (2 places, HALF_UP)
here and nowhere earlier.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from engines.valuation.buckets import Bucket, FinancialBuckets
from engines.valuation.config import ValuationConfig
from engines.valuation.window import ValuationWindow

VALUATION_METHOD = "WAC"


@dataclass(frozen=True)
class BucketTotal:
    quantity: int
    value: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"quantity": self.quantity, "value": str(self.value)}


@dataclass(frozen=True)
class DataQualityReport:
    """Anomalies seen in the event history. Non-fatal, but never hidden."""
    over_issue_count: int = 0
    over_issued_quantity: int = 0
    over_issued_value: Decimal = Decimal("0")
    opening_over_issue_count: int = 0
    zero_cost_receipts: int = 0
    price_change_events: int = 0
    events_replayed: int = 0

    @property
    def has_anomalies(self) -> bool:
        return (
            self.over_issue_count > 0
            or self.opening_over_issue_count > 0
            or self.zero_cost_receipts > 0
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "over_issue_count": self.over_issue_count,
            "over_issued_quantity": self.over_issued_quantity,
            "over_issued_value": str(self.over_issued_value),
            "opening_over_issue_count": self.opening_over_issue_count,
            "zero_cost_receipts": self.zero_cost_receipts,
            "price_change_events": self.price_change_events,
            "events_replayed": self.events_replayed,
            "has_anomalies": self.has_anomalies,
        }


@dataclass(frozen=True)
class FinancialSummary:
    window_start: date
    window_end: date
    supplier_id: Optional[str]
    opening: BucketTotal
    purchases: BucketTotal
    returns_in: BucketTotal
    cogs: BucketTotal
    write_offs: BucketTotal
    ending: BucketTotal
    data_quality: DataQualityReport
    method: str = VALUATION_METHOD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "from": self.window_start.isoformat(),
            "to": self.window_end.isoformat(),
            "supplier_id": self.supplier_id,
            "opening": self.opening.to_dict(),
            "purchases": self.purchases.to_dict(),
            "returns_in": self.returns_in.to_dict(),
            "cogs": self.cogs.to_dict(),
            "write_offs": self.write_offs.to_dict(),
            "ending": self.ending.to_dict(),
            "data_quality": self.data_quality.to_dict(),
        }


def _freeze(bucket: Bucket, quantum: Decimal) -> BucketTotal:
    return BucketTotal(
        quantity=bucket.quantity,
        value=bucket.value.quantize(quantum, rounding=ROUND_HALF_UP),
    )


def build_summary(
    *,
    window: ValuationWindow,
    supplier_id: Optional[str],
    buckets: FinancialBuckets,
    data_quality: DataQualityReport,
    config: ValuationConfig,
) -> FinancialSummary:
    quantum = config.currency_quantum
    return FinancialSummary(
        window_start=window.start_date,
        window_end=window.end_date,
        supplier_id=supplier_id,
        opening=_freeze(buckets.opening, quantum),
        purchases=_freeze(buckets.purchases, quantum),
        returns_in=_freeze(buckets.returns_in, quantum),
        cogs=_freeze(buckets.cogs, quantum),
        write_offs=_freeze(buckets.write_offs, quantum),
        ending=_freeze(buckets.ending, quantum),
        data_quality=data_quality,
    )
