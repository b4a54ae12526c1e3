"""
Stockbook Valuation Engine - Date Window
==========================================
Turns the caller's (window_start, window_end, supplier_id) into the
bounds the replay uses. Both dates are inclusive:

    starts_at = window_start 00:00:00.000000
    ends_at   = window_end   23:59:59.999999

Validation happens here, before any event is read.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional

from engines.valuation.errors import InvalidValuationRequestError


@dataclass(frozen=True)
class ValuationWindow:
    start_date: date
    end_date: date
    starts_at: datetime
    ends_at: datetime

    def is_before(self, moment: datetime) -> bool:
        """True when moment belongs to the opening phase."""
        return moment < self.starts_at

    def contains(self, moment: datetime) -> bool:
        return self.starts_at <= moment <= self.ends_at


def _require_date(value, field_name: str) -> date:
    if value is None:
        raise InvalidValuationRequestError(f"{field_name} is required.")
    if isinstance(value, datetime) or not isinstance(value, date):
        raise InvalidValuationRequestError(
            f"{field_name} must be a date, got {type(value).__name__}."
        )
    return value


def resolve_window(
    window_start: Optional[date],
    window_end: Optional[date],
    tz: tzinfo = timezone.utc,
) -> ValuationWindow:
    start = _require_date(window_start, "window_start")
    end = _require_date(window_end, "window_end")
    if start > end:
        raise InvalidValuationRequestError(
            f"window_start ({start.isoformat()}) must be on or before "
            f"window_end ({end.isoformat()})."
        )
    return ValuationWindow(
        start_date=start,
        end_date=end,
        starts_at=datetime.combine(start, time.min, tzinfo=tz),
        ends_at=datetime.combine(end, time.max, tzinfo=tz),
    )


def normalize_supplier_id(supplier_id: Optional[str]) -> Optional[str]:
    """None means all suppliers. A given id must not be blank."""
    if supplier_id is None:
        return None
    if not isinstance(supplier_id, str):
        raise InvalidValuationRequestError("supplier_id must be a string.")
    normalized = supplier_id.strip()
    if not normalized:
        raise InvalidValuationRequestError("supplier_id must not be blank.")
    return normalized
