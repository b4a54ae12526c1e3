"""
Stockbook Valuation Engine - Public API
=========================================
Weighted-Average-Cost inventory valuation by event replay.
"""

from engines.valuation.config import DEFAULT_CONFIG, ValuationConfig
from engines.valuation.cost_state import (
    CostStateTracker,
    IssueResult,
    ItemCostState,
    apply_inbound,
    issue_at,
    resolve_unit_cost,
)
from engines.valuation.errors import (
    AccountingIdentityError,
    EventStreamOrderError,
    InvalidValuationRequestError,
    ValuationError,
    ValuationInvariantError,
)
from engines.valuation.events import StockMovementEvent
from engines.valuation.reasons import (
    ReasonCategory,
    StockChangeReason,
    classify_movement,
    classify_reason,
)
from engines.valuation.source import InMemoryStockEventSource, StockEventSource
from engines.valuation.summary import BucketTotal, DataQualityReport, FinancialSummary

__all__ = [
    "DEFAULT_CONFIG",
    "ValuationConfig",
    "CostStateTracker",
    "IssueResult",
    "ItemCostState",
    "apply_inbound",
    "issue_at",
    "resolve_unit_cost",
    "AccountingIdentityError",
    "EventStreamOrderError",
    "InvalidValuationRequestError",
    "ValuationError",
    "ValuationInvariantError",
    "StockMovementEvent",
    "ReasonCategory",
    "StockChangeReason",
    "classify_movement",
    "classify_reason",
    "InMemoryStockEventSource",
    "StockEventSource",
    "BucketTotal",
    "DataQualityReport",
    "FinancialSummary",
]
