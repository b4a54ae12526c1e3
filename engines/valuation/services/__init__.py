"""
Stockbook Valuation Engine - Application Service
==================================================
Entry point for the WAC financial summary.

    compute_financial_summary(window_start, window_end, supplier_id)

Read-only and idempotent: same inputs over an unchanged event history
give identical output. Validation runs before any event is read.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from engines.valuation.config import DEFAULT_CONFIG, ValuationConfig
from engines.valuation.replay import WacReplayEngine
from engines.valuation.source import StockEventSource
from engines.valuation.summary import FinancialSummary, build_summary
from engines.valuation.window import normalize_supplier_id, resolve_window

logger = logging.getLogger("stockbook.valuation")


class FinancialAnalyticsService:
    """
    Weighted-Average-Cost financial summary over the stock history.

    Holds no per-request state; concurrent calls are independent.
    """

    def __init__(
        self,
        *,
        event_source: StockEventSource,
        config: Optional[ValuationConfig] = None,
    ):
        self._event_source = event_source
        self._config = config or DEFAULT_CONFIG
        self._engine = WacReplayEngine(self._config)

    @property
    def config(self) -> ValuationConfig:
        return self._config

    def compute_financial_summary(
        self,
        window_start: date,
        window_end: date,
        supplier_id: Optional[str] = None,
    ) -> FinancialSummary:
        window = resolve_window(window_start, window_end, self._config.tzinfo)
        supplier = normalize_supplier_id(supplier_id)

        outcome = self._engine.replay(
            window=window,
            supplier_id=supplier,
            source=self._event_source,
        )
        summary = build_summary(
            window=window,
            supplier_id=supplier,
            buckets=outcome.buckets,
            data_quality=outcome.data_quality,
            config=self._config,
        )

        logger.info(
            "WAC summary computed for %s..%s supplier=%s: %s events, "
            "ending qty %s value %s, identity difference %s.",
            window.start_date.isoformat(), window.end_date.isoformat(),
            supplier or "*", outcome.data_quality.events_replayed,
            summary.ending.quantity, summary.ending.value, outcome.identity_difference,
        )
        if outcome.data_quality.has_anomalies:
            logger.warning(
                "WAC summary for %s..%s supplier=%s has data-quality anomalies: %s.",
                window.start_date.isoformat(), window.end_date.isoformat(),
                supplier or "*", outcome.data_quality.to_dict(),
            )
        return summary
