"""
Stockbook Valuation Engine - WAC Replay
=========================================
Rebuilds opening, in-period and ending inventory by replaying
immutable stock movements through the Cost State Tracker.

Replay doctrine:
- READ events only, never modify or reorder them
- Phase 1: events before the window build opening state (no buckets)
- Phase 2: events inside the window feed the six buckets
- Phase 3: terminal state after Phase 2 is the ending inventory
- Two scans total, state carried from Phase 1 into Phase 2
- All per-run state is local to one replay() call

A replay either returns a balanced result or raises. No partial output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional

from engines.valuation.buckets import FinancialBuckets
from engines.valuation.config import DEFAULT_CONFIG, ValuationConfig
from engines.valuation.cost_state import CostStateTracker, IssueResult, resolve_unit_cost
from engines.valuation.errors import EventStreamOrderError
from engines.valuation.events import StockMovementEvent
from engines.valuation.reasons import ReasonCategory, classify_movement
from engines.valuation.source import StockEventSource
from engines.valuation.summary import DataQualityReport
from engines.valuation.window import ValuationWindow

logger = logging.getLogger("stockbook.valuation")


@dataclass(frozen=True)
class ReplayOutcome:
    buckets: FinancialBuckets
    data_quality: DataQualityReport
    identity_difference: Decimal


# ══════════════════════════════════════════════════════════════
# SINGLE RUN
# ══════════════════════════════════════════════════════════════

class _ReplayRun:
    """Mutable working set for exactly one replay. Never shared."""

    def __init__(self, window: ValuationWindow, config: ValuationConfig):
        self.window = window
        self.config = config
        self.tracker = CostStateTracker(quantum=config.cost_quantum)
        self.buckets = FinancialBuckets(cost_quantum=config.cost_quantum)
        self._last_seen: Dict[str, datetime] = {}
        self.events_replayed = 0
        self.price_change_events = 0
        self.zero_cost_receipts = 0
        self.opening_over_issue_count = 0
        self.over_issue_count = 0
        self.over_issued_quantity = 0

    # ── Stream contract ───────────────────────────────────────

    def _accept(self, event: StockMovementEvent, in_window: bool) -> None:
        if in_window and not self.window.contains(event.timestamp):
            raise EventStreamOrderError(
                event.item_id,
                f"in-period stream returned event at {event.timestamp.isoformat()} "
                f"outside [{self.window.starts_at.isoformat()}, "
                f"{self.window.ends_at.isoformat()}].",
            )
        if not in_window and not self.window.is_before(event.timestamp):
            raise EventStreamOrderError(
                event.item_id,
                f"opening stream returned event at {event.timestamp.isoformat()} "
                f"not before window start {self.window.starts_at.isoformat()}.",
            )
        last = self._last_seen.get(event.item_id)
        if last is not None and event.timestamp < last:
            raise EventStreamOrderError(
                event.item_id,
                f"event at {event.timestamp.isoformat()} arrived after "
                f"{last.isoformat()}; replay requires ascending timestamps.",
            )
        self._last_seen[event.item_id] = event.timestamp
        self.events_replayed += 1

    # ── Primitive moves ───────────────────────────────────────

    def _unit_cost(self, event: StockMovementEvent) -> Decimal:
        state = self.tracker.get(event.item_id)
        if state is None and not event.is_priced:
            self.zero_cost_receipts += 1
            logger.warning(
                "Unpriced first receipt for item %s at %s costed at zero "
                "(reason %s, qty %s).",
                event.item_id, event.timestamp.isoformat(),
                event.reason.value, event.quantity_delta,
            )
        return resolve_unit_cost(state, event.unit_price)

    def _issue(self, event: StockMovementEvent, in_window: bool) -> IssueResult:
        quantity = abs(event.quantity_delta)
        result = self.tracker.issue(event.item_id, quantity)
        if result.clamped:
            logger.warning(
                "Over-issue clamped to zero for item %s at %s: issued %s, on hand %s "
                "(reason %s).",
                event.item_id, event.timestamp.isoformat(),
                quantity, result.available_quantity, event.reason.value,
            )
            if in_window:
                self.over_issue_count += 1
                self.over_issued_quantity += result.shortfall
                self.buckets.note_over_issue(result.state.wac * result.shortfall)
            else:
                self.opening_over_issue_count += 1
        return result

    # ── Phase 1 ───────────────────────────────────────────────

    def replay_opening(self, events: Iterable[StockMovementEvent]) -> None:
        for event in events:
            self._accept(event, in_window=False)
            if event.is_inbound:
                unit_cost = self._unit_cost(event)
                self.tracker.receive(event.item_id, event.quantity_delta, unit_cost)
            elif event.is_outbound:
                self._issue(event, in_window=False)
            else:
                self.price_change_events += 1

        self.buckets.opening.add(self.tracker.total_quantity(), self.tracker.total_value())

    # ── Phase 2 ───────────────────────────────────────────────

    def replay_period(self, events: Iterable[StockMovementEvent]) -> None:
        for event in events:
            self._accept(event, in_window=True)
            if event.is_price_change_only:
                self.price_change_events += 1
                continue

            category = classify_movement(event)
            if event.is_inbound:
                self._receive_in_period(event, category)
            else:
                self._issue_in_period(event, category)

    def _receive_in_period(self, event: StockMovementEvent, category: ReasonCategory) -> None:
        quantity = event.quantity_delta
        if category is ReasonCategory.RETURNS_IN:
            # Returns re-enter stock at the existing WAC, ignoring any price.
            state = self.tracker.get(event.item_id)
            if state is None:
                self.zero_cost_receipts += 1
                logger.warning(
                    "Customer return for unseen item %s at %s costed at zero.",
                    event.item_id, event.timestamp.isoformat(),
                )
            unit_cost = state.wac if state is not None else Decimal("0")
            self.buckets.returns_in.add(quantity, unit_cost * quantity)
        else:
            unit_cost = self._unit_cost(event)
            self.buckets.purchases.add(quantity, unit_cost * quantity)

        new_state = self.tracker.receive(event.item_id, quantity, unit_cost)
        self.buckets.note_reblend(new_state.quantity)

    def _issue_in_period(self, event: StockMovementEvent, category: ReasonCategory) -> None:
        result = self._issue(event, in_window=True)
        self.buckets.note_issue_rounding()
        quantity = result.requested_quantity

        if category is ReasonCategory.RETURN_TO_SUPPLIER:
            self.buckets.purchases.subtract(quantity, result.cost)
        elif category is ReasonCategory.WRITE_OFF:
            self.buckets.write_offs.add(quantity, result.cost)
        else:
            self.buckets.cogs.add(quantity, result.cost)

    # ── Phase 3 ───────────────────────────────────────────────

    def close(self) -> None:
        self.buckets.ending.add(self.tracker.total_quantity(), self.tracker.total_value())

    def data_quality(self) -> DataQualityReport:
        return DataQualityReport(
            over_issue_count=self.over_issue_count,
            over_issued_quantity=self.over_issued_quantity,
            over_issued_value=self.buckets.over_issued_value.quantize(
                self.config.currency_quantum, rounding=ROUND_HALF_UP,
            ),
            opening_over_issue_count=self.opening_over_issue_count,
            zero_cost_receipts=self.zero_cost_receipts,
            price_change_events=self.price_change_events,
            events_replayed=self.events_replayed,
        )


# ══════════════════════════════════════════════════════════════
# ENGINE
# ══════════════════════════════════════════════════════════════

class WacReplayEngine:
    """
    Stateless driver for the three replay phases.

    Safe to share between threads: every replay() builds its own
    tracker and buckets.
    """

    def __init__(self, config: Optional[ValuationConfig] = None):
        self._config = config or DEFAULT_CONFIG

    def replay(
        self,
        *,
        window: ValuationWindow,
        supplier_id: Optional[str],
        source: StockEventSource,
    ) -> ReplayOutcome:
        run = _ReplayRun(window, self._config)

        run.replay_opening(source.events_before(window.starts_at, supplier_id))
        run.replay_period(source.events_between(window.starts_at, window.ends_at, supplier_id))
        run.close()

        difference = run.buckets.verify_identity(self._config.identity_tolerance)
        return ReplayOutcome(
            buckets=run.buckets,
            data_quality=run.data_quality(),
            identity_difference=difference,
        )
