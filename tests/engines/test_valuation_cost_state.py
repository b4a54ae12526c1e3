"""
Stockbook - Cost State Tracker Tests
======================================
WAC blending, issue costing, clamping, and the per-run tracker.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from engines.valuation.cost_state import (
    CostStateTracker,
    ItemCostState,
    apply_inbound,
    issue_at,
    resolve_unit_cost,
)
from engines.valuation.events import StockMovementEvent


class TestApplyInbound:
    def test_blends_to_four_places_half_up(self):
        state = ItemCostState(quantity=100, wac=Decimal("10.00"))
        new_state = apply_inbound(state, 50, Decimal("12.00"))
        assert new_state.quantity == 150
        assert new_state.wac == Decimal("10.6667")

    def test_first_receipt_takes_unit_cost(self):
        new_state = apply_inbound(None, 10, Decimal("5.00"))
        assert new_state == ItemCostState(quantity=10, wac=Decimal("5.0000"))

    def test_receipt_after_stock_out_uses_new_cost(self):
        empty = ItemCostState(quantity=0, wac=Decimal("7.5000"))
        assert apply_inbound(empty, 4, Decimal("2.00")).wac == Decimal("2.0000")

    def test_does_not_modify_input_state(self):
        state = ItemCostState(quantity=1, wac=Decimal("1.0000"))
        apply_inbound(state, 1, Decimal("3.00"))
        assert state == ItemCostState(quantity=1, wac=Decimal("1.0000"))

    def test_rejects_non_positive_quantity(self):
        with pytest.raises(ValueError, match="positive"):
            apply_inbound(None, 0, Decimal("1.00"))

    def test_rejects_negative_cost(self):
        with pytest.raises(ValueError, match="negative"):
            apply_inbound(None, 1, Decimal("-1.00"))


class TestIssueAt:
    def test_costs_at_current_wac(self):
        state = ItemCostState(quantity=150, wac=Decimal("10.6667"))
        result = issue_at(state, 50)
        assert result.cost == Decimal("533.335")
        assert result.state == ItemCostState(quantity=100, wac=Decimal("10.6667"))
        assert not result.clamped

    def test_repeated_issues_never_move_wac(self):
        state = ItemCostState(quantity=40, wac=Decimal("3.1415"))
        for _ in range(10):
            result = issue_at(state, 3)
            assert result.state.wac == Decimal("3.1415")
            state = result.state
        assert state.quantity == 10

    def test_over_issue_clamps_to_zero(self):
        state = ItemCostState(quantity=3, wac=Decimal("2.0000"))
        result = issue_at(state, 4)
        assert result.state.quantity == 0
        assert result.cost == Decimal("8.0000")
        assert result.clamped
        assert result.shortfall == 1

    def test_issue_against_unseen_item(self):
        result = issue_at(None, 2)
        assert result.state == ItemCostState()
        assert result.cost == Decimal("0")
        assert result.shortfall == 2


class TestResolveUnitCost:
    def test_explicit_price_wins(self):
        state = ItemCostState(quantity=1, wac=Decimal("4.0000"))
        assert resolve_unit_cost(state, Decimal("6.00")) == Decimal("6.00")

    def test_falls_back_to_current_wac(self):
        state = ItemCostState(quantity=1, wac=Decimal("4.0000"))
        assert resolve_unit_cost(state, None) == Decimal("4.0000")

    def test_zero_without_price_or_state(self):
        assert resolve_unit_cost(None, None) == Decimal("0")


class TestItemCostState:
    def test_rejects_negative_quantity(self):
        with pytest.raises(ValueError, match="negative"):
            ItemCostState(quantity=-1)

    def test_value(self):
        assert ItemCostState(quantity=115, wac=Decimal("10.6667")).value == Decimal("1226.6705")


class TestCostStateTracker:
    def test_tracks_items_independently(self):
        tracker = CostStateTracker()
        tracker.receive("a", 10, Decimal("1.00"))
        tracker.receive("b", 5, Decimal("4.00"))
        tracker.issue("a", 4)
        assert tracker.get("a") == ItemCostState(quantity=6, wac=Decimal("1.0000"))
        assert tracker.get("b") == ItemCostState(quantity=5, wac=Decimal("4.0000"))
        assert tracker.total_quantity() == 11
        assert tracker.total_value() == Decimal("26.0000")
        assert tracker.item_count == 2

    def test_unknown_item(self):
        tracker = CostStateTracker()
        assert tracker.get("missing") is None
        assert not tracker.has_item("missing")
        assert tracker.total_value() == Decimal("0")


class TestStockMovementEvent:
    @pytest.mark.parametrize("price", ["NaN", "Infinity", "-Infinity"])
    def test_rejects_non_finite_price(self, price):
        with pytest.raises(ValueError, match="finite"):
            StockMovementEvent(
                item_id="i", quantity_delta=1, reason="INITIAL_STOCK",
                timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc), unit_price=Decimal(price),
            )

    def test_requires_aware_timestamp(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            StockMovementEvent(
                item_id="i", quantity_delta=1, reason="SOLD",
                timestamp=datetime(2024, 1, 1),
            )

    def test_parses_reason_and_price(self):
        event = StockMovementEvent(
            item_id="i", quantity_delta=1, reason="initial-stock",
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc), unit_price="2.50",
        )
        assert event.reason.value == "INITIAL_STOCK"
        assert event.unit_price == Decimal("2.50")

    def test_rejects_negative_price(self):
        with pytest.raises(ValueError, match="negative"):
            StockMovementEvent(
                item_id="i", quantity_delta=1, reason="SOLD",
                timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc), unit_price=Decimal("-1"),
            )
