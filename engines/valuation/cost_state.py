"""
Stockbook Valuation Engine - Cost State Tracker
=================================================
Per-item running state for Weighted Average Cost.

RULES:
- Transitions are pure: the passed-in state is never modified
- WAC is kept at cost precision (4 places, ROUND_HALF_UP)
- Only inbound stock moves the WAC; issuing never does
- Over-issue clamps quantity at zero and is reported, never raised

    new_wac = (qty * wac + qty_in * unit_cost) / (qty + qty_in)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional

ZERO = Decimal("0")
DEFAULT_COST_QUANTUM = Decimal("0.0001")


# ══════════════════════════════════════════════════════════════
# DATA STRUCTURES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ItemCostState:
    quantity: int = 0
    wac: Decimal = ZERO

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValueError(f"quantity cannot be negative, got {self.quantity}.")
        if self.wac < 0:
            raise ValueError(f"wac cannot be negative, got {self.wac}.")

    @property
    def value(self) -> Decimal:
        return self.wac * self.quantity


@dataclass(frozen=True)
class IssueResult:
    """Outcome of issuing stock at the current WAC."""
    state: ItemCostState
    cost: Decimal
    requested_quantity: int
    available_quantity: int

    @property
    def clamped(self) -> bool:
        return self.requested_quantity > self.available_quantity

    @property
    def shortfall(self) -> int:
        """Units issued that were not on hand (0 unless clamped)."""
        return max(0, self.requested_quantity - self.available_quantity)


# ══════════════════════════════════════════════════════════════
# TRANSITIONS
# ══════════════════════════════════════════════════════════════

def resolve_unit_cost(
    state: Optional[ItemCostState],
    unit_price: Optional[Decimal],
) -> Decimal:
    """
    Explicit price first, then the item's current WAC, then zero.
    Zero is only reachable on an unpriced first event for an item.
    """
    if unit_price is not None:
        return unit_price
    if state is not None:
        return state.wac
    return ZERO


def apply_inbound(
    state: Optional[ItemCostState],
    quantity: int,
    unit_cost: Decimal,
    quantum: Decimal = DEFAULT_COST_QUANTUM,
) -> ItemCostState:
    """Receive stock and re-blend the weighted average cost."""
    if quantity <= 0:
        raise ValueError(f"Inbound quantity must be positive, got {quantity}.")
    if unit_cost < 0:
        raise ValueError(f"unit_cost cannot be negative, got {unit_cost}.")
    current = state or ItemCostState()

    new_quantity = current.quantity + quantity
    if new_quantity == 0:
        return ItemCostState(quantity=0, wac=ZERO)

    blended = (current.value + unit_cost * quantity) / new_quantity
    return ItemCostState(
        quantity=new_quantity,
        wac=blended.quantize(quantum, rounding=ROUND_HALF_UP),
    )


def issue_at(
    state: Optional[ItemCostState],
    quantity: int,
    quantum: Decimal = DEFAULT_COST_QUANTUM,
) -> IssueResult:
    """Issue stock at the current WAC. WAC itself is left unchanged."""
    if quantity <= 0:
        raise ValueError(f"Issue quantity must be positive, got {quantity}.")
    current = state or ItemCostState()

    cost = (current.wac * quantity).quantize(quantum, rounding=ROUND_HALF_UP)
    return IssueResult(
        state=ItemCostState(
            quantity=max(0, current.quantity - quantity),
            wac=current.wac,
        ),
        cost=cost,
        requested_quantity=quantity,
        available_quantity=current.quantity,
    )


# ══════════════════════════════════════════════════════════════
# TRACKER (one per replay)
# ══════════════════════════════════════════════════════════════

class CostStateTracker:
    """
    Item id -> ItemCostState for a single replay.

    Owned by one invocation of the replay engine and discarded with it.
    Items appear the first time an event touches them.
    """

    def __init__(self, quantum: Decimal = DEFAULT_COST_QUANTUM):
        self._states: Dict[str, ItemCostState] = {}
        self._quantum = quantum

    def get(self, item_id: str) -> Optional[ItemCostState]:
        return self._states.get(item_id)

    def has_item(self, item_id: str) -> bool:
        return item_id in self._states

    def receive(self, item_id: str, quantity: int, unit_cost: Decimal) -> ItemCostState:
        new_state = apply_inbound(self._states.get(item_id), quantity, unit_cost, self._quantum)
        self._states[item_id] = new_state
        return new_state

    def issue(self, item_id: str, quantity: int) -> IssueResult:
        result = issue_at(self._states.get(item_id), quantity, self._quantum)
        self._states[item_id] = result.state
        return result

    def total_quantity(self) -> int:
        return sum(s.quantity for s in self._states.values())

    def total_value(self) -> Decimal:
        return sum((s.value for s in self._states.values()), ZERO)

    @property
    def item_count(self) -> int:
        return len(self._states)
