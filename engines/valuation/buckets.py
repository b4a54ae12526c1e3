"""
Stockbook Valuation Engine - Financial Buckets
================================================
Six running totals, each with quantity and value:

    opening, purchases, returns_in, cogs, write_offs, ending

Accounting identity (checked once replay is complete):

    opening + purchases + returns_in - cogs - write_offs
        + over_issued_value == ending

over_issued_value is the cost booked for units that were issued while
not on hand (clamped over-issues). It is zero for a consistent history.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from engines.valuation.errors import AccountingIdentityError

logger = logging.getLogger("stockbook.valuation")

ZERO = Decimal("0")


@dataclass
class Bucket:
    quantity: int = 0
    value: Decimal = ZERO

    def add(self, quantity: int, value: Decimal) -> None:
        self.quantity += quantity
        self.value += value

    def subtract(self, quantity: int, value: Decimal) -> None:
        self.quantity -= quantity
        self.value -= value


class FinancialBuckets:
    """
    Accumulator for one valuation run.

    Besides the six buckets it tracks the rounding drift the WAC replay
    may legitimately introduce, which widens the identity tolerance.
    """

    def __init__(self, cost_quantum: Decimal = Decimal("0.0001")):
        self.opening = Bucket()
        self.purchases = Bucket()
        self.returns_in = Bucket()
        self.cogs = Bucket()
        self.write_offs = Bucket()
        self.ending = Bucket()
        self.over_issued_value: Decimal = ZERO
        self.rounding_drift: Decimal = ZERO
        self._half_unit = cost_quantum / 2

    # ── Drift bookkeeping ─────────────────────────────────────

    def note_reblend(self, new_quantity: int) -> None:
        """WAC re-blend: stock value may move by new_quantity * half a cost unit."""
        self.rounding_drift += self._half_unit * new_quantity

    def note_issue_rounding(self) -> None:
        self.rounding_drift += self._half_unit

    def note_over_issue(self, value: Decimal) -> None:
        self.over_issued_value += value

    # ── Identity ──────────────────────────────────────────────

    def expected_ending_value(self) -> Decimal:
        return (
            self.opening.value
            + self.purchases.value
            + self.returns_in.value
            - self.cogs.value
            - self.write_offs.value
            + self.over_issued_value
        )

    def verify_identity(self, tolerance: Decimal) -> Decimal:
        """
        Raise AccountingIdentityError if flows and ending value disagree
        by more than tolerance + accumulated rounding drift.
        Returns the absolute difference.
        """
        allowed = tolerance + self.rounding_drift
        expected = self.expected_ending_value()
        difference = abs(expected - self.ending.value)
        if difference > allowed:
            logger.error(
                "Accounting identity violated: expected ending %s, actual %s, "
                "difference %s exceeds tolerance %s.",
                expected, self.ending.value, difference, allowed,
            )
            raise AccountingIdentityError(
                expected_ending=expected,
                actual_ending=self.ending.value,
                tolerance=allowed,
            )
        return difference
