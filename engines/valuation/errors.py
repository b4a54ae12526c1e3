"""
Stockbook Valuation Engine - Errors
=====================================
Two families, kept apart on purpose:

ValuationError           - the request or the event stream is unusable.
ValuationInvariantError  - the replay itself produced an impossible result.

Callers may treat the first as a client/upstream problem.
The second is a defect and must never be downgraded to a warning.
"""

from __future__ import annotations

from decimal import Decimal


class ValuationError(Exception):
    """Base error for valuation requests that cannot be computed."""
    pass


class InvalidValuationRequestError(ValuationError):
    """Missing or inconsistent window/supplier arguments."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class EventStreamOrderError(ValuationError):
    """Event Source delivered events outside the agreed order or window."""

    def __init__(self, item_id: str, detail: str):
        self.item_id = item_id
        self.detail = detail
        super().__init__(
            f"Replay refused - event stream invalid for item "
            f"{item_id}: {detail}"
        )


class ValuationInvariantError(Exception):
    """Base error for internal invariant failures of the valuation engine."""
    pass


class AccountingIdentityError(ValuationInvariantError):
    """
    opening + purchases + returns_in - cogs - write_offs != ending.

    Raised after replay when the imbalance exceeds the rounding tolerance.
    """

    def __init__(self, expected_ending: Decimal, actual_ending: Decimal, tolerance: Decimal):
        self.expected_ending = expected_ending
        self.actual_ending = actual_ending
        self.tolerance = tolerance
        self.difference = abs(expected_ending - actual_ending)
        super().__init__(
            f"Accounting identity violated: flows imply ending value "
            f"{expected_ending} but replay produced {actual_ending} "
            f"(difference {self.difference}, tolerance {tolerance})."
        )
