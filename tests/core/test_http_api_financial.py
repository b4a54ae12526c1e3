from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from core.http_api.contracts import FinancialSummaryHttpRequest
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import (
    ERROR_STATUS,
    EVENT_STREAM_INVALID,
    INVALID_REQUEST,
    INVARIANT_VIOLATION,
    map_valuation_error,
    status_for,
)
from core.http_api.handlers import get_financial_summary
from engines.valuation import (
    AccountingIdentityError,
    EventStreamOrderError,
    InMemoryStockEventSource,
    StockMovementEvent,
)
from engines.valuation.services import FinancialAnalyticsService


def _deps(*events):
    return HttpApiDependencies(
        financial_service=FinancialAnalyticsService(
            event_source=InMemoryStockEventSource(events),
        )
    )


class _RaisingService:
    def __init__(self, exc):
        self._exc = exc

    def compute_financial_summary(self, window_start, window_end, supplier_id=None):
        raise self._exc


FEBRUARY = FinancialSummaryHttpRequest(
    window_start=date(2024, 2, 1), window_end=date(2024, 2, 29),
)


class TestFinancialSummaryHttpRequest:
    def test_from_query(self):
        request = FinancialSummaryHttpRequest.from_query(
            {"from": "2024-02-01", "to": "2024-02-29", "supplierId": "ACME"}
        )
        assert request.window_start == date(2024, 2, 1)
        assert request.window_end == date(2024, 2, 29)
        assert request.supplier_id == "ACME"

    def test_supplier_optional(self):
        request = FinancialSummaryHttpRequest.from_query({"from": "2024-02-01", "to": "2024-02-01"})
        assert request.supplier_id is None

    @pytest.mark.parametrize("params, message", [
        ({"to": "2024-02-01"}, "from is required"),
        ({"from": "2024-02-01", "to": ""}, "to is required"),
        ({"from": "02/01/2024", "to": "2024-02-01"}, "ISO date"),
    ])
    def test_rejects_bad_query(self, params, message):
        with pytest.raises(ValueError, match=message):
            FinancialSummaryHttpRequest.from_query(params)


class TestGetFinancialSummary:
    def test_success_payload(self):
        event = StockMovementEvent(
            item_id="widget", quantity_delta=4, reason="INITIAL_STOCK",
            timestamp=datetime(2024, 2, 3, tzinfo=timezone.utc), unit_price=Decimal("2.50"),
        )
        payload = get_financial_summary(FEBRUARY, _deps(event))
        assert payload["ok"] is True
        assert payload["data"]["purchases"] == {"quantity": 4, "value": "10.00"}
        assert status_for(payload) == 200

    def test_invalid_window_is_400(self):
        request = FinancialSummaryHttpRequest(
            window_start=date(2024, 3, 1), window_end=date(2024, 2, 1),
        )
        payload = get_financial_summary(request, _deps())
        assert payload["ok"] is False
        assert payload["error"]["code"] == INVALID_REQUEST
        assert status_for(payload) == 400

    def test_stream_order_error_is_502(self):
        deps = HttpApiDependencies(
            financial_service=_RaisingService(EventStreamOrderError("widget", "out of order")),
        )
        payload = get_financial_summary(FEBRUARY, deps)
        assert payload["error"]["code"] == EVENT_STREAM_INVALID
        assert payload["error"]["details"] == {"item_id": "widget", "detail": "out of order"}
        assert status_for(payload) == 502

    def test_identity_error_is_500_and_logged(self, caplog):
        exc = AccountingIdentityError(
            expected_ending=Decimal("10.0000"),
            actual_ending=Decimal("12.0000"),
            tolerance=Decimal("0.01"),
        )
        deps = HttpApiDependencies(financial_service=_RaisingService(exc))
        with caplog.at_level("ERROR", logger="stockbook.http"):
            payload = get_financial_summary(FEBRUARY, deps)
        assert payload["error"]["code"] == INVARIANT_VIOLATION
        assert payload["error"]["details"]["actual_ending"] == "12.0000"
        assert status_for(payload) == 500
        assert "Financial summary failed" in caplog.text

    def test_source_failure_is_not_mapped(self):
        deps = HttpApiDependencies(financial_service=_RaisingService(ConnectionError("down")))
        with pytest.raises(ConnectionError):
            get_financial_summary(FEBRUARY, deps)


class TestErrorMapping:
    def test_status_table(self):
        assert ERROR_STATUS[INVALID_REQUEST] == 400
        assert ERROR_STATUS[INVARIANT_VIOLATION] == 500
        assert ERROR_STATUS[EVENT_STREAM_INVALID] == 502

    def test_identity_error_maps_to_invariant_code(self):
        exc = AccountingIdentityError(Decimal("1"), Decimal("2"), Decimal("0.01"))
        assert map_valuation_error(exc).code == INVARIANT_VIOLATION
