"""
Stockbook HTTP API - Error Mapping
==================================
Stable transport error mapping for valuation failures.

Invariant failures keep their own code so they are never confused
with a bad request.
"""

from __future__ import annotations

from typing import Any, Optional

from core.http_api.contracts import HttpApiErrorBody, HttpApiResponse
from engines.valuation.errors import (
    AccountingIdentityError,
    EventStreamOrderError,
    InvalidValuationRequestError,
    ValuationError,
    ValuationInvariantError,
)

INVALID_REQUEST = "INVALID_REQUEST"
EVENT_STREAM_INVALID = "EVENT_STREAM_INVALID"
INVARIANT_VIOLATION = "INVARIANT_VIOLATION"
METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

ERROR_STATUS = {
    INVALID_REQUEST: 400,
    METHOD_NOT_ALLOWED: 405,
    INVARIANT_VIOLATION: 500,
    EVENT_STREAM_INVALID: 502,
}


def error_response(
    *,
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return HttpApiResponse(
        ok=False,
        error=HttpApiErrorBody(
            code=code,
            message=message,
            details=details or {},
        ),
    ).to_dict()


def success_response(data: Any) -> dict[str, Any]:
    return HttpApiResponse(ok=True, data=data).to_dict()


def map_valuation_error(exc: ValuationError | ValuationInvariantError) -> HttpApiErrorBody:
    if isinstance(exc, InvalidValuationRequestError):
        return HttpApiErrorBody(code=INVALID_REQUEST, message=exc.message)
    if isinstance(exc, EventStreamOrderError):
        return HttpApiErrorBody(
            code=EVENT_STREAM_INVALID,
            message="Stock history could not be replayed.",
            details={"item_id": exc.item_id, "detail": exc.detail},
        )
    if isinstance(exc, AccountingIdentityError):
        return HttpApiErrorBody(
            code=INVARIANT_VIOLATION,
            message="Valuation failed an internal consistency check.",
            details={
                "expected_ending": str(exc.expected_ending),
                "actual_ending": str(exc.actual_ending),
                "tolerance": str(exc.tolerance),
            },
        )
    if isinstance(exc, ValuationInvariantError):
        return HttpApiErrorBody(code=INVARIANT_VIOLATION, message=str(exc))
    return HttpApiErrorBody(code=INVALID_REQUEST, message=str(exc))


def status_for(payload: dict[str, Any]) -> int:
    if payload.get("ok"):
        return 200
    return ERROR_STATUS.get(payload["error"]["code"], 400)
