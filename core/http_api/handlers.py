"""
Stockbook HTTP API - Framework-Agnostic Handlers
================================================
Pure handler functions over contracts and injected dependencies.

Event Source failures are not caught here; they reach the caller as-is.
"""

from __future__ import annotations

import logging
from typing import Any

from core.http_api.contracts import FinancialSummaryHttpRequest
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import error_response, map_valuation_error, success_response
from engines.valuation.errors import ValuationError, ValuationInvariantError

logger = logging.getLogger("stockbook.http")


def get_financial_summary(
    request: FinancialSummaryHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    try:
        summary = dependencies.financial_service.compute_financial_summary(
            request.window_start,
            request.window_end,
            request.supplier_id,
        )
    except (ValuationError, ValuationInvariantError) as exc:
        if isinstance(exc, ValuationInvariantError):
            logger.error("Financial summary failed: %s", exc)
        mapped = map_valuation_error(exc)
        return error_response(
            code=mapped.code,
            message=mapped.message,
            details=mapped.details,
        )

    return success_response(summary.to_dict())
