"""
Stockbook HTTP API - Public API
===============================
"""

from core.http_api.contracts import (
    FinancialSummaryHttpRequest,
    HttpApiErrorBody,
    HttpApiResponse,
)
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import (
    error_response,
    map_valuation_error,
    status_for,
    success_response,
)
from core.http_api.handlers import get_financial_summary

__all__ = [
    "FinancialSummaryHttpRequest",
    "HttpApiErrorBody",
    "HttpApiResponse",
    "HttpApiDependencies",
    "error_response",
    "success_response",
    "map_valuation_error",
    "status_for",
    "get_financial_summary",
]
