"""
Stockbook Django Adapter Views
==============================
Pass-through HTTP views over core/http_api handlers.
"""

from __future__ import annotations

from django.http import HttpRequest, JsonResponse

from adapters.django_api.wiring import build_dependencies
from core.http_api.contracts import FinancialSummaryHttpRequest
from core.http_api.errors import (
    INVALID_REQUEST,
    METHOD_NOT_ALLOWED,
    error_response,
    status_for,
)
from core.http_api.handlers import get_financial_summary


def _json(payload: dict) -> JsonResponse:
    return JsonResponse(payload, status=status_for(payload))


def _method_not_allowed() -> JsonResponse:
    return _json(
        error_response(
            code=METHOD_NOT_ALLOWED,
            message="Method not allowed for this endpoint.",
        )
    )


def financial_summary_view(request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    try:
        contract = FinancialSummaryHttpRequest.from_query(request.GET.dict())
    except ValueError as exc:
        return _json(error_response(code=INVALID_REQUEST, message=str(exc)))

    return _json(get_financial_summary(contract, build_dependencies()))
