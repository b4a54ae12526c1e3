"""
Stockbook Django Adapter Wiring
===============================
Constructs HttpApiDependencies for the Django process.

Adapter-only glue: the valuation engine stays framework-free and reads
stock history through the ORM-backed Event Source built here.
"""

from __future__ import annotations

import threading

from django.conf import settings

from core.http_api.dependencies import HttpApiDependencies
from core.stock_history.repository import DjangoStockEventSource
from engines.valuation.config import ValuationConfig
from engines.valuation.services import FinancialAnalyticsService

_DEPENDENCIES_LOCK = threading.Lock()
_DEPENDENCIES: HttpApiDependencies | None = None


def build_valuation_config() -> ValuationConfig:
    return ValuationConfig.from_mapping(getattr(settings, "STOCKBOOK_VALUATION", None))


def build_dependencies() -> HttpApiDependencies:
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        if _DEPENDENCIES is None:
            _DEPENDENCIES = HttpApiDependencies(
                financial_service=FinancialAnalyticsService(
                    event_source=DjangoStockEventSource(),
                    config=build_valuation_config(),
                ),
            )
        return _DEPENDENCIES


def reset_dependencies() -> None:
    """Drop the cached wiring (settings overrides in tests)."""
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        _DEPENDENCIES = None
