"""
Stockbook HTTP API - Dependencies
=================================
Injected services for handler wiring.
"""

from __future__ import annotations

from dataclasses import dataclass

from engines.valuation.services import FinancialAnalyticsService


@dataclass(frozen=True)
class HttpApiDependencies:
    financial_service: FinancialAnalyticsService
