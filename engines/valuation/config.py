"""
Stockbook Valuation Engine - Configuration
============================================
Precision and tolerance settings for the WAC engine.

Cost arithmetic runs at cost_places (4) during replay.
Only the Summary Builder rounds to currency_places (2).
Rounding is always ROUND_HALF_UP.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timezone, tzinfo as TzInfo
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@dataclass(frozen=True)
class ValuationConfig:
    cost_places: int = 4
    currency_places: int = 2
    identity_tolerance: Decimal = Decimal("0.01")
    time_zone: str = "UTC"

    def __post_init__(self) -> None:
        if self.cost_places < self.currency_places:
            raise ValueError(
                f"cost_places ({self.cost_places}) must be >= "
                f"currency_places ({self.currency_places})."
            )
        if self.currency_places < 0:
            raise ValueError(
                f"currency_places cannot be negative, got {self.currency_places}."
            )
        if self.identity_tolerance < 0:
            raise ValueError(
                f"identity_tolerance cannot be negative, got {self.identity_tolerance}."
            )
        try:
            self.tzinfo
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time_zone '{self.time_zone}'.") from exc

    @property
    def cost_quantum(self) -> Decimal:
        return Decimal(1).scaleb(-self.cost_places)

    @property
    def currency_quantum(self) -> Decimal:
        return Decimal(1).scaleb(-self.currency_places)

    @property
    def tzinfo(self) -> TzInfo:
        if self.time_zone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.time_zone)

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "ValuationConfig":
        """
        Build from a settings dict, e.g. Django's STOCKBOOK_VALUATION.
        Missing keys keep their defaults.
        """
        if not mapping:
            return cls()
        kwargs: dict[str, Any] = {}
        if "COST_PLACES" in mapping:
            kwargs["cost_places"] = int(mapping["COST_PLACES"])
        if "CURRENCY_PLACES" in mapping:
            kwargs["currency_places"] = int(mapping["CURRENCY_PLACES"])
        if "IDENTITY_TOLERANCE" in mapping:
            try:
                kwargs["identity_tolerance"] = Decimal(str(mapping["IDENTITY_TOLERANCE"]))
            except InvalidOperation as exc:
                raise ValueError("IDENTITY_TOLERANCE must be a decimal number.") from exc
        if "TIME_ZONE" in mapping:
            kwargs["time_zone"] = str(mapping["TIME_ZONE"])
        return cls(**kwargs)


DEFAULT_CONFIG = ValuationConfig()
