"""
Stockbook HTTP API - Contracts
==============================
Framework-agnostic request/response DTOs for analytics endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional


@dataclass(frozen=True)
class FinancialSummaryHttpRequest:
    window_start: date
    window_end: date
    supplier_id: Optional[str] = None

    @classmethod
    def from_query(cls, params: dict[str, Any]) -> "FinancialSummaryHttpRequest":
        """
        Parse ?from=YYYY-MM-DD&to=YYYY-MM-DD[&supplierId=...].
        Raises ValueError with a client-facing message.
        """
        return cls(
            window_start=_parse_iso_date(params.get("from"), "from"),
            window_end=_parse_iso_date(params.get("to"), "to"),
            supplier_id=params.get("supplierId"),
        )


def _parse_iso_date(value: Any, field_name: str) -> date:
    if value is None or value == "":
        raise ValueError(f"{field_name} is required.")
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise ValueError(f"{field_name} must be an ISO date (YYYY-MM-DD).") from exc


@dataclass(frozen=True)
class HttpApiErrorBody:
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class HttpApiResponse:
    ok: bool
    data: Any = None
    error: Optional[HttpApiErrorBody] = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        if self.error is None:
            raise ValueError("error must be set when ok is False.")
        return {"ok": False, "error": self.error.to_dict()}
