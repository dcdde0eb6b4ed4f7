from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

MISMATCH_CALCULATED_OK = "Calculated OK, Excel NOT OK"
MISMATCH_EXCEL_OK = "Calculated NOT OK, Excel OK"


def _iso(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d is not None else None


@dataclass(frozen=True)
class EnrichedRow:
    # parsed dates (UTC calendar dates)
    order_date: Optional[date]
    shipping_date: Optional[date]
    required_arrival_date: Optional[date]
    calculated_required_arrival_date: Optional[date]
    sla_days: int

    # normalized text ("" when blank or unmapped)
    status: str
    method: str
    product: str
    destination_country: str
    order_id: Optional[str]
    customer: Optional[str]

    # metrics
    turnover_days: Optional[int]
    is_on_time: Optional[bool]              # vs. provided required date
    is_on_time_calculated: Optional[bool]   # vs. order date + SLA days
    mismatch_type: Optional[str]
    month_key: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        """camelCase keys, ISO dates; matches the export column names."""
        return {
            "orderDate": _iso(self.order_date),
            "shippingDate": _iso(self.shipping_date),
            "requiredArrivalDate": _iso(self.required_arrival_date),
            "calculatedRequiredArrivalDate": _iso(self.calculated_required_arrival_date),
            "slaDays": self.sla_days,
            "status": self.status,
            "method": self.method,
            "product": self.product,
            "destinationCountry": self.destination_country,
            "orderId": self.order_id,
            "customer": self.customer,
            "turnoverDays": self.turnover_days,
            "isOnTime": self.is_on_time,
            "isOnTimeCalculated": self.is_on_time_calculated,
            "mismatchType": self.mismatch_type,
            "monthKey": self.month_key,
        }


@dataclass(frozen=True)
class ExcludedRow:
    row: EnrichedRow
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"row": self.row.to_dict(), "reason": self.reason}


@dataclass(frozen=True)
class ExclusionCount:
    reason: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"reason": self.reason, "count": self.count}


@dataclass(frozen=True)
class QualityMetrics:
    raw_rows: int
    valid_rows: int
    included_rows: int
    exclusions: tuple[ExclusionCount, ...]

    def exclusion_count(self, reason: str) -> int:
        return next((e.count for e in self.exclusions if e.reason == reason), 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rawRows": self.raw_rows,
            "validRows": self.valid_rows,
            "includedRows": self.included_rows,
            "exclusions": [e.to_dict() for e in self.exclusions],
        }


@dataclass(frozen=True)
class MonthlySummary:
    month: str
    shipped: int
    on_time: int
    late: int
    on_time_rate: float
    on_time_calculated: int
    late_calculated: int
    on_time_rate_calculated: float
    mismatch_count: int
    average_turnover: Optional[float]

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "shipped": self.shipped,
            "onTime": self.on_time,
            "late": self.late,
            "onTimeRate": self.on_time_rate,
            "onTimeCalculated": self.on_time_calculated,
            "lateCalculated": self.late_calculated,
            "onTimeRateCalculated": self.on_time_rate_calculated,
            "mismatchCount": self.mismatch_count,
            "averageTurnover": self.average_turnover,
        }


@dataclass(frozen=True)
class OverallKpis:
    """Totals across every included row; rates are None when nothing shipped."""
    shipped: int
    average_turnover: Optional[float]
    on_time_rate: Optional[float]
    late_rate: Optional[float]
    on_time_rate_calculated: Optional[float]
    late_rate_calculated: Optional[float]

    def to_dict(self) -> dict[str, Any]:
        return {
            "shipped": self.shipped,
            "averageTurnover": self.average_turnover,
            "onTimeRate": self.on_time_rate,
            "lateRate": self.late_rate,
            "onTimeRateCalculated": self.on_time_rate_calculated,
            "lateRateCalculated": self.late_rate_calculated,
        }


@dataclass(frozen=True)
class CalculationResult:
    monthly: tuple[MonthlySummary, ...]
    rows: tuple[EnrichedRow, ...]
    quality: QualityMetrics
    excluded_rows: tuple[ExcludedRow, ...]

    @property
    def mismatch_rows(self) -> tuple[EnrichedRow, ...]:
        return tuple(r for r in self.rows if r.mismatch_type)

    def to_dict(self) -> dict[str, Any]:
        """Convenience for JSON dumps and equality checks in tests."""
        return {
            "monthly": [m.to_dict() for m in self.monthly],
            "rows": [r.to_dict() for r in self.rows],
            "quality": self.quality.to_dict(),
            "excludedRows": [e.to_dict() for e in self.excluded_rows],
        }
