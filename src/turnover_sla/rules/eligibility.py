# src/turnover_sla/rules/eligibility.py
from __future__ import annotations

from typing import Callable, Optional

from turnover_sla.models import EnrichedRow, FieldMapping, FiltersConfig, RulesConfig
from turnover_sla.rules.status_matcher import match_status

# Exclusion reasons (shown to end users; keep verbatim)
MISSING_REQUIRED_FIELDS = "Missing required fields"
UNPARSEABLE_DATES = "Unparseable or missing dates"
STATUS_MISMATCH = "Status mismatch"
EXCLUDED_COUNTRY = "Excluded country"
EXCLUDED_DELIVERY_NOT_REQUIRED = "Excluded delivery not required"
FILTERED_BY_METHOD = "Filtered out by method"
FILTERED_BY_PRODUCT = "Filtered out by product"
FILTERED_BY_MONTH = "Filtered out by month"
MISSING_MONTH_BASIS = "Missing month basis"

# Must be mapped to a column. The provided required-arrival date is only
# compared against, so it is not in the per-row value list below.
REQUIRED_MAPPED_FIELDS: tuple[str, ...] = (
    "order_date",
    "shipping_date",
    "required_arrival_date",
    "status",
    "method",
    "product",
    "destination_country",
)

# Must hold a value on each row.
REQUIRED_VALUE_FIELDS: tuple[str, ...] = (
    "order_date",
    "shipping_date",
    "status",
    "method",
    "product",
    "destination_country",
)

DELIVERY_NOT_REQUIRED = "Delivery not required"
EXCLUDED_COUNTRY_HINT = "china"


def _clean_method(method: str) -> str:
    return " ".join((method or "").split())


def _missing_mapped(mapping: FieldMapping) -> bool:
    return any(not mapping.is_mapped(f) for f in REQUIRED_MAPPED_FIELDS)


def _missing_values(row: EnrichedRow) -> bool:
    return any(not getattr(row, f) for f in REQUIRED_VALUE_FIELDS)


def _missing_dates(row: EnrichedRow) -> bool:
    return row.order_date is None or row.shipping_date is None


# Each check returns True when the row FAILS it.
Check = Callable[[EnrichedRow, FieldMapping, RulesConfig, FiltersConfig], bool]

EXCLUSION_CHAIN: tuple[tuple[str, Check], ...] = (
    (MISSING_REQUIRED_FIELDS,
     lambda row, mapping, rules, filters: _missing_mapped(mapping)),
    (MISSING_REQUIRED_FIELDS,
     lambda row, mapping, rules, filters: _missing_values(row)),
    (UNPARSEABLE_DATES,
     lambda row, mapping, rules, filters: _missing_dates(row)),
    (STATUS_MISMATCH,
     lambda row, mapping, rules, filters: not match_status(row.status, rules)),
    (EXCLUDED_COUNTRY,
     lambda row, mapping, rules, filters: rules.exclude_china
     and EXCLUDED_COUNTRY_HINT in row.destination_country.lower()),
    (EXCLUDED_DELIVERY_NOT_REQUIRED,
     lambda row, mapping, rules, filters: not filters.delivery_not_required
     and _clean_method(row.method) == DELIVERY_NOT_REQUIRED),
    (FILTERED_BY_METHOD,
     lambda row, mapping, rules, filters: bool(filters.methods)
     and row.method not in filters.methods),
    (FILTERED_BY_PRODUCT,
     lambda row, mapping, rules, filters: bool(filters.products)
     and row.product not in filters.products),
    # Month bounds only apply to rows that have a month; the rest fall
    # through to MISSING_MONTH_BASIS.
    (FILTERED_BY_MONTH,
     lambda row, mapping, rules, filters: bool(filters.month_range[0])
     and row.month_key is not None and row.month_key < filters.month_range[0]),
    (FILTERED_BY_MONTH,
     lambda row, mapping, rules, filters: bool(filters.month_range[1])
     and row.month_key is not None and row.month_key > filters.month_range[1]),
    (MISSING_MONTH_BASIS,
     lambda row, mapping, rules, filters: row.month_key is None),
)

# Structural completeness only: no business rules or user filters.
_STRUCTURAL_CHECKS = EXCLUSION_CHAIN[:3]


def classify(
    row: EnrichedRow,
    mapping: FieldMapping,
    rules: RulesConfig,
    filters: FiltersConfig,
) -> Optional[str]:
    """Return the first failing reason, or None when the row is included."""
    for reason, fails in EXCLUSION_CHAIN:
        if fails(row, mapping, rules, filters):
            return reason
    return None


def is_structurally_valid(row: EnrichedRow, mapping: FieldMapping) -> bool:
    rules, filters = RulesConfig(), FiltersConfig()
    return not any(fails(row, mapping, rules, filters) for _, fails in _STRUCTURAL_CHECKS)
