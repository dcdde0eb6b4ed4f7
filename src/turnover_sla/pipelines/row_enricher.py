from __future__ import annotations

import datetime as dt
import re
from typing import Any, Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from turnover_sla.models import (
    MISMATCH_CALCULATED_OK,
    MISMATCH_EXCEL_OK,
    EnrichedRow,
    FieldMapping,
    MonthBasis,
)
from turnover_sla.parsing.dates import axis_date, format_month_key, parse_date
from turnover_sla.rules.sla import sla_days_for_product

_WS_RE = re.compile(r"\s+")


def _is_blank(val: Any) -> bool:
    """True if value is None/NaN/NaT."""
    if val is None or val is pd.NaT:
        return True
    if isinstance(val, float) and np.isnan(val):
        return True
    return False


def normalize_cell(value: Any) -> str:
    """Cell -> text with `_x000D_` artifacts removed and whitespace collapsed."""
    if _is_blank(value):
        return ""
    return _WS_RE.sub(" ", str(value).replace("_x000D_", "")).strip()


def _mapped_value(raw: Mapping[str, Any], mapping: FieldMapping, key: str) -> Any:
    column = mapping.column_for(key)
    if not column:
        return ""
    value = raw.get(column, "")
    return "" if value is None else value


def _days_between(start: dt.date, end: dt.date) -> int:
    return (end - start).days


def _on_time(shipped: Optional[dt.date], due: Optional[dt.date]) -> Optional[bool]:
    if shipped is None or due is None:
        return None
    return shipped <= due


def _mismatch(is_on_time: Optional[bool], is_on_time_calculated: Optional[bool]) -> Optional[str]:
    if is_on_time is None or is_on_time_calculated is None:
        return None
    if is_on_time == is_on_time_calculated:
        return None
    return MISMATCH_CALCULATED_OK if is_on_time_calculated else MISMATCH_EXCEL_OK


def enrich_row(
    raw: Mapping[str, Any],
    mapping: FieldMapping,
    month_basis: MonthBasis | str = MonthBasis.SHIPPED,
) -> EnrichedRow:
    """
    Type one raw row through the field mapping. Never raises: unmapped,
    blank or unparseable cells come back as None (dates) or "" (text).

    month_key depends on `month_basis`, so rows must be re-enriched when
    the basis changes.
    """
    order_date = parse_date(_mapped_value(raw, mapping, "order_date"))
    shipping_date = parse_date(_mapped_value(raw, mapping, "shipping_date"))
    required_arrival_date = parse_date(
        _mapped_value(raw, mapping, "required_arrival_date"))

    status = normalize_cell(_mapped_value(raw, mapping, "status"))
    method = normalize_cell(_mapped_value(raw, mapping, "method"))
    product = normalize_cell(_mapped_value(raw, mapping, "product"))
    country = normalize_cell(_mapped_value(raw, mapping, "destination_country"))
    order_id = normalize_cell(_mapped_value(raw, mapping, "order_id"))
    customer = normalize_cell(_mapped_value(raw, mapping, "customer"))

    turnover_days = None
    if order_date is not None and shipping_date is not None:
        turnover_days = max(_days_between(order_date, shipping_date), 0)

    sla_days = sla_days_for_product(product)
    calculated_required = (
        order_date + dt.timedelta(days=sla_days) if order_date is not None else None
    )

    # Provided (vendor/Excel) due date vs. our own SLA due date: kept as two
    # separate verdicts, the mismatch label depends on both.
    is_on_time = _on_time(shipping_date, required_arrival_date)
    is_on_time_calculated = _on_time(shipping_date, calculated_required)

    month_key = format_month_key(
        axis_date(
            month_basis,
            order=order_date,
            shipping=shipping_date,
            required_arrival=required_arrival_date,
        )
    )

    return EnrichedRow(
        order_date=order_date,
        shipping_date=shipping_date,
        required_arrival_date=required_arrival_date,
        calculated_required_arrival_date=calculated_required,
        sla_days=sla_days,
        status=status,
        method=method,
        product=product,
        destination_country=country,
        order_id=order_id or None,
        customer=customer or None,
        turnover_days=turnover_days,
        is_on_time=is_on_time,
        is_on_time_calculated=is_on_time_calculated,
        mismatch_type=_mismatch(is_on_time, is_on_time_calculated),
        month_key=month_key,
    )


class RowEnricher:
    def __init__(self, logger=None):
        self.logger = logger

    def enrich(
        self,
        rows: Iterable[Mapping[str, Any]],
        mapping: FieldMapping,
        month_basis: MonthBasis | str = MonthBasis.SHIPPED,
    ) -> list[EnrichedRow]:
        out = [enrich_row(r, mapping, month_basis) for r in rows]

        if self.logger:
            no_order = sum(1 for r in out if r.order_date is None)
            no_ship = sum(1 for r in out if r.shipping_date is None)
            no_month = sum(1 for r in out if r.month_key is None)
            self.logger.debug(
                "enriched %d rows (basis=%s): order_date missing=%d, "
                "shipping_date missing=%d, month_key missing=%d",
                len(out), MonthBasis.coerce(month_basis).value,
                no_order, no_ship, no_month,
            )
        return out
