# src/turnover_sla/pipelines/aggregator.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from turnover_sla.models import EnrichedRow, MonthlySummary, OverallKpis

_FRAME_COLS = (
    "month_key",
    "is_on_time",
    "is_on_time_calculated",
    "mismatch_type",
    "turnover_days",
)


def round_half_up(value: float, places: int = 1) -> float:
    """Round like a spreadsheet (2.25 -> 2.3), not banker's rounding."""
    q = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(q, rounding=ROUND_HALF_UP))


def _to_frame(rows: Iterable[EnrichedRow]) -> pd.DataFrame:
    records = [{c: getattr(r, c) for c in _FRAME_COLS} for r in rows]
    return pd.DataFrame.from_records(records, columns=list(_FRAME_COLS))


def _count_is(s: pd.Series, flag: bool) -> int:
    # True/False/None column; None counts toward neither side
    return sum(1 for v in s if isinstance(v, (bool, np.bool_)) and bool(v) == flag)


def _rate(part: int, whole: int) -> float:
    return part / whole if whole else 0.0


def _average_turnover(s: pd.Series) -> Optional[float]:
    values = pd.to_numeric(s, errors="coerce").dropna()
    if values.empty:
        return None
    return round_half_up(float(values.mean()), 1)


def _summarize(month: str, g: pd.DataFrame) -> MonthlySummary:
    shipped = int(len(g))
    on_time = _count_is(g["is_on_time"], True)
    late = _count_is(g["is_on_time"], False)
    on_time_calc = _count_is(g["is_on_time_calculated"], True)
    late_calc = _count_is(g["is_on_time_calculated"], False)
    return MonthlySummary(
        month=month,
        shipped=shipped,
        on_time=on_time,
        late=late,
        on_time_rate=_rate(on_time, shipped),
        on_time_calculated=on_time_calc,
        late_calculated=late_calc,
        on_time_rate_calculated=_rate(on_time_calc, shipped),
        mismatch_count=int(g["mismatch_type"].notna().sum()),
        average_turnover=_average_turnover(g["turnover_days"]),
    )


def aggregate_monthly(rows: Iterable[EnrichedRow]) -> list[MonthlySummary]:
    """
    Group included rows by month_key ("YYYY-MM", so string order is
    chronological) and compute both on-time variants per month.
    Rows without a month_key are skipped.
    """
    df = _to_frame(rows)
    df = df[df["month_key"].notna()]
    if df.empty:
        return []
    return [
        _summarize(str(month), g)
        for month, g in df.groupby("month_key", sort=True)
    ]


def overall_kpis(rows: Iterable[EnrichedRow]) -> OverallKpis:
    """Headline figures over all included rows, month key or not."""
    df = _to_frame(rows)
    shipped = int(len(df))
    if not shipped:
        return OverallKpis(0, None, None, None, None, None)
    return OverallKpis(
        shipped=shipped,
        average_turnover=_average_turnover(df["turnover_days"]),
        on_time_rate=_rate(_count_is(df["is_on_time"], True), shipped),
        late_rate=_rate(_count_is(df["is_on_time"], False), shipped),
        on_time_rate_calculated=_rate(
            _count_is(df["is_on_time_calculated"], True), shipped),
        late_rate_calculated=_rate(
            _count_is(df["is_on_time_calculated"], False), shipped),
    )
