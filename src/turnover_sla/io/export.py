from __future__ import annotations

import warnings
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from turnover_sla.io.schema import (
    EXCLUDED_ROW_EXPORT_COLUMNS,
    INCLUDED_ROW_EXPORT_COLUMNS,
    MISMATCH_ROW_EXPORT_COLUMNS,
    MONTHLY_EXPORT_COLUMNS,
    SHEET_EXCLUDED,
    SHEET_INCLUDED,
    SHEET_MISMATCH,
    SHEET_MONTHLY,
    SUMMARY_CSV_HEADER,
)
from turnover_sla.models import CalculationResult, EnrichedRow, OverallKpis


def _yes_no(v: Optional[bool]) -> str:
    if v is None:
        return ""
    return "Yes" if v else "No"


def _row_record(row: EnrichedRow) -> dict[str, Any]:
    d = row.to_dict()
    # blanks instead of None so the sheet shows empty cells, not "None"
    out = {k: ("" if v is None else v) for k, v in d.items()}
    out["isOnTime"] = _yes_no(row.is_on_time)
    out["isOnTimeCalculated"] = _yes_no(row.is_on_time_calculated)
    return out


def monthly_frame(result: CalculationResult) -> pd.DataFrame:
    records = [m.to_dict() for m in result.monthly]
    return pd.DataFrame.from_records(records, columns=MONTHLY_EXPORT_COLUMNS)


def included_frame(result: CalculationResult) -> pd.DataFrame:
    return pd.DataFrame.from_records(
        [_row_record(r) for r in result.rows], columns=INCLUDED_ROW_EXPORT_COLUMNS)


def mismatch_frame(result: CalculationResult) -> pd.DataFrame:
    return pd.DataFrame.from_records(
        [_row_record(r) for r in result.mismatch_rows], columns=MISMATCH_ROW_EXPORT_COLUMNS)


def excluded_frame(result: CalculationResult) -> pd.DataFrame:
    records = [{"reason": e.reason, **_row_record(e.row)}
               for e in result.excluded_rows]
    return pd.DataFrame.from_records(records, columns=EXCLUDED_ROW_EXPORT_COLUMNS)


def write_export(
    result: CalculationResult,
    path: Union[str, Path],
    *,
    include_diagnostics: bool = True,
) -> Path:
    """
    Write the result workbook. `monthly_summary` and `included_rows` always;
    `mismatch_rows` and `excluded_rows` unless include_diagnostics=False.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        with pd.ExcelWriter(out, engine="openpyxl", mode="w") as xw:
            monthly_frame(result).to_excel(
                xw, sheet_name=SHEET_MONTHLY, index=False, na_rep="")
            included_frame(result).to_excel(
                xw, sheet_name=SHEET_INCLUDED, index=False, na_rep="")
            if include_diagnostics:
                mismatch_frame(result).to_excel(
                    xw, sheet_name=SHEET_MISMATCH, index=False, na_rep="")
                excluded_frame(result).to_excel(
                    xw, sheet_name=SHEET_EXCLUDED, index=False, na_rep="")
    return out


def format_number(value: Optional[float]) -> str:
    """Shortest round-trip text, whole numbers without ".0" (2.0 -> "2")."""
    if value is None:
        return ""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def format_percent(rate: Optional[float]) -> str:
    if rate is None:
        return "n/a"
    return f"{int(rate * 100 + 0.5)}%"


def summary_csv(result: CalculationResult) -> str:
    """Monthly summary as CSV text (the "copy summary" view)."""
    lines = [",".join(SUMMARY_CSV_HEADER)]
    for m in result.monthly:
        lines.append(",".join([
            m.month,
            str(m.shipped),
            str(m.on_time),
            str(m.late),
            format_percent(m.on_time_rate),
            format_number(m.average_turnover),
        ]))
    return "\n".join(lines)


def kpi_summary(kpis: OverallKpis) -> str:
    avg = "n/a" if kpis.average_turnover is None else format_number(kpis.average_turnover)
    return (
        f"shipped={kpis.shipped}, avg turnover={avg}, "
        f"on-time={format_percent(kpis.on_time_rate)}, "
        f"late={format_percent(kpis.late_rate)}; "
        f"calculated on-time={format_percent(kpis.on_time_rate_calculated)}, "
        f"late={format_percent(kpis.late_rate_calculated)}"
    )
