# src/turnover_sla/parsing/dates.py
from __future__ import annotations

import datetime as dt
import math
import numbers
import re
import warnings
from typing import Any, Optional

import numpy as np
import pandas as pd

from turnover_sla.models import MonthBasis

# Spreadsheet day 0 (1899-12-30), the usual off-by-two epoch
EXCEL_EPOCH = dt.date(1899, 12, 30)

_ISO_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_EXCEL_SERIAL_RE = re.compile(r"^\d+(\.\d+)?$")
# Carriage-return escapes left behind by some xlsx writers
_CR_ARTIFACT_RE = re.compile(r"_x000D_|\r")
# Free-text fallback needs a digit; pandas reads "now"/"today" as the clock.
_HAS_DIGIT_RE = re.compile(r"\d")


def _is_missing(value: Any) -> bool:
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, np.datetime64) and np.isnat(value):
        return True
    return False


def excel_serial_to_date(value: Any) -> Optional[dt.date]:
    """Serial day count -> calendar date. Fractions (time of day) are dropped."""
    try:
        serial = float(value)
        if not math.isfinite(serial):
            return None
        return EXCEL_EPOCH + dt.timedelta(days=math.floor(serial))
    except (OverflowError, ValueError, TypeError):
        return None


def _from_datetime(value: dt.datetime) -> dt.date:
    # Aware values are moved to UTC first; naive ones are already treated as UTC.
    if value.tzinfo is not None:
        value = value.astimezone(dt.timezone.utc)
    return dt.date(value.year, value.month, value.day)


def _from_string(text: str) -> Optional[dt.date]:
    s = _CR_ARTIFACT_RE.sub("", text).strip()
    if not s:
        return None

    if _ISO_PREFIX_RE.match(s):
        try:
            return dt.date.fromisoformat(s[:10])
        except ValueError:
            return None

    if _EXCEL_SERIAL_RE.match(s):
        return excel_serial_to_date(s)

    if not _HAS_DIGIT_RE.search(s):
        return None

    # Locale-ish strings ("03/31/2024", "Mar 31, 2024"): keep the parsed
    # calendar fields exactly as written.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(s, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if _is_missing(parsed) or not isinstance(parsed, pd.Timestamp):
        return None
    return dt.date(parsed.year, parsed.month, parsed.day)


def parse_date(value: Any) -> Optional[dt.date]:
    """
    Normalize a cell value into a UTC calendar date (no time of day).

    Accepts date/datetime/Timestamp objects, spreadsheet serial numbers and
    strings (ISO prefix, numeric serial, or anything pandas can parse).
    Returns None for blanks and anything unparseable; never raises.
    """
    if _is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, np.datetime64):
        value = pd.Timestamp(value)
    if isinstance(value, dt.datetime):
        return _from_datetime(value)
    if isinstance(value, dt.date):
        return value
    if isinstance(value, numbers.Real):
        return excel_serial_to_date(value)
    if isinstance(value, str):
        return _from_string(value)
    return None


def format_month_key(d: Optional[dt.date]) -> Optional[str]:
    if d is None:
        return None
    return f"{d.year:04d}-{d.month:02d}"


def axis_date(
    basis: MonthBasis | str,
    *,
    order: Optional[dt.date],
    shipping: Optional[dt.date],
    required_arrival: Optional[dt.date],
) -> Optional[dt.date]:
    """Pick the date that anchors a row to a reporting month (first non-null wins)."""
    basis = MonthBasis.coerce(basis)
    if basis is MonthBasis.SHIPPED:
        preference = (shipping, required_arrival, order)
    elif basis is MonthBasis.SLA_DUE:
        preference = (required_arrival, shipping, order)
    else:
        preference = (order, shipping, required_arrival)
    return next((d for d in preference if d is not None), None)
