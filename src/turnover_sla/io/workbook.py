from __future__ import annotations

import warnings
from pathlib import Path
from typing import Any, Union

import pandas as pd

EMPTY_HEADER = "(empty)"


def _is_blank_cell(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, str):
        return v.strip() == ""
    try:
        return bool(pd.isna(v))
    except (TypeError, ValueError):
        return False


def extract_headers(header_cells: list[Any]) -> list[str]:
    """
    Header row -> unique column names. Blank cells become "(empty)",
    "(empty 2)", ...; repeats become "Name (2)", "Name (3)", ...
    """
    seen: dict[str, int] = {}
    out: list[str] = []
    for cell in header_cells:
        base = "" if _is_blank_cell(cell) else str(cell).strip()
        base = base or EMPTY_HEADER
        n = seen.get(base, 0) + 1
        seen[base] = n
        if n == 1:
            out.append(base)
        elif base == EMPTY_HEADER:
            out.append(f"(empty {n})")
        else:
            out.append(f"{base} ({n})")
    return out


def _read_grid(path: Path, sheet: Union[str, int]) -> pd.DataFrame:
    if path.suffix.lower() == ".csv":
        return pd.read_csv(path, header=None, dtype=str, keep_default_na=False)
    # openpyxl warns about styles/data validation it cannot read; harmless here
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        return pd.read_excel(path, sheet_name=sheet, header=None,
                             dtype=object, engine="openpyxl")


def grid_to_rows(grid: pd.DataFrame, header_row: int = 0) -> list[dict[str, Any]]:
    """Turn a raw cell grid into row dicts keyed by the header row; blank rows dropped."""
    if grid.empty or header_row >= len(grid):
        return []
    headers = extract_headers(list(grid.iloc[header_row]))
    rows: list[dict[str, Any]] = []
    for values in grid.iloc[header_row + 1:].itertuples(index=False, name=None):
        if all(_is_blank_cell(v) for v in values):
            continue
        rows.append({h: (None if _is_blank_cell(v) else v)
                    for h, v in zip(headers, values)})
    return rows


def read_rows(
    path: Union[str, Path],
    *,
    sheet: Union[str, int] = 0,
    header_row: int = 0,
) -> list[dict[str, Any]]:
    """
    Read one sheet (or a CSV file) into raw row dicts. Cell values are kept
    as decoded (numbers, datetimes, strings); typing happens in enrichment.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    return grid_to_rows(_read_grid(p, sheet), header_row=header_row)
