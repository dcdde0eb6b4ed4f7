# src/turnover_sla/rules/sla.py
from __future__ import annotations

from typing import Iterable

DEFAULT_SLA_DAYS = 28

# -------- Product hints (lowercased) -> lead time in days --------
# First matching entry wins; add new product categories here.
# "padj"/"padi" are Estonian stems for pillow ("padi", "padja", ...).
SLA_TABLE: tuple[tuple[tuple[str, ...], int], ...] = (
    (("pillow", "padj", "padi"), 14),
)


def _any_in(text: str, phrases: Iterable[str]) -> bool:
    t = (text or "").casefold()
    return any(p in t for p in phrases)


def sla_days_for_product(
    product: str,
    *,
    table: tuple[tuple[tuple[str, ...], int], ...] = SLA_TABLE,
    default: int = DEFAULT_SLA_DAYS,
) -> int:
    for hints, days in table:
        if _any_in(product, hints):
            return days
    return default
