from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

from turnover_sla.models import (
    EnrichedRow,
    ExcludedRow,
    ExclusionCount,
    FieldMapping,
    QualityMetrics,
)
from turnover_sla.rules.eligibility import is_structurally_valid


def tally_exclusions(excluded: Iterable[ExcludedRow]) -> tuple[ExclusionCount, ...]:
    """reason -> count, in the order reasons were first seen."""
    counts = Counter(e.reason for e in excluded)
    return tuple(ExclusionCount(reason, n) for reason, n in counts.items())


def build_quality_metrics(
    raw_count: int,
    enriched: Sequence[EnrichedRow],
    mapping: FieldMapping,
    excluded: Sequence[ExcludedRow],
) -> QualityMetrics:
    valid = sum(1 for r in enriched if is_structurally_valid(r, mapping))
    return QualityMetrics(
        raw_rows=int(raw_count),
        valid_rows=valid,
        included_rows=len(enriched) - len(excluded),
        exclusions=tally_exclusions(excluded),
    )
