from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Union

import pandas as pd

from turnover_sla.models import (
    CalculationResult,
    EnrichedRow,
    ExcludedRow,
    FieldMapping,
    FiltersConfig,
    RulesConfig,
)
from turnover_sla.pipelines.aggregator import aggregate_monthly
from turnover_sla.pipelines.quality import build_quality_metrics
from turnover_sla.pipelines.row_enricher import RowEnricher
from turnover_sla.rules.eligibility import classify

RawRows = Union[pd.DataFrame, Sequence[Mapping[str, Any]]]


def _as_records(rows: RawRows) -> list[Mapping[str, Any]]:
    if isinstance(rows, pd.DataFrame):
        return rows.to_dict(orient="records")
    return list(rows)


class MetricsCalculator:
    """Orchestrates enrichment, eligibility, monthly aggregation and quality counts."""

    def __init__(self, logger=None) -> None:
        self.logger = logger

    def _log_delta(self, label: str, before: int, after: int) -> None:
        if self.logger:
            self.logger.info("%s: %d -> %d (Δ %d)", label,
                             before, after, after - before)

    def calculate(
        self,
        rows: RawRows,
        mapping: FieldMapping,
        rules: RulesConfig,
        filters: FiltersConfig,
    ) -> CalculationResult:
        """
        Pure function of its four inputs: nothing is kept between calls and
        the inputs are not modified. Included and excluded rows keep the
        input order.
        """
        records = _as_records(rows)

        enriched = RowEnricher(self.logger).enrich(
            records, mapping, filters.month_basis)

        included: list[EnrichedRow] = []
        excluded: list[ExcludedRow] = []
        for row in enriched:
            reason = classify(row, mapping, rules, filters)
            if reason is None:
                included.append(row)
            else:
                excluded.append(ExcludedRow(row=row, reason=reason))

        self._log_delta("eligibility", len(enriched), len(included))

        quality = build_quality_metrics(
            len(records), enriched, mapping, excluded)
        if self.logger:
            for e in quality.exclusions:
                self.logger.info("excluded %d row(s): %s", e.count, e.reason)

        monthly = aggregate_monthly(included)
        if self.logger:
            self.logger.debug("monthly summary: %d month(s)", len(monthly))

        return CalculationResult(
            monthly=tuple(monthly),
            rows=tuple(included),
            quality=quality,
            excluded_rows=tuple(excluded),
        )


def calculate_metrics(
    rows: RawRows,
    mapping: FieldMapping,
    rules: Optional[RulesConfig] = None,
    filters: Optional[FiltersConfig] = None,
    *,
    logger=None,
) -> CalculationResult:
    """Functional entry point. Missing rules/filters fall back to the defaults."""
    return MetricsCalculator(logger).calculate(
        rows,
        mapping,
        rules if rules is not None else RulesConfig(),
        filters if filters is not None else FiltersConfig(),
    )
