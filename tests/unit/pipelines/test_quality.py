from __future__ import annotations

import dataclasses
import datetime as dt

from turnover_sla.models import EnrichedRow, ExcludedRow, FieldMapping
from turnover_sla.pipelines.quality import build_quality_metrics, tally_exclusions

MAPPING = FieldMapping(
    order_date="o", shipping_date="s", required_arrival_date="r",
    status="st", method="m", product="p", destination_country="c",
)

ROW = EnrichedRow(
    order_date=dt.date(2024, 3, 1),
    shipping_date=dt.date(2024, 3, 3),
    required_arrival_date=None,
    calculated_required_arrival_date=dt.date(2024, 3, 29),
    sla_days=28,
    status="Pending",
    method="Air",
    product="A",
    destination_country="Finland",
    order_id=None,
    customer=None,
    turnover_days=2,
    is_on_time=None,
    is_on_time_calculated=True,
    mismatch_type=None,
    month_key="2024-03",
)


def test_tally_keeps_first_seen_order():
    excluded = [ExcludedRow(ROW, "Status mismatch"),
                ExcludedRow(ROW, "Excluded country"),
                ExcludedRow(ROW, "Status mismatch")]
    out = tally_exclusions(excluded)
    assert [(e.reason, e.count) for e in out] == [
        ("Status mismatch", 2), ("Excluded country", 1)]


def test_quality_counts():
    broken = dataclasses.replace(ROW, shipping_date=None)
    enriched = [ROW, ROW, broken]
    excluded = [ExcludedRow(ROW, "Status mismatch"),
                ExcludedRow(broken, "Missing required fields")]
    q = build_quality_metrics(3, enriched, MAPPING, excluded)
    assert q.raw_rows == 3
    # status is a business rule, not a structural problem
    assert q.valid_rows == 2
    assert q.included_rows == 1
    assert q.exclusion_count("Status mismatch") == 1
    assert q.exclusion_count("Missing required fields") == 1
    assert q.exclusion_count("Excluded country") == 0


def test_unmapped_schema_makes_nothing_valid():
    q = build_quality_metrics(1, [ROW], FieldMapping(), [])
    assert q.valid_rows == 0
