from __future__ import annotations

import dataclasses
import datetime as dt

import pytest

from turnover_sla.models import MISMATCH_CALCULATED_OK, EnrichedRow
from turnover_sla.pipelines.aggregator import aggregate_monthly, overall_kpis, round_half_up


def _row(month_key="2024-03", **kw) -> EnrichedRow:
    base = EnrichedRow(
        order_date=dt.date(2024, 3, 1),
        shipping_date=dt.date(2024, 3, 3),
        required_arrival_date=dt.date(2024, 3, 10),
        calculated_required_arrival_date=dt.date(2024, 3, 29),
        sla_days=28,
        status="Shipped",
        method="Air",
        product="A",
        destination_country="Finland",
        order_id=None,
        customer=None,
        turnover_days=2,
        is_on_time=True,
        is_on_time_calculated=True,
        mismatch_type=None,
        month_key=month_key,
    )
    return dataclasses.replace(base, **kw)


def test_empty_input():
    assert aggregate_monthly([]) == []


def test_groups_are_sorted_by_month():
    rows = [_row("2024-05"), _row("2023-12"), _row("2024-01"), _row("2024-05")]
    out = aggregate_monthly(rows)
    assert [m.month for m in out] == ["2023-12", "2024-01", "2024-05"]
    assert [m.shipped for m in out] == [1, 1, 2]
    assert sum(m.shipped for m in out) == len(rows)


def test_counts_for_both_on_time_definitions():
    rows = [
        _row(is_on_time=True, is_on_time_calculated=True),
        _row(is_on_time=False, is_on_time_calculated=True,
             mismatch_type=MISMATCH_CALCULATED_OK),
        _row(is_on_time=None, is_on_time_calculated=False),
        _row(is_on_time=None, is_on_time_calculated=None),
    ]
    (m,) = aggregate_monthly(rows)
    assert m.shipped == 4
    assert (m.on_time, m.late) == (1, 1)
    assert m.on_time_rate == pytest.approx(0.25)
    assert (m.on_time_calculated, m.late_calculated) == (2, 1)
    assert m.on_time_rate_calculated == pytest.approx(0.5)
    assert m.mismatch_count == 1
    assert isinstance(m.on_time, int) and isinstance(m.shipped, int)


def test_average_turnover_skips_nulls_and_rounds_half_up():
    rows = [_row(turnover_days=1), _row(turnover_days=2),
            _row(turnover_days=2), _row(turnover_days=4),
            _row(turnover_days=None)]
    (m,) = aggregate_monthly(rows)
    # (1 + 2 + 2 + 4) / 4 = 2.25
    assert m.average_turnover == 2.3


def test_average_turnover_none_without_values():
    (m,) = aggregate_monthly([_row(turnover_days=None)])
    assert m.average_turnover is None


def test_rows_without_month_key_are_ignored():
    out = aggregate_monthly([_row(month_key=None), _row("2024-02")])
    assert [m.month for m in out] == ["2024-02"]


def test_round_half_up():
    assert round_half_up(2.25) == 2.3
    assert round_half_up(3.0) == 3.0
    # rounds the exact binary value: 1.15 is stored as 1.1499999...
    assert round_half_up(1.15) == 1.1
    assert round_half_up(2.35) == 2.4


def test_overall_kpis_cover_every_included_row():
    rows = [
        _row("2024-03", turnover_days=2, is_on_time=True, is_on_time_calculated=True),
        _row("2024-04", turnover_days=3, is_on_time=False, is_on_time_calculated=True),
        _row("2024-04", turnover_days=None, is_on_time=None, is_on_time_calculated=False),
        _row(None, turnover_days=4, is_on_time=True, is_on_time_calculated=True),
    ]
    k = overall_kpis(rows)
    assert k.shipped == 4
    assert k.average_turnover == 3.0
    assert k.on_time_rate == 0.5
    assert k.late_rate == 0.25
    assert k.on_time_rate_calculated == 0.75
    assert k.late_rate_calculated == 0.25


def test_overall_kpis_without_rows():
    k = overall_kpis([])
    assert k.shipped == 0
    assert k.average_turnover is None
    assert k.on_time_rate is None and k.late_rate_calculated is None
