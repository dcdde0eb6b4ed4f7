from __future__ import annotations

import json
from pathlib import Path

import pytest

from turnover_sla.io.run_config import (
    RunConfig,
    RunConfigError,
    dump_run_config,
    load_run_config,
)
from turnover_sla.models import FieldMapping, FiltersConfig, MonthBasis, RulesConfig


def test_load_browser_style_config(tmp_path: Path):
    p = tmp_path / "run.json"
    p.write_text(json.dumps({
        "mapping": {"order_date": "Column1.order_date", "status": None},
        "rules": {"excludeChina": False, "statusMatchers": ["shipped"], "statusRegex": ""},
        "filters": {"methods": [], "products": [], "monthRange": [None, "2024-06"],
                    "deliveryNotRequired": True, "monthBasis": "sla_due"},
    }), encoding="utf-8")

    cfg = load_run_config(p)
    assert cfg.mapping.order_date == "Column1.order_date"
    assert cfg.mapping.status is None
    assert cfg.rules.exclude_china is False
    assert cfg.filters.month_range == (None, "2024-06")
    assert cfg.filters.month_basis is MonthBasis.SLA_DUE


def test_missing_sections_use_defaults(tmp_path: Path):
    p = tmp_path / "run.json"
    p.write_text("{}", encoding="utf-8")
    assert load_run_config(p) == RunConfig()


def test_round_trip(tmp_path: Path):
    cfg = RunConfig(
        mapping=FieldMapping(order_date="OD", shipping_date="SD"),
        rules=RulesConfig(status_regex="^ok"),
        filters=FiltersConfig(products=("A",), month_basis=MonthBasis.ORDER),
    )
    p = dump_run_config(cfg, tmp_path / "nested" / "run.json")
    assert load_run_config(p) == cfg


@pytest.mark.parametrize("text", ["{not json", "[1, 2]"])
def test_bad_files_raise(tmp_path: Path, text):
    p = tmp_path / "run.json"
    p.write_text(text, encoding="utf-8")
    with pytest.raises(RunConfigError):
        load_run_config(p)


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(RunConfigError):
        load_run_config(tmp_path / "absent.json")
