from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from turnover_sla.models import FieldMapping, FiltersConfig, RulesConfig


class RunConfigError(RuntimeError):
    """Config file missing, unreadable, or not a JSON object."""


@dataclass(frozen=True)
class RunConfig:
    mapping: FieldMapping = field(default_factory=FieldMapping)
    rules: RulesConfig = field(default_factory=RulesConfig)
    filters: FiltersConfig = field(default_factory=FiltersConfig)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "RunConfig":
        # Sections are fail-soft: absent or malformed -> defaults.
        return cls(
            mapping=FieldMapping.from_dict(d.get("mapping")),
            rules=RulesConfig.from_dict(d.get("rules")),
            filters=FiltersConfig.from_dict(d.get("filters")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "mapping": self.mapping.to_dict(),
            "rules": self.rules.to_dict(),
            "filters": self.filters.to_dict(),
        }


def load_run_config(path: Union[str, Path]) -> RunConfig:
    """
    Read {"mapping": {...}, "rules": {...}, "filters": {...}} from JSON.
    Key names follow the browser tool's saved settings (camelCase rules and
    filters); snake_case works too.
    """
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise RunConfigError(f"config file not found: {p}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise RunConfigError(f"could not read config {p}: {e}") from e

    if not isinstance(data, dict):
        raise RunConfigError(f"config {p} must hold a JSON object")
    return RunConfig.from_dict(data)


def dump_run_config(cfg: RunConfig, path: Union[str, Path]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(cfg.to_dict(), indent=2,
                 ensure_ascii=False), encoding="utf-8")
    return p
