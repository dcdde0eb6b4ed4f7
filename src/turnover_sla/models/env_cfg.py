from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EnvCfg:
    """Minimal shape we need from get_app_env()."""
    TURNOVER_SLA_CONFIG: Optional[str] = None
    TURNOVER_SLA_SHEET: Optional[str] = None
