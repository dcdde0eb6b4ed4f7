from .env_cfg import EnvCfg
from .config import (
    FIELD_KEYS,
    DEFAULT_STATUS_MATCHERS,
    FieldMapping,
    FiltersConfig,
    MonthBasis,
    RulesConfig,
)
from .results import (
    MISMATCH_CALCULATED_OK,
    MISMATCH_EXCEL_OK,
    CalculationResult,
    EnrichedRow,
    ExcludedRow,
    ExclusionCount,
    MonthlySummary,
    OverallKpis,
    QualityMetrics,
)

__all__ = [
    "EnvCfg",
    "FIELD_KEYS",
    "DEFAULT_STATUS_MATCHERS",
    "FieldMapping",
    "FiltersConfig",
    "MonthBasis",
    "RulesConfig",
    "MISMATCH_CALCULATED_OK",
    "MISMATCH_EXCEL_OK",
    "CalculationResult",
    "EnrichedRow",
    "ExcludedRow",
    "ExclusionCount",
    "MonthlySummary",
    "OverallKpis",
    "QualityMetrics",
]
