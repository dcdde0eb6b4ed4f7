# src/turnover_sla/__init__.py
from .pipelines.metrics_calculator import MetricsCalculator, calculate_metrics
from .models import FieldMapping, FiltersConfig, MonthBasis, RulesConfig

__all__ = [
    "MetricsCalculator",
    "calculate_metrics",
    "FieldMapping",
    "FiltersConfig",
    "MonthBasis",
    "RulesConfig",
]
