"""Run aggregation and history KPIs."""

from bimcheck.analytics.aggregator import (
    ValidationSummary,
    aggregate,
    conformity_rate,
    most_common_issue_category,
)
from bimcheck.analytics.kpi import KPICalculator

__all__ = [
    "KPICalculator",
    "ValidationSummary",
    "aggregate",
    "conformity_rate",
    "most_common_issue_category",
]
