"""KPI calculations over the run history shown on the dashboard."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bimcheck.analytics.aggregator import most_common_issue_category
from bimcheck.models.status import RunStatus
from bimcheck.validation.rules.base import RuleCategory

if TYPE_CHECKING:
    from bimcheck.history.models import DashboardState


class KPICalculator:
    """Calculate KPIs from a :class:`DashboardState`.

    Parameters
    ----------
    state:
        Snapshot of the history store.
    """

    def __init__(self, state: DashboardState) -> None:
        self.state = state

    def total_validations(self) -> int:
        return len(self.state.recent_runs)

    def successful_validations(self) -> int:
        return sum(1 for r in self.state.recent_runs if r.status == RunStatus.SUCCESS)

    def average_conformity(self) -> float:
        """Mean unrounded conformity of recent runs, to one decimal.

        Runs with no elements are skipped; 0.0 when none remain.
        """
        rates = [
            100 * max(r.summary.total_elements - r.summary.total_issues, 0) / r.summary.total_elements
            for r in self.state.recent_runs
            if r.summary.total_elements > 0
        ]
        if not rates:
            return 0.0
        return round(sum(rates) / len(rates), 1)

    def average_processing_ms(self) -> float:
        runs = self.state.recent_runs
        if not runs:
            return 0.0
        return round(sum(r.elapsed_ms for r in runs) / len(runs), 2)

    def most_common_issue(self) -> RuleCategory | None:
        """Most frequent issue category summed across recent runs."""
        totals = {category.value: 0 for category in RuleCategory}
        for run in self.state.recent_runs:
            for key, count in run.summary.issues_by_category.items():
                if key in totals:
                    totals[key] += count
        return most_common_issue_category(totals)

    def all_kpis(self) -> dict[str, Any]:
        """Return all KPIs as a dict."""
        most_common = self.most_common_issue()
        return {
            "totalValidations": self.total_validations(),
            "successfulValidations": self.successful_validations(),
            "averageConformity": self.average_conformity(),
            "averageProcessingMs": self.average_processing_ms(),
            "mostCommonIssue": most_common.value if most_common else None,
        }
