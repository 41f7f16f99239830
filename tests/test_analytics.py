"""Tests for aggregation — summary counts, conformity rate, KPIs."""

from __future__ import annotations

import pytest

from bimcheck.analytics.aggregator import (
    aggregate,
    conformity_rate,
    most_common_issue_category,
)
from bimcheck.analytics.kpi import KPICalculator
from bimcheck.history.models import DashboardState, ValidationRun
from bimcheck.models.element import Element, ElementCategory
from bimcheck.models.status import RunStatus
from bimcheck.validation.rules.base import Issue, RuleCategory, Severity


def _elements(n: int, category: ElementCategory | None = ElementCategory.WALL) -> list[Element]:
    return [
        Element(id=f"E{i}", category=category, properties={"material": "Steel"})
        for i in range(n)
    ]


def _issues(*categories: RuleCategory) -> list[Issue]:
    return [
        Issue(
            id=i + 1,
            element_id=f"E{i}",
            rule_id=f"{c.value}.rule",
            rule_category=c,
            severity=Severity.HIGH,
            description="failed",
        )
        for i, c in enumerate(categories)
    ]


# ── conformity rate ──────────────────────────────────────────────────────────

class TestConformityRate:

    @pytest.mark.parametrize(
        "elements, issues, expected",
        [(25, 0, 100), (18, 5, 72), (35, 2, 94), (0, 0, 100), (8, 1, 88), (3, 10, 0)],
    )
    def test_values(self, elements: int, issues: int, expected: int):
        assert conformity_rate(elements, issues) == expected

    def test_rounds_half_up(self):
        # 100 * 1/8 = 12.5 non-conforming -> 87.5 -> 88
        assert conformity_rate(8, 1) == 88
        # 100 * 7/200 = 3.5 -> 96.5 -> 97
        assert conformity_rate(200, 7) == 97

    def test_always_in_range(self):
        for total in range(0, 40):
            for issues in range(0, 60):
                assert 0 <= conformity_rate(total, issues) <= 100


# ── aggregate ────────────────────────────────────────────────────────────────

class TestAggregate:

    def test_scenario_clean_run(self):
        summary = aggregate(_elements(25), [])
        assert summary.total_elements == 25
        assert summary.total_issues == 0
        assert summary.conformity_rate == 100
        assert summary.most_common_issue_category is None

    def test_scenario_mixed_issues(self):
        issues = _issues(
            RuleCategory.NORM_CODE,
            RuleCategory.DIMENSIONS,
            RuleCategory.MATERIAL,
            RuleCategory.DIMENSIONS,
            RuleCategory.MATERIAL,
        )
        summary = aggregate(_elements(18), issues)
        assert summary.conformity_rate == 72
        assert summary.issues_by_category == {"material": 2, "dimensions": 2, "normCode": 1}
        assert summary.most_common_issue_category == RuleCategory.MATERIAL

    def test_scenario_norm_code_only(self):
        summary = aggregate(_elements(35), _issues(RuleCategory.NORM_CODE, RuleCategory.NORM_CODE))
        assert summary.conformity_rate == 94
        assert summary.most_common_issue_category == RuleCategory.NORM_CODE

    def test_scenario_no_elements(self):
        summary = aggregate([], [])
        assert summary.conformity_rate == 100
        assert summary.total_issues == 0
        assert sum(summary.elements_by_category.values()) == 0

    def test_issue_totals_match_categories(self):
        issues = _issues(RuleCategory.MATERIAL, RuleCategory.NORM_CODE, RuleCategory.NORM_CODE)
        summary = aggregate(_elements(10), issues)
        assert summary.total_issues == len(issues) == sum(summary.issues_by_category.values())

    def test_elements_by_category_with_unclassified(self):
        elements = (
            _elements(3, ElementCategory.DOOR)
            + _elements(2, ElementCategory.WINDOW)
            + _elements(4, None)
        )
        summary = aggregate(elements, [])
        assert summary.elements_by_category["Door"] == 3
        assert summary.elements_by_category["Window"] == 2
        assert summary.elements_by_category["unclassified"] == 4
        assert summary.elements_by_category["Wall"] == 0
        assert sum(summary.elements_by_category.values()) == summary.total_elements

    def test_no_unclassified_bucket_when_all_classified(self):
        summary = aggregate(_elements(2), [])
        assert "unclassified" not in summary.elements_by_category

    def test_idempotent(self):
        elements = _elements(12)
        issues = _issues(RuleCategory.DIMENSIONS, RuleCategory.MATERIAL)
        first = aggregate(elements, issues)
        second = aggregate(elements, issues)
        assert first == second
        assert first.model_dump_json() == second.model_dump_json()


class TestMostCommonIssueCategory:

    def test_tie_uses_declared_order(self):
        counts = {"normCode": 3, "dimensions": 3, "material": 1}
        assert most_common_issue_category(counts) == RuleCategory.DIMENSIONS

    def test_all_zero(self):
        assert most_common_issue_category({"material": 0}) is None


# ── KPIs ─────────────────────────────────────────────────────────────────────

class TestKPICalculator:

    def _state(self) -> DashboardState:
        runs = [
            ValidationRun(
                id="R1",
                status=RunStatus.SUCCESS,
                summary=aggregate(_elements(25), []),
                elapsed_ms=100.0,
            ),
            ValidationRun(
                id="R2",
                status=RunStatus.WARNING,
                summary=aggregate(_elements(35), _issues(RuleCategory.NORM_CODE, RuleCategory.NORM_CODE)),
                elapsed_ms=300.0,
            ),
        ]
        return DashboardState(recent_runs=runs)

    def test_all_kpis(self):
        kpis = KPICalculator(self._state()).all_kpis()
        assert kpis["totalValidations"] == 2
        assert kpis["successfulValidations"] == 1
        assert kpis["averageConformity"] == 97.1
        assert kpis["averageProcessingMs"] == 200.0
        assert kpis["mostCommonIssue"] == "normCode"

    def test_average_conformity_uses_unrounded_rates(self):
        runs = [
            ValidationRun(id="R1", summary=aggregate(_elements(8), _issues(RuleCategory.MATERIAL))),
            ValidationRun(id="R2", summary=aggregate(_elements(3), _issues(RuleCategory.MATERIAL))),
        ]
        # 87.5 and 66.67, not the rounded 88 and 67
        assert KPICalculator(DashboardState(recent_runs=runs)).average_conformity() == 77.1

    def test_average_conformity_skips_empty_runs(self):
        runs = [
            ValidationRun(id="R1", summary=aggregate([], [])),
            ValidationRun(id="R2", summary=aggregate(_elements(8), _issues(RuleCategory.MATERIAL))),
        ]
        assert KPICalculator(DashboardState(recent_runs=runs)).average_conformity() == 87.5

    def test_empty_history(self):
        kpis = KPICalculator(DashboardState()).all_kpis()
        assert kpis["totalValidations"] == 0
        assert kpis["averageConformity"] == 0.0
        assert kpis["mostCommonIssue"] is None
