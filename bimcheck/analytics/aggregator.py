"""Aggregator — reduce a run's elements and issues into a ValidationSummary."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from bimcheck.config import UNCLASSIFIED
from bimcheck.models.element import Element, ElementCategory
from bimcheck.validation.rules.base import Issue, RuleCategory


class ValidationSummary(BaseModel):
    """Counts, conformity rate and category breakdowns for one run."""

    model_config = ConfigDict(frozen=True)

    total_elements: int = 0
    total_issues: int = 0
    conformity_rate: int = 100
    issues_by_category: dict[str, int] = Field(default_factory=dict)
    elements_by_category: dict[str, int] = Field(default_factory=dict)

    @property
    def most_common_issue_category(self) -> RuleCategory | None:
        return most_common_issue_category(self.issues_by_category)


def conformity_rate(total_elements: int, total_issues: int) -> int:
    """Percentage of elements without an issue, rounded half up.

    100 when there are no elements; never below 0.
    """
    if total_elements <= 0:
        return 100
    conforming = max(total_elements - total_issues, 0)
    # Integer half-up rounding of 100 * conforming / total_elements
    return min((200 * conforming + total_elements) // (2 * total_elements), 100)


def most_common_issue_category(issues_by_category: dict[str, int]) -> RuleCategory | None:
    """Category with the highest count; ties go to the earliest declared.

    Returns ``None`` when no issues were counted.
    """
    best: RuleCategory | None = None
    best_count = 0
    for category in RuleCategory:
        count = issues_by_category.get(category.value, 0)
        if count > best_count:
            best, best_count = category, count
    return best


def aggregate(elements: Sequence[Element], issues: Sequence[Issue]) -> ValidationSummary:
    """Build the summary for one run.

    ``issues_by_category`` lists every rule category in declared order and
    ``elements_by_category`` every element category, so zero counts are
    explicit.  Elements without a category are counted under
    ``"unclassified"``.
    """
    issues_by_category = {category.value: 0 for category in RuleCategory}
    for issue in issues:
        issues_by_category[issue.rule_category.value] += 1

    elements_by_category = {category.value: 0 for category in ElementCategory}
    unclassified = 0
    for element in elements:
        if element.category is None:
            unclassified += 1
        else:
            elements_by_category[element.category.value] += 1
    if unclassified:
        elements_by_category[UNCLASSIFIED] = unclassified

    return ValidationSummary(
        total_elements=len(elements),
        total_issues=len(issues),
        conformity_rate=conformity_rate(len(elements), len(issues)),
        issues_by_category=issues_by_category,
        elements_by_category=elements_by_category,
    )
