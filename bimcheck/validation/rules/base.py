"""Abstract Rule interface and the Issue record it produces."""

from __future__ import annotations

import abc
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from bimcheck.models.element import Element


class RuleCategory(str, Enum):
    """Rule categories, in declared order.

    Declaration order is significant: it breaks ties when picking the most
    common issue category.
    """

    MATERIAL = "material"
    DIMENSIONS = "dimensions"
    NORM_CODE = "normCode"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def rule_category_label(category: RuleCategory) -> str:
    """Display label for a rule category."""
    if category is RuleCategory.MATERIAL:
        return "Material"
    if category is RuleCategory.DIMENSIONS:
        return "Dimensions"
    return "Standard Code"


def problem_title(category: RuleCategory) -> str:
    """Short problem title for an issue of the given category."""
    if category is RuleCategory.MATERIAL:
        return "Material not defined"
    if category is RuleCategory.DIMENSIONS:
        return "Invalid dimensions"
    return "Missing standard code"


def severity_label(severity: Severity) -> str:
    return severity.value.capitalize()


class Issue(BaseModel):
    """A recorded failure of one rule against one element."""

    model_config = ConfigDict(frozen=True)

    id: int
    element_id: str
    element_name: str = ""
    rule_id: str
    rule_category: RuleCategory
    severity: Severity
    description: str
    recommendation: str = ""

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class Rule(abc.ABC):
    """Base class for the fixed element rules.

    A rule returns an :class:`Issue` draft (with ``id`` 0) when the element
    fails, or ``None`` when it passes.  Missing data is a failure, never an
    exception.
    """

    @property
    @abc.abstractmethod
    def rule_id(self) -> str:
        """Stable rule identifier."""

    @property
    @abc.abstractmethod
    def category(self) -> RuleCategory:
        """Category the rule's issues are counted under."""

    @property
    @abc.abstractmethod
    def severity(self) -> Severity:
        """Severity assigned to the rule's issues."""

    @abc.abstractmethod
    def check(self, element: Element) -> Issue | None:
        """Run this rule against one element."""

    def _issue(self, element: Element, description: str, recommendation: str = "") -> Issue:
        return Issue(
            id=0,
            element_id=element.id,
            element_name=element.name,
            rule_id=self.rule_id,
            rule_category=self.category,
            severity=self.severity,
            description=description,
            recommendation=recommendation,
        )
