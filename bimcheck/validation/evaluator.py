"""RuleEvaluator — apply the fixed rule set to every element of a run.

Usage::

    from bimcheck.validation import RuleEvaluator

    evaluator = RuleEvaluator()
    issues = evaluator.evaluate(elements)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bimcheck.errors import ConfigurationError, RunWarning, WarningKind
from bimcheck.models.element import Element
from bimcheck.validation.rules.base import Issue, Rule, RuleCategory, Severity
from bimcheck.validation.rules.properties import PropertyRules

logger = logging.getLogger(__name__)


class RuleEvaluator:
    """Evaluate elements against a validated rule set.

    Parameters
    ----------
    rules:
        Rules in evaluation order.  Defaults to the fixed property rules.

    Raises
    ------
    ConfigurationError
        If the rule set is empty, has duplicate ids, or declares an
        unknown category or severity.
    """

    def __init__(self, rules: list[Rule] | None = None) -> None:
        self.rules: list[Rule] = list(rules) if rules is not None else PropertyRules.all_rules()
        self.warnings: list[RunWarning] = []
        _check_rule_set(self.rules)

    def evaluate(self, elements: Iterable[Element]) -> list[Issue]:
        """Return the issues for *elements* in input order, then rule order.

        Issue ids are assigned sequentially from 1.  Malformed elements fail
        every rule and are recorded in :attr:`warnings`.
        """
        self.warnings = []
        issues: list[Issue] = []
        for element in elements:
            if element.is_malformed:
                logger.warning("Element %s has no properties; failing all rules", element.id)
                self.warnings.append(RunWarning(
                    kind=WarningKind.MALFORMED_ELEMENT,
                    message=f"Element '{element.id}' has no properties",
                ))
            for rule in self.rules:
                try:
                    draft = rule.check(element)
                except Exception:
                    logger.exception("Rule %s failed on element %s", rule.rule_id, element.id)
                    continue
                if draft is not None:
                    issues.append(draft.model_copy(update={"id": len(issues) + 1}))
        logger.debug("Evaluated rules: %d issues", len(issues))
        return issues


def _check_rule_set(rules: list[Rule]) -> None:
    if not rules:
        raise ConfigurationError("Rule set is empty")
    seen: set[str] = set()
    for rule in rules:
        rule_id = rule.rule_id
        if not rule_id:
            raise ConfigurationError(f"Rule {type(rule).__name__} has no rule_id")
        if rule_id in seen:
            raise ConfigurationError(f"Duplicate rule id '{rule_id}'")
        seen.add(rule_id)
        if not isinstance(rule.category, RuleCategory):
            raise ConfigurationError(f"Rule '{rule_id}' has unknown category {rule.category!r}")
        if not isinstance(rule.severity, Severity):
            raise ConfigurationError(f"Rule '{rule_id}' has unknown severity {rule.severity!r}")
