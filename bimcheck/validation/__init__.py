"""Rule evaluation over element sets."""

from bimcheck.validation.evaluator import RuleEvaluator
from bimcheck.validation.rules.base import Issue, Rule, RuleCategory, Severity

__all__ = ["Issue", "Rule", "RuleCategory", "RuleEvaluator", "Severity"]
