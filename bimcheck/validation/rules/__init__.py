"""Element rules — material, dimensions, norm code."""

from bimcheck.validation.rules.base import Issue, Rule, RuleCategory, Severity
from bimcheck.validation.rules.properties import (
    DimensionsPositive,
    MaterialPresent,
    NormCodePresent,
    PropertyRules,
)

__all__ = [
    "DimensionsPositive",
    "Issue",
    "MaterialPresent",
    "NormCodePresent",
    "PropertyRules",
    "Rule",
    "RuleCategory",
    "Severity",
]
