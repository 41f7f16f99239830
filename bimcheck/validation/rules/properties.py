"""Property rules — material present, dimensions positive, norm code present."""

from __future__ import annotations

import re

from bimcheck.config import ACCEPTED_NORM_TOKENS
from bimcheck.models.element import Element
from bimcheck.validation.rules.base import Issue, Rule, RuleCategory, Severity

MATERIAL_KEY = "material"
DIMENSIONS_KEY = "dimensions"
NORM_CODE_KEY = "normCode"

# "300 x 2800 x 5000", "0.9X2.1", "900×2100"
_DIM_SEPARATOR = re.compile(r"\s*[xX×]\s*")

# Token must not be embedded in a longer word ("GENERIC" is not "EN")
_NORM_TOKEN = re.compile(
    r"(?<![A-Z])(" + "|".join(ACCEPTED_NORM_TOKENS) + r")(?![A-Z])"
)


def parse_dimensions(value: str) -> list[float] | None:
    """Split an ``x``-separated dimension string into floats.

    Returns ``None`` if any part is not a number.
    """
    parts = _DIM_SEPARATOR.split(value.strip())
    dims: list[float] = []
    for part in parts:
        try:
            dims.append(float(part))
        except ValueError:
            return None
    return dims


def norm_code_accepted(value: str) -> bool:
    return _NORM_TOKEN.search(value.upper()) is not None


class MaterialPresent(Rule):
    """Element must declare a non-blank material."""

    @property
    def rule_id(self) -> str:
        return "material.present"

    @property
    def category(self) -> RuleCategory:
        return RuleCategory.MATERIAL

    @property
    def severity(self) -> Severity:
        return Severity.HIGH

    def check(self, element: Element) -> Issue | None:
        if element.get_property(MATERIAL_KEY) is not None:
            return None
        return self._issue(
            element,
            "Element does not have specified material",
            "Add material specification according to EN 1992-1-1 (Eurocode 2)",
        )


class DimensionsPositive(Rule):
    """Every declared dimension must be a number greater than zero."""

    @property
    def rule_id(self) -> str:
        return "dimensions.positive"

    @property
    def category(self) -> RuleCategory:
        return RuleCategory.DIMENSIONS

    @property
    def severity(self) -> Severity:
        return Severity.HIGH

    def check(self, element: Element) -> Issue | None:
        raw = element.get_property(DIMENSIONS_KEY)
        if raw is None:
            return self._issue(
                element,
                "Element does not have dimensions specified",
                "Define physical dimensions according to EN 1992-1-1 structural requirements",
            )
        dims = parse_dimensions(raw)
        if dims is None:
            return self._issue(
                element,
                f"Dimensions '{raw}' are not numeric",
                "Express dimensions as numbers separated by 'x', e.g. 200x3000x5000",
            )
        if any(not d > 0 for d in dims):
            return self._issue(
                element,
                f"Dimensions '{raw}' contain a zero or negative value",
                "All dimensions must be greater than zero",
            )
        return None


class NormCodePresent(Rule):
    """Element must reference a recognised standard (EN, ISO, ASTM)."""

    @property
    def rule_id(self) -> str:
        return "norm_code.present"

    @property
    def category(self) -> RuleCategory:
        return RuleCategory.NORM_CODE

    @property
    def severity(self) -> Severity:
        return Severity.MEDIUM

    def check(self, element: Element) -> Issue | None:
        code = element.get_property(NORM_CODE_KEY)
        if code is None:
            return self._issue(
                element,
                "Element does not have associated standard code",
                "Associate appropriate technical standard code according to EN 1992-1-1",
            )
        if not norm_code_accepted(code):
            return self._issue(
                element,
                f"Standard code '{code}' is not a recognised {'/'.join(ACCEPTED_NORM_TOKENS)} reference",
                "Reference a European (EN), international (ISO) or ASTM standard",
            )
        return None


class PropertyRules:
    """The fixed rule set, in evaluation order."""

    @staticmethod
    def all_rules() -> list[Rule]:
        return [
            MaterialPresent(),
            DimensionsPositive(),
            NormCodePresent(),
        ]
