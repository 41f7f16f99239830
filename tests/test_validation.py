"""Tests for rule evaluation — the three property rules and RuleEvaluator."""

from __future__ import annotations

import pytest

from bimcheck.errors import ConfigurationError, WarningKind
from bimcheck.models.element import Element, ElementCategory
from bimcheck.validation.evaluator import RuleEvaluator
from bimcheck.validation.rules.base import Issue, Rule, RuleCategory, Severity
from bimcheck.validation.rules.properties import (
    DimensionsPositive,
    MaterialPresent,
    NormCodePresent,
    PropertyRules,
    norm_code_accepted,
    parse_dimensions,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _element(element_id: str = "W1", **overrides) -> Element:
    props = {"material": "Concrete", "dimensions": "200x3000x5000", "normCode": "EN 1992-1-1"}
    props.update(overrides)
    props = {k: v for k, v in props.items() if v is not None}
    return Element(id=element_id, name=f"Element {element_id}", category=ElementCategory.WALL, properties=props)


class _ExplodingRule(Rule):
    @property
    def rule_id(self) -> str:
        return "test.exploding"

    @property
    def category(self) -> RuleCategory:
        return RuleCategory.MATERIAL

    @property
    def severity(self) -> Severity:
        return Severity.LOW

    def check(self, element: Element) -> Issue | None:
        raise RuntimeError("boom")


class _BadCategoryRule(_ExplodingRule):
    @property
    def rule_id(self) -> str:
        return "test.bad_category"

    @property
    def category(self):
        return "fire"


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------

class TestMaterialPresent:

    def test_passes_with_material(self):
        assert MaterialPresent().check(_element()) is None

    def test_missing_material(self):
        issue = MaterialPresent().check(_element(material=None))
        assert issue is not None
        assert issue.rule_category == RuleCategory.MATERIAL
        assert issue.severity == Severity.HIGH
        assert issue.element_id == "W1"

    def test_blank_material(self):
        assert MaterialPresent().check(_element(material="   ")) is not None


class TestDimensionsPositive:

    @pytest.mark.parametrize("dims", ["200x3000x5000", "0.9X2.1", "900 × 2100", "12.5"])
    def test_valid_dimensions(self, dims: str):
        assert DimensionsPositive().check(_element(dimensions=dims)) is None

    @pytest.mark.parametrize("dims", ["0x3000", "200x-1x5000", "abcx100", "200xx300", ""])
    def test_invalid_dimensions(self, dims: str):
        issue = DimensionsPositive().check(_element(dimensions=dims))
        assert issue is not None
        assert issue.rule_category == RuleCategory.DIMENSIONS

    def test_missing_dimensions(self):
        issue = DimensionsPositive().check(_element(dimensions=None))
        assert issue is not None
        assert "does not have dimensions" in issue.description

    def test_parse_dimensions(self):
        assert parse_dimensions("1 x 2 x 3") == [1.0, 2.0, 3.0]
        assert parse_dimensions("1 x two") is None


class TestNormCodePresent:

    @pytest.mark.parametrize("code", ["EN 1992-1-1", "ISO 9001", "astm c150", "EN1992"])
    def test_accepted_codes(self, code: str):
        assert NormCodePresent().check(_element(normCode=code)) is None

    @pytest.mark.parametrize("code", ["DIN 1045", "GENERIC", "NBR 6118"])
    def test_rejected_codes(self, code: str):
        issue = NormCodePresent().check(_element(normCode=code))
        assert issue is not None
        assert issue.severity == Severity.MEDIUM

    def test_missing_code(self):
        issue = NormCodePresent().check(_element(normCode=None))
        assert issue is not None
        assert issue.rule_category == RuleCategory.NORM_CODE

    def test_token_must_stand_alone(self):
        assert not norm_code_accepted("OPEN")
        assert norm_code_accepted("BS EN 206")


def test_fixed_rule_order():
    categories = [r.category for r in PropertyRules.all_rules()]
    assert categories == [RuleCategory.MATERIAL, RuleCategory.DIMENSIONS, RuleCategory.NORM_CODE]


# ---------------------------------------------------------------------------
# RuleEvaluator
# ---------------------------------------------------------------------------

class TestRuleEvaluator:

    def test_clean_elements_produce_no_issues(self):
        evaluator = RuleEvaluator()
        assert evaluator.evaluate([_element("A"), _element("B")]) == []

    def test_one_issue_per_failing_rule(self):
        element = _element(material=None, dimensions="0x1", normCode="DIN")
        issues = RuleEvaluator().evaluate([element])
        assert [i.rule_category for i in issues] == [
            RuleCategory.MATERIAL, RuleCategory.DIMENSIONS, RuleCategory.NORM_CODE,
        ]

    def test_ordering_is_input_then_rule(self):
        elements = [
            _element("A", normCode=None),
            _element("B", material=None, normCode=None),
        ]
        issues = RuleEvaluator().evaluate(elements)
        assert [(i.element_id, i.rule_id) for i in issues] == [
            ("A", "norm_code.present"),
            ("B", "material.present"),
            ("B", "norm_code.present"),
        ]
        assert [i.id for i in issues] == [1, 2, 3]

    def test_deterministic(self):
        elements = [_element("A", material=None), _element("B", dimensions="x")]
        evaluator = RuleEvaluator()
        assert evaluator.evaluate(elements) == evaluator.evaluate(elements)

    def test_malformed_element_fails_all_rules_and_continues(self):
        elements = [Element(id="BROKEN"), _element("OK", material=None)]
        evaluator = RuleEvaluator()
        issues = evaluator.evaluate(elements)
        assert len([i for i in issues if i.element_id == "BROKEN"]) == 3
        assert [i.element_id for i in issues][-1] == "OK"
        assert evaluator.warnings[0].kind == WarningKind.MALFORMED_ELEMENT

    def test_rule_exception_does_not_abort(self):
        evaluator = RuleEvaluator([_ExplodingRule(), MaterialPresent()])
        issues = evaluator.evaluate([_element(material=None)])
        assert len(issues) == 1
        assert issues[0].rule_id == "material.present"

    def test_issues_are_immutable(self):
        issue = RuleEvaluator().evaluate([_element(material=None)])[0]
        with pytest.raises(Exception):
            issue.description = "changed"


class TestRuleSetConfiguration:

    def test_empty_rule_set(self):
        with pytest.raises(ConfigurationError):
            RuleEvaluator([])

    def test_duplicate_rule_ids(self):
        with pytest.raises(ConfigurationError):
            RuleEvaluator([MaterialPresent(), MaterialPresent()])

    def test_unknown_category(self):
        with pytest.raises(ConfigurationError):
            RuleEvaluator([_BadCategoryRule()])
