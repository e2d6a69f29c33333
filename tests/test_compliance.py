"""Tests for the SSIS compliance engine."""

import pytest

from ssis_compliance.compliance.engine import evaluate
from ssis_compliance.compliance.models import ComplianceVerdict, NutritionRecord, coerce_number
from ssis_compliance.compliance.rules import RULE_NAMES, SSIS_RULES, get_rule


def test_rule_set_is_fixed():
    assert RULE_NAMES == ("calories", "sodium", "totalFat", "saturatedFat", "transFat", "totalSugars")
    assert len(SSIS_RULES) == 6


def test_empty_record_fails_every_rule():
    verdict = evaluate({})

    assert verdict.is_compliant is False
    assert len(verdict.failed) == 6
    assert verdict.passed == ()
    assert set(verdict.results_by_name) == set(RULE_NAMES)
    for r in verdict.failed:
        assert r.actual_value == "N/A"
        assert "not found" in r.explanation


def test_none_record_treated_as_empty():
    assert len(evaluate(None).failed) == 6


def test_compliant_example(compliant_data):
    verdict = evaluate(compliant_data)
    by_name = verdict.results_by_name

    assert verdict.is_compliant is True
    assert len(verdict.passed) == 6
    assert by_name["calories"].actual_value == "150 calories"
    assert by_name["totalFat"].actual_value == "5g (30.0% of calories)"
    assert by_name["saturatedFat"].actual_value == "1g (6.0% of calories)"
    assert by_name["transFat"].actual_value == "0g"
    assert by_name["sodium"].actual_value == "100mg"
    assert by_name["totalSugars"].actual_value == "8g (26.7% by weight)"
    assert by_name["calories"].explanation == "Meets calorie requirement"
    assert by_name["totalSugars"].explanation == "Meets sugar requirement"


def test_non_compliant_example(non_compliant_data):
    verdict = evaluate(non_compliant_data)
    by_name = verdict.results_by_name

    assert verdict.is_compliant is False
    assert len(verdict.failed) == 6
    assert by_name["calories"].explanation == "Exceeds limit by 50 calories"
    assert by_name["sodium"].explanation == "Exceeds limit by 20mg"
    assert by_name["totalFat"].actual_value == "12g (43.2% of calories)"
    assert by_name["totalFat"].explanation == "Exceeds limit by 8.2%"
    assert by_name["saturatedFat"].actual_value == "6g (21.6% of calories)"
    assert by_name["saturatedFat"].explanation == "Exceeds limit by 11.6%"
    assert by_name["transFat"].explanation == "Contains 0.5g trans fat (must be 0g)"
    assert by_name["totalSugars"].actual_value == "18g (45.0% by weight)"
    assert by_name["totalSugars"].explanation == "Exceeds limit by 10.0%"


def test_requirements_text(compliant_data):
    by_name = evaluate(compliant_data).results_by_name
    assert by_name["calories"].requirement == "≤ 200 calories"
    assert by_name["sodium"].requirement == "≤ 200mg"
    assert by_name["totalFat"].requirement == "≤ 35% of calories"
    assert by_name["saturatedFat"].requirement == "< 10% of calories"
    assert by_name["transFat"].requirement == "0g"
    assert by_name["totalSugars"].requirement == "≤ 35% by weight"


# ═══════════════════════════════════════════════════════
#  Boundaries
# ═══════════════════════════════════════════════════════

class TestBoundaries:

    def test_trans_fat_exact_zero(self):
        assert evaluate({"transFat": 0}).results_by_name["transFat"].passed
        assert evaluate({"transFat": 0.0}).results_by_name["transFat"].passed

    def test_trans_fat_no_tolerance(self):
        result = evaluate({"transFat": 0.0000001}).results_by_name["transFat"]
        assert not result.passed

    def test_calories_at_limit(self):
        assert evaluate({"calories": 200}).results_by_name["calories"].passed
        over = evaluate({"calories": 200.5}).results_by_name["calories"]
        assert not over.passed
        assert over.explanation == "Exceeds limit by 0.5 calories"

    def test_sodium_at_limit(self):
        assert evaluate({"sodium": 200}).results_by_name["sodium"].passed
        assert not evaluate({"sodium": 201}).results_by_name["sodium"].passed

    def test_saturated_fat_ten_percent_is_strict(self):
        # 4g * 9 / 360 cal = exactly 10%
        result = evaluate({"calories": 360, "saturatedFat": 4}).results_by_name["saturatedFat"]
        assert not result.passed
        assert result.explanation == "Exceeds limit by 0.0%"

    def test_total_fat_thirty_five_percent_passes(self):
        # 7g * 9 / 180 cal = 35%
        assert evaluate({"calories": 180, "totalFat": 7}).results_by_name["totalFat"].passed

    def test_sugar_thirty_five_percent_passes(self):
        assert evaluate({"totalSugars": 35, "servingWeightGrams": 100}).results_by_name["totalSugars"].passed

    def test_comparison_uses_unrounded_value(self):
        # 35.04% displays as 35.0% but is over the limit
        result = evaluate({"totalSugars": 35.04, "servingWeightGrams": 100}).results_by_name["totalSugars"]
        assert not result.passed
        assert "35.0% by weight" in result.actual_value


# ═══════════════════════════════════════════════════════
#  Missing and unusable inputs
# ═══════════════════════════════════════════════════════

class TestMissingFields:

    def test_fat_without_calories_fails(self):
        result = evaluate({"totalFat": 3}).results_by_name["totalFat"]
        assert not result.passed
        assert result.explanation == "Fat or calorie information not found"

    def test_calories_without_fat_fails(self):
        result = evaluate({"calories": 100}).results_by_name["saturatedFat"]
        assert not result.passed
        assert result.explanation == "Saturated fat or calorie information not found"

    def test_sugar_without_serving_weight_fails(self):
        result = evaluate({"totalSugars": 2}).results_by_name["totalSugars"]
        assert result.explanation == "Sugar or serving weight information not found"

    def test_explicit_null_is_unknown_not_zero(self):
        result = evaluate({"transFat": None}).results_by_name["transFat"]
        assert not result.passed
        assert result.explanation == "Trans fat information not found"

    def test_zero_calories_cannot_be_divided(self):
        result = evaluate({"calories": 0, "totalFat": 0}).results_by_name["totalFat"]
        assert not result.passed
        assert "Cannot compute" in result.explanation

    def test_zero_serving_weight_cannot_be_divided(self):
        result = evaluate({"totalSugars": 1, "servingWeightGrams": 0}).results_by_name["totalSugars"]
        assert not result.passed
        assert "Cannot compute" in result.explanation


# ═══════════════════════════════════════════════════════
#  Verdict invariants
# ═══════════════════════════════════════════════════════

@pytest.mark.parametrize("data", [
    {},
    {"calories": 90},
    {"calories": 150, "totalFat": 5, "saturatedFat": 1, "transFat": 0},
    {"calories": 250, "sodium": 10, "transFat": 0, "totalSugars": 1, "servingWeightGrams": 50},
])
def test_every_rule_lands_in_exactly_one_partition(data):
    verdict = evaluate(data)
    passed = {r.rule_name for r in verdict.passed}
    failed = {r.rule_name for r in verdict.failed}

    assert verdict.total_rules == 6
    assert passed.isdisjoint(failed)
    assert passed | failed == set(RULE_NAMES)
    assert verdict.is_compliant == (len(verdict.failed) == 0)


def test_verdict_is_read_only(compliant_data):
    verdict = evaluate(compliant_data)
    with pytest.raises(TypeError):
        verdict.results_by_name["calories"] = None
    assert isinstance(verdict.passed, tuple)


def test_evaluate_accepts_record_instance():
    record = NutritionRecord(calories=100, sodium=50)
    verdict = evaluate(record)
    assert verdict.results_by_name["calories"].passed
    assert verdict.results_by_name["sodium"].passed


def test_verdict_to_dict(non_compliant_data):
    data = evaluate(non_compliant_data).to_dict()
    assert data["isCompliant"] is False
    assert len(data["failed"]) == 6
    assert data["resultsByName"]["sodium"]["actualValue"] == "220mg"


def test_from_results_partitions():
    rule = get_rule("transFat")
    verdict = ComplianceVerdict.from_results([rule.evaluate(NutritionRecord(trans_fat=0))])
    assert verdict.is_compliant


def test_get_rule_unknown():
    with pytest.raises(KeyError):
        get_rule("cholesterol")


# ═══════════════════════════════════════════════════════
#  NutritionRecord parsing
# ═══════════════════════════════════════════════════════

class TestNutritionRecord:

    def test_camel_case_keys(self, compliant_data):
        record = NutritionRecord.from_dict(compliant_data)
        assert record.serving_weight_grams == 30
        assert record.product_name == "Healthy Snack Bar"
        assert record.to_dict()["servingWeightGrams"] == 30

    def test_snake_case_keys(self):
        record = NutritionRecord.from_dict({"total_fat": 3, "serving_weight_grams": 28})
        assert record.total_fat == 3
        assert record.serving_weight_grams == 28

    def test_unknown_keys_ignored(self):
        record = NutritionRecord.from_dict({"calories": 10, "vitaminQ": 5})
        assert record.calories == 10

    def test_lists(self):
        record = NutritionRecord.from_dict({"ingredients": ["oats", " honey "], "allergens": "milk, soy"})
        assert record.ingredients == ["oats", "honey"]
        assert record.allergens == ["milk", "soy"]

    @pytest.mark.parametrize("raw,expected", [
        (12, 12),
        (0.5, 0.5),
        ("12", 12),
        ("12g", 12),
        ("0.5 g", 0.5),
        (".5g", 0.5),
        ("-.25", -0.25),
        ("1,200 mg", 1200),
        ("none", None),
        ("", None),
        (True, None),
        (None, None),
        (float("nan"), None),
    ])
    def test_coerce_number(self, raw, expected):
        assert coerce_number(raw) == expected

    def test_string_numbers_feed_rules(self):
        verdict = evaluate({"calories": "150", "sodium": "220mg"})
        assert verdict.results_by_name["calories"].passed
        assert verdict.results_by_name["sodium"].explanation == "Exceeds limit by 20mg"
