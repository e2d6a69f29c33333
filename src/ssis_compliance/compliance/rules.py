"""
SSIS Rules
============
The six SSIS nutrition thresholds, expressed as a closed set of rule
variants. Each rule evaluates a NutritionRecord into exactly one
RuleResult; a missing input is a failing result, never a skipped rule.

    calories      ≤ 200
    sodium        ≤ 200 mg
    totalFat      ≤ 35% of calories
    saturatedFat  < 10% of calories
    transFat      = 0 g
    totalSugars   ≤ 35% by weight

Comparisons use unrounded values; displayed percentages round to one decimal.
"""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from ssis_compliance.compliance.models import NutritionRecord, RuleResult
from ssis_compliance.utils.helpers import format_number

CALORIES_PER_GRAM_FAT = 9
NOT_AVAILABLE = "N/A"


class ComplianceRule(ABC):
    """A single SSIS threshold."""

    name: str
    requirement: str

    @abstractmethod
    def evaluate(self, record: NutritionRecord) -> RuleResult:
        ...

    def _result(self, passed: bool, actual: str, explanation: str) -> RuleResult:
        return RuleResult(
            rule_name=self.name,
            passed=passed,
            actual_value=actual,
            requirement=self.requirement,
            explanation=explanation,
        )


@dataclass(frozen=True)
class MaxValueRule(ComplianceRule):
    """Field must not exceed `limit` (calories, sodium)."""

    name: str
    field_name: str
    limit: float
    unit: str
    label: str
    missing_message: str

    @property
    def requirement(self) -> str:
        return f"≤ {format_number(self.limit)}{self.unit}"

    def evaluate(self, record: NutritionRecord) -> RuleResult:
        value = record.get(self.field_name)
        if value is None:
            return self._result(False, NOT_AVAILABLE, self.missing_message)

        passed = value <= self.limit
        explanation = (
            f"Meets {self.label} requirement"
            if passed
            else f"Exceeds limit by {format_number(value - self.limit)}{self.unit}"
        )
        return self._result(passed, f"{format_number(value)}{self.unit}", explanation)


@dataclass(frozen=True)
class CaloriePercentRule(ComplianceRule):
    """Calories from a fat field, as a percentage of total calories."""

    name: str
    field_name: str
    limit: float
    strict: bool
    label: str
    missing_message: str

    @property
    def requirement(self) -> str:
        symbol = "<" if self.strict else "≤"
        return f"{symbol} {format_number(self.limit)}% of calories"

    def evaluate(self, record: NutritionRecord) -> RuleResult:
        grams = record.get(self.field_name)
        calories = record.calories
        if grams is None or calories is None:
            return self._result(False, NOT_AVAILABLE, self.missing_message)
        if calories <= 0:
            return self._result(
                False,
                f"{format_number(grams)}g",
                f"Cannot compute percentage of calories from {format_number(calories)} calories",
            )

        pct = grams * CALORIES_PER_GRAM_FAT / calories * 100
        compare: Callable[[float, float], bool] = operator.lt if self.strict else operator.le
        passed = compare(pct, self.limit)
        explanation = (
            f"Meets {self.label} requirement"
            if passed
            else f"Exceeds limit by {pct - self.limit:.1f}%"
        )
        return self._result(passed, f"{format_number(grams)}g ({pct:.1f}% of calories)", explanation)


@dataclass(frozen=True)
class ZeroValueRule(ComplianceRule):
    """Field must be exactly zero; no tolerance band."""

    name: str
    field_name: str
    unit: str
    label: str
    missing_message: str

    @property
    def requirement(self) -> str:
        return f"0{self.unit}"

    def evaluate(self, record: NutritionRecord) -> RuleResult:
        value = record.get(self.field_name)
        if value is None:
            return self._result(False, NOT_AVAILABLE, self.missing_message)

        passed = value == 0
        explanation = (
            f"Meets {self.label} requirement"
            if passed
            else f"Contains {format_number(value)}{self.unit} {self.label} (must be 0{self.unit})"
        )
        return self._result(passed, f"{format_number(value)}{self.unit}", explanation)


@dataclass(frozen=True)
class WeightPercentRule(ComplianceRule):
    """Field grams as a percentage of the serving weight."""

    name: str
    field_name: str
    limit: float
    label: str
    missing_message: str

    @property
    def requirement(self) -> str:
        return f"≤ {format_number(self.limit)}% by weight"

    def evaluate(self, record: NutritionRecord) -> RuleResult:
        grams = record.get(self.field_name)
        serving = record.serving_weight_grams
        if grams is None or serving is None:
            return self._result(False, NOT_AVAILABLE, self.missing_message)
        if serving <= 0:
            return self._result(
                False,
                f"{format_number(grams)}g",
                f"Cannot compute percentage by weight from a {format_number(serving)}g serving",
            )

        pct = grams / serving * 100
        passed = pct <= self.limit
        explanation = (
            f"Meets {self.label} requirement"
            if passed
            else f"Exceeds limit by {pct - self.limit:.1f}%"
        )
        return self._result(passed, f"{format_number(grams)}g ({pct:.1f}% by weight)", explanation)


SSIS_RULES: tuple[ComplianceRule, ...] = (
    MaxValueRule(
        name="calories",
        field_name="calories",
        limit=200,
        unit=" calories",
        label="calorie",
        missing_message="Calorie information not found",
    ),
    MaxValueRule(
        name="sodium",
        field_name="sodium",
        limit=200,
        unit="mg",
        label="sodium",
        missing_message="Sodium information not found",
    ),
    CaloriePercentRule(
        name="totalFat",
        field_name="totalFat",
        limit=35,
        strict=False,
        label="fat",
        missing_message="Fat or calorie information not found",
    ),
    CaloriePercentRule(
        name="saturatedFat",
        field_name="saturatedFat",
        limit=10,
        strict=True,
        label="saturated fat",
        missing_message="Saturated fat or calorie information not found",
    ),
    ZeroValueRule(
        name="transFat",
        field_name="transFat",
        unit="g",
        label="trans fat",
        missing_message="Trans fat information not found",
    ),
    WeightPercentRule(
        name="totalSugars",
        field_name="totalSugars",
        limit=35,
        label="sugar",
        missing_message="Sugar or serving weight information not found",
    ),
)

RULE_NAMES: tuple[str, ...] = tuple(rule.name for rule in SSIS_RULES)


def get_rule(name: str) -> ComplianceRule:
    """Look up one of the SSIS rules by name."""
    for rule in SSIS_RULES:
        if rule.name == name:
            return rule
    raise KeyError(f"Unknown SSIS rule: {name}")
