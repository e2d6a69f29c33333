"""
Compliance Data Model
=======================
NutritionRecord (extracted label fields), RuleResult (one rule's outcome)
and ComplianceVerdict (all six outcomes, partitioned and indexed).

NutritionRecord mirrors the JSON the extraction model returns, which uses
camelCase keys. Any field may be missing; missing means unknown, not zero.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping

from ssis_compliance.utils.helpers import camel_to_snake, snake_to_camel

_NUMBER_RE = re.compile(r"-?(?:\d+(?:\.\d+)?|\.\d+)")

NUMERIC_FIELDS = (
    "serving_weight_grams",
    "calories",
    "total_fat",
    "saturated_fat",
    "trans_fat",
    "cholesterol",
    "sodium",
    "total_carbohydrates",
    "dietary_fiber",
    "total_sugars",
    "added_sugars",
    "protein",
)
LIST_FIELDS = ("ingredients", "allergens")


def coerce_number(value: Any) -> float | int | None:
    """
    Best-effort numeric conversion of an extracted value.

    Numbers pass through; strings like "12", "12g" or "1,200 mg" yield
    their first number. Anything else (including booleans and NaN) is
    treated as unknown.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value
    if isinstance(value, str):
        match = _NUMBER_RE.search(value.replace(",", ""))
        if match is None:
            return None
        number = float(match.group())
        return int(number) if number.is_integer() and "." not in match.group() else number
    return None


def _coerce_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_list(value: Any) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return None


@dataclass
class NutritionRecord:
    """Nutrition fields extracted from one label."""

    product_name: str | None = None
    serving_size: str | None = None
    serving_weight_grams: float | None = None
    calories: float | None = None
    total_fat: float | None = None
    saturated_fat: float | None = None
    trans_fat: float | None = None
    cholesterol: float | None = None
    sodium: float | None = None
    total_carbohydrates: float | None = None
    dietary_fiber: float | None = None
    total_sugars: float | None = None
    added_sugars: float | None = None
    protein: float | None = None
    ingredients: list[str] | None = None
    allergens: list[str] | None = None
    additional_info: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> NutritionRecord:
        """Build a record from the extraction JSON (camelCase or snake_case keys)."""
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, raw in data.items():
            name = camel_to_snake(key)
            if name not in known:
                continue
            if name in NUMERIC_FIELDS:
                values[name] = coerce_number(raw)
            elif name in LIST_FIELDS:
                values[name] = _coerce_list(raw)
            else:
                values[name] = _coerce_text(raw)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase JSON shape."""
        return {snake_to_camel(f.name): getattr(self, f.name) for f in fields(self)}

    def get(self, rule_field: str) -> Any:
        """Look up a field by its camelCase or snake_case name."""
        return getattr(self, camel_to_snake(rule_field))


@dataclass(frozen=True)
class RuleResult:
    """Outcome of one compliance rule."""

    rule_name: str
    passed: bool
    actual_value: str
    requirement: str
    explanation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "ruleName": self.rule_name,
            "passed": self.passed,
            "actualValue": self.actual_value,
            "requirement": self.requirement,
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class ComplianceVerdict:
    """All rule outcomes for one record; compliant only when nothing failed."""

    passed: tuple[RuleResult, ...]
    failed: tuple[RuleResult, ...]
    results_by_name: Mapping[str, RuleResult] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_results(cls, results: list[RuleResult] | tuple[RuleResult, ...]) -> ComplianceVerdict:
        return cls(
            passed=tuple(r for r in results if r.passed),
            failed=tuple(r for r in results if not r.passed),
            results_by_name=MappingProxyType({r.rule_name: r for r in results}),
        )

    @property
    def is_compliant(self) -> bool:
        return not self.failed

    @property
    def total_rules(self) -> int:
        return len(self.passed) + len(self.failed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isCompliant": self.is_compliant,
            "passed": [r.to_dict() for r in self.passed],
            "failed": [r.to_dict() for r in self.failed],
            "resultsByName": {name: r.to_dict() for name, r in self.results_by_name.items()},
        }
