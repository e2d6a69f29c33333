"""
Compliance Engine
==================
Runs every SSIS rule against a NutritionRecord and aggregates the
results into a ComplianceVerdict.

All rules run unconditionally; a product is compliant only when none fail.
"""

from __future__ import annotations

from typing import Any, Mapping

from ssis_compliance.compliance.models import ComplianceVerdict, NutritionRecord
from ssis_compliance.compliance.rules import SSIS_RULES, ComplianceRule
from ssis_compliance.utils.log import get_logger

logger = get_logger(__name__)


def evaluate(
    record: NutritionRecord | Mapping[str, Any] | None,
    rules: tuple[ComplianceRule, ...] = SSIS_RULES,
) -> ComplianceVerdict:
    """
    Evaluate a nutrition record against the SSIS rules.

    Args:
        record: Extracted fields, either a NutritionRecord or the
                camelCase JSON mapping produced by extraction.
        rules: Rule set to apply. Defaults to the six SSIS rules.

    Returns:
        ComplianceVerdict with one RuleResult per rule.
    """
    if not isinstance(record, NutritionRecord):
        record = NutritionRecord.from_dict(record)

    results = [rule.evaluate(record) for rule in rules]
    verdict = ComplianceVerdict.from_results(results)

    for r in verdict.failed:
        logger.debug("  FAIL %s: %s (%s)", r.rule_name, r.explanation, r.actual_value)

    logger.info(
        "SSIS check: %s → %s — %d PASS, %d FAIL",
        record.product_name or "unnamed product",
        "COMPLIANT" if verdict.is_compliant else "NON-COMPLIANT",
        len(verdict.passed),
        len(verdict.failed),
    )
    return verdict
