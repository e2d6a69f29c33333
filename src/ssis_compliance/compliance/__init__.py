"""Compliance engine subpackage — record model, SSIS rules, evaluation, presentation."""

from ssis_compliance.compliance.engine import evaluate
from ssis_compliance.compliance.models import ComplianceVerdict, NutritionRecord, RuleResult
from ssis_compliance.compliance.rules import SSIS_RULES

__all__ = ["evaluate", "ComplianceVerdict", "NutritionRecord", "RuleResult", "SSIS_RULES"]
