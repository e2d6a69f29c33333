"""
Verdict Presentation
=====================
Turns a ComplianceVerdict into the pieces a front end shows:
an overall icon + message, a per-rule breakdown, and a bullet
list of failures keyed by the human-readable rule title.
"""

from __future__ import annotations

from dataclasses import dataclass

from ssis_compliance.compliance.models import ComplianceVerdict, RuleResult
from ssis_compliance.utils.helpers import split_camel_case

PASS_ICON = "✅"
FAIL_ICON = "❌"


@dataclass(frozen=True)
class ComplianceSummary:
    """Overall status line for a verdict."""

    status: str  # "compliant" | "non-compliant"
    message: str
    icon: str


@dataclass(frozen=True)
class RuleDetail:
    """One row of the per-rule breakdown."""

    name: str
    passed: bool
    value: str
    requirement: str
    explanation: str
    icon: str


def humanize_rule_name(rule_name: str) -> str:
    """'totalFat' -> 'Total Fat'. Display only; rule names stay unchanged."""
    if not rule_name:
        return rule_name
    return rule_name[0].upper() + split_camel_case(rule_name[1:])


def get_compliance_summary(verdict: ComplianceVerdict) -> ComplianceSummary:
    if verdict.is_compliant:
        return ComplianceSummary(
            status="compliant",
            message="This product meets all SSIS compliance requirements!",
            icon=PASS_ICON,
        )
    return ComplianceSummary(
        status="non-compliant",
        message=f"This product fails {len(verdict.failed)} of {verdict.total_rules} SSIS requirements.",
        icon=FAIL_ICON,
    )


def _detail(result: RuleResult) -> RuleDetail:
    return RuleDetail(
        name=humanize_rule_name(result.rule_name),
        passed=result.passed,
        value=result.actual_value,
        requirement=result.requirement,
        explanation=result.explanation,
        icon=PASS_ICON if result.passed else FAIL_ICON,
    )


def format_compliance_details(verdict: ComplianceVerdict) -> list[RuleDetail]:
    """Per-rule breakdown: passed rules first, then failed."""
    return [_detail(r) for r in (*verdict.passed, *verdict.failed)]


def failure_bullets(verdict: ComplianceVerdict) -> list[str]:
    """'Total Fat: Exceeds limit by 8.2%' for each failed rule."""
    return [f"{humanize_rule_name(r.rule_name)}: {r.explanation}" for r in verdict.failed]
