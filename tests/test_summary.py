"""Tests for verdict presentation helpers."""

import pytest

from ssis_compliance.compliance.engine import evaluate
from ssis_compliance.compliance.summary import (
    failure_bullets,
    format_compliance_details,
    get_compliance_summary,
    humanize_rule_name,
)


@pytest.mark.parametrize("name,title", [
    ("calories", "Calories"),
    ("sodium", "Sodium"),
    ("totalFat", "Total Fat"),
    ("saturatedFat", "Saturated Fat"),
    ("transFat", "Trans Fat"),
    ("totalSugars", "Total Sugars"),
    ("", ""),
])
def test_humanize_rule_name(name, title):
    assert humanize_rule_name(name) == title


def test_summary_compliant(compliant_data):
    summary = get_compliance_summary(evaluate(compliant_data))
    assert summary.status == "compliant"
    assert summary.icon == "✅"
    assert summary.message == "This product meets all SSIS compliance requirements!"


def test_summary_non_compliant():
    summary = get_compliance_summary(evaluate({"calories": 100, "sodium": 50}))
    assert summary.status == "non-compliant"
    assert summary.icon == "❌"
    assert summary.message == "This product fails 4 of 6 SSIS requirements."


def test_details_list_passed_then_failed():
    details = format_compliance_details(evaluate({"calories": 100, "sodium": 500}))
    assert [d.name for d in details[:1]] == ["Calories"]
    assert details[0].icon == "✅"
    assert all(not d.passed for d in details[1:])
    assert len(details) == 6


def test_detail_keeps_rule_name_untouched(non_compliant_data):
    verdict = evaluate(non_compliant_data)
    details = format_compliance_details(verdict)
    assert "Total Fat" in [d.name for d in details]
    assert "totalFat" in verdict.results_by_name


def test_failure_bullets(non_compliant_data):
    bullets = failure_bullets(evaluate(non_compliant_data))
    assert "Total Fat: Exceeds limit by 8.2%" in bullets
    assert "Trans Fat: Contains 0.5g trans fat (must be 0g)" in bullets
    assert len(bullets) == 6


def test_no_bullets_when_compliant(compliant_data):
    assert failure_bullets(evaluate(compliant_data)) == []
