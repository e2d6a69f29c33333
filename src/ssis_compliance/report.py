"""
Report Generator
==================
Generates Markdown and JSON SSIS compliance reports.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from ssis_compliance.compliance.summary import (
    FAIL_ICON,
    PASS_ICON,
    failure_bullets,
    format_compliance_details,
    get_compliance_summary,
)
from ssis_compliance.config import get_settings
from ssis_compliance.pipeline import LabelCheckResult
from ssis_compliance.utils.helpers import human_bytes, safe_filename
from ssis_compliance.utils.log import get_logger

logger = get_logger(__name__)


def generate_report(
    result: LabelCheckResult,
    output_dir: Path | None = None,
) -> tuple[Path, Path]:
    """
    Generate Markdown + JSON compliance reports for a label.

    Returns: (markdown_path, json_path)
    """
    settings = get_settings()
    if output_dir is None:
        output_dir = settings.paths.report_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    safe_name = safe_filename(result.label_name) or "label"
    md_path = output_dir / f"report-{safe_name}.md"
    json_path = output_dir / f"report-{safe_name}.json"

    md_path.write_text(render_markdown(result), encoding="utf-8")
    json_path.write_text(json.dumps(render_json(result), indent=2, ensure_ascii=False), encoding="utf-8")

    logger.info("Reports: %s, %s", md_path.name, json_path.name)
    return md_path, json_path


def render_markdown(result: LabelCheckResult) -> str:
    """Render a Markdown compliance report."""
    record = result.record
    verdict = result.verdict
    summary = get_compliance_summary(verdict)
    lines: list[str] = []

    lines.append(f"# SSIS Compliance Report: {result.label_name}")
    lines.append("")
    lines.append(f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    if record.product_name:
        lines.append(f"**Product:** {record.product_name}")
    if record.serving_size:
        lines.append(f"**Serving Size:** {record.serving_size}")
    lines.append("")

    lines.append(f"## {summary.icon} {summary.message}")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| **Status** | **{summary.status.upper()}** |")
    lines.append(f"| Rules checked | {verdict.total_rules} |")
    lines.append(f"| {PASS_ICON} Passed | {len(verdict.passed)} |")
    lines.append(f"| {FAIL_ICON} Failed | {len(verdict.failed)} |")
    if result.compression is not None:
        c = result.compression
        lines.append(f"| Uploaded image | {c.width}x{c.height}, {human_bytes(c.byte_size)} |")
    lines.append("")

    lines.append("## Requirement Details")
    lines.append("")
    lines.append("| Status | Requirement | Actual | Required | Explanation |")
    lines.append("|--------|-------------|--------|----------|-------------|")
    for d in format_compliance_details(verdict):
        lines.append(f"| {d.icon} | {d.name} | {d.value} | {d.requirement} | {d.explanation} |")
    lines.append("")

    bullets = failure_bullets(verdict)
    if bullets:
        lines.append("## Issues Found")
        lines.append("")
        lines.extend(f"- {b}" for b in bullets)
        lines.append("")

    if record.ingredients:
        lines.append("## Ingredients")
        lines.append("")
        lines.append(", ".join(record.ingredients))
        lines.append("")
    if record.allergens:
        lines.append(f"**Allergens:** {', '.join(record.allergens)}")
        lines.append("")

    return "\n".join(lines)


def render_json(result: LabelCheckResult) -> dict:
    """Render a structured JSON compliance report."""
    summary = get_compliance_summary(result.verdict)
    compression = result.compression

    return {
        "label_name": result.label_name,
        "generated_at": datetime.now().isoformat(),
        "summary": {
            "status": summary.status,
            "message": summary.message,
            "total_rules": result.verdict.total_rules,
            "passed": len(result.verdict.passed),
            "failed": len(result.verdict.failed),
        },
        "nutrition": result.record.to_dict(),
        "verdict": result.verdict.to_dict(),
        "image": (
            {
                "source_bytes": result.source_bytes,
                "byte_size": compression.byte_size,
                "mime_type": compression.mime_type,
                "width": compression.width,
                "height": compression.height,
                "attempts": len(compression.attempts),
            }
            if compression is not None
            else None
        ),
    }
