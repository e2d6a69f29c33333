"""
SSIS Label Check CLI
=====================
Command-line interface for the SSIS compliance checker.

Commands:
    check     — Photo → compress → extract → SSIS verdict
    evaluate  — Score an already-extracted JSON record
    compress  — Compress an image under the upload target
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from ssis_compliance import __version__
from ssis_compliance.config import get_settings
from ssis_compliance.errors import SSISError
from ssis_compliance.utils.helpers import human_bytes
from ssis_compliance.utils.log import get_logger, setup_logging

logger = get_logger(__name__)
console = Console()

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp"}


# ═══════════════════════════════════════════════════════
#  Root group
# ═══════════════════════════════════════════════════════
@click.group()
@click.version_option(version=__version__, prog_name="ssis-check")
@click.option("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, WARNING).")
def main(log_level: str | None):
    """Nutrition-label SSIS compliance checker."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level, settings.paths.log_dir / "ssis-check.log")


# ═══════════════════════════════════════════════════════
#  CHECK: full pipeline on label photos
# ═══════════════════════════════════════════════════════
@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--provider", "-p",
    type=click.Choice(["openai", "local", "none"], case_sensitive=False),
    default=None,
    help="Vision provider. Default: config value.",
)
@click.option("--details/--no-details", default=False, help="Show the per-rule breakdown.")
@click.option("--report/--no-report", default=True, help="Write Markdown + JSON reports.")
def check(paths: tuple[Path, ...], provider: str | None, details: bool, report: bool):
    """Check nutrition-label photos for SSIS compliance."""
    from ssis_compliance.ai.base import get_ai_provider
    from ssis_compliance.pipeline import LabelCheckResult, check_label_image
    from ssis_compliance.report import generate_report

    settings = get_settings()
    settings.ensure_dirs()

    images: list[Path] = []
    for p in paths:
        if p.is_dir():
            images.extend(sorted(f for f in p.glob("**/*") if f.suffix.lower() in IMAGE_SUFFIXES))
        else:
            images.append(p)
    images = list(dict.fromkeys(images))

    if not images:
        console.print("[red]No label images found.[/red]")
        sys.exit(1)

    vision = get_ai_provider(provider)
    console.print(f"\n[bold]Checking {len(images)} label(s) with {vision.name}…[/bold]\n")

    results: list[LabelCheckResult] = []
    failures = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Processing labels…", total=len(images))
        for image in images:
            progress.update(task, description=f"Checking {image.name}…")
            try:
                result = check_label_image(image, provider=vision, settings=settings)
                results.append(result)
                if report:
                    generate_report(result)
            except SSISError as e:
                failures += 1
                logger.error("Failed to process %s: %s", image.name, e)
                console.print(f"  [red]✗[/red] {image.name}: {e}")
            progress.advance(task)

    for result in results:
        _print_verdict(result, details)

    if report and results:
        console.print(f"[dim]Reports written to {settings.paths.report_dir}/[/dim]\n")
    if failures:
        sys.exit(1)


# ═══════════════════════════════════════════════════════
#  EVALUATE: score an extracted record
# ═══════════════════════════════════════════════════════
@main.command()
@click.argument("json_file", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--sample",
    type=click.Choice(["compliant", "non-compliant"], case_sensitive=False),
    default=None,
    help="Evaluate a built-in sample record instead of a file.",
)
@click.option("--details/--no-details", default=True, help="Show the per-rule breakdown.")
@click.option("--json", "as_json", is_flag=True, help="Print the verdict as JSON.")
def evaluate(json_file: Path | None, sample: str | None, details: bool, as_json: bool):
    """Score a nutrition record (extraction JSON) against the SSIS rules."""
    from ssis_compliance.pipeline import SAMPLE_RECORDS, check_record

    if json_file is None and sample is None:
        console.print("[red]Pass a JSON file or --sample.[/red]")
        sys.exit(1)

    if sample is not None:
        data = SAMPLE_RECORDS[sample.lower()]
        label_name = sample.lower()
    else:
        try:
            data = json.loads(json_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            console.print(f"[red]Invalid JSON in {json_file.name}:[/red] {e}")
            sys.exit(1)
        # Accept the extraction endpoint's {"success": ..., "data": {...}} envelope too
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        if not isinstance(data, dict):
            console.print(f"[red]{json_file.name} must contain a JSON object.[/red]")
            sys.exit(1)
        label_name = json_file.stem

    result = check_record(data, label_name=label_name)

    if as_json:
        click.echo(json.dumps(result.verdict.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_verdict(result, details)


# ═══════════════════════════════════════════════════════
#  COMPRESS: shrink an image under the upload target
# ═══════════════════════════════════════════════════════
@main.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), required=True)
@click.option("--target-bytes", "-t", type=click.IntRange(min=1), default=None, help="Byte ceiling. Default: config.")
@click.option("--max-attempts", "-n", type=click.IntRange(min=1), default=None, help="Attempt budget. Default: config.")
def compress(image: Path, output: Path, target_bytes: int | None, max_attempts: int | None):
    """Compress IMAGE until it fits under the byte ceiling."""
    from ssis_compliance.imaging.compressor import CompressionFailure, compress_bytes

    settings = get_settings()
    target = target_bytes or settings.compression.target_bytes
    attempts = max_attempts or settings.compression.max_attempts

    data = image.read_bytes()
    try:
        outcome = compress_bytes(
            data,
            target_bytes=target,
            max_attempts=attempts,
            max_dimension=settings.compression.max_dimension,
        )
    except SSISError as e:
        console.print(f"[red]✗ {image.name}:[/red] {e}")
        sys.exit(1)

    table = Table(title=f"Compression: {image.name}", show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Quality", justify="right")
    table.add_column("Size (px)", justify="right")
    table.add_column("Bytes", justify="right")
    for i, a in enumerate(outcome.attempts, 1):
        style = "green" if a.byte_size <= target else "red"
        table.add_row(str(i), f"{a.quality:.2f}", f"{a.width}x{a.height}", f"[{style}]{human_bytes(a.byte_size)}[/{style}]")
    console.print(table)

    if isinstance(outcome, CompressionFailure):
        console.print(f"[red]✗ {outcome.reason}. Please use a smaller image.[/red]")
        sys.exit(1)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(outcome.data)
    console.print(
        f"[bold green]✓[/bold green] {human_bytes(len(data))} → {human_bytes(outcome.byte_size)} "
        f"({outcome.mime_type}) → {output}"
    )


def _print_verdict(result, details: bool) -> None:
    """Display a verdict: status line, optional breakdown, issue list."""
    from ssis_compliance.compliance.summary import (
        failure_bullets,
        format_compliance_details,
        get_compliance_summary,
    )

    summary = get_compliance_summary(result.verdict)
    color = "green" if result.verdict.is_compliant else "red"
    title = result.record.product_name or result.label_name
    console.print(f"\n{summary.icon} [bold]{title}[/bold]: [{color}]{summary.message}[/{color}]")

    if details:
        table = Table(title="Detailed Requirements Check", show_lines=True)
        table.add_column("", justify="center")
        table.add_column("Requirement", style="bold")
        table.add_column("Actual")
        table.add_column("Required", style="cyan")
        table.add_column("Explanation")
        for d in format_compliance_details(result.verdict):
            table.add_row(d.icon, d.name, d.value, d.requirement, d.explanation)
        console.print(table)

    bullets = failure_bullets(result.verdict)
    if bullets:
        console.print("[bold]Issues Found:[/bold]")
        for b in bullets:
            console.print(f"  • {b}")
    console.print()


if __name__ == "__main__":
    main()
