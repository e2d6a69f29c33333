"""
Label Check Pipeline
======================
Orchestrates the full SSIS check for a single label photo:

1. Read image bytes
2. Decode the image
3. Compress under the upload target
4. Enforce the hard transport ceiling
5. Extract nutrition fields with the vision model
6. Evaluate the SSIS rules
7. Return structured results

This is the primary entry point for checking a label.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ssis_compliance.ai.base import VisionProvider
from ssis_compliance.ai.extractor import ExtractionResult, extract_nutrition
from ssis_compliance.compliance.engine import evaluate
from ssis_compliance.compliance.models import ComplianceVerdict, NutritionRecord
from ssis_compliance.config import Settings, get_settings
from ssis_compliance.errors import ExtractionError, ImageTooLargeError
from ssis_compliance.imaging.base import ImageCodec
from ssis_compliance.imaging.codec import PillowCodec, decode_image
from ssis_compliance.imaging.compressor import CompressionFailure, CompressionSuccess, compress
from ssis_compliance.utils.helpers import human_bytes
from ssis_compliance.utils.log import get_logger

logger = get_logger(__name__)

# Development fixtures: one product that passes every rule, one that fails every rule
SAMPLE_RECORDS: dict[str, dict[str, Any]] = {
    "compliant": {
        "productName": "Healthy Snack Bar",
        "servingSize": "1 bar (30g)",
        "servingWeightGrams": 30,
        "calories": 150,
        "totalFat": 5,
        "saturatedFat": 1,
        "transFat": 0,
        "sodium": 100,
        "totalSugars": 8,
        "protein": 4,
    },
    "non-compliant": {
        "productName": "High Sugar Cookie",
        "servingSize": "2 cookies (40g)",
        "servingWeightGrams": 40,
        "calories": 250,
        "totalFat": 12,
        "saturatedFat": 6,
        "transFat": 0.5,
        "sodium": 220,
        "totalSugars": 18,
        "protein": 3,
    },
}


@dataclass
class LabelCheckResult:
    """Full SSIS check results for one label."""

    label_name: str
    record: NutritionRecord
    verdict: ComplianceVerdict
    compression: CompressionSuccess | None = None
    extraction: ExtractionResult | None = None
    source_bytes: int | None = None

    @property
    def is_compliant(self) -> bool:
        return self.verdict.is_compliant


def prepare_image(
    data: bytes,
    mime_type: str | None = None,
    codec: ImageCodec | None = None,
    settings: Settings | None = None,
) -> CompressionSuccess:
    """
    Decode and compress an image for upload.

    Raises:
        ImageDecodeError: bytes are not an image.
        ImageTooLargeError: too many pixels to decode, compression could not
            meet the target, or the result is still over the transport ceiling.
    """
    settings = settings or get_settings()
    codec = codec or PillowCodec()
    cfg = settings.compression

    image = decode_image(data, mime_type, codec)
    outcome = compress(
        image,
        target_bytes=cfg.target_bytes,
        max_attempts=cfg.max_attempts,
        codec=codec,
        max_dimension=cfg.max_dimension,
    )

    if isinstance(outcome, CompressionFailure):
        raise ImageTooLargeError(
            f"{outcome.reason}. Please use a smaller image.",
            byte_size=min(a.byte_size for a in outcome.attempts),
            limit=cfg.target_bytes,
        )

    # The ceiling is a hard stop; the compressor is not re-run
    if outcome.byte_size > cfg.transport_limit_bytes:
        raise ImageTooLargeError(
            f"Image is {human_bytes(outcome.byte_size)} after compression, over the "
            f"{human_bytes(cfg.transport_limit_bytes)} upload limit. Please use a smaller image.",
            byte_size=outcome.byte_size,
            limit=cfg.transport_limit_bytes,
        )
    return outcome


def check_label_image(
    source: Path | bytes,
    mime_type: str | None = None,
    provider: VisionProvider | None = None,
    codec: ImageCodec | None = None,
    settings: Settings | None = None,
    label_name: str | None = None,
) -> LabelCheckResult:
    """
    Run the full SSIS check on a label photo.

    Args:
        source: Path to the image file, or the raw image bytes.
        mime_type: Declared mime type. Detected from the bytes when omitted.
        provider: Vision provider. Defaults to the configured one.
        codec: Image codec. Defaults to Pillow.
        settings: Settings override (tests).
        label_name: Name used in logs and reports.

    Returns:
        LabelCheckResult with the extracted record and verdict.

    Raises:
        ImageDecodeError, ImageTooLargeError, ExtractionError
    """
    if isinstance(source, Path):
        data = source.read_bytes()
        label_name = label_name or source.stem
    else:
        data = source
        label_name = label_name or "label"

    logger.info("═" * 60)
    logger.info("Checking label: %s (%s)", label_name, human_bytes(len(data)))
    logger.info("═" * 60)

    logger.info("Step 1: Compressing image...")
    prepared = prepare_image(data, mime_type, codec=codec, settings=settings)

    logger.info("Step 2: Extracting nutrition data...")
    extraction = extract_nutrition(prepared.data, prepared.mime_type, provider=provider)
    if not extraction.success:
        raise ExtractionError(extraction.error or "Failed to extract nutritional data", raw_text=extraction.raw_text)

    logger.info("Step 3: Evaluating SSIS rules...")
    verdict = evaluate(extraction.record)

    return LabelCheckResult(
        label_name=label_name,
        record=extraction.record,
        verdict=verdict,
        compression=prepared,
        extraction=extraction,
        source_bytes=len(data),
    )


def check_record(data: NutritionRecord | Mapping[str, Any], label_name: str | None = None) -> LabelCheckResult:
    """Evaluate an already-extracted record (no image, no model call)."""
    record = data if isinstance(data, NutritionRecord) else NutritionRecord.from_dict(data)
    return LabelCheckResult(
        label_name=label_name or record.product_name or "record",
        record=record,
        verdict=evaluate(record),
    )
