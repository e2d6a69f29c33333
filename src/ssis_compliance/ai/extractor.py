"""
Nutrition Extraction
=====================
Asks a vision model to read a nutrition-facts label and turns its reply
into a NutritionRecord.

Model output is parsed leniently (code fences, surrounding prose,
trailing commas, truncation). Failures come back as an ExtractionResult
with a message fit to show the user.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field

from ssis_compliance.ai.base import VisionProvider, get_ai_provider
from ssis_compliance.compliance.models import NutritionRecord
from ssis_compliance.errors import ExtractionError, ProviderConfigError
from ssis_compliance.utils.log import get_logger

logger = get_logger(__name__)

NUTRITION_PROMPT = """\
Please extract all nutritional information from this food product label image for SSIS compliance checking.

Return the data as a JSON object with the following structure:
{
  "productName": "string",
  "servingSize": "string",
  "servingWeightGrams": "number (extract the weight in grams from serving size, e.g., from '28g' extract 28)",
  "calories": "number",
  "totalFat": "number",
  "saturatedFat": "number",
  "transFat": "number",
  "cholesterol": "number",
  "sodium": "number",
  "totalCarbohydrates": "number",
  "dietaryFiber": "number",
  "totalSugars": "number",
  "addedSugars": "number",
  "protein": "number",
  "ingredients": ["array of ingredient strings"],
  "allergens": ["array of allergen strings"],
  "additionalInfo": "any other relevant nutritional information"
}

IMPORTANT:
- Extract numbers without units (just the numeric value)
- For servingWeightGrams, convert serving size to grams (e.g., "1 cup (28g)" -> 28, "2 pieces (30g)" -> 30)
- If serving weight is in other units, convert to grams where possible
- If a value is not visible or available, use null
- Only return the JSON object, no additional text."""

# Fields a label needs before its data is considered usable
REQUIRED_FIELDS = ("calories", "totalFat", "sodium", "totalCarbohydrates", "protein")


@dataclass
class ExtractionResult:
    """Outcome of one extraction call."""

    success: bool
    record: NutritionRecord | None = None
    data: dict = field(default_factory=dict)
    raw_text: str | None = None
    error: str | None = None


@dataclass
class DataCompleteness:
    is_valid: bool
    missing_fields: list[str]
    completeness: float  # 0-100%


# ═══════════════════════════════════════════════════════
#  JSON parsing
# ═══════════════════════════════════════════════════════

def parse_ai_json(raw: str | None) -> dict | list | None:
    """Robustly extract JSON from a model reply.

    Handles:
    - Pure JSON output
    - Markdown code blocks (```json ... ```)
    - JSON embedded in narrative text
    - Truncated JSON (best-effort repair)
    """
    if not raw or not raw.strip():
        return None

    text = raw.strip()

    # 1. Remove markdown code block wrappers
    if text.startswith("```"):
        lines = text.split("\n")
        lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines).strip()

    # 2. Try direct parse first
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # 3. Find the outermost { } and try parsing, then repair
    start = text.find("{")
    if start == -1:
        return None
    end = text.rfind("}")
    candidate = text[start:end + 1] if end > start else text[start:]
    # Truncated after a nested object: keep the tail so the repair can close it
    if text[start:].count("{") > text[start:].count("}"):
        candidate = text[start:]
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        pass
    try:
        return json.loads(repair_json(candidate))
    except json.JSONDecodeError:
        logger.debug("Unrepairable model JSON: %.200s", candidate)
        return None


def repair_json(text: str) -> str:
    """Attempt to repair common JSON issues from LLM output."""
    # Python-style literals
    text = re.sub(r":\s*None\b", ": null", text)
    text = re.sub(r":\s*(?:NaN|N/A)\b", ": null", text)
    # Single quotes → double quotes when the reply has no double quotes at all
    if "'" in text and '"' not in text:
        text = text.replace("'", '"')
    # Close unclosed brackets/braces left by truncation
    open_brackets = text.count("[") - text.count("]")
    open_braces = text.count("{") - text.count("}")
    if open_brackets > 0:
        text += "]" * open_brackets
    if open_braces > 0:
        text += "}" * open_braces
    # Remove trailing commas before } or ], including ones exposed by the closers above
    text = re.sub(r",\s*([}\]])", r"\1", text)
    return text


# ═══════════════════════════════════════════════════════
#  Error messages
# ═══════════════════════════════════════════════════════

def friendly_error(error: Exception) -> str:
    """Map a provider failure to a message the user can act on."""
    message = str(error) or error.__class__.__name__
    lowered = message.lower()
    status = getattr(error, "status_code", None)

    if isinstance(error, ProviderConfigError):
        if "api key" in lowered:
            return "API key missing. Please provide a valid API key."
        return message
    if status == 401 or "invalid api key" in lowered or "incorrect api key" in lowered:
        return "Invalid API key. Please check your API key and try again."
    if status == 429 or "rate limit" in lowered:
        return "API rate limit exceeded. Please try again later."
    if status == 413 or "too large" in lowered:
        return "Image too large for processing. Please use a smaller image."
    if "connect" in lowered or "timed out" in lowered:
        return "Cannot connect to the vision model. Please check your connection and try again."
    return message


# ═══════════════════════════════════════════════════════
#  Extraction
# ═══════════════════════════════════════════════════════

def extract_nutrition(
    image_data: bytes,
    mime_type: str = "image/jpeg",
    provider: VisionProvider | None = None,
) -> ExtractionResult:
    """
    Read nutrition fields from a label image.

    Args:
        image_data: Encoded image bytes (already compressed for transport).
        mime_type: Mime type of `image_data`.
        provider: Vision provider. Defaults to the configured one.

    Returns:
        ExtractionResult; on failure `error` holds a user-facing message.
    """
    if not image_data:
        return ExtractionResult(success=False, error="Image data is required")

    try:
        provider = provider or get_ai_provider()
        logger.info("Extracting nutrition data with %s (%d bytes, %s)", provider.name, len(image_data), mime_type)
        raw = provider.extract(NUTRITION_PROMPT, image_data, mime_type or "image/jpeg")
    except (ExtractionError, ProviderConfigError) as e:
        logger.error("Extraction failed: %s", e)
        return ExtractionResult(success=False, error=friendly_error(e), raw_text=getattr(e, "raw_text", None))

    parsed = parse_ai_json(raw)
    if not isinstance(parsed, dict):
        logger.error("Could not parse nutrition JSON from model reply (%d chars)", len(raw or ""))
        return ExtractionResult(
            success=False,
            raw_text=raw,
            error="Failed to parse nutritional data from image",
        )

    record = NutritionRecord.from_dict(parsed)
    logger.info("Extracted nutrition data for %s", record.product_name or "unnamed product")
    return ExtractionResult(success=True, record=record, data=parsed, raw_text=raw)


def validate_nutritional_data(record: NutritionRecord) -> DataCompleteness:
    """Report which core label fields the extraction could not find."""
    missing = [name for name in REQUIRED_FIELDS if record.get(name) is None]
    return DataCompleteness(
        is_valid=not missing,
        missing_fields=missing,
        completeness=(len(REQUIRED_FIELDS) - len(missing)) / len(REQUIRED_FIELDS) * 100,
    )
