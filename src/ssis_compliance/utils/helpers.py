"""
Shared helper functions.
"""

from __future__ import annotations

import math
import re


def safe_filename(name: str) -> str:
    """Convert an arbitrary string to a filesystem-safe filename."""
    return re.sub(r"[^\w\-]", "_", name).strip("_")


def format_number(value: float | int) -> str:
    """Render a number the way it was extracted: 150.0 -> '150', 0.5 -> '0.5'."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def split_camel_case(name: str) -> str:
    """'saturatedFat' -> 'saturated Fat'."""
    return re.sub(r"(?<!^)([A-Z])", r" \1", name)


def camel_to_snake(name: str) -> str:
    """'servingWeightGrams' -> 'serving_weight_grams'."""
    return re.sub(r"(?<!^)([A-Z])", r"_\1", name).lower()


def snake_to_camel(name: str) -> str:
    """'serving_weight_grams' -> 'servingWeightGrams'."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def human_bytes(size: int) -> str:
    """Format a byte count for log and console output."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
