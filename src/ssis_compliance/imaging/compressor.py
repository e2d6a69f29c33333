"""
Adaptive Image Compressor
===========================
Re-encodes a label photo until it fits under a byte ceiling.

Schedule:
1. Downscale once so neither side exceeds MAX_DIMENSION (aspect preserved).
2. Encode at quality 0.9; on each miss lower quality by 0.15 down to 0.3.
3. Once quality sits at the floor, shrink both sides to 80% and restart
   at quality 0.7.

Quality goes first because it keeps the resolution the extraction model
needs to read small printed digits; shrinking is the fallback.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ssis_compliance.imaging.base import ImageCodec, RasterImage
from ssis_compliance.imaging.codec import PillowCodec, decode_image
from ssis_compliance.utils.helpers import human_bytes
from ssis_compliance.utils.log import get_logger

logger = get_logger(__name__)

MAX_DIMENSION = 2048
INITIAL_QUALITY = 0.9
QUALITY_STEP = 0.15
QUALITY_FLOOR = 0.3
RESET_QUALITY = 0.7
SHRINK_FACTOR = 0.8

DEFAULT_TARGET_BYTES = int(4.5 * 1024 * 1024)
DEFAULT_MAX_ATTEMPTS = 5


@dataclass(frozen=True)
class CompressionAttempt:
    """Parameters and result size of one encode pass."""

    quality: float
    width: int
    height: int
    byte_size: int


@dataclass(frozen=True)
class CompressionSuccess:
    data: bytes
    byte_size: int
    mime_type: str
    width: int
    height: int
    attempts: tuple[CompressionAttempt, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class CompressionFailure:
    reason: str
    attempts_exhausted: bool = True
    attempts: tuple[CompressionAttempt, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return False


CompressionOutcome = CompressionSuccess | CompressionFailure


def fit_within(width: int, height: int, cap: int = MAX_DIMENSION) -> tuple[int, int]:
    """Scale (width, height) so the larger side equals `cap`. No-op if it already fits."""
    longest = max(width, height)
    if longest <= cap:
        return width, height
    # Integer arithmetic so the long side lands exactly on the cap
    return max(1, width * cap // longest), max(1, height * cap // longest)


def next_parameters(quality: float, width: int, height: int) -> tuple[float, int, int]:
    """Parameters for the attempt after a miss at (quality, width, height)."""
    if quality > QUALITY_FLOOR:
        return max(QUALITY_FLOOR, round(quality - QUALITY_STEP, 2)), width, height
    return (
        RESET_QUALITY,
        max(1, int(width * SHRINK_FACTOR)),
        max(1, int(height * SHRINK_FACTOR)),
    )


def compress(
    image: RasterImage,
    target_bytes: int = DEFAULT_TARGET_BYTES,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    codec: ImageCodec | None = None,
    max_dimension: int = MAX_DIMENSION,
) -> CompressionOutcome:
    """
    Re-encode `image` until it is at most `target_bytes`.

    Args:
        image: Decoded source image.
        target_bytes: Byte ceiling the encoded result must not exceed.
        max_attempts: Maximum number of encode passes.
        codec: Encoder to use. Defaults to Pillow.
        max_dimension: Longest side allowed before the first encode.

    Returns:
        CompressionSuccess on the first pass that fits, otherwise
        CompressionFailure once every attempt has been spent.
    """
    if target_bytes <= 0:
        raise ValueError(f"target_bytes must be positive, got {target_bytes}")
    if max_attempts <= 0:
        raise ValueError(f"max_attempts must be positive, got {max_attempts}")
    if image.width <= 0 or image.height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {image.width}x{image.height}")

    codec = codec or PillowCodec()

    width, height = fit_within(image.width, image.height, max_dimension)
    if (width, height) != image.size:
        logger.debug("Downscaled %dx%d → %dx%d", image.width, image.height, width, height)

    quality = INITIAL_QUALITY
    attempts: list[CompressionAttempt] = []

    for attempt_no in range(1, max_attempts + 1):
        data = codec.encode(image, width, height, quality)
        attempt = CompressionAttempt(quality=quality, width=width, height=height, byte_size=len(data))
        attempts.append(attempt)
        logger.debug(
            "  Attempt %d/%d: q=%.2f %dx%d → %s",
            attempt_no, max_attempts, quality, width, height, human_bytes(len(data)),
        )

        if len(data) <= target_bytes:
            logger.info(
                "Compressed %s → %s in %d attempt(s) (%dx%d, q=%.2f)",
                human_bytes(image.byte_size), human_bytes(len(data)),
                attempt_no, width, height, quality,
            )
            return CompressionSuccess(
                data=data,
                byte_size=len(data),
                mime_type=image.mime_type,
                width=width,
                height=height,
                attempts=tuple(attempts),
            )

        quality, width, height = next_parameters(quality, width, height)

    reason = (
        f"Could not compress image below {human_bytes(target_bytes)} "
        f"in {max_attempts} attempt(s); smallest result was "
        f"{human_bytes(min(a.byte_size for a in attempts))}"
    )
    logger.warning(reason)
    return CompressionFailure(reason=reason, attempts_exhausted=True, attempts=tuple(attempts))


def compress_bytes(
    data: bytes,
    mime_type: str | None = None,
    target_bytes: int = DEFAULT_TARGET_BYTES,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    codec: ImageCodec | None = None,
    max_dimension: int = MAX_DIMENSION,
) -> CompressionOutcome:
    """Decode `data` and compress it. Raises ImageDecodeError on unreadable input."""
    codec = codec or PillowCodec()
    image = decode_image(data, mime_type, codec)
    return compress(image, target_bytes, max_attempts, codec=codec, max_dimension=max_dimension)
