"""
Pillow Codec
=============
Decodes label photos and re-encodes them for upload.
Uses Pillow; quality maps onto Pillow's 1-100 scale for lossy formats.
"""

from __future__ import annotations

import io

from PIL import Image, ImageOps, UnidentifiedImageError

from ssis_compliance.errors import ImageDecodeError, ImageTooLargeError
from ssis_compliance.imaging.base import ImageCodec, RasterImage
from ssis_compliance.utils.log import get_logger

logger = get_logger(__name__)

# Pillow format name <-> mime type
_FORMAT_TO_MIME = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
    "BMP": "image/bmp",
}
_MIME_TO_FORMAT = {mime: fmt for fmt, mime in _FORMAT_TO_MIME.items()}
_MIME_TO_FORMAT["image/jpg"] = "JPEG"

_LOSSY_FORMATS = {"JPEG", "WEBP"}


def format_for_mime(mime_type: str) -> str:
    """Map a mime type to a Pillow save format. Unknown types encode as JPEG."""
    return _MIME_TO_FORMAT.get(mime_type.lower(), "JPEG")


class PillowCodec(ImageCodec):
    """Production codec backed by Pillow."""

    def decode(self, data: bytes, mime_type: str | None = None) -> RasterImage:
        if not data:
            raise ImageDecodeError("Image data is empty")
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except Image.DecompressionBombError as e:
            raise ImageTooLargeError(f"Image has too many pixels to process: {e}", byte_size=len(data)) from e
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ImageDecodeError(f"Unable to decode image: {e}") from e

        detected = _FORMAT_TO_MIME.get(img.format or "")
        # Phone cameras store rotation in EXIF; bake it into the pixels
        img = ImageOps.exif_transpose(img)

        if mime_type and mime_type.lower() in _MIME_TO_FORMAT:
            mime = mime_type.lower()
        else:
            mime = detected or "image/jpeg"
        logger.debug(
            "Decoded %s image %dx%d (%d bytes, declared %s)",
            detected or "unknown", img.width, img.height, len(data), mime_type,
        )
        return RasterImage(
            width=img.width,
            height=img.height,
            pixels=img,
            mime_type=mime,
            byte_size=len(data),
        )

    def encode(self, image: RasterImage, width: int, height: int, quality: float) -> bytes:
        img: Image.Image = image.pixels
        if (width, height) != (img.width, img.height):
            img = img.resize((width, height), Image.Resampling.LANCZOS)

        fmt = format_for_mime(image.mime_type)
        params: dict = {}
        if fmt in _LOSSY_FORMATS:
            params["quality"] = max(1, min(100, round(quality * 100)))
        if fmt == "JPEG":
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
            params["optimize"] = True
        elif fmt == "PNG":
            params["optimize"] = True
        elif fmt == "WEBP" and img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGBA")

        buf = io.BytesIO()
        img.save(buf, format=fmt, **params)
        return buf.getvalue()


def decode_image(data: bytes, mime_type: str | None = None, codec: ImageCodec | None = None) -> RasterImage:
    """Decode bytes with the given codec (Pillow by default)."""
    return (codec or PillowCodec()).decode(data, mime_type)
