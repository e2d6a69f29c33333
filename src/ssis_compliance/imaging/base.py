"""
Image Codec — Abstract Base
=============================
Defines the decoded-image value and the decode/encode interface
the compressor works against. Production implementation: Pillow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RasterImage:
    """A decoded bitmap owned by one compression run."""

    width: int
    height: int
    pixels: Any
    mime_type: str
    byte_size: int

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


class ImageCodec(ABC):
    """Decode source bytes and re-encode bitmaps at a given size and quality."""

    @abstractmethod
    def decode(self, data: bytes, mime_type: str | None = None) -> RasterImage:
        """Decode image bytes. Raises ImageDecodeError on unreadable input."""
        ...

    @abstractmethod
    def encode(self, image: RasterImage, width: int, height: int, quality: float) -> bytes:
        """Render `image` at width x height and encode it in its own format."""
        ...
