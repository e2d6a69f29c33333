"""Pytest configuration and shared fixtures."""

import io
import os
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add project root and src to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))

# Keep tests off the network and away from a developer's .env choice
os.environ.setdefault("AI_PROVIDER", "none")

from ssis_compliance.imaging.base import ImageCodec, RasterImage  # noqa: E402
from ssis_compliance.ai.base import VisionProvider  # noqa: E402


class FakeCodec(ImageCodec):
    """Deterministic codec: encoded size = width * height * quality * bytes_per_pixel."""

    def __init__(self, bytes_per_pixel: float = 1.0) -> None:
        self.bytes_per_pixel = bytes_per_pixel
        self.calls: list[tuple[int, int, float]] = []

    def decode(self, data: bytes, mime_type: str | None = None) -> RasterImage:
        raise NotImplementedError

    def encode(self, image: RasterImage, width: int, height: int, quality: float) -> bytes:
        self.calls.append((width, height, quality))
        return b"\0" * int(width * height * quality * self.bytes_per_pixel)


class FakeProvider(VisionProvider):
    """Returns a canned reply (or raises) and records what it was sent."""

    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, bytes, str]] = []

    def extract(self, prompt: str, image_data: bytes, mime_type: str) -> str:
        self.calls.append((prompt, image_data, mime_type))
        if self.error is not None:
            raise self.error
        return self.reply

    @property
    def name(self) -> str:
        return "fake"


def make_raster(width: int, height: int, mime_type: str = "image/jpeg") -> RasterImage:
    return RasterImage(width=width, height=height, pixels=None, mime_type=mime_type, byte_size=width * height * 3)


def make_image_bytes(width: int, height: int, fmt: str = "JPEG", noise: bool = True) -> bytes:
    """Encode an in-memory test image. Noise keeps it from compressing to nothing."""
    if noise:
        img = Image.effect_noise((width, height), 64).convert("RGB")
    else:
        img = Image.new("RGB", (width, height), (240, 240, 240))
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def project_root():
    return ROOT


@pytest.fixture
def fake_codec():
    return FakeCodec()


@pytest.fixture
def compliant_data():
    return {
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
    }


@pytest.fixture
def non_compliant_data():
    return {
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
    }
