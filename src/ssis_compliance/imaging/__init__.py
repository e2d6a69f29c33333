"""Imaging subpackage — decoded-image value, Pillow codec, adaptive compressor."""

from ssis_compliance.imaging.base import ImageCodec, RasterImage
from ssis_compliance.imaging.compressor import (
    CompressionAttempt,
    CompressionFailure,
    CompressionSuccess,
    compress,
    compress_bytes,
)

__all__ = [
    "ImageCodec",
    "RasterImage",
    "CompressionAttempt",
    "CompressionFailure",
    "CompressionSuccess",
    "compress",
    "compress_bytes",
]
