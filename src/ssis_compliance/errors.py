"""
Exception hierarchy.

Expected failure modes (size ceiling, missing nutrition fields) are
returned as values; these exceptions cover the conditions that stop a
check outright.
"""

from __future__ import annotations


class SSISError(Exception):
    """Base class for all errors raised by ssis_compliance."""


class ImageDecodeError(SSISError):
    """Source bytes could not be interpreted as an image."""


class ImageTooLargeError(SSISError):
    """Compressed image is still over the transport size limit."""

    def __init__(self, message: str, byte_size: int | None = None, limit: int | None = None) -> None:
        super().__init__(message)
        self.byte_size = byte_size
        self.limit = limit


class ProviderConfigError(SSISError):
    """Vision provider is missing credentials or is misconfigured."""


class ExtractionError(SSISError):
    """Vision model call failed or returned unusable output."""

    def __init__(
        self,
        message: str,
        raw_text: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.raw_text = raw_text
        self.status_code = status_code
