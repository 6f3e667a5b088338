"""Exceptions raised at the text-acquisition boundary and surfaced by the portal."""
from __future__ import annotations

from typing import Optional


class MenuScanError(Exception):
    """Base class for menuscan failures the caller should report."""
    status_code = 500


class TextAcquisitionError(MenuScanError):
    """OCR could not produce text for an image."""
    status_code = 502


class UnsupportedImageError(TextAcquisitionError):
    """The upload is not an image we can open."""
    status_code = 400


class VisionApiError(TextAcquisitionError):
    """The remote vision API rejected the request or returned no text."""

    def __init__(self, message: str, http_status: Optional[int] = None):
        super().__init__(message)
        self.http_status = http_status
