"""Centralized constants and tuning values.

Size floors, excluded extensions, supported output formats and the
enhancement factors used by the homogenizer live here so they can be
tuned in one place.
"""

from __future__ import annotations

from dataclasses import dataclass

MIN_IMAGE_WIDTH = 600
RIGHT_ROTATION_DEGREES = 90

PDF_MIME_TYPE = "application/pdf"
PDF_EXTENSION = ".pdf"
XML_EXTENSION = ".xml"

# Sidecar XML files never take part; PDFs only go through the document path
EXCLUDED_EXTENSIONS = frozenset({XML_EXTENSION, PDF_EXTENSION})

# MIME type -> Pillow format name
SUPPORTED_MIME_TYPES = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
    "image/gif": "GIF",
    "image/tiff": "TIFF",
    "image/bmp": "BMP",
}

# Formats where the quality setting is honoured
LOSSY_FORMATS = frozenset({"JPEG", "WEBP"})

# Formats that can store an alpha channel; others are flattened onto white
ALPHA_FORMATS = frozenset({"PNG", "WEBP", "GIF", "TIFF"})


@dataclass(frozen=True)
class MediaThresholds:
    """Tuning values for image enhancement and rasterization."""

    sharpen_factor: float = 1.5  # ImageEnhance.Sharpness factor after upscaling
    autolevel_cutoff: int = 0  # Percent of histogram clipped by auto-level
    gamma_floor: float = 0.01  # Mean brightness below this skips auto-gamma
    gamma_ceiling: float = 0.99  # Mean brightness above this skips auto-gamma
    bytes_per_pixel: int = 4  # RGBA worst case when converting memory to pixels
    pdf_points_per_inch: float = 72.0
    ghostscript_timeout_s: int = 120


MEDIA_THRESHOLDS = MediaThresholds()
