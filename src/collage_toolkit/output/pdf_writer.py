"""
Module: output.pdf_writer

Purpose:
    Write a sequence of page images to a single PDF using ReportLab.
    Each image becomes one page sized to the image at the given DPI.
    Pages are JPEG-encoded at their recorded quality.

Key Functions:
    - render_pages_to_pdf(): Main rendering function

Dependencies:
    - reportlab: PDF generation
    - PIL: Image encoding
    - images.ops: Flattening transparent pages onto white

Used By:
    - collage_toolkit.controller: Document composition
"""

from __future__ import annotations

import io
import logging
import tempfile
from pathlib import Path
from typing import Sequence

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from collage_toolkit.errors import ProcessingError
from collage_toolkit.images.ops import flatten_onto_white

logger = logging.getLogger(__name__)

DEFAULT_DPI = 150
DEFAULT_QUALITY = 75


def render_pages_to_pdf(
    pages: Sequence[Image.Image],
    output_path: Path,
    *,
    dpi: int = DEFAULT_DPI,
    default_quality: int = DEFAULT_QUALITY,
) -> None:
    """
    Render page images to a PDF file.

    The file is written to a temporary name next to output_path and moved
    into place only after the last page is written, so a failure never
    leaves a partial PDF at output_path.

    Args:
        pages: Page images in output order
        output_path: Path to write PDF
        dpi: Pixel density used to convert page sizes to points
        default_quality: JPEG quality when a page has none recorded

    Raises:
        ValueError: If pages is empty
        ProcessingError: If the PDF cannot be written

    Example:
        >>> render_pages_to_pdf([page1, page2], Path("out/document.pdf"), dpi=150)
    """
    if not pages:
        raise ValueError("Cannot render a PDF without pages")

    with tempfile.NamedTemporaryFile(suffix=".pdf", dir=output_path.parent, delete=False) as f:
        temp_path = Path(f.name)

    try:
        c = canvas.Canvas(str(temp_path))
        for page in pages:
            _render_page(c, page, dpi, default_quality)
            c.showPage()
        c.save()
    except Exception as e:
        temp_path.unlink(missing_ok=True)
        raise ProcessingError(f"Failed to write PDF {output_path}: {e}") from e

    # Use replace() instead of rename() for Windows compatibility
    temp_path.replace(output_path)
    logger.info(f"Rendered {len(pages)} pages to {output_path}")


def _render_page(c: canvas.Canvas, page: Image.Image, dpi: int, default_quality: int) -> None:
    """Size the current page to the image and draw it edge to edge."""
    width_pt = _px_to_pt(page.width, dpi)
    height_pt = _px_to_pt(page.height, dpi)
    c.setPageSize((width_pt, height_pt))
    quality = page.info.get("quality", default_quality)
    c.drawImage(_pil_to_reader(page, quality), 0, 0, width=width_pt, height=height_pt)


def _pil_to_reader(img: Image.Image, quality: int) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader via JPEG.

    Args:
        img: PIL Image object
        quality: JPEG quality 0-100

    Returns:
        ImageReader for use with ReportLab
    """
    img = flatten_onto_white(img)
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    buf.seek(0)
    return ImageReader(buf)


def _px_to_pt(px: int, dpi: int = DEFAULT_DPI) -> float:
    """
    Convert pixels to PDF points.

    PDF points are 1/72 inch.
    """
    return px * 72.0 / dpi
