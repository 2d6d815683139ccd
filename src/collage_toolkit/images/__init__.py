"""
Module: images

Purpose:
    Image capability interface for the composition engine.
    Decode, resize, rotate, enhance, montage and encode live behind
    ImageOps so the algorithms can run against an in-memory fake.

Key Classes:
    - ImageOps: Abstract raster capability interface
    - PillowImageOps: Production implementation on Pillow
    - ImageBatch: Scoped ownership of every handle decoded in a call
    - PdfRasterizer: Abstract PDF page rasterizer
    - PyMuPdfRasterizer: Default rasterizer on PyMuPDF
    - GhostscriptRasterizer: External Ghostscript toolchain

Dependencies:
    - PIL: Image manipulation
    - fitz (PyMuPDF): PDF rendering

Used By:
    - collage_toolkit.engine: Orientation, resize, homogenization
    - collage_toolkit.controller: Composition entry points
"""

from .ops import ImageOps, PillowImageOps
from .batch import ImageBatch
from .rasterizers import (
    PdfRasterizer,
    PyMuPdfRasterizer,
    GhostscriptRasterizer,
    find_ghostscript,
    create_rasterizer,
)

__all__ = [
    "ImageOps",
    "PillowImageOps",
    "ImageBatch",
    "PdfRasterizer",
    "PyMuPdfRasterizer",
    "GhostscriptRasterizer",
    "find_ghostscript",
    "create_rasterizer",
]
