"""
Module: output

Purpose:
    Serialize composed pages to PDF and describe produced artifacts.

Key Functions:
    - render_pages_to_pdf(): Multi-page PDF from page images
    - build_media_descriptor(): Metadata record for an artifact
"""

from .pdf_writer import render_pages_to_pdf
from .descriptor import build_media_descriptor, media_url

__all__ = ["render_pages_to_pdf", "build_media_descriptor", "media_url"]
