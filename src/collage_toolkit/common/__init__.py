"""
Common helpers shared across the toolkit.

Constants for size floors and excluded extensions, file name helpers
and the file system collaborator.
"""

from .constants import (
    MIN_IMAGE_WIDTH,
    PDF_MIME_TYPE,
    PDF_EXTENSION,
    XML_EXTENSION,
    EXCLUDED_EXTENSIONS,
    SUPPORTED_MIME_TYPES,
    MEDIA_THRESHOLDS,
)
from .path_utils import file_extension, is_excluded, is_pdf, is_xml, resized_filename
from .filesystem import FileSystemAdapter

__all__ = [
    "MIN_IMAGE_WIDTH",
    "PDF_MIME_TYPE",
    "PDF_EXTENSION",
    "XML_EXTENSION",
    "EXCLUDED_EXTENSIONS",
    "SUPPORTED_MIME_TYPES",
    "MEDIA_THRESHOLDS",
    "file_extension",
    "is_excluded",
    "is_pdf",
    "is_xml",
    "resized_filename",
    "FileSystemAdapter",
]
