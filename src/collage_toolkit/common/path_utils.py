"""Path and filename utilities.

Extension checks used to route inputs between the collage and
document paths, and naming for resized copies.
"""

from __future__ import annotations

from pathlib import Path

from .constants import EXCLUDED_EXTENSIONS, PDF_EXTENSION, XML_EXTENSION


def file_extension(filename: str | Path) -> str:
    """Return the lower-cased extension including the dot.

    Examples:
        >>> file_extension("scan.JPG")
        '.jpg'
        >>> file_extension(Path("/data/notes"))
        ''
    """
    return Path(filename).suffix.lower()


def is_excluded(filename: str | Path) -> bool:
    """True for extensions that never enter the collage path (.xml, .pdf)."""
    return file_extension(filename) in EXCLUDED_EXTENSIONS


def is_pdf(filename: str | Path) -> bool:
    return file_extension(filename) == PDF_EXTENSION


def is_xml(filename: str | Path) -> bool:
    return file_extension(filename) == XML_EXTENSION


def resized_filename(filename: str | Path) -> str:
    """Name for the resized copy of a file.

    Examples:
        >>> resized_filename("/uploads/car.jpg")
        'car_resized.jpg'
    """
    path = Path(filename)
    return f"{path.stem}_resized{path.suffix}"
