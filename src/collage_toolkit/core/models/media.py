"""
Module: media

Purpose:
    Inputs, settings and outputs of the collage and document composers.
    All models are frozen dataclasses validated on construction so a bad
    request is rejected before any image is decoded.

Key Classes:
    - OrientationTag: Caller-declared orientation of an input
    - GeometricOrientation: Orientation derived from width vs height
    - CollageImage: (file, declared orientation) for the collage path
    - DocumentInput: (file, sort priority, declared orientation) for the PDF path
    - HostedFile: (file, url) record rewritten by the resize operation
    - CollageSettings: Grid columns and output target for a collage
    - PdfSettings: Output target and page width for a document
    - MediaDescriptor: Metadata record for a produced artifact

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - collage_toolkit.controller: Composition entry points
    - collage_toolkit.engine: Orientation rules
    - collage_toolkit.output.descriptor: Descriptor building
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from collage_toolkit.common.constants import MIN_IMAGE_WIDTH, SUPPORTED_MIME_TYPES
from collage_toolkit.common.path_utils import is_pdf
from collage_toolkit.errors import ContractViolationError, OutOfRangeError


class OrientationTag(str, Enum):
    """
    Orientation declared by the caller for an input image.

    Distinct from the geometric orientation computed from the pixels:
    the tag decides whether an image gets rotated, the geometry decides
    how it is grouped and resized.

    Example:
        >>> OrientationTag.parse("Portrait")
        <OrientationTag.PORTRAIT: 'portrait'>
    """

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    NOT_APPLICABLE = "na"

    @classmethod
    def parse(cls, value: "str | OrientationTag | None") -> "OrientationTag":
        """Parse a tag from user input. None and blank mean NOT_APPLICABLE."""
        if isinstance(value, OrientationTag):
            return value
        if value is None or not str(value).strip():
            return cls.NOT_APPLICABLE
        key = str(value).strip().lower().replace("/", "").replace("_", "")
        aliases = {
            "portrait": cls.PORTRAIT,
            "landscape": cls.LANDSCAPE,
            "na": cls.NOT_APPLICABLE,
            "notapplicable": cls.NOT_APPLICABLE,
        }
        if key not in aliases:
            raise ContractViolationError(f"Unknown orientation: {value!r}")
        return aliases[key]


class GeometricOrientation(str, Enum):
    """Orientation computed from pixel dimensions (square counts as landscape)."""

    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


def _require_text(value: Optional[str], name: str) -> None:
    if value is None or not str(value).strip():
        raise ContractViolationError(f"{name} is required")


@dataclass(frozen=True)
class CollageImage:
    """
    One tile requested for a collage.

    Attributes:
        filename: Path to the source image
        orientation: Declared orientation used for rotation decisions
    """

    filename: str
    orientation: OrientationTag = OrientationTag.NOT_APPLICABLE

    def __post_init__(self) -> None:
        _require_text(self.filename, "filename")


@dataclass(frozen=True)
class DocumentInput:
    """
    One source file for the document (PDF) path.

    Attributes:
        filename: Path to an image or PDF
        sort_priority: Ascending order of appearance in the output
        orientation: Declared document orientation for image sources
        url: Public URL of the source (informational)
    """

    filename: str
    sort_priority: int = 0
    orientation: OrientationTag = OrientationTag.NOT_APPLICABLE
    url: Optional[str] = None

    def __post_init__(self) -> None:
        _require_text(self.filename, "filename")

    @property
    def is_pdf(self) -> bool:
        """True when the extension is .pdf (case-insensitive)."""
        return is_pdf(self.filename)


@dataclass(frozen=True)
class HostedFile:
    """
    A stored file with its public URL.

    The resize operation returns copies of these records pointing at the
    resized files.
    """

    filename: str
    url: Optional[str] = None

    def __post_init__(self) -> None:
        _require_text(self.filename, "filename")


@dataclass(frozen=True)
class CollageSettings:
    """
    Output settings for a collage (immutable).

    Attributes:
        columns: Number of grid columns (> 0)
        mime_type: Output MIME type, e.g. "image/jpeg"
        filename: Output file name inside output_folder
        output_folder: Existing directory to write into
        base_url: Prefix for the artifact URL

    Example:
        >>> CollageSettings(2, "image/jpeg", "collage.jpg", "/out", "https://cdn")
    """

    columns: int
    mime_type: str
    filename: str
    output_folder: str
    base_url: str = ""

    def __post_init__(self) -> None:
        """Validate settings on construction."""
        if self.columns is None or self.columns <= 0:
            raise OutOfRangeError(f"columns must be positive: {self.columns}")
        _require_text(self.mime_type, "mime_type")
        if self.mime_type.lower() not in SUPPORTED_MIME_TYPES:
            raise ContractViolationError(f"Unsupported collage MIME type: {self.mime_type}")
        _require_text(self.filename, "filename")
        _require_text(self.output_folder, "output_folder")

    @property
    def output_path(self) -> Path:
        return Path(self.output_folder) / self.filename


@dataclass(frozen=True)
class PdfSettings:
    """
    Output settings for a composed document (immutable).

    Attributes:
        filename: Output PDF name inside output_folder
        output_folder: Existing directory to write into
        base_url: Prefix for the artifact URL
        resize_document_width: Page width in pixels; None uses the 600px floor
    """

    filename: str
    output_folder: str
    base_url: str = ""
    resize_document_width: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate settings on construction."""
        _require_text(self.filename, "filename")
        _require_text(self.output_folder, "output_folder")
        if self.resize_document_width is not None and self.resize_document_width < MIN_IMAGE_WIDTH:
            raise OutOfRangeError(
                f"resize_document_width is invalid. The minimum value accepted is {MIN_IMAGE_WIDTH}."
            )

    @property
    def page_width(self) -> int:
        """Effective page width: the requested width or the floor."""
        if self.resize_document_width is None:
            return MIN_IMAGE_WIDTH
        return self.resize_document_width

    @property
    def output_path(self) -> Path:
        return Path(self.output_folder) / self.filename


@dataclass(frozen=True)
class MediaDescriptor:
    """
    Metadata for a produced artifact (immutable).

    Attributes:
        mime_type: MIME type of the artifact
        filename: Absolute path of the written file
        url: Public URL (base_url/filename)
        date_created: UTC creation timestamp
        date_modified: UTC modification timestamp
        metadata_title: Optional title
        metadata_alt: Optional alternative text
        metadata_copyright: Optional copyright line
        checksum_sha1: Hex SHA-1 of the written bytes
        checksum_md5: Hex MD5 of the written bytes
    """

    mime_type: str
    filename: str
    url: str
    date_created: datetime
    date_modified: datetime
    metadata_title: Optional[str] = None
    metadata_alt: Optional[str] = None
    metadata_copyright: Optional[str] = None
    checksum_sha1: Optional[str] = None
    checksum_md5: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialize for JSON output."""
        return {
            "mime_type": self.mime_type,
            "filename": self.filename,
            "url": self.url,
            "date_created": self.date_created.isoformat(),
            "date_modified": self.date_modified.isoformat(),
            "metadata_title": self.metadata_title,
            "metadata_alt": self.metadata_alt,
            "metadata_copyright": self.metadata_copyright,
            "checksum_sha1": self.checksum_sha1,
            "checksum_md5": self.checksum_md5,
        }
