"""
Module: output.descriptor

Purpose:
    Build the metadata record returned for every produced artifact.

Key Functions:
    - media_url(): base_url/filename
    - build_media_descriptor(): MediaDescriptor with UTC timestamps and checksums

Dependencies:
    - hashlib (std): Artifact checksums
    - common.filesystem: Reading the written artifact

Used By:
    - collage_toolkit.controller: Collage and document paths
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from collage_toolkit.common.filesystem import FileSystemAdapter
from collage_toolkit.core.models import MediaDescriptor


def media_url(base_url: Optional[str], filename: str) -> str:
    """
    Public URL of a file under base_url.

    Example:
        >>> media_url("https://cdn.example.com/media/", "collage.jpg")
        'https://cdn.example.com/media/collage.jpg'
    """
    base = (base_url or "").rstrip("/")
    return f"{base}/{filename}"


def build_media_descriptor(
    mime_type: str,
    output_folder: str | Path,
    filename: str,
    base_url: Optional[str],
    *,
    fs: Optional[FileSystemAdapter] = None,
    now: Optional[datetime] = None,
    title: Optional[str] = None,
) -> MediaDescriptor:
    """
    Describe an artifact that has already been written.

    Args:
        mime_type: MIME type of the artifact
        output_folder: Directory holding the artifact
        filename: Artifact file name
        base_url: Prefix for the URL
        fs: File system used to read the artifact for checksums
        now: Timestamp to use (defaults to the current UTC time)
        title: Optional metadata title

    Returns:
        MediaDescriptor with identical creation and modification times
    """
    fs = fs or FileSystemAdapter()
    path = (Path(output_folder) / filename).resolve()
    stamp = now or datetime.now(timezone.utc)
    data = fs.read_all_bytes(path)

    return MediaDescriptor(
        mime_type=mime_type,
        filename=str(path),
        url=media_url(base_url, filename),
        date_created=stamp,
        date_modified=stamp,
        metadata_title=title,
        checksum_sha1=hashlib.sha1(data).hexdigest(),
        checksum_md5=hashlib.md5(data).hexdigest(),
    )
