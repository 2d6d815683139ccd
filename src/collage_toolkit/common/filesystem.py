"""
Module: common.filesystem

Purpose:
    Thin file system collaborator used by the composers to check
    directories, read artifacts back for checksums and pick unique
    output filenames.

Key Classes:
    - FileSystemAdapter: Existence checks, byte reads, unique names

Used By:
    - collage_toolkit.controller: Output folder checks, resized names
    - collage_toolkit.images.rasterizers: Ghostscript detection
    - collage_toolkit.output.descriptor: Artifact checksums
"""

from __future__ import annotations

import logging
from pathlib import Path

from collage_toolkit.errors import ResourceError

logger = logging.getLogger(__name__)


class FileSystemAdapter:
    """File existence, read and naming helpers."""

    def directory_exists(self, path: str | Path) -> bool:
        return Path(path).is_dir()

    def file_exists(self, path: str | Path) -> bool:
        return Path(path).is_file()

    def read_all_bytes(self, path: str | Path) -> bytes:
        """
        Read a whole file.

        Raises:
            ResourceError: If the file is missing or unreadable
        """
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise ResourceError(f"Failed to read {path}: {e}") from e

    def generate_unique_filename(self, directory: str | Path, filename: str) -> str:
        """
        Return a filename that does not yet exist in directory.

        Appends a counter in parentheses before the extension on collision.

        Example:
            >>> fs.generate_unique_filename("/out", "car.jpg")
            'car(1).jpg'  # when /out/car.jpg already exists
        """
        directory = Path(directory)
        stem, suffix = Path(filename).stem, Path(filename).suffix
        candidate = filename
        counter = 0
        while self.file_exists(directory / candidate):
            counter += 1
            candidate = f"{stem}({counter}){suffix}"
        if counter:
            logger.debug(f"Renamed {filename} to {candidate} to avoid collision")
        return candidate
