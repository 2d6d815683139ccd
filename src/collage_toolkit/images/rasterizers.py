"""
Module: images.rasterizers

Purpose:
    Convert PDF pages to bitmaps at a given density and color mode.
    PyMuPDF is the default backend. An external Ghostscript install is
    used instead when the configured directory holds both expected files.

Key Classes:
    - PdfRasterizer: Abstract rasterizer
    - PyMuPdfRasterizer: Renders pages with fitz
    - GhostscriptRasterizer: Renders pages with the gs command line

Key Functions:
    - find_ghostscript(): Locate a usable Ghostscript executable
    - create_rasterizer(): Pick the backend for an engine config

Dependencies:
    - fitz (PyMuPDF): PDF rendering
    - PIL.Image: Image handling
    - subprocess (std): Ghostscript invocation

Used By:
    - collage_toolkit.controller: Document composition
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import fitz
from PIL import Image

from collage_toolkit.common.constants import MEDIA_THRESHOLDS
from collage_toolkit.common.filesystem import FileSystemAdapter
from collage_toolkit.errors import ProcessingError, ResourceError

logger = logging.getLogger(__name__)

# (library, console executable) expected inside the Ghostscript directory
GHOSTSCRIPT_FILES = {
    "nt": ("gsdll64.dll", "gswin64c.exe"),
    "posix": ("libgs.so", "gs"),
}


class PdfRasterizer(ABC):
    """Abstract PDF page rasterizer."""

    @abstractmethod
    def rasterize(self, path: Path, density: int, *, grayscale: bool = True) -> List[Image.Image]:
        """
        Render every page of a PDF.

        Args:
            path: PDF file
            density: Resolution in dots per inch
            grayscale: Render to a single grey channel

        Returns:
            One image per page, in page order

        Raises:
            ResourceError: If the file does not exist
            ProcessingError: If the PDF cannot be rendered
        """


class PyMuPdfRasterizer(PdfRasterizer):
    """
    Rasterizer on PyMuPDF.

    Example:
        >>> pages = PyMuPdfRasterizer().rasterize(Path("form.pdf"), 150)
        >>> len(pages)
        2
    """

    def rasterize(self, path: Path, density: int, *, grayscale: bool = True) -> List[Image.Image]:
        path = Path(path)
        if not path.is_file():
            raise ResourceError(f"PDF not found: {path}")

        scale = density / MEDIA_THRESHOLDS.pdf_points_per_inch
        matrix = fitz.Matrix(scale, scale)
        colorspace = fitz.csGRAY if grayscale else fitz.csRGB
        mode = "L" if grayscale else "RGB"

        pages: List[Image.Image] = []
        try:
            with fitz.open(str(path)) as doc:
                for page in doc:
                    pix = page.get_pixmap(matrix=matrix, alpha=False, colorspace=colorspace)
                    pages.append(Image.frombytes(mode, (pix.width, pix.height), pix.samples))
        except (RuntimeError, ValueError) as e:
            # fitz.FileDataError derives from RuntimeError
            for page_img in pages:
                page_img.close()
            raise ProcessingError(f"Failed to rasterize {path}: {e}") from e

        logger.debug(f"Rasterized {len(pages)} pages from {path.name} at {density} DPI")
        return pages


class GhostscriptRasterizer(PdfRasterizer):
    """
    Rasterizer that shells out to Ghostscript.

    Attributes:
        executable: Path to the gs console executable
        timeout_s: Seconds before the render is abandoned
    """

    def __init__(self, executable: Path, timeout_s: int = MEDIA_THRESHOLDS.ghostscript_timeout_s) -> None:
        self.executable = Path(executable)
        self.timeout_s = timeout_s

    def rasterize(self, path: Path, density: int, *, grayscale: bool = True) -> List[Image.Image]:
        path = Path(path)
        if not path.is_file():
            raise ResourceError(f"PDF not found: {path}")

        device = "pnggray" if grayscale else "png16m"
        with tempfile.TemporaryDirectory(prefix="gs_pages_") as tmp:
            cmd = [
                str(self.executable),
                "-dSAFER",
                "-dBATCH",
                "-dNOPAUSE",
                "-dQUIET",
                f"-sDEVICE={device}",
                f"-r{density}",
                f"-sOutputFile={Path(tmp) / 'page_%05d.png'}",
                str(path),
            ]
            try:
                proc = subprocess.run(
                    cmd,
                    check=False,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout_s,
                )
            except FileNotFoundError as e:
                raise ResourceError(f"Ghostscript executable not found: {self.executable}") from e
            except subprocess.TimeoutExpired as e:
                raise ProcessingError(f"Ghostscript timed out after {self.timeout_s}s on {path}") from e

            if proc.returncode != 0:
                raise ProcessingError(
                    f"Ghostscript failed on {path} (exit {proc.returncode}): {proc.stderr[-2000:]}"
                )

            pages: List[Image.Image] = []
            for page_file in sorted(Path(tmp).glob("page_*.png")):
                with Image.open(page_file) as img:
                    pages.append(img.copy())

        if not pages:
            raise ProcessingError(f"Ghostscript produced no pages for {path}")
        logger.debug(f"Ghostscript rasterized {len(pages)} pages from {path.name}")
        return pages


def find_ghostscript(
    directory: Optional[str],
    fs: Optional[FileSystemAdapter] = None,
) -> Optional[Path]:
    """
    Locate the Ghostscript console executable in directory.

    Returns None unless the directory exists and holds both the
    library and the executable expected for this platform.

    Example:
        >>> find_ghostscript(r"C:\\gs\\bin")
        WindowsPath('C:/gs/bin/gswin64c.exe')
    """
    if directory is None or not str(directory).strip():
        return None
    fs = fs or FileSystemAdapter()
    if not fs.directory_exists(directory):
        logger.warning(f"Ghostscript directory does not exist: {directory}")
        return None

    library, executable = GHOSTSCRIPT_FILES.get(os.name, GHOSTSCRIPT_FILES["posix"])
    lib_path = Path(directory) / library
    exe_path = Path(directory) / executable
    if fs.file_exists(lib_path) and fs.file_exists(exe_path):
        return exe_path

    logger.warning(f"Ghostscript directory {directory} lacks {library} or {executable}")
    return None


def create_rasterizer(
    ghostscript_directory: Optional[str],
    fs: Optional[FileSystemAdapter] = None,
) -> PdfRasterizer:
    """Ghostscript when a complete install is configured, PyMuPDF otherwise."""
    executable = find_ghostscript(ghostscript_directory, fs)
    if executable is not None:
        logger.info(f"Using Ghostscript at {executable} for PDF rasterization")
        return GhostscriptRasterizer(executable)
    return PyMuPdfRasterizer()
