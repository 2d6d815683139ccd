"""
Module: controller

Purpose:
    Orchestrate the three composition operations.
    Collage:  Filter → Load → Orient → Normalize width → Homogenize → Montage → Resize → Save
    Document: Filter → Sort → Rasterize/Load → Orient → Resize → Render PDF
    Resize:   Filter → Load → Resize by orientation → Save copy

Key Classes:
    - MediaEngine: Entry point holding config, backends and memory governor

Dependencies:
    - engine: Orientation, resize, homogenization, memory governance
    - layout: Montage geometry
    - images: ImageOps backend and PDF rasterizers
    - output: PDF rendering and media descriptors

Used By:
    - collage_toolkit.cli: Command line
"""

from __future__ import annotations

import logging
import mimetypes
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence

from collage_toolkit.common.constants import MIN_IMAGE_WIDTH, PDF_MIME_TYPE, SUPPORTED_MIME_TYPES
from collage_toolkit.common.filesystem import FileSystemAdapter
from collage_toolkit.common.path_utils import is_excluded, is_xml, resized_filename
from collage_toolkit.config import EngineConfig
from collage_toolkit.core.models import (
    CollageImage,
    CollageSettings,
    DocumentInput,
    HostedFile,
    MediaDescriptor,
    PdfSettings,
)
from collage_toolkit.engine import (
    ResourceGovernor,
    correct_orientation,
    homogenize_collection,
    resize_by_orientation,
    resize_proportional,
)
from collage_toolkit.errors import ContractViolationError, OutOfRangeError, ResourceError
from collage_toolkit.images import ImageBatch, ImageOps, PdfRasterizer, PillowImageOps, create_rasterizer
from collage_toolkit.layout import plan_montage
from collage_toolkit.output import build_media_descriptor, media_url, render_pages_to_pdf

logger = logging.getLogger(__name__)

PdfWriter = Callable[..., None]


def _require_files(items: Optional[Iterable[Any]], name: str) -> List[Any]:
    """Materialize items and reject None or blank filenames."""
    if items is None:
        raise ContractViolationError(f"{name} is required")
    items = list(items)
    for item in items:
        filename = getattr(item, "filename", None)
        if filename is None or not str(filename).strip():
            raise ContractViolationError(f"{name} contains an entry without a filename")
    return items


class MediaEngine:
    """
    Collage, document and resize operations over one engine config.

    Construction applies the configured memory limit to the imaging
    engine (process-wide, at most once). Construct engines from one
    thread at a time.

    Attributes:
        config: Engine configuration
        governor: Memory governor created from config

    Example:
        >>> engine = MediaEngine(EngineConfig(collage_image_width=1200))
        >>> media = engine.create_collage(
        ...     [CollageImage("a.jpg", OrientationTag.LANDSCAPE)],
        ...     CollageSettings(2, "image/jpeg", "collage.jpg", "/out", "https://cdn"),
        ... )
        >>> media.url
        'https://cdn/collage.jpg'
    """

    def __init__(
        self,
        config: EngineConfig,
        *,
        fs: Optional[FileSystemAdapter] = None,
        ops: Optional[ImageOps] = None,
        rasterizer: Optional[PdfRasterizer] = None,
        pdf_writer: PdfWriter = render_pages_to_pdf,
    ) -> None:
        if config is None:
            raise ContractViolationError("config is required")
        self.config = config
        self.governor = ResourceGovernor(config)
        self._fs = fs or FileSystemAdapter()
        self._ops = ops or PillowImageOps()
        self._rasterizer = rasterizer or create_rasterizer(config.ghostscript_directory, self._fs)
        self._pdf_writer = pdf_writer

    # ─────────────────────────────────────────────────────────────────────────
    # Collage
    # ─────────────────────────────────────────────────────────────────────────

    def create_collage(
        self,
        collage_images: Optional[Iterable[CollageImage]],
        settings: Optional[CollageSettings],
    ) -> Optional[MediaDescriptor]:
        """
        Tile images into a fixed-column grid and save it.

        .xml and .pdf inputs are skipped. Every other input is rotated to
        its declared orientation, normalized to the configured collage
        width and homogenized. The montage uses the first tile's size as
        the cell size on a white background and is finally resized to the
        collage width.

        Args:
            collage_images: Tiles in output order
            settings: Grid columns and output target

        Returns:
            MediaDescriptor, or None when no input survives filtering

        Raises:
            ContractViolationError: Missing images/settings or blank filenames
            ResourceError: Output folder or an input file missing
            ProcessingError: An input could not be decoded or the
                collage could not be encoded
        """
        collage_images = _require_files(collage_images, "collage_images")
        if settings is None:
            raise ContractViolationError("collage settings are required")

        selected = [ci for ci in collage_images if not is_excluded(ci.filename)]
        if len(selected) < len(collage_images):
            logger.debug(f"Skipped {len(collage_images) - len(selected)} excluded collage inputs")
        if not selected:
            logger.info("No collage inputs after filtering, nothing produced")
            return None

        self._require_directory(settings.output_folder)
        width = self.config.collage_image_width
        start_time = time.perf_counter()
        logger.info(f"Creating {settings.columns}-column collage from {len(selected)} images")

        with ImageBatch(self._ops) as batch:
            tiles = []
            for collage_image in selected:
                img = batch.track(self._ops.load(Path(collage_image.filename)))
                img = batch.track(correct_orientation(self._ops, img, collage_image.orientation))
                img = batch.track(resize_proportional(self._ops, img, width=width))
                tiles.append(img)

            tiles = homogenize_collection(self._ops, tiles, batch)

            first = tiles[0]
            plan = plan_montage(
                [(t.width, t.height) for t in tiles],
                settings.columns,
                (first.width, first.height),
            )
            composite = batch.track(self._ops.montage(tiles, plan))
            composite = batch.track(resize_proportional(self._ops, composite, width=width))
            self._ops.save(
                composite,
                settings.output_path,
                settings.mime_type,
                self.config.collage_image_quality,
            )

        media = build_media_descriptor(
            settings.mime_type,
            settings.output_folder,
            settings.filename,
            settings.base_url,
            fs=self._fs,
        )
        duration = time.perf_counter() - start_time
        logger.info(f"Collage written to {media.filename} in {duration:.2f}s")
        return media

    # ─────────────────────────────────────────────────────────────────────────
    # Resize
    # ─────────────────────────────────────────────────────────────────────────

    def resize_media_files(
        self,
        media_files: Optional[Iterable[HostedFile]],
        output_folder: Optional[str],
        base_url: Optional[str],
        new_image_width: Optional[int] = None,
    ) -> List[HostedFile]:
        """
        Write resized copies of images and point the records at them.

        Landscape images are resized by width, portrait images by height,
        both to new_image_width (or the configured collage width). Copies
        are named <stem>_resized<ext>, made unique in output_folder.
        Excluded files (.xml, .pdf) are returned unchanged.

        Raises:
            ContractViolationError: Missing files/folder or blank filenames
            OutOfRangeError: new_image_width below the 600px floor
            ResourceError: Output folder or an input file missing
            ProcessingError: An input could not be decoded or encoded
        """
        media_files = _require_files(media_files, "media_files")
        if output_folder is None or not str(output_folder).strip():
            raise ContractViolationError("output_folder is required")
        if new_image_width is not None and new_image_width < MIN_IMAGE_WIDTH:
            raise OutOfRangeError(
                f"The new_image_width is invalid. The minimum value accepted is {MIN_IMAGE_WIDTH}."
            )
        self._require_directory(output_folder)

        width = new_image_width if new_image_width is not None else self.config.collage_image_width
        mime_types = {
            mf.filename: _mime_type_for(mf.filename)
            for mf in media_files
            if not is_excluded(mf.filename)
        }

        resized: List[HostedFile] = []
        with ImageBatch(self._ops) as batch:
            for media_file in media_files:
                if is_excluded(media_file.filename):
                    resized.append(media_file)
                    continue
                img = batch.track(self._ops.load(Path(media_file.filename)))
                img = batch.track(resize_by_orientation(self._ops, img, width))

                new_name = self._fs.generate_unique_filename(
                    output_folder, resized_filename(media_file.filename)
                )
                new_path = Path(output_folder) / new_name
                self._ops.save(img, new_path, mime_types[media_file.filename],
                               self.config.collage_image_quality)
                logger.debug(f"Resized {media_file.filename} -> {new_path} ({img.width}x{img.height})")
                resized.append(replace(media_file, filename=str(new_path), url=media_url(base_url, new_name)))

        logger.info(f"Resized {len(mime_types)} of {len(media_files)} media files to {width}px")
        return resized

    # ─────────────────────────────────────────────────────────────────────────
    # Document
    # ─────────────────────────────────────────────────────────────────────────

    def create_pdf(
        self,
        media_files: Optional[Iterable[DocumentInput]],
        settings: Optional[PdfSettings],
    ) -> Optional[MediaDescriptor]:
        """
        Assemble images and PDF pages into one multi-page PDF.

        .xml inputs are skipped and the rest are ordered by ascending sort
        priority (stable). PDF sources are rasterized in grayscale at the
        configured density, stripped of metadata and each page appended;
        image sources are rotated to their declared orientation and
        appended as one page. Every page is resized to the document width
        and encoded at the configured quality.

        Args:
            media_files: Source files
            settings: Output target and optional page width

        Returns:
            MediaDescriptor, or None when no input survives filtering

        Raises:
            ContractViolationError: Missing files/settings or blank filenames
            ResourceError: Output folder or an input file missing
            ProcessingError: A source could not be decoded or rasterized.
                No PDF is written in that case.
        """
        media_files = _require_files(media_files, "media_files")
        if settings is None:
            raise ContractViolationError("pdf settings are required")

        ordered = sorted(
            (mf for mf in media_files if not is_xml(mf.filename)),
            key=lambda mf: mf.sort_priority,
        )
        if not ordered:
            logger.info("No document inputs after filtering, nothing produced")
            return None

        self._require_directory(settings.output_folder)
        page_width = settings.page_width
        quality = self.config.collage_image_quality
        density = self.config.collage_pdf_density
        start_time = time.perf_counter()
        logger.info(f"Creating PDF from {len(ordered)} sources at {page_width}px page width")

        with ImageBatch(self._ops) as batch:
            pages: List[Any] = []
            for source in ordered:
                if source.is_pdf:
                    pages.extend(self._pdf_pages(source, batch, page_width, density, quality))
                else:
                    pages.append(self._image_page(source, batch, page_width, quality))

            self._pdf_writer(pages, settings.output_path, dpi=density, default_quality=quality)

        media = build_media_descriptor(
            PDF_MIME_TYPE,
            settings.output_folder,
            settings.filename,
            settings.base_url,
            fs=self._fs,
        )
        duration = time.perf_counter() - start_time
        logger.info(f"PDF with {len(pages)} pages written to {media.filename} in {duration:.2f}s")
        return media

    def _pdf_pages(
        self,
        source: DocumentInput,
        batch: ImageBatch,
        page_width: int,
        density: int,
        quality: int,
    ) -> Sequence[Any]:
        pages = [batch.track(p) for p in self._rasterizer.rasterize(Path(source.filename), density)]
        result = []
        for page in pages:
            page = batch.track(self._ops.strip(page))
            page = batch.track(resize_proportional(self._ops, page, width=page_width))
            result.append(batch.track(self._ops.set_quality(page, quality)))
        logger.debug(f"Added {len(result)} pages from {source.filename}")
        return result

    def _image_page(
        self,
        source: DocumentInput,
        batch: ImageBatch,
        page_width: int,
        quality: int,
    ) -> Any:
        img = batch.track(self._ops.load(Path(source.filename)))
        img = batch.track(correct_orientation(self._ops, img, source.orientation))
        img = batch.track(resize_proportional(self._ops, img, width=page_width))
        return batch.track(self._ops.set_quality(img, quality))

    def _require_directory(self, folder: str) -> None:
        if not self._fs.directory_exists(folder):
            raise ResourceError(f"The output folder does not exist: {folder}")


def _mime_type_for(filename: str) -> str:
    """MIME type for an image file name, validated against the encoders."""
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None or mime_type.lower() not in SUPPORTED_MIME_TYPES:
        raise ContractViolationError(f"Unsupported image type for resizing: {filename}")
    return mime_type
