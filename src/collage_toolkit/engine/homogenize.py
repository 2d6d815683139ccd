"""
Module: engine.homogenize

Purpose:
    Bring a batch of already-oriented collage tiles to a common extent
    so the montage does not look broken.

    The batch is split into landscape (width >= height) and portrait
    groups. The larger group (ties go to landscape) is predominant and
    its maximum width and height become the targets:

    1. Landscape images narrower than the max width are upscaled to it;
       portrait or square images taller than the max height are scaled
       down to it. Resized images get a sharpening pass.
    2. Every image, resized or not, then gets auto-level and auto-gamma.

Key Functions:
    - predominant_extent(): Targets from the predominant group
    - homogenize_collection(): Apply both steps to a batch

Used By:
    - collage_toolkit.controller: Collage composition
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from collage_toolkit.core.models import GeometricOrientation
from collage_toolkit.images.batch import ImageBatch
from collage_toolkit.images.ops import ImageOps

from .orientation import classify_orientation
from .resize import scaled_size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredominantExtent:
    """
    Targets derived from the predominant orientation group.

    Attributes:
        orientation: Predominant group
        max_width: Widest image in the group
        max_height: Tallest image in the group
        landscape_count: Images with width >= height
        portrait_count: Images with width < height
    """

    orientation: GeometricOrientation
    max_width: int
    max_height: int
    landscape_count: int
    portrait_count: int


def predominant_extent(sizes: Sequence[Tuple[int, int]]) -> Optional[PredominantExtent]:
    """
    Find the predominant group and its maximum dimensions.

    Returns None for an empty batch.

    Example:
        >>> predominant_extent([(1200, 800), (1200, 900), (1200, 1800)])
        PredominantExtent(orientation=<...LANDSCAPE...>, max_width=1200, max_height=900, ...)
    """
    if not sizes:
        return None

    landscape = [s for s in sizes if classify_orientation(*s) == GeometricOrientation.LANDSCAPE]
    portrait = [s for s in sizes if classify_orientation(*s) == GeometricOrientation.PORTRAIT]

    if len(landscape) >= len(portrait):
        group, orientation = landscape, GeometricOrientation.LANDSCAPE
    else:
        group, orientation = portrait, GeometricOrientation.PORTRAIT

    return PredominantExtent(
        orientation=orientation,
        max_width=max(w for w, _ in group),
        max_height=max(h for _, h in group),
        landscape_count=len(landscape),
        portrait_count=len(portrait),
    )


def homogenize_collection(
    ops: ImageOps,
    images: Sequence[Any],
    batch: Optional[ImageBatch] = None,
) -> List[Any]:
    """
    Resize minority-extent tiles to the predominant group's extent and
    normalize brightness on every tile.

    Args:
        ops: Image backend
        images: Already oriented and width-normalized handles
        batch: Optional batch that takes ownership of derived handles

    Returns:
        New list of handles in the same order
    """
    extent = predominant_extent([(img.width, img.height) for img in images])
    if extent is None:
        return []

    logger.debug(
        f"Homogenizing {len(images)} images: {extent.landscape_count} landscape, "
        f"{extent.portrait_count} portrait, targets {extent.max_width}x{extent.max_height} "
        f"({extent.orientation.value})"
    )

    def _track(image: Any) -> Any:
        return batch.track(image) if batch is not None else image

    result: List[Any] = []
    for img in images:
        size = (img.width, img.height)

        # Step 1: conditional resize + sharpen
        if img.width > img.height:
            if img.width < extent.max_width:
                img = _track(ops.resize(img, *scaled_size(size, width=extent.max_width)))
                img = _track(ops.enhance(img))
        elif img.height > extent.max_height:
            img = _track(ops.resize(img, *scaled_size(size, height=extent.max_height)))
            img = _track(ops.enhance(img))

        # Step 2: unconditional equalization
        img = _track(ops.auto_level(img))
        img = _track(ops.auto_gamma(img))
        result.append(img)

    return result
