"""
Module: engine.resize

Purpose:
    Aspect-preserving resizing. One dimension is authoritative per call;
    passing 0 for the other means "compute it from the aspect ratio".

Key Functions:
    - scaled_size(): Target size for one authoritative dimension
    - resize_proportional(): Resize a handle by width or height
    - resize_by_orientation(): Resize the governing side to a target

Used By:
    - engine.homogenize: Matching tiles to the predominant extent
    - controller: Collage, resize and document paths
"""

from __future__ import annotations

from typing import Any, Tuple

from collage_toolkit.common.constants import MIN_IMAGE_WIDTH
from collage_toolkit.core.models import GeometricOrientation
from collage_toolkit.errors import ContractViolationError, OutOfRangeError
from collage_toolkit.images.ops import ImageOps

from .orientation import classify_orientation


def _check_floor(value: int, name: str) -> None:
    if value < MIN_IMAGE_WIDTH:
        raise OutOfRangeError(
            f"The {name} is invalid. The minimum value accepted is {MIN_IMAGE_WIDTH}."
        )


def scaled_size(size: Tuple[int, int], width: int = 0, height: int = 0) -> Tuple[int, int]:
    """
    Compute the output size for an aspect-preserving resize.

    Exactly one of width/height must be non-zero.

    Example:
        >>> scaled_size((1600, 900), width=800)
        (800, 450)
        >>> scaled_size((900, 1600), height=800)
        (450, 800)
    """
    src_w, src_h = size
    if bool(width) == bool(height):
        raise ContractViolationError("Exactly one of width or height must be given")
    if width < 0 or height < 0:
        raise OutOfRangeError(f"Target dimensions must be positive: {width}x{height}")
    if width:
        return width, max(1, round(src_h * width / src_w))
    return max(1, round(src_w * height / src_h)), height


def resize_proportional(ops: ImageOps, image: Any, width: int = 0, height: int = 0) -> Any:
    """
    Resize by width or by height, keeping the aspect ratio.

    Raises:
        OutOfRangeError: If width is non-zero and below the 600px floor
        ContractViolationError: If both or neither dimension is given
    """
    if width:
        _check_floor(width, "width")
    target = scaled_size((image.width, image.height), width=width, height=height)
    return ops.resize(image, *target)


def resize_by_orientation(ops: ImageOps, image: Any, target: int) -> Any:
    """
    Resize the side that governs the image's geometry to target.

    Landscape (and square) images are resized by width, portrait images
    by height.

    Raises:
        OutOfRangeError: If target is below the 600px floor
    """
    _check_floor(target, "new image width")
    if classify_orientation(image.width, image.height) == GeometricOrientation.LANDSCAPE:
        return resize_proportional(ops, image, width=target)
    return ops.resize(image, *scaled_size((image.width, image.height), height=target))
