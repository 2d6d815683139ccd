"""
Module: engine.orientation

Purpose:
    Geometric orientation from pixel dimensions, and rotation of images
    whose geometry contradicts the orientation declared by the caller.

Key Functions:
    - classify_orientation(): Landscape if width >= height
    - needs_rotation(): Whether a declared tag requires a quarter turn
    - correct_orientation(): Rotate 90 degrees clockwise when needed

Used By:
    - engine.homogenize: Grouping by geometry
    - controller: Per-image correction on both paths
"""

from __future__ import annotations

import logging
from typing import Any

from collage_toolkit.common.constants import RIGHT_ROTATION_DEGREES
from collage_toolkit.core.models import GeometricOrientation, OrientationTag
from collage_toolkit.images.ops import ImageOps

logger = logging.getLogger(__name__)


def classify_orientation(width: int, height: int) -> GeometricOrientation:
    """
    Orientation implied by dimensions. Squares count as landscape.

    Example:
        >>> classify_orientation(800, 800)
        <GeometricOrientation.LANDSCAPE: 'landscape'>
    """
    if width >= height:
        return GeometricOrientation.LANDSCAPE
    return GeometricOrientation.PORTRAIT


def needs_rotation(width: int, height: int, declared: OrientationTag) -> bool:
    """True when the declared tag and the geometry disagree."""
    if declared == OrientationTag.PORTRAIT:
        return width > height
    if declared == OrientationTag.LANDSCAPE:
        return width < height
    return False


def correct_orientation(ops: ImageOps, image: Any, declared: OrientationTag) -> Any:
    """
    Rotate image 90 degrees clockwise if it contradicts declared.

    Applying this twice with the same tag gives the same result as once:
    after a rotation the rule no longer fires. NOT_APPLICABLE never rotates.

    Args:
        ops: Image backend
        image: Handle to correct
        declared: Orientation declared by the caller

    Returns:
        The rotated handle, or image itself when no rotation is needed
    """
    if not needs_rotation(image.width, image.height, OrientationTag.parse(declared)):
        return image
    logger.debug(f"Rotating {image.width}x{image.height} image to match {declared}")
    return ops.rotate(image, RIGHT_ROTATION_DEGREES)
