"""
Module: engine

Purpose:
    Per-image and per-batch algorithms shared by the collage and
    document paths: memory governance, orientation inference and
    correction, proportional resizing and batch homogenization.

Key Functions:
    - classify_orientation(): Landscape/portrait from width vs height
    - correct_orientation(): Rotate to match a declared orientation
    - resize_proportional(): Resize by one authoritative dimension
    - resize_by_orientation(): Resize the governing side to a target
    - homogenize_collection(): Match tiles to the predominant group

Key Classes:
    - ResourceGovernor: Caps the imaging engine's memory use
"""

from .resources import ResourceGovernor
from .orientation import classify_orientation, correct_orientation
from .resize import resize_proportional, resize_by_orientation, scaled_size
from .homogenize import homogenize_collection, predominant_extent

__all__ = [
    "ResourceGovernor",
    "classify_orientation",
    "correct_orientation",
    "resize_proportional",
    "resize_by_orientation",
    "scaled_size",
    "homogenize_collection",
    "predominant_extent",
]
