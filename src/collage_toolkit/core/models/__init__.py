"""
Models Package

Immutable data models for composition inputs, settings and outputs.
"""

from .media import (
    OrientationTag,
    GeometricOrientation,
    CollageImage,
    DocumentInput,
    HostedFile,
    CollageSettings,
    PdfSettings,
    MediaDescriptor,
)

__all__ = [
    "OrientationTag",
    "GeometricOrientation",
    "CollageImage",
    "DocumentInput",
    "HostedFile",
    "CollageSettings",
    "PdfSettings",
    "MediaDescriptor",
]
