"""
Module: images.ops

Purpose:
    Abstract raster capability interface plus the Pillow implementation.
    Every operation returns a (possibly new) handle; callers track the
    handles they receive in an ImageBatch so they are released on exit.

Key Classes:
    - ImageOps: Abstract interface (load/rotate/resize/enhance/montage/save)
    - PillowImageOps: Pillow implementation

Dependencies:
    - PIL: Decode, resize, enhance, encode
    - numpy: Brightness statistics for auto-gamma
    - layout.models: MontagePlan

Used By:
    - engine.orientation / engine.resize / engine.homogenize
    - controller: Collage and document composition
"""

from __future__ import annotations

import logging
import math
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageEnhance, UnidentifiedImageError
from PIL import ImageOps as PilImageOps

from collage_toolkit.common.constants import (
    ALPHA_FORMATS,
    LOSSY_FORMATS,
    MEDIA_THRESHOLDS,
    SUPPORTED_MIME_TYPES,
)
from collage_toolkit.errors import ContractViolationError, ProcessingError, ResourceError
from collage_toolkit.layout.models import MontagePlan

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)
TRANSPARENT_WHITE = (255, 255, 255, 0)


class ImageOps(ABC):
    """
    Abstract raster capability interface.

    Handles are opaque to the engine apart from ``width`` and ``height``.
    Implementations must not mutate a handle passed in unless they return
    that same handle.
    """

    @abstractmethod
    def load(self, path: Path) -> Any:
        """
        Decode an image file.

        Raises:
            ResourceError: If the file does not exist or cannot be read
            ProcessingError: If the file is not a decodable image
        """

    @abstractmethod
    def rotate(self, image: Any, degrees: float) -> Any:
        """Rotate clockwise by degrees, expanding the canvas."""

    @abstractmethod
    def resize(self, image: Any, width: int, height: int) -> Any:
        """Resize to exactly (width, height)."""

    @abstractmethod
    def enhance(self, image: Any) -> Any:
        """Post-resize sharpening pass."""

    @abstractmethod
    def auto_level(self, image: Any) -> Any:
        """Stretch the histogram to the full range."""

    @abstractmethod
    def auto_gamma(self, image: Any) -> Any:
        """Adjust gamma so mean brightness moves to mid-grey."""

    @abstractmethod
    def strip(self, image: Any) -> Any:
        """Remove embedded metadata (EXIF, ICC, comments)."""

    @abstractmethod
    def set_quality(self, image: Any, quality: int) -> Any:
        """Record the lossy quality used when the image is encoded."""

    @abstractmethod
    def montage(self, images: Sequence[Any], plan: MontagePlan) -> Any:
        """Render images onto a white canvas at the plan's placements."""

    @abstractmethod
    def save(self, image: Any, path: Path, mime_type: str, quality: int) -> None:
        """
        Encode to path. The file appears at path only when fully written.

        Raises:
            ContractViolationError: If mime_type is unsupported
            ProcessingError: If encoding fails
        """

    @abstractmethod
    def close(self, image: Any) -> None:
        """Release native memory held by a handle."""


class PillowImageOps(ImageOps):
    """
    ImageOps on Pillow.

    Loads honour the EXIF orientation so width/height match what a viewer
    shows, and are converted to RGB, L or (when the source has transparency)
    RGBA. Tonal passes leave the alpha channel alone.

    Example:
        >>> ops = PillowImageOps()
        >>> img = ops.load(Path("photo.jpg"))
        >>> ops.resize(img, 600, 400).size
        (600, 400)
    """

    def load(self, path: Path) -> Image.Image:
        path = Path(path)
        if not path.is_file():
            raise ResourceError(f"Image not found: {path}")
        try:
            with Image.open(path) as src:
                img = PilImageOps.exif_transpose(src)
                img.load()
                if img.mode not in ("RGB", "L", "RGBA"):
                    img = img.convert("RGBA" if _has_transparency(img) else "RGB")
                elif img is src:
                    img = img.copy()
        except Image.DecompressionBombError as e:
            raise ProcessingError(f"Image exceeds the engine memory limit: {path}: {e}") from e
        except UnidentifiedImageError as e:
            raise ProcessingError(f"Unsupported or corrupt image: {path}") from e
        except OSError as e:
            raise ProcessingError(f"Failed to decode image {path}: {e}") from e
        logger.debug(f"Loaded {path.name} ({img.width}x{img.height}, {img.mode})")
        return img

    def rotate(self, image: Image.Image, degrees: float) -> Image.Image:
        turns = {90: Image.Transpose.ROTATE_270, 180: Image.Transpose.ROTATE_180,
                 270: Image.Transpose.ROTATE_90}
        normalized = degrees % 360
        if normalized == 0:
            return image
        if normalized in turns:
            return image.transpose(turns[normalized])
        # PIL rotates counter-clockwise
        return image.rotate(-degrees, expand=True, fillcolor=_fill_for(image))

    def resize(self, image: Image.Image, width: int, height: int) -> Image.Image:
        if (width, height) == image.size:
            return image
        return image.resize((width, height), Image.Resampling.LANCZOS)

    def enhance(self, image: Image.Image) -> Image.Image:
        return ImageEnhance.Sharpness(image).enhance(MEDIA_THRESHOLDS.sharpen_factor)

    def auto_level(self, image: Image.Image) -> Image.Image:
        color, alpha = _split_alpha(image)
        leveled = PilImageOps.autocontrast(color, cutoff=MEDIA_THRESHOLDS.autolevel_cutoff)
        return _merge_alpha(leveled, alpha)

    def auto_gamma(self, image: Image.Image) -> Image.Image:
        color, alpha = _split_alpha(image)
        pixels = np.asarray(color, dtype=np.float32)
        if alpha is not None:
            # Only visible pixels count towards the mean
            visible = np.asarray(alpha) > 0
            if not visible.any():
                return image
            pixels = pixels[visible]
        mean = float(pixels.mean()) / 255.0
        if not MEDIA_THRESHOLDS.gamma_floor < mean < MEDIA_THRESHOLDS.gamma_ceiling:
            return image
        gamma = math.log(mean) / math.log(0.5)
        lut = [min(255, round(255.0 * (i / 255.0) ** (1.0 / gamma))) for i in range(256)]
        return _merge_alpha(color.point(lut * len(color.getbands())), alpha)

    def strip(self, image: Image.Image) -> Image.Image:
        quality = image.info.get("quality")
        image.info.clear()
        if quality is not None:
            image.info["quality"] = quality
        return image

    def set_quality(self, image: Image.Image, quality: int) -> Image.Image:
        image.info["quality"] = quality
        return image

    def montage(self, images: Sequence[Image.Image], plan: MontagePlan) -> Image.Image:
        canvas = Image.new("RGB", plan.canvas_size, WHITE)
        for img, tile in zip(images, plan.tiles):
            scaled = img.resize(tile.size, Image.Resampling.LANCZOS) if img.size != tile.size else img
            if scaled.mode == "RGBA":
                canvas.paste(scaled, tile.offset, scaled)
            else:
                canvas.paste(scaled.convert("RGB"), tile.offset)
            if scaled is not img:
                scaled.close()
        return canvas

    def save(self, image: Image.Image, path: Path, mime_type: str, quality: int) -> None:
        fmt = SUPPORTED_MIME_TYPES.get(mime_type.lower())
        if fmt is None:
            raise ContractViolationError(f"Unsupported MIME type: {mime_type}")
        params: dict[str, Any] = {}
        if fmt in LOSSY_FORMATS:
            params["quality"] = quality
        if fmt not in ALPHA_FORMATS and image.mode not in ("RGB", "L"):
            image = flatten_onto_white(image)
        _atomic_save(image, Path(path), fmt, params)

    def close(self, image: Image.Image) -> None:
        image.close()


def _fill_for(image: Image.Image) -> Tuple[int, ...] | int:
    if image.mode == "RGBA":
        return TRANSPARENT_WHITE
    return 255 if image.mode == "L" else WHITE


def _has_transparency(image: Image.Image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


def _split_alpha(image: Image.Image) -> Tuple[Image.Image, Optional[Image.Image]]:
    if image.mode != "RGBA":
        return image, None
    return image.convert("RGB"), image.getchannel("A")


def _merge_alpha(color: Image.Image, alpha: Optional[Image.Image]) -> Image.Image:
    if alpha is None:
        return color
    color.putalpha(alpha)
    return color


def flatten_onto_white(image: Image.Image) -> Image.Image:
    """
    Composite an image onto a white background and return it as RGB.

    Images without transparency are only converted.
    """
    if image.mode in ("RGB", "L"):
        return image
    if not _has_transparency(image):
        return image.convert("RGB")
    rgba = image.convert("RGBA")
    background = Image.new("RGBA", rgba.size, WHITE + (255,))
    background.alpha_composite(rgba)
    return background.convert("RGB")


def _atomic_save(image: Image.Image, path: Path, fmt: str, params: dict) -> None:
    """Write image atomically using temp file."""
    with tempfile.NamedTemporaryFile(
        mode="wb",
        suffix=path.suffix or ".tmp",
        dir=path.parent,
        delete=False,
    ) as f:
        temp_path = Path(f.name)
        try:
            image.save(f, format=fmt, **params)
        except (OSError, ValueError) as e:
            f.close()
            temp_path.unlink(missing_ok=True)
            raise ProcessingError(f"Failed to encode {path.name} as {fmt}: {e}") from e

    # Use replace() instead of rename() for Windows compatibility
    temp_path.replace(path)
