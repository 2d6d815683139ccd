"""
Module: images.batch

Purpose:
    Scoped ownership of decoded image handles. Every handle created
    during one composition call is tracked and released on exit,
    including when the call raises.

Key Classes:
    - ImageBatch: Context manager tracking handles for one call

Used By:
    - collage_toolkit.controller: Collage, resize and document paths
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from .ops import ImageOps

logger = logging.getLogger(__name__)


class ImageBatch:
    """
    Owns every image handle produced during one call.

    Example:
        >>> with ImageBatch(ops) as batch:
        ...     img = batch.track(ops.load(path))
        ...     img = batch.track(ops.resize(img, 600, 400))
        # both handles closed here
    """

    def __init__(self, ops: ImageOps) -> None:
        self._ops = ops
        self._handles: Dict[int, Any] = {}

    def track(self, image: Any) -> Any:
        """Register a handle for release and return it unchanged."""
        self._handles.setdefault(id(image), image)
        return image

    def __len__(self) -> int:
        return len(self._handles)

    def close(self) -> None:
        """Release all tracked handles."""
        handles, self._handles = list(self._handles.values()), {}
        for image in handles:
            self._ops.close(image)
        if handles:
            logger.debug(f"Released {len(handles)} image handles")

    def __enter__(self) -> "ImageBatch":
        return self

    def __exit__(self, *args) -> None:
        self.close()
