"""
Module: engine.resources

Purpose:
    Cap the imaging engine's memory use as a percentage of system memory.

    Pillow only exposes a process-wide decode limit
    (``Image.MAX_IMAGE_PIXELS``). The limit is applied behind a guard
    that runs at most once per process; later governors asking for a
    different percentage keep the first limit and log a warning.

Key Classes:
    - ResourceGovernor: Applies and reports the memory limit

Dependencies:
    - psutil: System memory
    - PIL.Image: Engine decode limit

Used By:
    - collage_toolkit.controller: MediaEngine construction
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import psutil
from PIL import Image

from collage_toolkit.common.constants import MEDIA_THRESHOLDS, MIN_IMAGE_WIDTH
from collage_toolkit.config import EngineConfig
from collage_toolkit.errors import ContractViolationError, OutOfRangeError

logger = logging.getLogger(__name__)

_limit_lock = threading.Lock()
_applied_percentage: Optional[int] = None


def _apply_memory_limit(percentage: int, system_memory: int) -> None:
    """Set the process-wide decode limit once."""
    global _applied_percentage
    with _limit_lock:
        if _applied_percentage is not None:
            if _applied_percentage != percentage:
                logger.warning(
                    f"Engine memory already limited to {_applied_percentage}%, "
                    f"ignoring request for {percentage}%"
                )
            return
        budget = system_memory * percentage // 100
        Image.MAX_IMAGE_PIXELS = max(1, budget // MEDIA_THRESHOLDS.bytes_per_pixel)
        _applied_percentage = percentage
        logger.info(
            f"Limited imaging engine to {percentage}% of system memory "
            f"({budget} bytes, {Image.MAX_IMAGE_PIXELS} pixels)"
        )


class ResourceGovernor:
    """
    Reads system memory once and applies the configured engine limit.

    Constructing a governor with a positive percentage changes state shared
    by the whole process. Concurrent construction of several engines must be
    serialized by the caller.

    Attributes:
        system_memory: Total physical memory in bytes, read at construction
        engine_memory: Memory the engine may use for decoding, in bytes
        limit_memory_percentage: Configured percentage (0 = engine default)

    Example:
        >>> governor = ResourceGovernor(EngineConfig(limit_memory_percentage=25))
        >>> governor.engine_memory <= governor.system_memory
        True
    """

    def __init__(self, config: EngineConfig) -> None:
        if config is None:
            raise ContractViolationError("config is required")
        if config.limit_memory_percentage < 0:
            raise OutOfRangeError(
                f"limit_memory_percentage must be non-negative: {config.limit_memory_percentage}"
            )
        if config.collage_image_width < MIN_IMAGE_WIDTH:
            raise OutOfRangeError(
                f"The collage_image_width is invalid. The minimum value accepted is {MIN_IMAGE_WIDTH}."
            )

        self._system_memory = int(psutil.virtual_memory().total)
        self._limit_memory_percentage = config.limit_memory_percentage

        # 0 leaves Pillow's own default in place
        if config.limit_memory_percentage > 0:
            _apply_memory_limit(config.limit_memory_percentage, self._system_memory)

    @property
    def system_memory(self) -> int:
        return self._system_memory

    @property
    def engine_memory(self) -> int:
        """Current decode limit in bytes (system memory when unlimited)."""
        pixels = Image.MAX_IMAGE_PIXELS
        if pixels is None:
            return self._system_memory
        return int(pixels) * MEDIA_THRESHOLDS.bytes_per_pixel

    @property
    def limit_memory_percentage(self) -> int:
        return self._limit_memory_percentage
