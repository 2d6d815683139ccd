"""
Module: config

Purpose:
    Engine configuration for the collage and document composers.
    Immutable, validated once on construction, loadable from JSON.

Key Classes:
    - EngineConfig: Memory cap, collage width/quality, PDF density,
      optional Ghostscript directory

Key Functions:
    - load_engine_config(): Read an EngineConfig from a JSON file

Dependencies:
    - dataclasses (std)
    - json (std)

Used By:
    - collage_toolkit.controller: MediaEngine construction
    - collage_toolkit.engine.resources: ResourceGovernor
    - collage_toolkit.cli: --config option
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

from collage_toolkit.common.constants import MIN_IMAGE_WIDTH
from collage_toolkit.errors import ConfigError, OutOfRangeError

logger = logging.getLogger(__name__)

# camelCase keys accepted from JSON settings files
_CAMEL_CASE_KEYS = {
    "limitMemoryPercentage": "limit_memory_percentage",
    "collageImageWidth": "collage_image_width",
    "collageImageQuality": "collage_image_quality",
    "collagePdfDensity": "collage_pdf_density",
    "ghostscriptDirectory": "ghostscript_directory",
}


@dataclass(frozen=True)
class EngineConfig:
    """
    Configuration for the composition engine (immutable).

    Attributes:
        limit_memory_percentage: Share of system memory the imaging engine
            may use. 0 keeps the engine's own default.
        collage_image_width: Width every collage tile and the final
            collage are normalized to (>= 600)
        collage_image_quality: Lossy output quality, 0-100
        collage_pdf_density: DPI used when rasterizing PDF pages
        ghostscript_directory: Optional directory holding an external
            Ghostscript install. Used only if its expected files exist.

    Example:
        >>> config = EngineConfig(collage_image_width=1024, collage_pdf_density=200)
        >>> config.collage_image_quality
        75
    """

    limit_memory_percentage: int = 0
    collage_image_width: int = 1200
    collage_image_quality: int = 75
    collage_pdf_density: int = 150
    ghostscript_directory: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.limit_memory_percentage < 0:
            raise OutOfRangeError(
                f"limit_memory_percentage must be non-negative: {self.limit_memory_percentage}"
            )
        if self.collage_image_width < MIN_IMAGE_WIDTH:
            raise OutOfRangeError(
                f"The collage_image_width is invalid. The minimum value accepted is {MIN_IMAGE_WIDTH}."
            )
        if not 0 <= self.collage_image_quality <= 100:
            raise OutOfRangeError(
                f"collage_image_quality must be between 0 and 100: {self.collage_image_quality}"
            )
        if self.collage_pdf_density <= 0:
            raise OutOfRangeError(f"collage_pdf_density must be positive: {self.collage_pdf_density}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EngineConfig":
        """
        Build a config from a mapping.

        Accepts snake_case field names and the camelCase names used by
        older configuration files. Unknown keys are ignored.

        Raises:
            ConfigError: If a value has the wrong type
            OutOfRangeError: If a value fails validation
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name not in known:
                logger.warning(f"Ignoring unknown engine config key: {key}")
                continue
            kwargs[name] = value

        for name in ("limit_memory_percentage", "collage_image_width",
                     "collage_image_quality", "collage_pdf_density"):
            if name in kwargs:
                try:
                    kwargs[name] = int(kwargs[name])
                except (TypeError, ValueError) as e:
                    raise ConfigError(f"{name} must be an integer: {kwargs[name]!r}") from e

        if kwargs.get("ghostscript_directory") in ("", None):
            kwargs["ghostscript_directory"] = None

        return cls(**kwargs)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_engine_config(path: Optional[Path]) -> EngineConfig:
    """
    Load engine configuration from a JSON file.

    A missing path or file yields the defaults.

    Args:
        path: JSON file with an object of config keys

    Returns:
        Validated EngineConfig

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object
    """
    if path is None or not path.exists():
        if path is not None:
            logger.info(f"No engine config at {path}, using defaults")
        return EngineConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Engine config file is corrupted: {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read engine config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Engine config must be a JSON object: {path}")

    return EngineConfig.from_dict(data)
