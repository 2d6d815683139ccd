"""
Module: layout.montage

Purpose:
    Compute a fixed-column grid for a collage. Every cell has the size
    of the reference geometry (the first image's bounding box); each
    tile is scaled to fit inside its cell, keeping its aspect ratio,
    and centered.

Key Functions:
    - plan_montage(): Build a MontagePlan from tile sizes
    - fit_inside(): Scale a size to fit a box

Used By:
    - collage_toolkit.controller: Collage composition
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

from collage_toolkit.errors import ContractViolationError, OutOfRangeError

from .models import MontagePlan, TilePlacement

logger = logging.getLogger(__name__)


def fit_inside(size: Tuple[int, int], box: Tuple[int, int]) -> Tuple[int, int]:
    """
    Scale size up or down so it fits inside box with aspect ratio kept.

    Example:
        >>> fit_inside((800, 1200), (600, 400))
        (267, 400)
    """
    width, height = size
    box_w, box_h = box
    if width <= 0 or height <= 0:
        raise ContractViolationError(f"Tile size must be positive: {size}")
    scale = min(box_w / width, box_h / height)
    return (
        min(box_w, max(1, round(width * scale))),
        min(box_h, max(1, round(height * scale))),
    )


def plan_montage(
    sizes: Sequence[Tuple[int, int]],
    columns: int,
    cell: Tuple[int, int],
) -> MontagePlan:
    """
    Lay tiles out left to right, top to bottom.

    Args:
        sizes: (width, height) of each tile, in input order
        columns: Requested column count (> 0)
        cell: (width, height) of every grid cell

    Returns:
        MontagePlan with one placement per tile

    Raises:
        OutOfRangeError: If columns is not positive
        ContractViolationError: If sizes is empty or cell is degenerate
    """
    if columns <= 0:
        raise OutOfRangeError(f"columns must be positive: {columns}")
    if not sizes:
        raise ContractViolationError("Cannot plan a montage without tiles")
    cell_w, cell_h = cell
    if cell_w <= 0 or cell_h <= 0:
        raise ContractViolationError(f"Cell size must be positive: {cell}")

    effective_columns = min(columns, len(sizes))
    rows = math.ceil(len(sizes) / effective_columns)

    tiles: List[TilePlacement] = []
    for index, size in enumerate(sizes):
        row, column = divmod(index, effective_columns)
        tile_w, tile_h = fit_inside(size, cell)
        tiles.append(
            TilePlacement(
                index=index,
                row=row,
                column=column,
                width=tile_w,
                height=tile_h,
                left=column * cell_w + (cell_w - tile_w) // 2,
                top=row * cell_h + (cell_h - tile_h) // 2,
            )
        )

    logger.debug(f"Montage grid {effective_columns}x{rows} with {cell_w}x{cell_h} cells")
    return MontagePlan(
        columns=effective_columns,
        rows=rows,
        cell_width=cell_w,
        cell_height=cell_h,
        tiles=tuple(tiles),
    )
