"""
Module: layout.models

Purpose:
    Data models for montage layout.
    Immutable dataclasses describing where each tile lands on the canvas.

Key Classes:
    - TilePlacement: Scaled size and offset of one tile
    - MontagePlan: Complete montage layout

Used By:
    - layout.montage: Creates MontagePlans
    - images.ops: Renders MontagePlans
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class TilePlacement:
    """
    A tile positioned on the montage canvas.

    Attributes:
        index: Position in the input order
        row: Grid row (0-indexed)
        column: Grid column (0-indexed)
        width: Scaled tile width in pixels
        height: Scaled tile height in pixels
        left: X offset on the canvas
        top: Y offset on the canvas
    """

    index: int
    row: int
    column: int
    width: int
    height: int
    left: int
    top: int

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def offset(self) -> Tuple[int, int]:
        return (self.left, self.top)


@dataclass(frozen=True)
class MontagePlan:
    """
    Grid layout for a collage.

    Attributes:
        columns: Effective column count (never more than the tile count)
        rows: Number of rows
        cell_width: Width of every grid cell
        cell_height: Height of every grid cell
        tiles: Placements in input order

    Example:
        >>> plan = plan_montage([(600, 400)] * 3, columns=2, cell=(600, 400))
        >>> plan.canvas_size
        (1200, 800)
    """

    columns: int
    rows: int
    cell_width: int
    cell_height: int
    tiles: tuple[TilePlacement, ...]

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return (self.columns * self.cell_width, self.rows * self.cell_height)
