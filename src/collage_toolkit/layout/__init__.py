"""
Module: layout

Purpose:
    Montage geometry for collages. Computes the grid, per-tile scale and
    placement as pure data; rendering is done by an ImageOps backend.

Key Functions:
    - plan_montage(): Grid layout for a list of tile sizes

Key Classes:
    - MontagePlan: Canvas size and tile placements
    - TilePlacement: One tile's scaled size and offset
"""

from .models import MontagePlan, TilePlacement
from .montage import plan_montage

__all__ = ["MontagePlan", "TilePlacement", "plan_montage"]
