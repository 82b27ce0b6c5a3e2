# models.py
from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class WorldPoint:
    """Continuous physical-space position (e.g. meters)."""
    x: float
    y: float


@dataclass(frozen=True)
class MapPoint:
    """Continuous position in grid-cell units; x = column axis, y = row axis."""
    x: float
    y: float


@dataclass(frozen=True)
class LineCell:
    row: int
    col: int
    entry: WorldPoint   # where the beam enters the cell box
    exit: WorldPoint    # where the beam leaves it


class OutOfBoundsError(IndexError):
    """Raised when a cell index or map coordinate falls outside the grid."""

    def __init__(self, row, col):
        self.row = row
        self.col = col
        super().__init__(
            f"Requested map coordinates ({row},{col}) is not within the map bounds."
        )
