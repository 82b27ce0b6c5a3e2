# region Imports
from __future__ import annotations
from typing import Iterable, List, Optional, Tuple, Union
import math
import numpy as np

from probability_map.config import MAX_LOG_ODDS, DEFAULT_KERNEL, DEFAULT_TOL
from probability_map.models import WorldPoint, MapPoint, LineCell, OutOfBoundsError
from probability_map.logodds import probability_to_log_odds, log_odds_to_probability
from probability_map.geometry import find_intersections, rasterize_line
from probability_map.smoothing import KernelFn, build_kernel, separable_convolve
from probability_map import export
# endregion


class GridMap:
    """
    Dense rows x cols log-odds occupancy grid.

    Row indexes the Y axis and col the X axis. Map coordinate (0, 0) sits at
    `origin` in world space and one cell spans `cell_size` world units in
    both axes. All cells start at log-odds 0 (probability 0.5).
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        cell_size: float,
        origin: WorldPoint = WorldPoint(0.0, 0.0),
        max_log_odds: float = MAX_LOG_ODDS,
    ):
        if int(rows) < 1 or int(cols) < 1:
            raise ValueError(f"Map needs at least one row and column, got {rows}x{cols}.")
        if not cell_size > 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}.")
        self._cells = np.zeros((int(rows), int(cols)), dtype=np.float64)
        self._origin = WorldPoint(float(origin.x), float(origin.y))
        self._cell_size = float(cell_size)
        self._max_log_odds = float(max_log_odds)

    # region Grid Store
    @property
    def rows(self) -> int:
        return self._cells.shape[0]

    @property
    def cols(self) -> int:
        return self._cells.shape[1]

    @property
    def origin(self) -> WorldPoint:
        return self._origin

    @property
    def cell_size(self) -> float:
        return self._cell_size

    @property
    def max_log_odds(self) -> float:
        return self._max_log_odds

    @property
    def log_odds(self) -> np.ndarray:
        """Copy of the stored log-odds grid."""
        return self._cells.copy()

    def probabilities(self) -> np.ndarray:
        return log_odds_to_probability(self._cells)

    def load(self, data: Iterable[float]) -> None:
        """Replace every cell from a flat row-major buffer of rows*cols log-odds."""
        cells = np.asarray(data, dtype=np.float64).reshape(self.rows, self.cols)
        self._cells = np.clip(cells, -self._max_log_odds, self._max_log_odds)

    def clear(self) -> None:
        self._cells = np.zeros((self.rows, self.cols), dtype=np.float64)
    # endregion

    # region Coordinate Transform
    def to_world(self, map_point: MapPoint) -> WorldPoint:
        return WorldPoint(
            self._cell_size * map_point.x + self._origin.x,
            self._cell_size * map_point.y + self._origin.y,
        )

    def from_world(self, world_point: WorldPoint) -> MapPoint:
        return MapPoint(
            (world_point.x - self._origin.x) / self._cell_size,
            (world_point.y - self._origin.y) / self._cell_size,
        )
    # endregion

    # region Occupancy Accessor
    def inside(self, row, col) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def inside_point(self, map_point: MapPoint) -> bool:
        return self.inside(map_point.y, map_point.x)

    def at(self, row: int, col: int) -> float:
        if not self.inside(row, col):
            raise OutOfBoundsError(row, col)
        return log_odds_to_probability(self._cells[row, col])

    def update(self, row: int, col: int, probability: float) -> None:
        """
        Recursive Bayes update in log-odds form: add logit(probability) to the
        cell and saturate at +/- max_log_odds.
        """
        if not self.inside(row, col):
            raise OutOfBoundsError(row, col)
        value = self._cells[row, col] + probability_to_log_odds(probability)
        if value > self._max_log_odds:
            value = self._max_log_odds
        if value < -self._max_log_odds:
            value = -self._max_log_odds
        self._cells[row, col] = value
    # endregion

    # region Interpolator
    def interpolate(self, map_point: MapPoint) -> float:
        """Bilinear probability at a continuous map coordinate."""
        if not self.inside_point(map_point):
            raise OutOfBoundsError(map_point.y, map_point.x)

        x, y = map_point.x, map_point.y

        # lower corner, pulled back one cell at the far edges
        x1 = math.floor(x)
        if x1 >= self.cols - 1:
            x1, x2 = self.cols - 2, self.cols - 1
        else:
            x2 = x1 + 1
        y1 = math.floor(y)
        if y1 >= self.rows - 1:
            y1, y2 = self.rows - 2, self.rows - 1
        else:
            y2 = y1 + 1

        # hold the last sample beyond the final cell instead of extrapolating
        x = min(x, float(x2))
        y = min(y, float(y2))

        dx21 = float(x2 - x1)
        dx2p = x2 - x
        dxp1 = x - x1
        dy21 = float(y2 - y1)
        dy2p = y2 - y
        dyp1 = y - y1

        r1 = (dx2p / dx21) * self.at(y1, x1) + (dxp1 / dx21) * self.at(y1, x2)
        r2 = (dx2p / dx21) * self.at(y2, x1) + (dxp1 / dx21) * self.at(y2, x2)
        return (dy2p / dy21) * r1 + (dyp1 / dy21) * r2
    # endregion

    # region Ray Geometry
    def find_intersections(
        self,
        start: WorldPoint,
        end: WorldPoint,
        lower_left: WorldPoint,
        upper_right: WorldPoint,
    ) -> Tuple[WorldPoint, WorldPoint]:
        return find_intersections(start, end, lower_left, upper_right)

    def line(self, start: WorldPoint, end: WorldPoint) -> List[LineCell]:
        """Cells crossed by the beam start -> end (world), in walk order."""
        return rasterize_line(start, end, self.from_world, self.to_world, self.inside)
    # endregion

    # region Smoother
    def smooth(self, sigma: float, kernel: Union[str, KernelFn] = DEFAULT_KERNEL) -> None:
        """
        Blur the log-odds grid in place with a separable kernel whose support
        is +/- 3 sigma (sigma in world units). Shape is preserved.
        """
        kernel_1d = build_kernel(sigma, self._cell_size, kernel)
        smoothed = separable_convolve(self._cells, kernel_1d)
        self._cells = np.clip(smoothed, -self._max_log_odds, self._max_log_odds)
    # endregion

    # region Exporter
    def points(self, threshold: float) -> List[MapPoint]:
        """Map coordinates (col, row) of cells above `threshold` probability, row-major."""
        log_odds_threshold = probability_to_log_odds(threshold)
        rc = np.argwhere(self._cells > log_odds_threshold)
        return [MapPoint(float(c), float(r)) for r, c in rc]

    def occupancy_grid(self) -> np.ndarray:
        return export.occupancy_bytes(self._cells)

    def occupancy_image(self):
        return export.occupancy_image(self.occupancy_grid())

    def write_occupancy_grid(self, path: str) -> Tuple[str, str]:
        return export.write_occupancy_grid(path, self.occupancy_grid(), self._cell_size, self._origin)

    def equals(self, other: "GridMap", tol: float = DEFAULT_TOL) -> bool:
        return (
            abs(self._origin.x - other._origin.x) < tol
            and abs(self._origin.y - other._origin.y) < tol
            and abs(self._cell_size - other._cell_size) < tol
            and self._cells.shape == other._cells.shape
            and bool(np.all(np.abs(self._cells - other._cells) <= tol))
        )

    def __str__(self) -> str:
        lines = [
            f"  cell size: {self._cell_size}",
            f"  origin: ( {self._origin.x} , {self._origin.y} )",
        ]
        prob = self.probabilities()
        for i in range(self.rows):
            prefix = "  data:" if i == 0 else "       "
            lines.append(prefix + "".join(f" {p:g}" for p in prob[i]))
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return (
            f"GridMap(rows={self.rows}, cols={self.cols}, "
            f"cell_size={self._cell_size}, origin={self._origin})"
        )

    def print(self, name: Optional[str] = "") -> None:
        print(name)
        print(self)
    # endregion
