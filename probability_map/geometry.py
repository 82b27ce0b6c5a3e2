# region Imports
from typing import Callable, List, Tuple
import math
import numpy as np
from probability_map.models import WorldPoint, MapPoint, LineCell
# endregion

# region Ray / AABB Intersection
def find_intersections(
    start: WorldPoint,
    end: WorldPoint,
    lower_left: WorldPoint,
    upper_right: WorldPoint,
) -> Tuple[WorldPoint, WorldPoint]:
    """
    Slab test of the ray start->end against an axis-aligned box.
    Returns the world points at tmin and tmax along the unit direction.

    An axis-aligned ray has a zero direction component whose reciprocal is
    +/-inf; the slab for that axis then spans (-inf, inf) and drops out of
    the min/max naturally.
    """
    s = np.array([start.x, start.y], dtype=np.float64)
    e = np.array([end.x, end.y], dtype=np.float64)

    with np.errstate(divide="ignore", invalid="ignore"):
        direction = (e - s) / np.hypot(*(e - s))
        inv = 1.0 / direction

        t1 = float((lower_left.x - s[0]) * inv[0])
        t2 = float((upper_right.x - s[0]) * inv[0])
        t3 = float((lower_left.y - s[1]) * inv[1])
        t4 = float((upper_right.y - s[1]) * inv[1])

        # builtin min/max keep the first argument when a comparison involves nan
        tmin = max(min(t1, t2), min(t3, t4))
        tmax = min(max(t1, t2), max(t3, t4))

        p_min = s + tmin * direction
        p_max = s + tmax * direction

    return (
        WorldPoint(float(p_min[0]), float(p_min[1])),
        WorldPoint(float(p_max[0]), float(p_max[1])),
    )
# endregion

# region Beam Rasterization
def rasterize_line(
    start_world: WorldPoint,
    end_world: WorldPoint,
    from_world: Callable[[WorldPoint], MapPoint],
    to_world: Callable[[MapPoint], WorldPoint],
    inside: Callable[[int, int], bool],
) -> List[LineCell]:
    """
    Walk the beam start_world -> end_world through the grid in floating point.

    Steps one cell at a time along the dominant axis (the last step is the
    fractional remainder) and floors each visited point to a cell. Cells
    outside the grid are skipped but the walk always covers the full beam.
    A cell is emitted once even if two consecutive steps land in it.
    Each emitted cell carries the beam's true entry/exit points for its box.
    """
    cells: List[LineCell] = []

    start_map = from_world(start_world)
    end_map = from_world(end_world)

    dx = abs(end_map.x - start_map.x)
    sx = 1 if start_map.x < end_map.x else -1
    dy = abs(end_map.y - start_map.y)
    sy = 1 if start_map.y < end_map.y else -1

    # region Dominant-axis Step
    if dx > dy:
        delta = (float(sx), sy * (dy / dx))
        remaining = dx
    elif dy > 0.0:
        delta = (sx * (dx / dy), float(sy))
        remaining = dy
    else:
        # zero-length beam: only the start cell is visited
        delta = (0.0, 0.0)
        remaining = 0.0
    # endregion

    x, y = start_map.x, start_map.y
    last = None
    while True:
        col = math.floor(x)
        row = math.floor(y)

        # a short final step can land in the cell just emitted
        if inside(row, col) and (row, col) != last:
            last = (row, col)
            box_min = to_world(MapPoint(col, row))
            box_max = to_world(MapPoint(col + 1, row + 1))
            entry, exit_ = find_intersections(start_world, end_world, box_min, box_max)
            cells.append(LineCell(row=row, col=col, entry=entry, exit=exit_))

        if remaining <= 0.0:
            break

        increment = remaining if remaining < 1.0 else 1.0
        x += increment * delta[0]
        y += increment * delta[1]
        remaining -= increment

    return cells
# endregion
