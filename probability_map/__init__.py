from probability_map.config import MAX_LOG_ODDS
from probability_map.models import WorldPoint, MapPoint, LineCell, OutOfBoundsError
from probability_map.logodds import probability_to_log_odds, log_odds_to_probability
from probability_map.geometry import find_intersections, rasterize_line
from probability_map.grid import GridMap

__all__ = [
    "MAX_LOG_ODDS",
    "WorldPoint",
    "MapPoint",
    "LineCell",
    "OutOfBoundsError",
    "probability_to_log_odds",
    "log_odds_to_probability",
    "find_intersections",
    "rasterize_line",
    "GridMap",
]
