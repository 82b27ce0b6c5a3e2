# region Imports
from __future__ import annotations
from typing import Tuple
import logging
import os
import numpy as np
from PIL import Image

from probability_map.config import OCCUPIED_THRESH, FREE_THRESH
from probability_map.logodds import log_odds_to_probability
from probability_map.models import WorldPoint
# endregion

logger = logging.getLogger(__name__)

# region Occupancy Raster
def occupancy_bytes(log_odds: np.ndarray) -> np.ndarray:
    """
    255 - rint(255 * p) per cell, as uint8 (dark = likely occupied).
    rint rounds half to even, so an unknown cell (p = 0.5) maps to 127.
    """
    prob = log_odds_to_probability(log_odds)
    return (255 - np.rint(255.0 * np.asarray(prob))).astype(np.uint8)


def occupancy_image(occupancy: np.ndarray) -> Image.Image:
    return Image.fromarray(np.ascontiguousarray(occupancy, dtype=np.uint8), "L")
# endregion

# region PGM + YAML Export
def map_metadata(image_name: str, cell_size: float, origin: WorldPoint) -> str:
    lines = [
        f"image: {image_name}",
        f"resolution: {float(cell_size)}",
        f"origin: [{float(origin.x)}, {float(origin.y)}, 0.0]",
        "negate: 0",
        f"occupied_thresh: {OCCUPIED_THRESH}",
        f"free_thresh: {FREE_THRESH}",
    ]
    return "\n".join(lines) + "\n"


def write_occupancy_grid(
    path: str,
    occupancy: np.ndarray,
    cell_size: float,
    origin: WorldPoint,
) -> Tuple[str, str]:
    """
    Write <path>.pgm (binary P5 raster, row-major) and <path>.yaml (map
    metadata). Returns both file names.
    """
    path = os.fspath(path)
    pgm_path = path + ".pgm"
    yaml_path = path + ".yaml"

    rows, cols = occupancy.shape
    # Pillow writes "P5\n<cols> <rows>\n255\n" followed by the raw bytes
    occupancy_image(occupancy).save(pgm_path, format="PPM")

    with open(yaml_path, "w") as f:
        f.write(map_metadata(os.path.basename(pgm_path), cell_size, origin))

    logger.info("Wrote %dx%d occupancy grid to %s and %s", cols, rows, pgm_path, yaml_path)
    return pgm_path, yaml_path
# endregion
