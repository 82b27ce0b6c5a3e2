# region Imports
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
from matplotlib.patches import Patch, Rectangle
from probability_map.models import MapPoint
# endregion

# region Visualization Function
def show_map(
    grid_map,
    cells=None,
    title="Occupancy probability",
    ax=None,
    show=True,
):
    """
    Render the map's occupancy probabilities in world coordinates, with an
    optional rasterized beam (list of LineCell) drawn on top.
    Returns the matplotlib Axes.
    """
    # region Base Image
    x0, y0 = grid_map.origin.x, grid_map.origin.y
    extent = (
        x0,
        x0 + grid_map.cols * grid_map.cell_size,
        y0,
        y0 + grid_map.rows * grid_map.cell_size,
    )
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))
    else:
        fig = ax.figure

    # row 0 is the lowest Y, so draw with origin="lower"
    img = ax.imshow(
        grid_map.probabilities(),
        origin="lower",
        cmap="gray_r",
        vmin=0.0,
        vmax=1.0,
        extent=extent,
        interpolation="nearest",
    )
    cbar = fig.colorbar(img, ax=ax, fraction=0.046, pad=0.04)
    cbar.set_label("P(occupied)")
    # endregion

    # region Beam Overlay
    if cells:
        size = grid_map.cell_size
        for cell in cells:
            corner = grid_map.to_world(MapPoint(cell.col, cell.row))
            ax.add_patch(Rectangle((corner.x, corner.y), size, size,
                                   fill=False, edgecolor="orange", linewidth=1.2))
        pts = np.array([[c.entry.x, c.entry.y, c.exit.x, c.exit.y] for c in cells])
        ax.plot(pts[:, [0, 2]].T, pts[:, [1, 3]].T, color="cyan", linewidth=2.0)
        ax.scatter(pts[:, 0], pts[:, 1], s=18, c="lime", zorder=3)
        ax.scatter(pts[:, 2], pts[:, 3], s=18, c="red", zorder=3)
    # endregion

    # region Legend / Layout
    legend_elements = [
        Patch(facecolor="white", edgecolor="black", label="Free"),
        Patch(facecolor="gray", label="Unknown"),
        Patch(facecolor="black", label="Occupied"),
    ]
    if cells:
        legend_elements += [
            Patch(facecolor="none", edgecolor="orange", label="Beam cells"),
            Line2D([0], [0], marker="o", color="w", label="Entry",
                   markerfacecolor="lime", markersize=7),
            Line2D([0], [0], marker="o", color="w", label="Exit",
                   markerfacecolor="red", markersize=7),
        ]
    ax.legend(handles=legend_elements, loc="lower right", fontsize=8, framealpha=0.85)
    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    if show:
        plt.tight_layout()
        plt.show()
    # endregion
    return ax
# endregion
