from __future__ import annotations

from typing import Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np


def plot_polygon_selection(
    values: np.ndarray,
    row_centers: Sequence[float],
    col_centers: Sequence[float],
    poly_x: Sequence[float],
    poly_y: Sequence[float],
    rows: Sequence[int] = (),
    cols: Sequence[int] = (),
    out_png: Optional[str] = None,
    cmap_name: str = "viridis",
    title: str = "Cells in polygon",
):
    """Plot a 2-D raster window, the polygon outline and the selected cell centres.

    ``values`` is indexed by (row, col) with coordinates ``row_centers`` and
    ``col_centers``. NaNs are left transparent. Returns the figure, or saves it
    to ``out_png`` and closes it when a path is given.
    """
    values = np.asarray(values, dtype=float)
    ry = np.asarray(row_centers, dtype=float)
    cx = np.asarray(col_centers, dtype=float)

    fig, ax = plt.subplots()
    mesh = ax.pcolormesh(cx, ry, np.ma.masked_invalid(values), cmap=plt.get_cmap(cmap_name), shading="nearest")
    fig.colorbar(mesh, ax=ax)

    px = list(poly_x) + [poly_x[0]]
    py = list(poly_y) + [poly_y[0]]
    ax.plot(px, py, "r-", linewidth=1.5, label="Polygon")
    if len(rows):
        ax.plot(cx[np.asarray(cols)], ry[np.asarray(rows)], "k.", markersize=3, label="Selected")

    ax.set_xlabel("longitude")
    ax.set_ylabel("latitude")
    ax.set_title(title)
    ax.legend()

    if out_png:
        fig.savefig(out_png, dpi=150)
        plt.close(fig)
        return None
    return fig
