"""Point-in-polygon test and polygon masking of regular grids."""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np


def _check_polygon(poly_x, poly_y) -> Tuple[np.ndarray, np.ndarray]:
    x = np.asarray(poly_x, dtype=float).ravel()
    y = np.asarray(poly_y, dtype=float).ravel()
    if x.size != y.size:
        raise ValueError("polygon must have equal number of x and y points")
    if x.size < 3:
        raise ValueError("polygon must have at least 3 points")
    return x, y


def _contains(x: np.ndarray, y: np.ndarray, px: float, py: float) -> bool:
    # A vertex sitting exactly on the point is nudged up so the ray never
    # passes through it
    def vertex(i):
        xv, yv = float(x[i]), float(y[i])
        if xv == px and yv == py:
            yv = float(np.nextafter(yv, np.inf))
        return xv, yv

    x_here, y_here = vertex(-1)
    crossings = 0
    for i in range(x.size):
        x_last, y_last = x_here, y_here
        x_here, y_here = vertex(i)

        # Vertices on the scan line count as above it, so a ray through a
        # vertex crosses exactly one of the two edges meeting there
        if (y_last >= py) == (y_here >= py):
            continue
        if x_last < px and x_here < px:
            continue
        if x_last > px and x_here > px:
            crossings += 1
            continue

        # One end left of the point, one right (or touching): project onto y = py
        dy = y_here - y_last
        if dy != 0:
            x_proj = x_last + (x_here - x_last) * (py - y_last) / dy
            if x_proj > px:
                crossings += 1

    return crossings % 2 == 1


def point_in_polygon(poly_x: Sequence[float], poly_y: Sequence[float], point: Sequence[float]) -> bool:
    """Even-odd ray-casting test: is ``point`` = (x, y) inside the polygon?

    The polygon is given by vertex coordinates ``poly_x``, ``poly_y`` and is
    implicitly closed. A ray is cast from the point towards +x and the edge
    crossings are counted; an odd count means inside. No tolerance is used.
    """
    x, y = _check_polygon(poly_x, poly_y)
    pt = np.asarray(point, dtype=float).ravel()
    if pt.size != 2:
        raise ValueError("point must be an ordered pair (x, y)")
    return _contains(x, y, float(pt[0]), float(pt[1]))


def cells_in_polygon(row_centers, col_centers, poly_x, poly_y) -> Tuple[np.ndarray, np.ndarray]:
    """Find the grid cells whose centres fall inside a polygon.

    Parameters
    ----------
    row_centers : array_like
        Coordinate of each grid row (the polygon's y axis, e.g. latitude).
    col_centers : array_like
        Coordinate of each grid column (the polygon's x axis, e.g. longitude).
    poly_x, poly_y : array_like
        Polygon vertices.

    Returns
    -------
    (rows, cols) : tuple of numpy.ndarray
        0-based indices of the matching cells in row-major order.
    """
    x, y = _check_polygon(poly_x, poly_y)
    grid_y = np.asarray(row_centers, dtype=float)
    grid_x = np.asarray(col_centers, dtype=float)
    if grid_y.ndim != 1 or grid_x.ndim != 1:
        raise ValueError("row_centers and col_centers must be 1-D coordinate vectors")

    # Only cells inside the bounding box can be inside the polygon
    row_inrange = np.flatnonzero((grid_y >= y.min()) & (grid_y <= y.max()))
    col_inrange = np.flatnonzero((grid_x >= x.min()) & (grid_x <= x.max()))

    rows, cols = [], []
    for i in row_inrange:
        py = float(grid_y[i])
        for j in col_inrange:
            if _contains(x, y, float(grid_x[j]), py):
                rows.append(i)
                cols.append(j)

    return np.asarray(rows, dtype=np.intp), np.asarray(cols, dtype=np.intp)
