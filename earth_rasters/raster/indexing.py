from __future__ import annotations

from typing import NamedTuple, Optional, Tuple

import numpy as np

from .types import GridConvention


class GridIndex(NamedTuple):
    """0-based row/column indices; entries where ``valid`` is False hold 0."""
    rows: np.ndarray
    cols: np.ndarray
    valid: np.ndarray


def as_coordinates(lat, lon) -> Tuple[np.ndarray, np.ndarray]:
    lat = np.asarray(lat, dtype=float)
    lon = np.asarray(lon, dtype=float)
    if lat.shape != lon.shape:
        raise ValueError(f"lat and lon must be equal length (got shapes {lat.shape} and {lon.shape})")
    return lat, lon


def _equirectangular(conv: GridConvention, lat: np.ndarray, lon: np.ndarray):
    sf = conv.cells_per_degree
    # Distance in degrees from the origin pole and from the western edge
    y = 90.0 - lat if conv.row_origin == "north" else 90.0 + lat
    x = lon + 180.0
    if conv.wrap_longitude:
        x = np.mod(x, 360.0)

    if conv.registration == "node":
        return np.rint(y * sf), np.rint(x * sf)

    row = np.floor(y * sf)
    col = np.floor(x * sf)
    # A point on the far edge belongs to the last cell, not one past it
    row = np.where(row == conv.n_rows, conv.n_rows - 1, row)
    col = np.where(col == conv.n_cols, conv.n_cols - 1, col)
    return row, col


def _mercator(conv: GridConvention, lat: np.ndarray, lon: np.ndarray):
    half = conv.n_rows / 2
    smax = np.arcsinh(np.tan(np.radians(conv.lat_max)))
    s = np.arcsinh(np.tan(np.radians(lat))) / smax
    row = half - np.floor(half * s)
    col = np.floor(np.mod(lon, 360.0) * conv.n_cols / 360.0)
    return row, col


def grid_indices(convention: GridConvention, lat, lon) -> GridIndex:
    """Map latitude/longitude (decimal degrees) to 0-based grid indices.

    Works elementwise on scalars or arrays of equal shape. NaN or
    out-of-domain coordinates are flagged invalid instead of raising.
    """
    lat, lon = as_coordinates(lat, lon)
    conv = convention

    with np.errstate(invalid="ignore", divide="ignore", over="ignore"):
        valid = (
            np.isfinite(lat)
            & np.isfinite(lon)
            & (lat >= -90.0)
            & (lat <= 90.0)
            & (lon >= conv.lon_min)
            & (lon <= conv.lon_max)
        )
        if conv.projection == "mercator":
            valid &= np.abs(lat) <= conv.lat_max
            row, col = _mercator(conv, lat, lon)
        else:
            row, col = _equirectangular(conv, lat, lon)

        valid &= (
            np.isfinite(row)
            & np.isfinite(col)
            & (row >= 0)
            & (row < conv.n_rows)
            & (col >= 0)
            & (col < conv.n_cols)
        )

    rows = np.where(valid, row, 0).astype(np.intp)
    cols = np.where(valid, col, 0).astype(np.intp)
    return GridIndex(rows, cols, valid)


def cell_index(convention: GridConvention, lat: float, lon: float) -> Optional[Tuple[int, int]]:
    """Scalar form of :func:`grid_indices`; returns ``None`` for an invalid point."""
    idx = grid_indices(convention, float(lat), float(lon))
    if not bool(idx.valid):
        return None
    return int(idx.rows), int(idx.cols)


def cell_centers(convention: GridConvention) -> Tuple[np.ndarray, np.ndarray]:
    """Return (latitude of each row, longitude of each column) for a convention.

    For node-registered grids these are the node coordinates themselves.
    """
    conv = convention
    r = np.arange(conv.n_rows, dtype=float)
    c = np.arange(conv.n_cols, dtype=float)

    if conv.projection == "mercator":
        half = conv.n_rows / 2
        smax = np.arcsinh(np.tan(np.radians(conv.lat_max)))
        s = (half - r + 0.5) * smax / half
        lat = np.degrees(np.arctan(np.sinh(s)))
        lon = (c + 0.5) * 360.0 / conv.n_cols
        return lat, lon

    offset = 0.0 if conv.registration == "node" else 0.5
    y = (r + offset) / conv.cells_per_degree
    lat = 90.0 - y if conv.row_origin == "north" else y - 90.0
    lon = (c + offset) / conv.cells_per_degree - 180.0
    return lat, lon
