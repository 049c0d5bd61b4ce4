"""Decoders turning dataset files into in-memory arrays."""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Dict, Iterable, Tuple

import h5py
import numpy as np
import rasterio

from ..raster.types import GridConvention, Raster
from ..utils.logging import get_logger

logger = get_logger(__name__)


def _read_only(a: np.ndarray) -> np.ndarray:
    a.flags.writeable = False
    return a


def parse_layered_text(path: str | Path, n_rows: int, n_cols: int, n_layers: int) -> np.ndarray:
    """Read a line-per-cell layered text file into a (layers, rows, cols) array.

    Each line holds the whitespace-delimited layer stack of one cell; lines run
    west to east from -180 degrees, rows north to south.
    """
    values = np.loadtxt(path, dtype=float, ndmin=2)
    expected = (n_rows * n_cols, n_layers)
    if values.shape != expected:
        raise ValueError(f"{path}: expected {expected[0]} lines of {n_layers} values, got shape {values.shape}")
    return _read_only(np.ascontiguousarray(values.reshape(n_rows, n_cols, n_layers).transpose(2, 0, 1)))


def read_hdf5_variables(path: str | Path, names: Iterable[str], shape: Tuple[int, ...]) -> Dict[str, np.ndarray]:
    """Read ``vars/<name>`` datasets from an HDF5 file.

    Arrays written column-major come back with reversed dimensions and are
    transposed to ``shape``.
    """
    out = {}
    with h5py.File(path, "r") as h5:
        for name in names:
            key = f"vars/{name}"
            if key not in h5:
                raise KeyError(f"{path}: no variable {key!r}")
            arr = h5[key][()]
            if arr.shape != tuple(shape) and arr.shape == tuple(shape)[::-1]:
                arr = arr.T
            logger.debug("Read %s %s from %s", key, arr.shape, path)
            out[name] = _read_only(arr)
    return out


def read_geotiff_raster(path: str | Path, convention: GridConvention, scale: float = 1.0, units: str = "") -> Raster:
    """Load band 1 of a global EPSG:4326 GeoTIFF as a raster in ``convention``.

    The band is re-oriented to north-up, west-left and then flipped when the
    convention counts rows from the south. The band nodata value becomes the
    sentinel when the convention does not declare one.
    """
    if convention.n_layers:
        raise ValueError(f"GeoTIFF input holds a single band; {convention.name} is layered")

    with rasterio.open(path) as src:
        if src.crs and "4326" not in str(src.crs):
            raise ValueError(f"Unsupported CRS for {path}: {src.crs}. Expected EPSG:4326 (lat/lon).")
        a = src.read(1)
        nodata = src.nodata
        transform = src.transform

    if transform.e > 0:  # row increases upward
        a = np.flipud(a)
    if transform.a < 0:  # col increases leftward
        a = np.fliplr(a)
    if convention.row_origin == "south":
        a = np.flipud(a)

    if convention.sentinel is None and nodata is not None:
        convention = dataclasses.replace(convention, sentinel=nodata)
    return Raster(_read_only(np.ascontiguousarray(a)), convention, scale=scale, units=units)
