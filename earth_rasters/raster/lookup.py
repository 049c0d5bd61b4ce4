"""Nearest-cell lookups of physical quantities from global rasters."""

from __future__ import annotations

from typing import Optional, Tuple, Union

import numpy as np

from ..utils.logging import get_logger
from .conventions import CRUST1_LAYERS
from .indexing import GridIndex, grid_indices
from .types import Raster, RasterBundle

logger = get_logger(__name__)

# Layers with a boundary below them (thickness/base defined), and all layers
N_BOUNDED_LAYERS = 8
N_SEISMIC_LAYERS = 9


def _layer_help(max_layer: int, result: str) -> str:
    lines = [f"{i}) {name}" for i, name in enumerate(CRUST1_LAYERS[:max_layer], start=1)]
    return (
        f"layer must be an integer between 1 and {max_layer}.\n"
        "Available layers:\n" + "\n".join(lines) + f"\nResults are returned in form {result}"
    )


def check_layer(layer, max_layer: int, result: str = "(value,)") -> int:
    """Validate a 1-based layer number and return it as a 0-based index."""
    if isinstance(layer, bool) or not isinstance(layer, (int, np.integer)):
        raise ValueError(_layer_help(max_layer, result))
    if layer < 1 or layer > max_layer:
        raise ValueError(_layer_help(max_layer, result))
    return int(layer) - 1


def _read(raster: Raster, idx: GridIndex, layer: Optional[int] = None) -> np.ndarray:
    """Read the cells in ``idx`` from ``raster``; invalid points and sentinels become NaN."""
    n_rows, n_cols = raster.data.shape[-2:]
    ok = idx.valid & (idx.rows < n_rows) & (idx.cols < n_cols)
    out = np.full(idx.rows.shape, np.nan)
    if not ok.any():
        return out

    if layer is None:
        values = raster.data[idx.rows[ok], idx.cols[ok]]
    else:
        values = raster.data[layer, idx.rows[ok], idx.cols[ok]]
    values = np.asarray(values, dtype=float)

    if raster.sentinel is not None:
        values = np.where(values == raster.sentinel, np.nan, values)
    out[ok] = values * raster.scale
    return out


def read_cells(raster: Raster, rows, cols, layer: Optional[int] = None) -> np.ndarray:
    """Values at explicit 0-based (row, col) cells, e.g. from ``cells_in_polygon``.

    Applies the same sentinel and unit policy as the coordinate lookups;
    ``layer`` is 1-based. Out-of-range cells give NaN.
    """
    rows = np.asarray(rows, dtype=np.intp)
    cols = np.asarray(cols, dtype=np.intp)
    if rows.shape != cols.shape:
        raise ValueError("rows and cols must be equal length")
    layer_index = check_layer(layer, raster.convention.n_layers) if raster.is_layered else None
    valid = (rows >= 0) & (cols >= 0)
    idx = GridIndex(np.where(valid, rows, 0), np.where(valid, cols, 0), valid)
    return _read(raster, idx, layer_index)


def lookup(raster: Raster, lat, lon, layer: Optional[int] = None) -> np.ndarray:
    """Value of ``raster`` at each (lat, lon); ``layer`` is 1-based for layered rasters."""
    layer_index = None
    if raster.is_layered:
        if layer is None:
            raise ValueError(f"{raster.convention.name} is layered; a layer number is required")
        layer_index = check_layer(layer, raster.convention.n_layers)
    elif layer is not None:
        raise ValueError(f"{raster.convention.name} has a single layer; got layer={layer!r}")

    idx = grid_indices(raster.convention, lat, lon)
    if not idx.valid.all():
        logger.debug("%d of %d points outside %s", int((~idx.valid).sum()), idx.valid.size, raster.convention.name)
    return _read(raster, idx, layer_index)


def _crust_index(crust: RasterBundle, lat, lon) -> GridIndex:
    return grid_indices(crust.primary.convention, lat, lon)


def _thickness_and_base(crust: RasterBundle, idx: GridIndex, k: int) -> Tuple[np.ndarray, np.ndarray]:
    bnds = crust["bnds"]
    top = _read(bnds, idx, k)
    base = _read(bnds, idx, k + 1)
    return np.asarray(top - base), base


def lookup_layer(crust: RasterBundle, lat, lon, layer: int):
    """Vp, Vs, density and thickness of a CRUST 1.0 layer (1..8) at each point.

    Returns ``(vp, vs, rho, thickness)``; velocities in km/s, density in kg/m^3,
    thickness in km.
    """
    k = check_layer(layer, N_BOUNDED_LAYERS, "(Vp, Vs, Rho, thickness)")
    idx = _crust_index(crust, lat, lon)
    vp = _read(crust["vp"], idx, k)
    vs = _read(crust["vs"], idx, k)
    rho = _read(crust["rho"], idx, k)
    thickness, _ = _thickness_and_base(crust, idx, k)
    return vp, vs, rho, thickness


def lookup_seismic(crust: RasterBundle, lat, lon, layer: int):
    """Vp, Vs and density of a CRUST 1.0 layer (1..9, 9 = top of mantle)."""
    k = check_layer(layer, N_SEISMIC_LAYERS, "(Vp, Vs, Rho)")
    idx = _crust_index(crust, lat, lon)
    return _read(crust["vp"], idx, k), _read(crust["vs"], idx, k), _read(crust["rho"], idx, k)


def lookup_thickness(crust: RasterBundle, lat, lon, layer: int) -> np.ndarray:
    """Thickness (km) of a CRUST 1.0 layer (1..8)."""
    k = check_layer(layer, N_BOUNDED_LAYERS, "thickness of the requested layer")
    thickness, _ = _thickness_and_base(crust, _crust_index(crust, lat, lon), k)
    return thickness


def lookup_base(crust: RasterBundle, lat, lon, layer: int) -> np.ndarray:
    """Elevation (km, relative to sea level) of the base of a CRUST 1.0 layer (1..8)."""
    k = check_layer(layer, N_BOUNDED_LAYERS, "depth from sea level to base of the requested layer")
    return _read(crust["bnds"], _crust_index(crust, lat, lon), k + 1)


def lookup_elevation(raster: Raster, lat, lon) -> np.ndarray:
    """Elevation in metres from an ETOPO1 or SRTM15+ raster.

    Index convention and "no data" sentinel come from ``raster.convention``.
    """
    if raster.is_layered:
        raise ValueError(f"Expected a single-layer elevation raster, got {raster.convention.name}")
    return _read(raster, grid_indices(raster.convention, lat, lon))


def lookup_seafloor_age(
    sfdata: Union[Raster, RasterBundle], lat, lon, variable: str = "seafloorage"
) -> np.ndarray:
    """Seafloor age (Ma), its uncertainty or spreading rate at each point.

    ``variable`` selects ``seafloorage``, ``seafloorage_sigma`` or
    ``seafloorrate`` when ``sfdata`` is a bundle.
    """
    raster = sfdata[variable] if isinstance(sfdata, RasterBundle) else sfdata
    if raster.convention.projection != "mercator":
        raise ValueError(f"Seafloor age lookups need a Mercator raster, got {raster.convention.name}")
    return _read(raster, grid_indices(raster.convention, lat, lon))
