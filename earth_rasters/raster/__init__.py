"""Global raster grids: conventions, index mapping and value lookups."""

from .types import GridConvention, Raster, RasterBundle
from .conventions import CRUST1, ETOPO1, SRTM15PLUS, SEAFLOORAGE, CONVENTIONS, CRUST1_LAYERS
from .indexing import GridIndex, grid_indices, cell_index, cell_centers
from .lookup import (
    lookup,
    lookup_layer,
    lookup_seismic,
    lookup_thickness,
    lookup_base,
    lookup_elevation,
    lookup_seafloor_age,
    read_cells,
)

__all__ = [
    "GridConvention",
    "Raster",
    "RasterBundle",
    "CRUST1",
    "ETOPO1",
    "SRTM15PLUS",
    "SEAFLOORAGE",
    "CONVENTIONS",
    "CRUST1_LAYERS",
    "GridIndex",
    "grid_indices",
    "cell_index",
    "cell_centers",
    "lookup",
    "lookup_layer",
    "lookup_seismic",
    "lookup_thickness",
    "lookup_base",
    "lookup_elevation",
    "lookup_seafloor_age",
    "read_cells",
]
