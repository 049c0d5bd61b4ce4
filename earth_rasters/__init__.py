"""Point queries against global geospatial rasters and polygon masking."""

from .raster import (
    GridConvention,
    Raster,
    RasterBundle,
    CRUST1,
    ETOPO1,
    SRTM15PLUS,
    SEAFLOORAGE,
    CRUST1_LAYERS,
    grid_indices,
    cell_index,
    cell_centers,
    lookup,
    lookup_layer,
    lookup_seismic,
    lookup_thickness,
    lookup_base,
    lookup_elevation,
    lookup_seafloor_age,
    read_cells,
)
from .geometry import point_in_polygon, cells_in_polygon, arc_distance
from .provider import DatasetProvider

__version__ = "0.1.0"

__all__ = [
    "GridConvention",
    "Raster",
    "RasterBundle",
    "CRUST1",
    "ETOPO1",
    "SRTM15PLUS",
    "SEAFLOORAGE",
    "CRUST1_LAYERS",
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
    "point_in_polygon",
    "cells_in_polygon",
    "arc_distance",
    "DatasetProvider",
]
