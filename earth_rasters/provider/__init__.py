"""Dataset retrieval and decoding."""

from .decode import parse_layered_text, read_hdf5_variables, read_geotiff_raster
from .fetch import DatasetProvider, download_file, load_catalog

__all__ = [
    "DatasetProvider",
    "download_file",
    "load_catalog",
    "parse_layered_text",
    "read_hdf5_variables",
    "read_geotiff_raster",
]
