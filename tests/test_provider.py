import h5py
import numpy as np
import pytest
import rasterio
import requests
from rasterio.transform import from_origin

from earth_rasters.provider import fetch as fetch_mod
from earth_rasters.provider import DatasetProvider, load_catalog, parse_layered_text, read_geotiff_raster
from earth_rasters.raster.conventions import CRUST1, SRTM15PLUS
from earth_rasters.raster.lookup import lookup_elevation, lookup_layer
from earth_rasters.raster.types import GridConvention

N_ROWS, N_COLS, N_LAYERS = 18, 36, 3
TINY_GRID = {
    "projection": "equirectangular",
    "n_layers": N_LAYERS,
    "n_rows": N_ROWS,
    "n_cols": N_COLS,
    "cells_per_degree": 0.1,
    "wrap_longitude": True,
}
CRUST_FILES = {"vp": "tiny.vp", "vs": "tiny.vs", "rho": "tiny.rho", "bnds": "tiny.bnds"}


def _coded_stack(offset=0.0):
    # value encodes (row, col, layer) so orientation mistakes show up
    r, c, l = np.meshgrid(np.arange(N_ROWS), np.arange(N_COLS), np.arange(N_LAYERS), indexing="ij")
    return (r * 1000 + c * 10 + l + offset).reshape(-1, N_LAYERS).astype(float)


def _write_crust(dirpath):
    dirpath.mkdir(parents=True, exist_ok=True)
    for i, fname in enumerate(CRUST_FILES.values()):
        np.savetxt(dirpath / fname, _coded_stack(offset=i * 0.25), fmt="%.2f")
    (dirpath / "tiny.references.txt").write_text("Laske et al. (2013)\n")


def _crust_catalog():
    return {
        "tinycrust": {
            "format": "crust1_text",
            "grid": TINY_GRID,
            "references": "tiny.references.txt",
            "files": CRUST_FILES,
            "primary": "bnds",
            "scale": {"rho": 1000.0},
            "units": {"rho": "kg/m^3"},
        }
    }


def test_parse_layered_text_orientation(tmp_path):
    path = tmp_path / "stack.txt"
    np.savetxt(path, _coded_stack(), fmt="%.1f")
    arr = parse_layered_text(path, N_ROWS, N_COLS, N_LAYERS)
    assert arr.shape == (N_LAYERS, N_ROWS, N_COLS)
    assert arr[0, 0, 0] == 0.0
    assert arr[2, 5, 7] == 5 * 1000 + 7 * 10 + 2
    assert arr[1, 17, 35] == 17 * 1000 + 35 * 10 + 1
    assert not arr.flags.writeable


def test_parse_layered_text_rejects_wrong_size(tmp_path):
    path = tmp_path / "short.txt"
    np.savetxt(path, _coded_stack()[:-1], fmt="%.1f")
    with pytest.raises(ValueError):
        parse_layered_text(path, N_ROWS, N_COLS, N_LAYERS)


def test_provider_loads_local_layered_dataset(tmp_path):
    _write_crust(tmp_path / "tinycrust")
    provider = DatasetProvider(resource_dir=tmp_path, catalog=_crust_catalog(), download=False)
    bundle = provider.provide("tinycrust")

    assert bundle.primary is bundle["bnds"]
    assert bundle["rho"].scale == 1000.0
    assert bundle["rho"].units == "kg/m^3"
    assert "Laske" in bundle.references
    assert provider.provide("tinycrust") is bundle

    # lat 85 -> row 0, lon -175 -> col 0, layer 2
    vp, vs, rho, thk = lookup_layer(bundle, [85.0], [-175.0], 2)
    assert vp[0] == pytest.approx(1.0)
    assert rho[0] == pytest.approx((1.0 + 0.5) * 1000.0)
    assert thk[0] == pytest.approx(-1.0)


def test_provider_without_download_reports_missing_file(tmp_path):
    provider = DatasetProvider(resource_dir=tmp_path, catalog=_crust_catalog(), download=False)
    with pytest.raises(FileNotFoundError):
        provider.provide("tinycrust")


def test_unknown_dataset(tmp_path):
    provider = DatasetProvider(resource_dir=tmp_path, catalog=_crust_catalog(), download=False)
    with pytest.raises(KeyError):
        provider.provide("crust2")


class _FakeResponse:
    def __init__(self, url, content, status_code=200):
        self.url = url
        self.content = content
        self.status_code = status_code

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}")

    def iter_content(self, chunk_size=1):
        yield self.content


def test_provider_downloads_missing_files(tmp_path, monkeypatch):
    source = tmp_path / "remote"
    _write_crust(source)
    requested = []

    def fake_get(url, stream=False, timeout=None):
        requested.append(url)
        name = url.rsplit("/", 1)[-1]
        return _FakeResponse(url, (source / name).read_bytes())

    monkeypatch.setattr(fetch_mod.requests, "get", fake_get)
    provider = DatasetProvider(resource_dir=tmp_path / "cache", base_url="https://example.org/data/", catalog=_crust_catalog())
    bundle = provider.provide("tinycrust")

    assert requested[0] == "https://example.org/data/tiny.references.txt"
    assert len(requested) == 5
    assert bundle["vp"].data.shape == (N_LAYERS, N_ROWS, N_COLS)
    assert not list((tmp_path / "cache" / "tinycrust").glob("*.part"))

    # a second provider finds the cached files and does not download again
    requested.clear()
    DatasetProvider(resource_dir=tmp_path / "cache", catalog=_crust_catalog()).provide("tinycrust")
    assert requested == []


def test_provider_http_error_propagates(tmp_path, monkeypatch):
    monkeypatch.setattr(fetch_mod.requests, "get", lambda url, **kw: _FakeResponse(url, b"", status_code=404))
    provider = DatasetProvider(resource_dir=tmp_path, catalog=_crust_catalog())
    with pytest.raises(requests.HTTPError):
        provider.provide("tinycrust")
    assert not list((tmp_path / "tinycrust").iterdir())


def test_provider_reads_hdf5_and_transposes_column_major(tmp_path):
    grid = {
        "projection": "equirectangular",
        "n_rows": 181,
        "n_cols": 361,
        "row_origin": "south",
        "registration": "node",
        "sentinel": -32768,
    }
    elevation = (np.arange(181 * 361).reshape(181, 361) % 3000).astype(np.int16)
    elevation[90, 180] = -32768
    filedir = tmp_path / "tinysrtm"
    filedir.mkdir()
    with h5py.File(filedir / "tinysrtm.h5", "w") as h5:
        h5["vars/elevation"] = elevation.T
    catalog = {"tinysrtm": {"format": "hdf5", "grid": grid, "file": "tinysrtm.h5", "primary": "elevation"}}

    bundle = DatasetProvider(resource_dir=tmp_path, catalog=catalog, download=False).provide("tinysrtm")
    assert bundle.primary.data.shape == (181, 361)
    out = lookup_elevation(bundle.primary, [0.0, 1.0], [0.0, 0.0])
    assert np.isnan(out[0])
    assert out[1] == elevation[91, 180]


def test_bundled_catalog():
    catalog = load_catalog()
    assert set(catalog) == {"crust1", "etopo1", "srtm15plus", "seafloorage"}
    provider = DatasetProvider(catalog=catalog, download=False)
    assert provider.convention("srtm15plus") is SRTM15PLUS
    assert provider.convention("crust1") is CRUST1
    assert catalog["crust1"]["scale"]["rho"] == 1000.0
    assert catalog["seafloorage"]["variables"] == ["seafloorage", "seafloorage_sigma", "seafloorrate"]


def test_catalog_with_unknown_format(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text("datasets:\n  foo:\n    format: netcdf\n    file: foo.nc\n")
    with pytest.raises(ValueError):
        load_catalog(path)
    with pytest.raises(FileNotFoundError):
        load_catalog(tmp_path / "missing.yaml")


def _write_geotiff(path):
    data = np.arange(N_ROWS * N_COLS, dtype=np.float32).reshape(N_ROWS, N_COLS)  # north-up
    data[0, 0] = -9999.0
    with rasterio.open(
        path, "w", driver="GTiff", height=N_ROWS, width=N_COLS, count=1, dtype="float32",
        crs="EPSG:4326", transform=from_origin(-180.0, 90.0, 10.0, 10.0), nodata=-9999.0,
    ) as dst:
        dst.write(data, 1)
    return data


def test_read_geotiff_raster_orients_to_convention(tmp_path):
    data = _write_geotiff(tmp_path / "global.tif")
    conv = GridConvention(
        name="tif", projection="equirectangular", n_rows=N_ROWS, n_cols=N_COLS,
        cells_per_degree=0.1, row_origin="south",
    )
    raster = read_geotiff_raster(tmp_path / "global.tif", conv)
    assert raster.sentinel == -9999.0
    assert raster.data[0, 1] == data[N_ROWS - 1, 1]
    out = lookup_elevation(raster, [85.0, -85.0], [-175.0, -175.0])
    assert np.isnan(out[0])
    assert out[1] == data[N_ROWS - 1, 0]


def test_read_geotiff_rejects_layered_convention(tmp_path):
    with pytest.raises(ValueError):
        read_geotiff_raster(tmp_path / "unused.tif", CRUST1)


def test_provider_loads_geotiff_entry(tmp_path):
    filedir = tmp_path / "tinytif"
    filedir.mkdir()
    data = _write_geotiff(filedir / "tiny.tif")
    grid = {
        "projection": "equirectangular",
        "n_rows": N_ROWS,
        "n_cols": N_COLS,
        "cells_per_degree": 0.1,
        "row_origin": "south",
    }
    catalog = {
        "tinytif": {
            "format": "geotiff",
            "grid": grid,
            "file": "tiny.tif",
            "primary": "elevation",
            "units": {"elevation": "m"},
        }
    }

    bundle = DatasetProvider(resource_dir=tmp_path, catalog=catalog, download=False).provide("tinytif")
    assert bundle.variables() == {"elevation": (N_ROWS, N_COLS)}
    assert bundle.primary is bundle["elevation"]
    assert bundle.primary.units == "m"
    assert bundle.primary.sentinel == -9999.0
    out = lookup_elevation(bundle.primary, [85.0, -85.0, 85.0], [-175.0, -175.0, -165.0])
    assert np.isnan(out[0])
    assert out[1] == data[N_ROWS - 1, 0]
    assert out[2] == data[0, 1]
