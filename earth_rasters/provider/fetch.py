from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import requests
import yaml

from ..config import BASE_URL, DOWNLOAD_TIMEOUT
from ..raster.conventions import CONVENTIONS
from ..raster.types import GridConvention, Raster, RasterBundle
from ..utils.logging import get_logger
from ..utils.paths import ensure_resource_subdir
from .decode import parse_layered_text, read_geotiff_raster, read_hdf5_variables

logger = get_logger(__name__)

FORMATS = ("crust1_text", "hdf5", "geotiff")


def load_catalog(path: Optional[str | Path] = None) -> Dict[str, Dict[str, Any]]:
    """Load the dataset catalog (the bundled ``datasets.yaml`` by default)."""
    if path is None:
        text = resources.files("earth_rasters").joinpath("datasets.yaml").read_text(encoding="utf-8")
    else:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Dataset catalog not found: {path}")
        text = path.read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    datasets = data.get("datasets", {})
    for name, entry in datasets.items():
        if entry.get("format") not in FORMATS:
            raise ValueError(f"Dataset {name}: unsupported format {entry.get('format')!r}")
    return datasets


def _convention(name: str, entry: Mapping[str, Any]) -> GridConvention:
    if "grid" in entry:
        return GridConvention.from_dict(name, entry["grid"])
    key = entry.get("convention", name)
    if key not in CONVENTIONS:
        raise ValueError(f"Dataset {name}: unknown convention {key!r}")
    return CONVENTIONS[key]


def _data_files(entry: Mapping[str, Any]) -> List[str]:
    if entry["format"] == "crust1_text":
        return list(entry["files"].values())
    return [entry["file"]]


def download_file(url: str, dest: Path, timeout: int = DOWNLOAD_TIMEOUT) -> Path:
    """Stream ``url`` into ``dest``, writing through a ``.part`` file."""
    logger.info("Downloading %s", url)
    tmp = dest.with_name(dest.name + ".part")
    with requests.get(url, stream=True, timeout=timeout) as r:
        r.raise_for_status()
        with open(tmp, "wb") as f:
            for chunk in r.iter_content(chunk_size=1 << 20):
                f.write(chunk)
    tmp.replace(dest)
    return dest


class DatasetProvider:
    """Fetches, caches and decodes the global datasets listed in the catalog.

    Each dataset is decoded at most once per provider; the returned
    :class:`RasterBundle` is immutable and may be shared between threads.
    """

    def __init__(
        self,
        resource_dir: Optional[str | Path] = None,
        base_url: Optional[str] = None,
        catalog: Optional[str | Path | Mapping[str, Any]] = None,
        timeout: Optional[int] = None,
        download: bool = True,
    ) -> None:
        self.resource_dir = resource_dir
        self.base_url = (base_url or BASE_URL).rstrip("/")
        if isinstance(catalog, Mapping):
            self.catalog = dict(catalog)
        else:
            self.catalog = load_catalog(catalog)
        self.timeout = DOWNLOAD_TIMEOUT if timeout is None else timeout
        self.download = download
        self._loaded: Dict[str, RasterBundle] = {}

    def names(self) -> List[str]:
        return sorted(self.catalog)

    def _entry(self, name: str) -> Mapping[str, Any]:
        try:
            return self.catalog[name]
        except KeyError:
            raise KeyError(f"Unknown dataset {name!r}; available: {self.names()}") from None

    def convention(self, name: str) -> GridConvention:
        return _convention(name, self._entry(name))

    def fetch(self, name: str) -> Path:
        """Make sure every file of dataset ``name`` is on disk; return its directory."""
        entry = self._entry(name)
        filedir = ensure_resource_subdir(name, self.resource_dir)
        files = _data_files(entry)
        if entry.get("references"):
            files.insert(0, entry["references"])

        for fname in files:
            path = filedir / fname
            if path.exists():
                continue
            if not self.download:
                raise FileNotFoundError(f"{path} is missing and downloads are disabled")
            download_file(f"{self.base_url}/{fname}", path, timeout=self.timeout)
        return filedir

    def references(self, name: str) -> str:
        entry = self._entry(name)
        if not entry.get("references"):
            return ""
        return (self.fetch(name) / entry["references"]).read_text(encoding="utf-8", errors="replace")

    def provide(self, name: str) -> RasterBundle:
        """Return dataset ``name`` as a bundle of rasters, loading it on first use."""
        if name in self._loaded:
            return self._loaded[name]

        entry = self._entry(name)
        convention = _convention(name, entry)
        filedir = self.fetch(name)
        scale = entry.get("scale", {})
        units = entry.get("units", {})

        if entry["format"] == "geotiff":
            var = entry.get("primary", name)
            named = {
                var: read_geotiff_raster(
                    filedir / entry["file"], convention, scale=float(scale.get(var, 1.0)), units=units.get(var, "")
                )
            }
        else:
            if entry["format"] == "crust1_text":
                arrays = {
                    var: parse_layered_text(filedir / fname, convention.n_rows, convention.n_cols, convention.n_layers)
                    for var, fname in entry["files"].items()
                }
            else:
                variables = entry.get("variables") or [entry["primary"]]
                arrays = read_hdf5_variables(filedir / entry["file"], variables, convention.shape)
            named = {
                var: Raster(arr, convention, scale=float(scale.get(var, 1.0)), units=units.get(var, ""))
                for var, arr in arrays.items()
            }
        primary = entry.get("primary", next(iter(named)))
        if primary not in named:
            raise ValueError(f"Dataset {name}: primary variable {primary!r} was not loaded")

        ref = entry.get("references")
        references = (filedir / ref).read_text(encoding="utf-8", errors="replace") if ref else ""
        bundle = RasterBundle(primary=named[primary], named=named, references=references)
        logger.debug("Loaded %s: %s", name, bundle.variables())
        self._loaded[name] = bundle
        return bundle
