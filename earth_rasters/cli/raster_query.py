import argparse
import csv
import sys
from typing import List, Optional, Sequence, Tuple

import numpy as np

from earth_rasters.geometry.polygon import cells_in_polygon
from earth_rasters.provider import DatasetProvider
from earth_rasters.raster.indexing import cell_centers
from earth_rasters.raster.lookup import (
    lookup_base,
    lookup_elevation,
    lookup_layer,
    lookup_seafloor_age,
    lookup_seismic,
    lookup_thickness,
    read_cells,
)
from earth_rasters.utils.logging import get_logger, set_level

logger = get_logger(__name__)


def _read_points(args) -> Tuple[np.ndarray, np.ndarray]:
    if args.points_csv:
        lat, lon = [], []
        with open(args.points_csv, newline="") as f:
            for row in csv.DictReader(f):
                lat.append(float(row["lat"]) if row["lat"] else np.nan)
                lon.append(float(row["lon"]) if row["lon"] else np.nan)
        return np.asarray(lat), np.asarray(lon)
    if args.lat is None or args.lon is None:
        raise SystemExit("Provide --lat and --lon, or --points-csv.")
    if len(args.lat) != len(args.lon):
        raise SystemExit("--lat and --lon must have the same number of values.")
    return np.asarray(args.lat, dtype=float), np.asarray(args.lon, dtype=float)


def _write_csv(header: Sequence[str], columns: Sequence[np.ndarray], out: Optional[str]) -> None:
    f = open(out, "w", newline="") if out else sys.stdout
    try:
        w = csv.writer(f)
        w.writerow(header)
        for row in zip(*columns):
            w.writerow([f"{v:g}" if isinstance(v, float) else v for v in map(_scalar, row)])
    finally:
        if out:
            f.close()


def _scalar(v):
    return v.item() if isinstance(v, np.generic) else v


def _crust1(provider: DatasetProvider, args) -> None:
    lat, lon = _read_points(args)
    crust = provider.provide("crust1")
    if args.quantity == "layer":
        cols = lookup_layer(crust, lat, lon, args.layer)
        header = ["vp_km_s", "vs_km_s", "rho_kg_m3", "thickness_km"]
    elif args.quantity == "seismic":
        cols = lookup_seismic(crust, lat, lon, args.layer)
        header = ["vp_km_s", "vs_km_s", "rho_kg_m3"]
    elif args.quantity == "thickness":
        cols = (lookup_thickness(crust, lat, lon, args.layer),)
        header = ["thickness_km"]
    else:
        cols = (lookup_base(crust, lat, lon, args.layer),)
        header = ["base_km"]
    _write_csv(["lat", "lon", *header], [lat, lon, *cols], args.out)


def _elevation(provider: DatasetProvider, args) -> None:
    lat, lon = _read_points(args)
    elev = lookup_elevation(provider.provide(args.dataset).primary, lat, lon)
    _write_csv(["lat", "lon", "elevation_m"], [lat, lon, elev], args.out)


def _seafloorage(provider: DatasetProvider, args) -> None:
    lat, lon = _read_points(args)
    values = lookup_seafloor_age(provider.provide("seafloorage"), lat, lon, variable=args.variable)
    _write_csv(["lat", "lon", args.variable], [lat, lon, values], args.out)


def _polygon(provider: DatasetProvider, args) -> None:
    if len(args.poly_lon) != len(args.poly_lat):
        raise SystemExit("--poly-lon and --poly-lat must have the same number of values.")
    bundle = provider.provide(args.dataset)
    raster = bundle[args.variable] if args.variable else bundle.primary
    lat_c, lon_c = cell_centers(raster.convention)
    rows, cols = cells_in_polygon(lat_c, lon_c, args.poly_lon, args.poly_lat)
    logger.info("%d cells of %s inside polygon", rows.size, args.dataset)

    layer = args.layer if raster.is_layered else None
    values = read_cells(raster, rows, cols, layer)
    _write_csv(["row", "col", "lat", "lon", "value"], [rows, cols, lat_c[rows], lon_c[cols], values], args.out)

    if args.plot and rows.size:
        from earth_rasters.utils.plotting import plot_polygon_selection

        r0, r1 = rows.min(), rows.max() + 1
        c0, c1 = cols.min(), cols.max() + 1
        wr, wc = np.meshgrid(np.arange(r0, r1), np.arange(c0, c1), indexing="ij")
        window = read_cells(raster, wr, wc, layer)
        plot_polygon_selection(
            window, lat_c[r0:r1], lon_c[c0:c1], args.poly_lon, args.poly_lat,
            rows - r0, cols - c0, out_png=args.plot, title=f"{args.dataset} cells in polygon",
        )


def _add_points(p: argparse.ArgumentParser) -> None:
    p.add_argument("--lat", type=float, nargs="+", help="Latitudes (decimal degrees)")
    p.add_argument("--lon", type=float, nargs="+", help="Longitudes (decimal degrees)")
    p.add_argument("--points-csv", type=str, default=None, help="CSV file with 'lat' and 'lon' columns")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Point and polygon queries against global rasters")
    p.add_argument("--resource-dir", type=str, default=None, help="Dataset directory (default: ~/resources)")
    p.add_argument("--base-url", type=str, default=None, help="Where to download missing datasets from")
    p.add_argument("--catalog", type=str, default=None, help="Dataset catalog YAML (default: bundled datasets.yaml)")
    p.add_argument("--no-download", action="store_true", help="Fail instead of downloading missing files")
    p.add_argument("--out", type=str, default=None, help="Write CSV here instead of stdout")
    p.add_argument("--verbose", action="store_true")
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("crust1", help="CRUST 1.0 layer properties")
    _add_points(c)
    c.add_argument("--layer", type=int, required=True, help="1-based layer number")
    c.add_argument("--quantity", choices=["layer", "seismic", "thickness", "base"], default="layer")
    c.set_defaults(func=_crust1)

    e = sub.add_parser("elevation", help="ETOPO1 or SRTM15+ elevation")
    _add_points(e)
    e.add_argument("--dataset", choices=["etopo1", "srtm15plus"], default="etopo1")
    e.set_defaults(func=_elevation)

    s = sub.add_parser("seafloorage", help="Seafloor age, its sigma or spreading rate")
    _add_points(s)
    s.add_argument("--variable", choices=["seafloorage", "seafloorage_sigma", "seafloorrate"], default="seafloorage")
    s.set_defaults(func=_seafloorage)

    g = sub.add_parser("polygon", help="Raster cells whose centres fall inside a lon/lat polygon")
    g.add_argument("--dataset", type=str, required=True)
    g.add_argument("--variable", type=str, default=None, help="Bundle variable (default: primary)")
    g.add_argument("--layer", type=int, default=1, help="1-based layer for layered datasets")
    g.add_argument("--poly-lon", type=float, nargs="+", required=True)
    g.add_argument("--poly-lat", type=float, nargs="+", required=True)
    g.add_argument("--plot", type=str, default=None, help="Write a PNG of the selection here")
    g.set_defaults(func=_polygon)
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    if args.verbose:
        set_level("DEBUG")
    provider = DatasetProvider(
        resource_dir=args.resource_dir,
        base_url=args.base_url,
        catalog=args.catalog,
        download=not args.no_download,
    )
    args.func(provider, args)


if __name__ == "__main__":
    main()
