"""Grid conventions of the global datasets served by the provider."""

from .types import GridConvention

# CRUST 1.0: 1x1 degree, 9 boundaries/layers, row 0 at the north pole
CRUST1 = GridConvention(
    name="crust1",
    projection="equirectangular",
    n_layers=9,
    n_rows=180,
    n_cols=360,
    cells_per_degree=1,
    row_origin="north",
    wrap_longitude=True,
)

# ETOPO1: 1 arc minute, row 0 at the south pole
ETOPO1 = GridConvention(
    name="etopo1",
    projection="equirectangular",
    n_rows=180 * 60,
    n_cols=360 * 60,
    cells_per_degree=60,
    row_origin="south",
)

# SRTM15+: 15 arc seconds, node registered (N+1 rows and columns)
SRTM15PLUS = GridConvention(
    name="srtm15plus",
    projection="equirectangular",
    n_rows=180 * 240 + 1,
    n_cols=360 * 240 + 1,
    cells_per_degree=240,
    row_origin="south",
    registration="node",
    sentinel=-32768,
)

# Mueller et al. seafloor age: Mercator, 2 arc minute columns from 0 deg east
SEAFLOORAGE = GridConvention(
    name="seafloorage",
    projection="mercator",
    n_rows=8640,
    n_cols=10800,
    cells_per_degree=30,
    row_origin="north",
    lon_min=-180.0,
    lon_max=360.0,
    lat_max=80.738,
)

CONVENTIONS = {c.name: c for c in (CRUST1, ETOPO1, SRTM15PLUS, SEAFLOORAGE)}

CRUST1_LAYERS = (
    "water",
    "ice",
    "upper sediments",
    "middle sediments",
    "lower sediments",
    "upper crystalline crust",
    "middle crystalline crust",
    "lower crystalline crust",
    "top of mantle below crust",
)
