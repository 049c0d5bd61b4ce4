import os
import sys

import numpy as np

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(SCRIPT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from earth_rasters import CRUST1_LAYERS, DatasetProvider, lookup_elevation, lookup_layer


def main():
    """Query CRUST 1.0 and ETOPO1 at a few sites (downloads the data on first run)."""
    sites = {
        "Yellowstone": (44.6, -110.5),
        "Mid-Atlantic Ridge": (0.0, -25.0),
        "Tibet": (32.0, 88.0),
    }
    lat = np.array([v[0] for v in sites.values()])
    lon = np.array([v[1] for v in sites.values()])

    provider = DatasetProvider()
    crust = provider.provide("crust1")
    elev = lookup_elevation(provider.provide("etopo1").primary, lat, lon)

    for layer, name in enumerate(CRUST1_LAYERS[:8], start=1):
        vp, vs, rho, thk = lookup_layer(crust, lat, lon, layer)
        print(f"{layer}) {name}")
        for site, a, b, c, d in zip(sites, vp, vs, rho, thk):
            print(f"    {site:20s} vp={a:5.2f} km/s  vs={b:5.2f} km/s  rho={c:7.1f} kg/m^3  thickness={d:6.2f} km")

    for site, e in zip(sites, elev):
        print(f"{site:20s} elevation {e:8.1f} m")


if __name__ == '__main__':
    main()
