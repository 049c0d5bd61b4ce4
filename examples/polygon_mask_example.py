import os
import sys

import numpy as np

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(SCRIPT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from earth_rasters.geometry import cells_in_polygon
from earth_rasters.utils.paths import ensure_resource_subdir
from earth_rasters.utils.plotting import plot_polygon_selection


def main():
    """Select the cells of a synthetic 1-degree field that fall inside a polygon."""
    # Step 1: Synthetic field on a 1-degree cell grid over the North Atlantic
    lat_c = np.arange(0.5, 60.0, 1.0)
    lon_c = np.arange(-79.5, 0.0, 1.0)
    field = np.cos(np.radians(lat_c))[:, None] * np.sin(np.radians(lon_c))[None, :]

    # Step 2: Polygon in (lon, lat) order
    poly_lon = [-70.0, -20.0, -10.0, -40.0, -75.0]
    poly_lat = [10.0, 5.0, 40.0, 55.0, 35.0]
    rows, cols = cells_in_polygon(lat_c, lon_c, poly_lon, poly_lat)
    print(f"{rows.size} of {field.size} cells inside the polygon")
    print(f"Mean value inside: {field[rows, cols].mean():.4f}")

    # Step 3: Plot the selection
    out_png = os.path.join(str(ensure_resource_subdir("examples")), "polygon_mask.png")
    plot_polygon_selection(field, lat_c, lon_c, poly_lon, poly_lat, rows, cols, out_png=out_png)
    print(f"Saved plot to {out_png}")


if __name__ == '__main__':
    main()
