from __future__ import annotations

import numpy as np


def arc_distance(lat_i, lon_i, lat, lon):
    """Angular great-circle distance in degrees between (lat_i, lon_i) and (lat, lon).

    Inputs are decimal degrees and broadcast against each other.
    """
    to_rad = np.pi / 180.0
    lat_i, lon_i = np.asarray(lat_i, dtype=float), np.asarray(lon_i, dtype=float)
    lat, lon = np.asarray(lat, dtype=float), np.asarray(lon, dtype=float)
    arg = (
        np.sin(lat_i * to_rad) * np.sin(lat * to_rad)
        + np.cos(lat_i * to_rad) * np.cos(lat * to_rad) * np.cos((lon_i - lon) * to_rad)
    )
    # acos domain guard against rounding
    arg = np.clip(arg, -1.0, 1.0)
    return np.degrees(np.arccos(arg))
