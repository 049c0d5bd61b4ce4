"""Planar polygon tests and spherical distances."""

from .polygon import point_in_polygon, cells_in_polygon
from .sphere import arc_distance

__all__ = ["point_in_polygon", "cells_in_polygon", "arc_distance"]
