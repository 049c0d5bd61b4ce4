from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

PROJECTIONS = ("equirectangular", "mercator")


@dataclass(frozen=True)
class GridConvention:
    """How a global grid maps latitude/longitude onto rows and columns.

    ``registration`` is ``"cell"`` for grids storing N cell centres and
    ``"node"`` for grids storing the N+1 nodes on cell edges.
    ``n_layers`` is 0 for single-layer (2-D) rasters.
    """
    name: str
    projection: str
    n_rows: int
    n_cols: int
    cells_per_degree: float = 1.0
    n_layers: int = 0
    row_origin: str = "north"         # row 0 at the north or south pole
    registration: str = "cell"
    wrap_longitude: bool = False      # fold lon=180 onto the first column
    lon_min: float = -180.0
    lon_max: float = 180.0
    lat_max: float = 90.0             # Mercator band limit
    sentinel: Optional[float] = None  # raw "no data" value

    def __post_init__(self):
        if self.projection not in PROJECTIONS:
            raise ValueError(f"Unknown projection {self.projection!r}; expected one of {PROJECTIONS}")
        if self.row_origin not in ("north", "south"):
            raise ValueError("row_origin must be 'north' or 'south'")
        if self.registration not in ("cell", "node"):
            raise ValueError("registration must be 'cell' or 'node'")
        if self.n_rows < 1 or self.n_cols < 1 or self.n_layers < 0:
            raise ValueError(f"Invalid grid size for {self.name}: {self.shape}")
        if self.cells_per_degree <= 0:
            raise ValueError("cells_per_degree must be positive")
        if self.projection == "mercator" and not 0.0 < self.lat_max < 90.0:
            raise ValueError("Mercator grids need 0 < lat_max < 90")

    @property
    def shape(self) -> Tuple[int, ...]:
        if self.n_layers:
            return (self.n_layers, self.n_rows, self.n_cols)
        return (self.n_rows, self.n_cols)

    @classmethod
    def from_dict(cls, name: str, settings: Mapping[str, Any]) -> "GridConvention":
        """Build a convention from a catalog ``grid:`` mapping."""
        known = set(cls.__dataclass_fields__) - {"name"}
        unknown = set(settings) - known
        if unknown:
            raise ValueError(f"Unknown grid keys for {name}: {sorted(unknown)}")
        return cls(name=name, **dict(settings))


@dataclass(frozen=True)
class Raster:
    """Read-only in-memory raster plus the convention that indexes it.

    Writeable input arrays are copied; read-only arrays are shared as is.
    """
    data: np.ndarray
    convention: GridConvention
    scale: float = 1.0   # unit conversion applied to every returned value
    units: str = ""

    def __post_init__(self):
        arr = np.asarray(self.data)
        if arr.shape != self.convention.shape:
            raise ValueError(
                f"Raster shape {arr.shape} does not match convention "
                f"{self.convention.name} {self.convention.shape}"
            )
        if arr.flags.writeable:
            arr = arr.copy()
        view = arr.view()
        view.flags.writeable = False
        object.__setattr__(self, "data", view)

    @property
    def sentinel(self) -> Optional[float]:
        return self.convention.sentinel

    @property
    def is_layered(self) -> bool:
        return self.convention.n_layers > 0


@dataclass(frozen=True)
class RasterBundle:
    """A primary raster plus named companion variables on the same grid."""
    primary: Raster
    named: Mapping[str, Raster] = field(default_factory=dict)
    references: str = ""

    def __getitem__(self, name: str) -> Raster:
        try:
            return self.named[name]
        except KeyError:
            raise KeyError(f"No variable {name!r} in bundle; available: {sorted(self.named)}") from None

    def __contains__(self, name: str) -> bool:
        return name in self.named

    def variables(self) -> Dict[str, Tuple[int, ...]]:
        return {k: v.data.shape for k, v in self.named.items()}
