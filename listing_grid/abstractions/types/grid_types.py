# listing_grid/abstractions/types/grid_types.py
"""Grid system type definitions."""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from shapely.geometry import Polygon, box


@dataclass
class Boundary:
    """City outline as a single closed exterior ring in lon/lat."""
    polygon: Polygon
    geometry_type: str = 'Polygon'
    ignored_members: int = 0
    source: Optional[str] = None

    @property
    def ring(self) -> List[Tuple[float, float]]:
        """Closed ring of (lon, lat) vertices, first == last."""
        return [(x, y) for x, y in self.polygon.exterior.coords]

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_lon, min_lat, max_lon, max_lat) over the ring vertices."""
        return self.polygon.bounds


@dataclass(frozen=True)
class Listing:
    """A price-tagged location that passed row validation."""
    price: float
    longitude: float
    latitude: float


@dataclass
class GridSpec:
    """Full row-major lattice laid over a boundary's bounding box."""
    min_lon: float
    min_lat: float
    cell_lon: float
    cell_lat: float
    rows: int
    cols: int
    cell_size_m: float
    reference_latitude: float

    @property
    def lattice_size(self) -> int:
        return self.rows * self.cols

    def cell_id(self, row: int, col: int) -> int:
        """Lattice id, counted over every position including discarded ones."""
        return row * self.cols + col + 1

    def position(self, cell_id: int) -> Tuple[int, int]:
        """Inverse of :meth:`cell_id`."""
        return divmod(cell_id - 1, self.cols)

    def cell_bounds(self, row: int, col: int) -> Tuple[float, float, float, float]:
        """(left, bottom, right, top) of a lattice position.

        Right and top are computed as the neighbouring cell's left and bottom
        so adjacent cells share bit-identical edges.
        """
        left = self.min_lon + col * self.cell_lon
        bottom = self.min_lat + row * self.cell_lat
        right = self.min_lon + (col + 1) * self.cell_lon
        top = self.min_lat + (row + 1) * self.cell_lat
        return left, bottom, right, top


@dataclass
class GridCell:
    """Axis-aligned lattice cell in degrees."""
    id: int
    row: int
    col: int
    left: float
    right: float
    top: float
    bottom: float
    _geometry: Optional[Polygon] = field(default=None, init=False, repr=False, compare=False)

    @property
    def geometry(self) -> Polygon:
        """Rectangle polygon of the cell."""
        if self._geometry is None:
            self._geometry = box(self.left, self.bottom, self.right, self.top)
        return self._geometry

    @property
    def ring(self) -> List[List[float]]:
        """Closed ring: top-left, top-right, bottom-right, bottom-left, top-left."""
        return [
            [self.left, self.top],
            [self.right, self.top],
            [self.right, self.bottom],
            [self.left, self.bottom],
            [self.left, self.top],
        ]

    def contains(self, lon: float, lat: float) -> bool:
        """Half-open membership test on [left, right) x [bottom, top)."""
        return self.left <= lon < self.right and self.bottom <= lat < self.top


@dataclass
class CellStatistics:
    """Price statistics over the listings binned into one cell."""
    min: float
    max: float
    mean: float
    count: int

    @classmethod
    def from_prices(cls, prices: List[float]) -> Optional['CellStatistics']:
        """Compute statistics, or None when there are no prices."""
        if not prices:
            return None
        return cls(
            min=min(prices),
            max=max(prices),
            mean=math.fsum(prices) / len(prices),
            count=len(prices)
        )


@dataclass
class PopulatedCell:
    """A kept cell with at least one listing."""
    cell: GridCell
    stats: CellStatistics
