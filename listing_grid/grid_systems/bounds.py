"""Bounding box definitions for grid generation."""

from dataclasses import dataclass
from typing import Tuple

from ..abstractions.types import Boundary


@dataclass
class BoundsDefinition:
    """Named lon/lat bounding box a lattice is laid over."""
    name: str
    bounds: Tuple[float, float, float, float]  # min_lon, min_lat, max_lon, max_lat

    @classmethod
    def from_boundary(cls, boundary: Boundary, name: str = 'boundary') -> 'BoundsDefinition':
        """Bounding box over all ring vertices of a boundary."""
        xs = [x for x, _ in boundary.ring]
        ys = [y for _, y in boundary.ring]
        return cls(name=name, bounds=(min(xs), min(ys), max(xs), max(ys)))

    def format(self, precision: int = 6) -> str:
        return ', '.join(f"{value:.{precision}f}" for value in self.bounds)
