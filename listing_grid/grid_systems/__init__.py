# listing_grid/grid_systems/__init__.py
"""Grid system implementations."""

from .bounds import BoundsDefinition
from .coordinate_converter import (
    CoordinateConverter,
    METERS_PER_DEGREE,
    LISBON_REFERENCE_LATITUDE,
    centroid_latitude
)
from .rectangular_grid import (
    RectangularGrid,
    ADJACENCY_TOLERANCE,
    cells_adjacent,
    adjacency
)

__all__ = [
    'BoundsDefinition',
    'CoordinateConverter',
    'METERS_PER_DEGREE',
    'LISBON_REFERENCE_LATITUDE',
    'centroid_latitude',
    'RectangularGrid',
    'ADJACENCY_TOLERANCE',
    'cells_adjacent',
    'adjacency'
]
