"""Type definitions shared across components."""

from .grid_types import (
    Boundary,
    Listing,
    GridSpec,
    GridCell,
    CellStatistics,
    PopulatedCell,
)

__all__ = [
    'Boundary',
    'Listing',
    'GridSpec',
    'GridCell',
    'CellStatistics',
    'PopulatedCell',
]
