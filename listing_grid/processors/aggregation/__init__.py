"""Per-cell aggregation of listing prices."""

from .cell_aggregator import CellAggregator, aggregate_listings

__all__ = ['CellAggregator', 'aggregate_listings']
