"""Input loaders for boundaries and listings."""

from .boundary_loader import BoundaryLoader, load_boundary
from .listing_loader import ListingLoader, load_listings

__all__ = ['BoundaryLoader', 'load_boundary', 'ListingLoader', 'load_listings']
