"""
Listing grid generation package.

This package turns a city boundary polygon and a table of price-tagged
listings into a uniform grid clipped to the boundary, with per-cell price
statistics, serialized as GeoJSON.
"""

__version__ = "1.0.0"
__description__ = "Boundary-clipped price grids for listing datasets"

# Note: Modules should be imported explicitly when needed to avoid
# loading configuration files on import.

__all__ = [
    '__version__',
    '__description__',
]
