# listing_grid/config/defaults.py
"""Default configuration values for grid generation runs."""

from pathlib import Path

# Project path
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Input and output locations, relative to the working directory unless absolute.
# Inputs are read from {source_dir}/{city}/outline.geojson and listings.csv
PATHS = {
    'source_dir': 'data/src',
    'output_dir': 'data',
    'logs_dir': 'logs',
    'boundary_filename': 'outline.geojson',
    'listings_filename': 'listings.csv',
}

GRID = {
    'default_cell_size': 200.0,  # meters
    'meters_per_degree': 111000.0,
    # None derives the reference latitude from the boundary centroid per run
    'reference_latitude': None,
}

LISTINGS = {
    'price_column': 'price',
    'latitude_column': 'latitude',
    'longitude_column': 'longitude',
    # Currency symbols and group separators removed before parsing prices
    'price_strip_pattern': r'[$€£,\s]',
}

AGGREGATION = {
    'strategy': 'indexed',  # indexed, naive
}

OUTPUT = {
    'crs_name': 'urn:ogc:def:crs:EPSG::4326',
    'price_decimals': 2,
    'indent': 2,
}

LOGGING = {
    'level': 'INFO',
    'file_logging': False,
    'max_file_size': 10 * 1024 * 1024,  # 10MB
    'backup_count': 3,
}
