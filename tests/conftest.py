"""Shared fixtures for grid generation tests."""

import csv
import json
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

import pytest
import yaml

from listing_grid.abstractions.types import Boundary
from listing_grid.config import Config
from listing_grid.grid_systems import CoordinateConverter
from listing_grid.loaders import BoundaryLoader

# 500 m at the default 111000 m per degree, anchored at the equator
CELL_500 = 500 / 111000

# Exactly representable cell edge: 500 m at 512000 m per degree
EXACT_CELL = 1 / 1024
EXACT_METERS_PER_DEGREE = 512000.0


def square_ring(size: float, origin: Tuple[float, float] = (0.0, 0.0)) -> List[List[float]]:
    x0, y0 = origin
    return [[x0, y0], [x0 + size, y0], [x0 + size, y0 + size], [x0, y0 + size], [x0, y0]]


def polygon_document(ring: Sequence[Sequence[float]]) -> dict:
    return {
        'type': 'FeatureCollection',
        'features': [{
            'type': 'Feature',
            'properties': {'name': 'Test City'},
            'geometry': {'type': 'Polygon', 'coordinates': [list(ring)]}
        }]
    }


def write_listings(path: Path, rows: Iterable[Sequence], header=('id', 'price', 'latitude', 'longitude')):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)


def write_city(source_dir: Path, city: str, ring, listing_rows) -> Path:
    """Write outline.geojson and listings.csv for a city, return its directory."""
    city_dir = source_dir / city
    city_dir.mkdir(parents=True, exist_ok=True)
    with open(city_dir / 'outline.geojson', 'w', encoding='utf-8') as f:
        json.dump(polygon_document(ring), f)
    write_listings(city_dir / 'listings.csv', listing_rows)
    return city_dir


def quadrant_rows() -> List[List[str]]:
    """Ten listings split 2/3/1/4 over the quadrants of a 2x2 lattice of CELL_500."""
    centers = {
        (0, 0): (0.5 * CELL_500, 0.5 * CELL_500),
        (0, 1): (1.5 * CELL_500, 0.5 * CELL_500),
        (1, 0): (0.5 * CELL_500, 1.5 * CELL_500),
        (1, 1): (1.5 * CELL_500, 1.5 * CELL_500),
    }
    split = {(0, 0): [50, 150], (0, 1): [80, 90, 100], (1, 0): [1200], (1, 1): [40, 60, 70, 30]}

    rows = []
    for position, prices in split.items():
        lon, lat = centers[position]
        for price in prices:
            rows.append([len(rows) + 1, f"${price:,.2f}", repr(lat), repr(lon)])
    return rows


def invalid_rows() -> List[List[str]]:
    """Rows every loader run must skip."""
    lon, lat = 0.5 * CELL_500, 0.5 * CELL_500
    return [
        [101, '$0.00', repr(lat), repr(lon)],
        [102, '-20', repr(lat), repr(lon)],
        [103, '$75.00', '0', repr(lon)],
        [104, '$75.00', repr(lat), '0'],
        [105, 'call us', repr(lat), repr(lon)],
        [106, '$75.00', 'n/a', repr(lon)],
    ]


@pytest.fixture
def test_config():
    """Config with defaults only and the reference latitude pinned at the equator."""
    config = Config()
    config.set('grid.reference_latitude', 0.0)
    return config


@pytest.fixture
def source_dir(tmp_path):
    path = tmp_path / 'data' / 'src'
    path.mkdir(parents=True)
    return path


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / 'data'


@pytest.fixture
def quadrant_city(source_dir):
    """A 1000 m square city with ten valid and six invalid listings."""
    write_city(source_dir, 'testville', square_ring(2 * CELL_500), quadrant_rows() + invalid_rows())
    return 'testville'


@pytest.fixture
def config_file(tmp_path):
    """YAML override pinning the reference latitude."""
    path = tmp_path / 'config.yml'
    with open(path, 'w') as f:
        yaml.dump({'grid': {'reference_latitude': 0.0}}, f)
    return path


@pytest.fixture
def exact_converter():
    return CoordinateConverter(0.0, meters_per_degree=EXACT_METERS_PER_DEGREE)


@pytest.fixture
def l_shaped_boundary():
    """3x3 cells of EXACT_CELL with the top-right 1.5 x 1.5 cell notch removed."""
    c = EXACT_CELL
    ring = [[0, 0], [3 * c, 0], [3 * c, 1.5 * c], [1.5 * c, 1.5 * c], [1.5 * c, 3 * c], [0, 3 * c], [0, 0]]
    return BoundaryLoader().parse({'type': 'Polygon', 'coordinates': [ring]})


@pytest.fixture
def square_boundary():
    """3x3 cells of EXACT_CELL."""
    ring = square_ring(3 * EXACT_CELL)
    return BoundaryLoader().parse({'type': 'Polygon', 'coordinates': [ring]})


def boundary_from_ring(ring) -> Boundary:
    return BoundaryLoader().parse({'type': 'Polygon', 'coordinates': [ring]})
