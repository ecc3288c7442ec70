"""Rectangular lattice clipped to a city boundary."""

import math
from typing import Dict, Iterator, List, Optional, Tuple

from shapely.prepared import prep

from ..abstractions.types import Boundary, GridCell, GridSpec
from ..exceptions import ValidationError
from ..infrastructure.logging import get_logger
from .bounds import BoundsDefinition
from .coordinate_converter import CoordinateConverter

logger = get_logger(__name__)

# Tolerance the downstream renderer uses when matching shared cell edges
ADJACENCY_TOLERANCE = 1e-4


class RectangularGrid:
    """
    Uniform row-major lattice over a boundary's bounding box.

    Every lattice position gets an id ``row * cols + col + 1``; only cells
    whose rectangle intersects the boundary are kept, so kept ids are not
    contiguous.
    """

    def __init__(self,
                 boundary: Boundary,
                 cell_size_m: float,
                 converter: Optional[CoordinateConverter] = None):
        """
        Initialize grid.

        Args:
            boundary: City boundary the lattice is laid over and clipped to
            cell_size_m: Cell edge length in metres
            converter: Metre to degree converter (anchored at the boundary
                centroid if omitted)
        """
        if not math.isfinite(cell_size_m) or cell_size_m <= 0:
            raise ValidationError(f"Cell size must be a positive number, got: {cell_size_m}")

        self.boundary = boundary
        self.cell_size_m = float(cell_size_m)
        self.converter = converter or CoordinateConverter.from_boundary(boundary)
        self.bounds_def = BoundsDefinition.from_boundary(boundary, name=boundary.source or 'boundary')
        self.spec = self._build_spec()
        self._cells: Optional[List[GridCell]] = None

    def _build_spec(self) -> GridSpec:
        min_lon, min_lat, max_lon, max_lat = self.bounds_def.bounds

        cell_lat = self.converter.meters_to_degrees_lat(self.cell_size_m)
        cell_lon = self.converter.meters_to_degrees_lon(self.cell_size_m)

        cols = math.ceil((max_lon - min_lon) / cell_lon)
        rows = math.ceil((max_lat - min_lat) / cell_lat)

        return GridSpec(
            min_lon=min_lon,
            min_lat=min_lat,
            cell_lon=cell_lon,
            cell_lat=cell_lat,
            rows=rows,
            cols=cols,
            cell_size_m=self.cell_size_m,
            reference_latitude=self.converter.reference_latitude
        )

    def iter_lattice(self) -> Iterator[GridCell]:
        """Yield every lattice position in row-major order, kept or not."""
        spec = self.spec
        for row in range(spec.rows):
            for col in range(spec.cols):
                left, bottom, right, top = spec.cell_bounds(row, col)
                yield GridCell(
                    id=spec.cell_id(row, col),
                    row=row,
                    col=col,
                    left=left,
                    right=right,
                    top=top,
                    bottom=bottom
                )

    def generate_grid(self) -> List[GridCell]:
        """Generate the cells whose rectangle intersects the boundary."""
        spec = self.spec
        logger.info(f"Creating {int(self.cell_size_m)}m x {int(self.cell_size_m)}m grid...")
        logger.info(f"WGS84 Bounds: {self.bounds_def.format()}")
        logger.info(f"Grid will be {spec.cols} x {spec.rows} = {spec.lattice_size} cells")
        logger.debug(
            f"Cell size in degrees: {spec.cell_lon:.8f} lon, {spec.cell_lat:.8f} lat "
            f"(reference latitude {spec.reference_latitude:.4f})"
        )

        outline = prep(self.boundary.polygon)
        cells = [cell for cell in self.iter_lattice() if outline.intersects(cell.geometry)]

        logger.info(f"Created {len(cells)} grid cells that intersect with the boundary")
        return cells

    def get_cells(self) -> List[GridCell]:
        """Get kept grid cells (generate if needed)."""
        if self._cells is None:
            self._cells = self.generate_grid()
        return self._cells

    def get_cell_count(self) -> int:
        return len(self.get_cells())

    def locate(self, lon: float, lat: float) -> Optional[Tuple[int, int]]:
        """
        Lattice (row, col) of a coordinate under the half-open convention.

        Matches :meth:`GridCell.contains` exactly: a point on a shared edge
        belongs to the cell to its right or above, and a point on the outer
        right or top edge of the lattice belongs to no cell.
        """
        spec = self.spec
        col = _axis_index(lon, spec.min_lon, spec.cell_lon, spec.cols)
        if col is None:
            return None
        row = _axis_index(lat, spec.min_lat, spec.cell_lat, spec.rows)
        if row is None:
            return None
        return row, col

    def get_neighbor_ids(self, cell_id: int) -> List[int]:
        """Ids of kept cells in the 8-neighbourhood of a lattice position."""
        kept = {cell.id for cell in self.get_cells()}
        row, col = self.spec.position(cell_id)

        neighbors = []
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                nr, nc = row + dr, col + dc
                if 0 <= nr < self.spec.rows and 0 <= nc < self.spec.cols:
                    neighbor_id = self.spec.cell_id(nr, nc)
                    if neighbor_id in kept:
                        neighbors.append(neighbor_id)
        return neighbors


def _axis_index(value: float, origin: float, step: float, count: int) -> Optional[int]:
    """Index i with origin + i*step <= value < origin + (i+1)*step, if any."""
    if not math.isfinite(value):
        return None

    index = min(max(math.floor((value - origin) / step), 0), count)

    # Reconcile the estimate with the edges as cells compute them
    while index > 0 and value < origin + index * step:
        index -= 1
    while index < count and value >= origin + (index + 1) * step:
        index += 1

    if index >= count or value < origin + index * step:
        return None
    return index


def cells_adjacent(a: GridCell, b: GridCell, tolerance: float = ADJACENCY_TOLERANCE) -> bool:
    """
    True when two cells share an edge or a corner, compared with a tolerance.

    This is the relation a renderer derives from the exported bound values.
    """
    horizontally = (
        abs(a.right - b.left) < tolerance or
        abs(a.left - b.right) < tolerance or
        (a.left < b.right and a.right > b.left)
    )
    vertically = (
        abs(a.top - b.bottom) < tolerance or
        abs(a.bottom - b.top) < tolerance or
        (a.bottom < b.top and a.top > b.bottom)
    )
    same = (a.left, a.right, a.top, a.bottom) == (b.left, b.right, b.top, b.bottom)
    return horizontally and vertically and not same


def adjacency(cells: List[GridCell], tolerance: float = ADJACENCY_TOLERANCE) -> Dict[int, List[int]]:
    """Neighbour ids per cell id using :func:`cells_adjacent`."""
    result: Dict[int, List[int]] = {cell.id: [] for cell in cells}
    for i, a in enumerate(cells):
        for b in cells[i + 1:]:
            if cells_adjacent(a, b, tolerance):
                result[a.id].append(b.id)
                result[b.id].append(a.id)
    for neighbors in result.values():
        neighbors.sort()
    return result
