"""Tests for the boundary-clipped rectangular grid."""

import math

import pytest

from listing_grid.exceptions import ValidationError
from listing_grid.grid_systems import (
    BoundsDefinition,
    RectangularGrid,
    adjacency,
    cells_adjacent
)
from listing_grid.abstractions.types import GridCell

from conftest import EXACT_CELL, boundary_from_ring, square_ring


class TestGridConstruction:
    """Test lattice sizing and cell generation."""

    def test_lattice_size(self, square_boundary, exact_converter):
        grid = RectangularGrid(square_boundary, 500, converter=exact_converter)

        assert grid.spec.rows == 3
        assert grid.spec.cols == 3
        assert grid.spec.lattice_size == 9
        assert grid.spec.cell_lon == EXACT_CELL
        assert grid.spec.cell_lat == EXACT_CELL

    def test_partial_cells_round_up(self, exact_converter):
        boundary = boundary_from_ring(square_ring(2.5 * EXACT_CELL))
        grid = RectangularGrid(boundary, 500, converter=exact_converter)

        assert (grid.spec.rows, grid.spec.cols) == (3, 3)

    def test_ids_are_row_major_from_one(self, square_boundary, exact_converter):
        grid = RectangularGrid(square_boundary, 500, converter=exact_converter)
        cells = grid.get_cells()

        assert [cell.id for cell in cells] == list(range(1, 10))
        for cell in cells:
            assert cell.id == cell.row * grid.spec.cols + cell.col + 1
            assert grid.spec.position(cell.id) == (cell.row, cell.col)

    def test_cell_bounds(self, square_boundary, exact_converter):
        grid = RectangularGrid(square_boundary, 500, converter=exact_converter)
        cell = grid.get_cells()[5]  # row 1, col 2

        assert (cell.row, cell.col) == (1, 2)
        assert cell.left == 2 * EXACT_CELL
        assert cell.right == 3 * EXACT_CELL
        assert cell.bottom == EXACT_CELL
        assert cell.top == 2 * EXACT_CELL

    def test_neighbouring_cells_share_edges(self, exact_converter):
        boundary = boundary_from_ring(square_ring(0.02, origin=(-9.23, 38.69)))
        grid = RectangularGrid(boundary, 170, converter=exact_converter)
        by_position = {(c.row, c.col): c for c in grid.get_cells()}

        for (row, col), cell in by_position.items():
            if (row, col + 1) in by_position:
                assert cell.right == by_position[(row, col + 1)].left
            if (row + 1, col) in by_position:
                assert cell.top == by_position[(row + 1, col)].bottom

    def test_l_shape_discards_notch(self, l_shaped_boundary, exact_converter):
        grid = RectangularGrid(l_shaped_boundary, 500, converter=exact_converter)
        ids = [cell.id for cell in grid.get_cells()]

        assert grid.spec.lattice_size == 9
        assert ids == [1, 2, 3, 4, 5, 6, 7, 8]
        assert grid.get_cell_count() == 8

    def test_kept_cells_intersect_boundary(self, l_shaped_boundary, exact_converter):
        grid = RectangularGrid(l_shaped_boundary, 500, converter=exact_converter)
        kept = {cell.id for cell in grid.get_cells()}

        for cell in grid.iter_lattice():
            assert (cell.id in kept) == cell.geometry.intersects(l_shaped_boundary.polygon)

    def test_cell_touching_boundary_vertex_is_kept(self, exact_converter):
        c = EXACT_CELL
        boundary = boundary_from_ring([[0, 0], [2 * c, 0], [c, c], [0, 2 * c], [0, 0]])
        grid = RectangularGrid(boundary, 500, converter=exact_converter)

        assert grid.spec.lattice_size == 4
        # Cell 4 spans [c, 2c] x [c, 2c] and meets the outline only at (c, c)
        assert [cell.id for cell in grid.get_cells()] == [1, 2, 3, 4]

    def test_cell_touching_boundary_edge_is_kept(self, exact_converter):
        c = EXACT_CELL
        boundary = boundary_from_ring(
            [[0, 0], [2 * c, 0], [2 * c, c], [c, c], [c, 2 * c], [0, 2 * c], [0, 0]]
        )
        grid = RectangularGrid(boundary, 500, converter=exact_converter)

        # Cell 4 is the notch itself and shares two edges with the outline
        cell = grid.get_cells()[-1]
        assert cell.id == 4
        assert not boundary.polygon.contains(cell.geometry.centroid)

    def test_get_cells_is_cached(self, square_boundary, exact_converter):
        grid = RectangularGrid(square_boundary, 500, converter=exact_converter)
        assert grid.get_cells() is grid.get_cells()

    @pytest.mark.parametrize('size', [0, -5, float('nan'), float('inf')])
    def test_invalid_cell_size(self, square_boundary, size):
        with pytest.raises(ValidationError):
            RectangularGrid(square_boundary, size)

    def test_default_converter_uses_centroid(self):
        boundary = boundary_from_ring(square_ring(0.1, origin=(-9.2, 38.65)))
        grid = RectangularGrid(boundary, 200)

        assert grid.spec.reference_latitude == pytest.approx(38.7)
        assert grid.spec.cell_lon == pytest.approx(
            200 / (111000 * math.cos(math.radians(38.7)))
        )


class TestLocate:
    """Test half-open lattice location."""

    def test_interior_point(self, square_boundary, exact_converter):
        grid = RectangularGrid(square_boundary, 500, converter=exact_converter)
        assert grid.locate(1.5 * EXACT_CELL, 0.5 * EXACT_CELL) == (0, 1)

    def test_shared_edge_goes_right_and_up(self, square_boundary, exact_converter):
        grid = RectangularGrid(square_boundary, 500, converter=exact_converter)

        assert grid.locate(EXACT_CELL, 0.5 * EXACT_CELL) == (0, 1)
        assert grid.locate(0.5 * EXACT_CELL, EXACT_CELL) == (1, 0)
        assert grid.locate(EXACT_CELL, EXACT_CELL) == (1, 1)

    def test_outer_edges(self, square_boundary, exact_converter):
        grid = RectangularGrid(square_boundary, 500, converter=exact_converter)

        assert grid.locate(0.0, 0.0) == (0, 0)
        assert grid.locate(3 * EXACT_CELL, 0.5 * EXACT_CELL) is None
        assert grid.locate(0.5 * EXACT_CELL, 3 * EXACT_CELL) is None
        assert grid.locate(-EXACT_CELL, 0.5 * EXACT_CELL) is None
        assert grid.locate(float('nan'), 0.5 * EXACT_CELL) is None

    def test_locate_agrees_with_contains(self, exact_converter):
        boundary = boundary_from_ring(square_ring(0.005, origin=(-9.23, 38.69)))
        grid = RectangularGrid(boundary, 130, converter=exact_converter)
        cells = list(grid.iter_lattice())

        # Probe every corner of every cell
        for cell in cells:
            for lon in (cell.left, cell.right):
                for lat in (cell.bottom, cell.top):
                    expected = [(c.row, c.col) for c in cells if c.contains(lon, lat)]
                    position = grid.locate(lon, lat)
                    assert expected == ([position] if position else [])


class TestNeighbors:
    """Test cell adjacency."""

    def test_get_neighbor_ids_interior(self, square_boundary, exact_converter):
        grid = RectangularGrid(square_boundary, 500, converter=exact_converter)
        assert sorted(grid.get_neighbor_ids(5)) == [1, 2, 3, 4, 6, 7, 8, 9]

    def test_get_neighbor_ids_skips_discarded(self, l_shaped_boundary, exact_converter):
        grid = RectangularGrid(l_shaped_boundary, 500, converter=exact_converter)

        assert sorted(grid.get_neighbor_ids(5)) == [1, 2, 3, 4, 6, 7, 8]
        assert sorted(grid.get_neighbor_ids(1)) == [2, 4, 5]

    def test_adjacency_matches_lattice_neighbours(self, l_shaped_boundary, exact_converter):
        grid = RectangularGrid(l_shaped_boundary, 500, converter=exact_converter)
        cells = grid.get_cells()

        relation = adjacency(cells)

        for cell in cells:
            assert relation[cell.id] == sorted(grid.get_neighbor_ids(cell.id))

    def test_cells_adjacent(self):
        a = GridCell(id=1, row=0, col=0, left=0.0, right=1.0, top=1.0, bottom=0.0)
        edge = GridCell(id=2, row=0, col=1, left=1.00001, right=2.0, top=1.0, bottom=0.0)
        corner = GridCell(id=5, row=1, col=1, left=1.0, right=2.0, top=2.0, bottom=1.0)
        far = GridCell(id=3, row=0, col=2, left=2.0, right=3.0, top=1.0, bottom=0.0)

        assert cells_adjacent(a, edge)
        assert cells_adjacent(a, corner)
        assert not cells_adjacent(a, far)
        assert not cells_adjacent(a, a)


class TestBoundsDefinition:
    """Test BoundsDefinition."""

    def test_from_boundary(self, l_shaped_boundary):
        bounds = BoundsDefinition.from_boundary(l_shaped_boundary, name='l')

        assert bounds.name == 'l'
        assert bounds.bounds == (0.0, 0.0, 3 * EXACT_CELL, 3 * EXACT_CELL)

    def test_format(self):
        bounds = BoundsDefinition(name='box', bounds=(-9.5, 38.6, -9.0, 38.8))
        assert bounds.format(precision=1) == '-9.5, 38.6, -9.0, 38.8'
