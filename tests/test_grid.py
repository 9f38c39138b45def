"""Tests for lattice grid systems."""

import math

import pytest

from patterncad.config import GridOptions
from patterncad.errors import ConfigurationError
from patterncad.shapes import circle, rect
from patterncad.systems import GridSystem


class TestSquareGrid:
    """Square lattices"""

    def test_nodes_are_intersections(self):
        grid = GridSystem(type='square', rows=3, cols=3, spacing=10)
        assert len(grid.nodes) == 16
        assert len(grid.cells) == 9
        last = grid.nodes.positions[-1]
        assert last.x == pytest.approx(30) and last.y == pytest.approx(30)

    def test_cells_start_ephemeral(self):
        grid = GridSystem(rows=2, cols=2)
        assert all(c.ephemeral for c in grid.cells)
        assert grid.render_shapes() == []
        grid.trace()
        assert len(grid.render_shapes()) == 4

    def test_rows_and_columns(self):
        grid = GridSystem(rows=2, cols=3, spacing=10)
        # 3 horizontal lines of 3 edges, 4 vertical lines of 2 edges
        assert len(grid.rows) == 9
        assert len(grid.columns) == 8
        assert grid.rows.length == pytest.approx(90)

    def test_rectangular_spacing_and_offset(self):
        grid = GridSystem({'rows': 1, 'cols': 1, 'spacing': (20, 10), 'offset': (5, 5)})
        cell = grid.cells[0]
        box = cell.bounding_box()
        assert box.min.x == pytest.approx(5)
        assert box.width == pytest.approx(20)
        assert box.height == pytest.approx(10)

    def test_count_shorthand(self):
        grid = GridSystem(count=4, size=5)
        assert len(grid.cells) == 16


class TestOtherGrids:

    def test_hexagonal_pointy(self):
        grid = GridSystem(type='hexagonal', rows=2, cols=3, spacing=10)
        assert len(grid.nodes) == 6
        first = grid.cells[0]
        assert len(first) == 6
        # odd rows shift by half a hex width
        assert grid.nodes.positions[3].x == pytest.approx(10 * math.sqrt(3) / 2)
        assert grid.nodes.positions[3].y == pytest.approx(15)

    def test_hexagonal_flat(self):
        grid = GridSystem(type='hexagonal', rows=1, cols=2, spacing=10, orientation='flat')
        second = grid.nodes.positions[1]
        assert second.x == pytest.approx(15)
        assert second.y == pytest.approx(10 * math.sqrt(3) / 2)

    def test_triangular_alternates(self):
        grid = GridSystem(type='triangular', rows=1, cols=2, spacing=10)
        up, down = grid.cells
        assert len(up) == 3 and len(down) == 3
        assert up.centroid().y < down.centroid().y
        assert all(c.area() == pytest.approx(25 * math.sqrt(3)) for c in grid.cells)

    def test_brick_offsets_odd_rows(self):
        grid = GridSystem(type='brick', rows=2, cols=2, spacing=(20, 10))
        positions = grid.nodes.positions
        assert positions[0].x == pytest.approx(10)
        assert positions[2].x == pytest.approx(20)
        grid = GridSystem(type='brick', rows=2, cols=1, spacing=(20, 10), brick_offset=0.25)
        assert grid.nodes.positions[1].x == pytest.approx(15)


class TestGridOperations:

    def test_place_at_nodes(self):
        grid = GridSystem(rows=2, cols=2, spacing=10)
        dot = circle(1, 6)
        grid.place(dot)
        assert dot.shape.ephemeral
        assert len(grid.shapes) == 9

    def test_place_through_node_selection(self):
        grid = GridSystem(rows=2, cols=2, spacing=10)
        grid.nodes.every(2).place(circle(1, 6))
        assert len(grid.placements) == 5

    def test_mask(self):
        grid = GridSystem(rows=4, cols=4, spacing=10)
        grid.place(circle(1, 6))
        boundary = rect(21, 21).move_to(20, 20)
        grid.mask(boundary)
        assert len(grid.nodes) == 9
        assert len(grid.placements) == 9
        assert len(grid.cells) == 4
        assert boundary.shape.ephemeral

    def test_rotate_about_center(self):
        grid = GridSystem(rows=2, cols=2, spacing=10).rotate(90)
        box = grid.get_bounds()
        assert box.center.x == pytest.approx(10)
        assert box.width == pytest.approx(20)

    def test_scale(self):
        grid = GridSystem(rows=2, cols=2, spacing=10).scale(2)
        assert grid.get_bounds().width == pytest.approx(40)
        assert grid.cells[0].area() == pytest.approx(400)

    def test_cell_records(self):
        grid = GridSystem(rows=2, cols=3)
        last = grid.grid_cells[-1]
        assert (last.row, last.col) == (1, 2)


class TestGridOptions:

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError) as info:
            GridSystem(type='octagonal')
        assert 'hexagonal' in str(info.value)

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError):
            GridSystem(colums=3)

    def test_bad_spacing(self):
        with pytest.raises(ConfigurationError):
            GridSystem(spacing=0)

    def test_options_object(self):
        opts = GridOptions.from_dict(type='brick', rows=1, cols=1)
        assert GridSystem(opts).type == 'brick'
