"""Tests for algorithmic tessellations."""

import math

import pytest

from patterncad.errors import ConfigurationError
from patterncad.geom import Point
from patterncad.shapes import hexagon, rect, square
from patterncad.systems import Lcg, TessellationSystem, proximity_edges


def snapshot(system):
    nodes = [p.key(9) for p in system.nodes.positions]
    edges = [(s.start.position.key(9), s.end.position.key(9)) for s in system.edges]
    tiles = [[p.key(9) for p in t.points] for t in system.tiles]
    return nodes, edges, tiles


class TestLcg:

    def test_known_sequence(self):
        rand = Lcg(1)
        first = rand()
        assert first == pytest.approx(1103527590 / 0x7fffffff)
        assert 0 <= rand() <= 1

    def test_same_seed_same_sequence(self):
        a = Lcg(42)
        b = Lcg(42)
        assert [a() for _ in range(5)] == [b() for _ in range(5)]


class TestProximityEdges:

    def test_square_lattice_connects_neighbours_only(self):
        pts = [Point(x * 10, y * 10) for y in range(3) for x in range(3)]
        pairs = proximity_edges(pts)
        # 12 orthogonal neighbours plus 8 diagonals under the 1.5x threshold
        assert len(pairs) == 20
        assert all(i < j for i, j in pairs)
        assert pairs == sorted(pairs)

    def test_blocked_rows_match_single_block(self):
        """Splitting the distance rows into blocks changes neither pairs nor order"""
        pts = [Point(x * 10, y * 10 + (x % 3)) for y in range(12) for x in range(15)]
        whole = proximity_edges(pts)
        assert proximity_edges(pts, chunk_cells=len(pts) * 7) == whole
        assert proximity_edges(pts, chunk_cells=1) == whole
        assert whole == sorted(whole)

    def test_large_lattice_is_blocked(self):
        """A 6561-node lattice connects only true neighbours"""
        pts = [Point(x * 10, y * 10) for y in range(81) for x in range(81)]
        pairs = proximity_edges(pts)
        # 2 * 81 * 80 orthogonal plus 2 * 80 * 80 diagonal links
        assert len(pairs) == 2 * 81 * 80 + 2 * 80 * 80

    def test_too_few_nodes(self):
        assert proximity_edges([Point(0, 0)]) == []


class TestTruchet:
    """Seeded Truchet tiles"""

    def test_tile_grid(self):
        t = TessellationSystem(pattern='truchet', bounds=(100, 80), tile_size=20)
        # corner lattice of (5 + 1) x (4 + 1) nodes, two arcs per tile
        assert len(t.nodes) == 30
        assert len(t.tiles) == 40
        assert len(t.edges) == 5 * 5 + 6 * 4 + 2 * 5 * 4

    def test_deterministic(self):
        a = TessellationSystem(pattern='truchet', seed=7, bounds=(120, 120), tile_size=30)
        b = TessellationSystem(pattern='truchet', seed=7, bounds=(120, 120), tile_size=30)
        assert snapshot(a) == snapshot(b)

    def test_seed_changes_rotations(self):
        a = TessellationSystem(pattern='truchet', seed=1, variant='triangles')
        b = TessellationSystem(pattern='truchet', seed=2, variant='triangles')
        assert snapshot(a)[2] != snapshot(b)[2]

    def test_variants(self):
        diag = TessellationSystem(pattern='truchet', variant='diagonal', bounds=(40, 40),
                                  tile_size=40)
        assert len(diag.tiles) == 1
        assert len(diag.tiles[0]) == 4
        tri = TessellationSystem(pattern='truchet', variant='triangles', bounds=(40, 40),
                                 tile_size=40)
        assert abs(tri.tiles[0].area()) == pytest.approx(800)

    def test_tiles_stay_inside_their_cell(self):
        t = TessellationSystem(pattern='truchet', variant='triangles', bounds=(80, 80),
                               tile_size=40)
        box = t.tiles.get_bounds()
        assert box.min.x == pytest.approx(0, abs=1e-9)
        assert box.max.x == pytest.approx(80)


class TestTrihexagonal:

    def test_nodes_are_unique(self):
        t = TessellationSystem(pattern='trihexagonal', bounds=(120, 120))
        keys = [p.key(6) for p in t.nodes.positions]
        assert len(keys) == len(set(keys))
        assert len(t.edges) > 0

    def test_tiles_are_hexagons_and_triangles(self):
        t = TessellationSystem(pattern='trihexagonal', bounds=(30, 30), spacing=30)
        sizes = {len(s) for s in t.tiles}
        assert sizes == {3, 6}
        hexes = [s for s in t.tiles if len(s) == 6]
        assert len([s for s in t.tiles if len(s) == 3]) == 6 * len(hexes)


class TestPenrose:

    def test_deflation_grows(self):
        small = TessellationSystem(pattern='penrose', iterations=1)
        big = TessellationSystem(pattern='penrose', iterations=3)
        assert len(big.tiles) > len(small.tiles)

    def test_triangles_inside_bounds(self):
        t = TessellationSystem(pattern='penrose', iterations=3, bounds=(200, 100))
        for tile in t.tiles:
            c = tile.centroid()
            assert 0 <= c.x <= 200
            assert 0 <= c.y <= 100

    def test_edges_deduplicated(self):
        t = TessellationSystem(pattern='penrose', iterations=2)
        keys = set()
        for s in t.edges:
            a = s.start.position.key(6)
            b = s.end.position.key(6)
            keys.add(tuple(sorted((a, b))))
        assert len(keys) == len(t.edges)

    def test_deterministic(self):
        a = TessellationSystem(pattern='penrose', iterations=3)
        b = TessellationSystem(pattern='penrose', iterations=3)
        assert snapshot(a) == snapshot(b)

    def test_zero_iterations_is_sun(self):
        t = TessellationSystem(pattern='penrose', iterations=0, bounds=(1000, 1000))
        # only the triangles whose centroid lies inside survive
        assert 0 < len(t.tiles) <= 10


class TestCustom:

    def test_requires_unit(self):
        with pytest.raises(ConfigurationError) as info:
            TessellationSystem(pattern='custom')
        assert info.value.code == 'C103'

    def test_square_arrangement(self):
        unit = square(10)
        t = TessellationSystem(pattern='custom', unit=unit, bounds=(40, 40), spacing=20,
                               arrangement='square')
        assert unit.shape.ephemeral
        assert len(t.tiles) == 9
        assert t.tiles[4].centroid().x == pytest.approx(20)

    def test_hexagonal_arrangement(self):
        t = TessellationSystem(pattern='custom', unit=hexagon(5), bounds=(60, 60),
                               spacing=20, arrangement='hexagonal')
        second_row = [tile.centroid() for tile in t.tiles
                      if tile.centroid().y == pytest.approx(15)]
        assert second_row[0].x == pytest.approx(10 * math.sqrt(3))


class TestTessellationSystem:

    def test_scaffold_and_trace(self):
        t = TessellationSystem(pattern='truchet', bounds=(40, 40), tile_size=20)
        assert t.render_shapes() == []
        t.trace()
        assert len(t.render_shapes()) == len(t.edges)
        t.tiles.trace()
        assert len(t.render_shapes()) == len(t.edges) + len(t.tiles)

    def test_mask(self):
        t = TessellationSystem(pattern='truchet', bounds=(100, 100), tile_size=20)
        t.mask(rect(41, 41).move_to(50, 50))
        assert len(t.nodes) == 4
        assert all(29 < s.centroid().x < 71 for s in t.tiles)

    def test_place_at_nodes(self):
        t = TessellationSystem(pattern='truchet', bounds=(40, 40), tile_size=20)
        t.place(square(2))
        assert len(t.shapes) == 9

    def test_unknown_pattern(self):
        with pytest.raises(ConfigurationError):
            TessellationSystem(pattern='voronoi')

    def test_bad_seed(self):
        with pytest.raises(ConfigurationError):
            TessellationSystem(seed='abc')
