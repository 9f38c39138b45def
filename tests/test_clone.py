"""Tests for clone systems and shape (vertex graph) systems."""

import pytest

from patterncad.contexts import ShapeContext
from patterncad.drawable import Collector
from patterncad.poly import Shape
from patterncad.shapes import circle, rect, square
from patterncad.systems import CloneSystem, ShapeSystem


class TestCloneSystem:
    """Linear and nested clone systems"""

    def test_clone_count_and_source(self):
        src = circle(5)
        system = src.clone(3, 20, 0)
        assert isinstance(system, CloneSystem)
        assert len(system) == 4
        assert src.shape.ephemeral
        assert all(not m.ephemeral for m in system.members)
        assert system.members[3].centroid().x == pytest.approx(60)

    def test_members_are_independent(self):
        system = square(4).clone(1, 10, 0)
        a, b = system.members
        assert a is not b
        assert a.vertices[0] is not b.vertices[0]

    def test_negative_count(self):
        with pytest.raises(ValueError):
            CloneSystem(square(1), -1)

    def test_path_is_scaffold_until_traced(self):
        system = square(2).clone(3, 10, 0)
        assert len(system.path) == 3
        assert len(system.render_shapes()) == 4
        system.trace()
        assert system.traced
        assert len(system.render_shapes()) == 7

    def test_nested_clone(self):
        row = square(2).clone(2, 10, 0)
        grid = row.clone(1, 0, 10)
        assert len(grid) == 6
        assert row.ephemeral
        assert row.render_shapes() == []
        # two rows of two links plus three column links
        assert len(grid.path) == 7
        assert grid.members[5].centroid().y == pytest.approx(10)

    def test_every_shares_members(self):
        system = square(2).clone(5, 10, 0)
        sub = system.every(2)
        assert len(sub) == 3
        assert sub.members[1] is system.members[2]
        sub.color('red')
        assert system.members[2].color == 'red'
        assert system.members[1].color is None
        assert not system.members[1].ephemeral

    def test_place_through_selection_reaches_system(self):
        """Placements made on a selection render with the whole system"""
        system = square(2).clone(5, 10, 0)
        sub = system.every(2)
        sub.place(circle(1, 6))
        assert len(sub.placements) == 3
        assert len(system.placements) == 3
        assert system.placements.shapes[1].centroid().x == pytest.approx(20)
        collector = Collector()
        collector.collect(system)
        assert len(collector) == 6 + 3

    def test_nested_selection_places_into_system(self):
        system = square(2).clone(5, 10, 0)
        system.slice(2).every(2).place(circle(1, 6))
        assert len(system.placements) == 2

    def test_mask_through_selection_updates_system(self):
        system = square(2).clone(5, 10, 0)
        sub = system.every(2)
        sub.mask(rect(25, 10).move_to(10, 0))
        assert len(sub) == 2
        assert len(system) == 5
        assert all(m.centroid().x != pytest.approx(40) for m in system.members)
        assert len(system.path) == 4

    def test_every_past_end_is_empty(self):
        system = square(2).clone(2)
        assert len(system.every(0)) == 0
        assert len(system.slice(5)) == 0
        assert len(system.at(1, 10)) == 1

    def test_spread(self):
        system = square(2).clone(2).spread(15, 5)
        c = system.members[2].centroid()
        assert c.x == pytest.approx(30)
        assert c.y == pytest.approx(10)

    def test_spread_polar(self):
        system = square(2).clone(5).spread_polar(50)
        assert system.members[0].centroid().x == pytest.approx(50)
        assert system.members[3].centroid().x == pytest.approx(-50)

    def test_spread_polar_single_member_is_noop(self):
        system = CloneSystem(square(2), 0)
        system.spread_polar(50)
        assert system.members[0].centroid().x == pytest.approx(0)

    def test_scale_and_rotate_per_member(self):
        system = square(2).clone(2, 10, 0).scale(2).rotate(45)
        assert system.members[1].centroid().x == pytest.approx(10)
        assert system.members[1].area() == pytest.approx(16)

    def test_place_at_nodes(self):
        system = square(2).clone(2, 10, 0)
        template = circle(1, 6)
        system.place(template)
        assert template.shape.ephemeral
        assert len(system.placements) == 3
        assert len(system.shapes) == 3

    def test_mask(self):
        system = square(2).clone(9, 10, 0)
        boundary = rect(45, 10).move_to(20, 0)
        system.mask(boundary)
        assert boundary.shape.ephemeral
        assert len(system) == 5

    def test_bounds(self):
        box = square(2).clone(2, 10, 0).get_bounds()
        assert box.min.x == pytest.approx(-1)
        assert box.max.x == pytest.approx(21)


class TestShapeSystem:
    """Vertex and edge extraction from a shape"""

    def test_nodes_and_edges(self):
        src = square(10)
        system = ShapeSystem(src)
        assert src.shape.ephemeral
        assert len(system.nodes) == 4
        assert len(system.edges) == 4
        assert system.edges.length == pytest.approx(40)
        assert system.center is None

    def test_subdivide_and_center(self):
        system = ShapeSystem(square(10), include_center=True, subdivide=2)
        assert len(system.nodes) == 9
        assert len(system.edges) == 8
        assert system.center.x == pytest.approx(0)

    def test_place_on_nodes(self):
        system = ShapeSystem(square(10), include_center=True)
        system.place(circle(1, 8))
        assert len(system.render_shapes()) == 5

    def test_source_is_scaffold_until_traced(self):
        system = ShapeSystem(square(10))
        assert system.render_shapes() == []
        system.trace()
        assert len(system.render_shapes()) == 1

    def test_node_selection_places_into_system(self):
        system = ShapeSystem(square(10))
        system.nodes.every(2).place(circle(1, 8))
        assert len(system.placements) == 2

    def test_mask(self):
        system = ShapeSystem(square(10), include_center=True)
        system.mask(rect(4, 4))
        assert len(system.nodes) == 1

    def test_scale_about_bounds_center(self):
        system = ShapeSystem(square(10)).scale(2)
        assert system.bbox().width == pytest.approx(20)
        assert system.edges.length == pytest.approx(80)

    def test_source_context(self):
        system = ShapeSystem(square(10))
        assert isinstance(system.source, ShapeContext)
        assert system.source.shape is not None
