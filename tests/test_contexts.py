"""Tests for selection contexts: points, lines and shape collections."""

import math

import pytest

from patterncad.contexts import (LinesView, PathContext, PointContext, PointsView,
                                 ShapeContext, ShapesView, polar_positions, pull)
from patterncad.geom import Point
from patterncad.poly import Shape
from patterncad.shapes import circle, rect, square


def unit_square(size=10.0, x=0.0, y=0.0):
    return ShapeContext(Shape.from_points([(x, y), (x + size, y),
                                           (x + size, y + size), (x, y + size)]))


class TestPull:

    def test_plain_callable_and_iterator(self):
        assert pull(3) == 3
        assert pull(lambda: 4) == 4
        it = iter([1, 2])
        assert pull(it) == 1
        assert pull(it) == 2


class TestPointsView:
    """Vertex selections mutate their owning shape"""

    def test_every_other_vertex_makes_a_star(self):
        star = circle(10, 10)
        star.points.every(2).expand(5)
        center = star.centroid()
        dists = [p.distance_to(center) for p in star.shape.points]
        assert dists[0] == pytest.approx(15, abs=0.5)
        assert dists[1] == pytest.approx(10, abs=0.5)
        assert star.shape.validate()

    def test_expand_keeps_vertex_identity(self):
        ctx = unit_square()
        before = ctx.vertices
        ctx.points.expand(1)
        assert all(a is b for a, b in zip(before, ctx.vertices))

    def test_inset_is_negative_expand(self):
        ctx = unit_square()
        ctx.points.at(0).inset(math.sqrt(2))
        assert ctx.shape.points[0].x == pytest.approx(1)
        assert ctx.shape.points[0].y == pytest.approx(1)

    def test_selection_edge_cases(self):
        pts = unit_square().points
        assert len(pts.every(0)) == 0
        assert len(pts.every(10)) == 1
        assert len(pts.at(1, 7, -1)) == 2
        assert len(pts.at([0, 1])) == 2
        assert len(pts.slice(1, 3)) == 2
        assert isinstance(pts.every(2), PointsView)

    def test_move(self):
        ctx = unit_square()
        ctx.points.at(2).move(5, 5)
        assert ctx.shape.points[2] == Point(15, 15)

    def test_round_returns_owner_context(self):
        ctx = unit_square()
        out = ctx.points.every(2).round(2)
        assert isinstance(out, ShapeContext)
        assert len(ctx.vertices) == 6

    def test_expand_to_circles(self):
        circles = unit_square().points.expand_to_circles(2, 8)
        assert len(circles) == 4
        assert len(circles[0]) == 8

    def test_raycast_outward_does_not_mutate(self):
        ctx = unit_square()
        ends = ctx.points.raycast(math.sqrt(2), 'outward')
        assert ends.positions[0].x == pytest.approx(-1)
        assert ends.positions[0].y == pytest.approx(-1)
        assert ctx.shape.points[0] == Point(0, 0)

    def test_raycast_angle(self):
        ends = unit_square().points.at(0).raycast(3, 90)
        assert ends.positions[0].y == pytest.approx(3)

    def test_raycast_bad_direction(self):
        with pytest.raises(ValueError):
            unit_square().points.raycast(1, 'sideways')

    def test_bbox_is_ephemeral(self):
        box = unit_square().points.bbox()
        assert box.shape.ephemeral
        assert box.area() == pytest.approx(100)

    def test_midpoint(self):
        mid = unit_square().points.midpoint()
        assert isinstance(mid, PointContext)
        assert mid.x == pytest.approx(5)

    def test_place_marks_template_ephemeral(self):
        template = square(2)
        placed = unit_square().points.place(template)
        assert template.shape.ephemeral
        assert len(placed) == 4
        assert not placed[0].ephemeral
        assert placed[2].centroid().x == pytest.approx(10)


class TestLinesView:
    """Segment selections"""

    def test_extrude_one_edge(self):
        ctx = unit_square()
        ctx.lines.at(0).extrude(5)
        assert len(ctx.vertices) == 6
        assert ctx.area() == pytest.approx(150)
        assert ctx.shape.validate()

    def test_extrude_zero_is_noop(self):
        ctx = unit_square()
        ctx.lines.extrude(0)
        assert len(ctx.vertices) == 4

    def test_subdivide_returns_new_segments(self):
        ctx = unit_square()
        subs = ctx.lines.at(0).subdivide(4)
        assert len(subs) == 4
        assert len(ctx.vertices) == 7
        assert subs.length == pytest.approx(10)
        assert ctx.area() == pytest.approx(100)

    def test_divide_and_collapse_are_free_points(self):
        ctx = unit_square()
        assert len(ctx.lines.at(0).divide(3)) == 2
        mids = ctx.lines.collapse()
        assert mids.positions[0] == Point(5, 0)
        assert len(ctx.vertices) == 4

    def test_length_and_midpoint(self):
        lines = unit_square().lines
        assert lines.length == pytest.approx(40)
        assert lines.midpoint().position == Point(5, 5)

    def test_expand_to_rect(self):
        rects = unit_square().lines.at(0).expand_to_rect(2)
        assert len(rects) == 1
        assert abs(rects[0].area()) == pytest.approx(20)

    def test_place_at_midpoints(self):
        placed = unit_square().lines.place(circle(1, 6))
        assert len(placed) == 4
        assert placed[1].centroid().x == pytest.approx(10)
        assert placed[1].centroid().y == pytest.approx(5)


class TestShapeContext:
    """Single-shape operations"""

    def test_offset_in_place(self):
        ctx = unit_square()
        ctx.expand(1)
        assert ctx.area() == pytest.approx(144)
        ctx.inset(2)
        assert ctx.area() == pytest.approx(64)

    def test_offset_rings(self):
        ctx = unit_square()
        rings = ctx.offset(1, count=3)
        assert isinstance(rings, ShapesView)
        assert len(rings) == 3
        assert rings[2].area() == pytest.approx(256)
        assert ctx.shape.ephemeral

    def test_offset_rings_with_original(self):
        ctx = unit_square()
        rings = ctx.offset(-1, count=2, include_original=True)
        assert len(rings) == 3
        assert rings[0] is ctx.shape
        assert not ctx.shape.ephemeral

    def test_bbox_leaves_source(self):
        ctx = circle(5)
        box = ctx.bbox()
        assert box.shape.ephemeral
        assert not ctx.shape.ephemeral
        assert box.bounding_box().width == pytest.approx(10)

    def test_explode(self):
        ctx = unit_square()
        parts = ctx.explode()
        assert ctx.shape.ephemeral
        assert len(parts) == 4
        assert all(p.open and len(p) == 1 for p in parts)

    def test_collapse(self):
        ctx = unit_square()
        pt = ctx.collapse()
        assert ctx.shape.ephemeral
        assert pt.x == pytest.approx(5)
        assert pt.y == pytest.approx(5)
        assert pt.source is ctx.shape

    def test_transforms_are_chainable(self):
        ctx = unit_square().move_to(100, 100).rotate(45).scale(2)
        assert ctx.centroid().x == pytest.approx(100)
        assert ctx.area() == pytest.approx(400)
        ctx.scale_x(0.5)
        assert ctx.area() == pytest.approx(200)

    def test_x_and_y(self):
        ctx = unit_square().x(50).y(-50)
        assert ctx.centroid().x == pytest.approx(50)
        assert ctx.centroid().y == pytest.approx(-50)

    def test_trace_and_styling(self):
        ctx = unit_square().ephemeral()
        assert ctx.shape.ephemeral
        ctx.trace().color('#ff0000').group('dark')
        assert not ctx.shape.ephemeral
        assert ctx.shape.color == '#ff0000'
        assert ctx.shape.group == 'dark'

    def test_round(self):
        ctx = unit_square().round(1, segments=2)
        assert len(ctx.vertices) == 16


class TestPathAndPoint:

    def test_path_length(self):
        p = PathContext.from_points([(0, 0), (3, 4), (3, 10)])
        assert p.length == pytest.approx(11)
        assert p.shape.open

    def test_path_from_segments(self):
        p = PathContext(unit_square().segments[:2])
        assert p.shape.open

    def test_point_context(self):
        pt = PointContext((3, 4))
        c = pt.expand_to_circle(2, 12)
        assert len(c.segments) == 12
        assert c.centroid().x == pytest.approx(3)
        placed = pt.place(square(2))
        assert placed.centroid().y == pytest.approx(4)


class TestShapesView:
    """Collections of independent shapes"""

    def make(self, n=4):
        return ShapesView([unit_square(2).shape for _ in range(n)])

    def test_spread(self):
        view = self.make(3).spread(10)
        assert view[2].centroid().x == pytest.approx(21)

    def test_spread_polar_full_circle(self):
        view = self.make(4).spread_polar(100)
        assert view[0].centroid().x == pytest.approx(100)
        assert view[1].centroid().x == pytest.approx(0, abs=1e-9)
        assert view[1].centroid().y == pytest.approx(100)

    def test_spread_polar_arc_occupies_both_ends(self):
        view = self.make(3).spread_polar(10, (0, 90))
        assert view[2].centroid().y == pytest.approx(10)
        assert view[1].centroid().x == pytest.approx(10 * math.cos(math.pi / 4))

    def test_spread_polar_single_member_is_noop(self):
        view = self.make(1)
        view.spread_polar(50)
        assert view[0].centroid().x == pytest.approx(1)

    def test_polar_positions_center(self):
        pts = polar_positions(2, 5, center=(10, 10))
        assert pts[0] == Point(15, 10)

    def test_scale_with_generator(self):
        view = self.make(2).scale(iter([1, 3]))
        assert view[0].area() == pytest.approx(4)
        assert view[1].area() == pytest.approx(36)

    def test_rotate_with_callable(self):
        view = self.make(2).rotate(lambda: 90)
        assert view[0].area() == pytest.approx(4)

    def test_color_generator(self):
        colors = iter(['red', 'blue'])
        view = self.make(2).color(colors)
        assert [s.color for s in view] == ['red', 'blue']

    def test_xy_moves_bounds_center(self):
        view = self.make(2).spread(10).xy(0, 0)
        box = view.get_bounds()
        assert box.center.x == pytest.approx(0)
        assert box.center.y == pytest.approx(0)

    def test_union_marks_inputs_ephemeral(self):
        a = unit_square().shape
        b = unit_square(10, 5, 0).shape
        merged = ShapesView([a, b]).union()
        assert len(merged) == 1
        assert merged[0].area() == pytest.approx(150)
        assert a.ephemeral and b.ephemeral

    def test_clone(self):
        view = self.make(2).clone(2, 10, 0)
        assert len(view) == 6

    def test_points_and_lines_span_members(self):
        view = self.make(3)
        assert len(view.points) == 12
        assert len(view.lines) == 12
        view.points.every(4).expand(1)
        assert all(len(s.vertices) == 4 for s in view)

    def test_offset_rings(self):
        rings = self.make(2).expand(1, count=2)
        assert len(rings) == 4

    def test_every_returns_view(self):
        assert isinstance(self.make(4).every(2), ShapesView)
        assert len(self.make(4).every(2)) == 2
