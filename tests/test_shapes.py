"""Tests for the built-in shape factories."""

import math

import pytest

from patterncad.shapes import (CircleContext, circle, from_points, hexagon, path,
                               polygon, rect, square, triangle)


class TestFactories:
    """Factories return concrete, centered shapes"""

    def test_circle_defaults(self):
        c = circle()
        assert isinstance(c, CircleContext)
        assert len(c.shape.segments) == 32
        assert not c.shape.ephemeral
        assert all(p.length() == pytest.approx(10) for p in c.shape.points)

    def test_circle_rebuild_keeps_identity_and_center(self):
        c = circle(5, 8).move_to(20, 30)
        shape = c.shape
        c.radius(10).segments(12)
        assert c.shape is shape
        assert len(c.shape.segments) == 12
        assert len(c.lines) == 12
        assert c.centroid().x == pytest.approx(20)
        assert c.shape.points[0].distance_to(c.centroid()) == pytest.approx(10)

    def test_rect(self):
        r = rect(20, 10)
        assert r.w == 20 and r.h == 10
        assert r.area() == pytest.approx(200)
        r.width(40)
        assert r.area() == pytest.approx(400)
        r.size(5)
        assert r.area() == pytest.approx(25)

    def test_square(self):
        s = square(10)
        box = s.bounding_box()
        assert box.min.x == pytest.approx(-5)
        s.size(4)
        assert s.area() == pytest.approx(16)

    def test_hexagon_is_pointy(self):
        h = hexagon(10)
        p0 = h.shape.points[0]
        assert math.degrees(p0.angle()) == pytest.approx(30)
        h.radius(20)
        assert h.shape.points[0].length() == pytest.approx(20)

    def test_triangle(self):
        t = triangle(10)
        assert len(t.segments) == 3
        assert t.shape.points[0].y == pytest.approx(-10)
        assert t.winding == 'ccw'

    def test_polygon_rotation_in_degrees(self):
        p = polygon(4, 10, 45)
        assert p.shape.points[0].x == pytest.approx(10 * math.cos(math.pi / 4))

    def test_from_points_and_path(self):
        s = from_points([(0, 0), (4, 0), (0, 3)])
        assert s.area() == pytest.approx(6)
        p = path([(0, 0), (4, 0), (4, 3)])
        assert p.shape.open
        assert p.length == pytest.approx(7)
