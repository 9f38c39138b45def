"""Tests for the 2D point/vector type."""

import math

import pytest

from patterncad.geom import Point, as_point, close, mean_point


class TestPoint:
    """Point arithmetic and vector helpers"""

    def test_arithmetic(self):
        """Operators match the named methods"""
        a = Point(1, 2)
        b = Point(3, -1)
        assert a + b == Point(4, 1)
        assert a - b == Point(-2, 3)
        assert a * 2 == Point(2, 4)
        assert 2 * a == Point(2, 4)
        assert b / 2 == Point(1.5, -0.5)
        assert -a == Point(-1, -2)

    def test_divide_by_zero(self):
        """Division by zero yields the zero point instead of raising"""
        assert Point(3, 4) / 0 == Point(0, 0)

    def test_products_and_length(self):
        a = Point(3, 4)
        assert a.length() == pytest.approx(5.0)
        assert a.length_squared() == pytest.approx(25.0)
        assert a.dot(Point(1, 0)) == pytest.approx(3.0)
        assert Point(1, 0).cross(Point(0, 1)) == pytest.approx(1.0)
        assert a.normalize().length() == pytest.approx(1.0)
        assert Point(0, 0).normalize() == Point(0, 0)

    def test_rotate(self):
        """Rotation is counter-clockwise, optionally about an origin"""
        p = Point(1, 0).rotate(math.pi / 2)
        assert p.x == pytest.approx(0.0, abs=1e-12)
        assert p.y == pytest.approx(1.0)
        q = Point(2, 1).rotate(math.pi, Point(1, 1))
        assert q.x == pytest.approx(0.0, abs=1e-12)
        assert q.y == pytest.approx(1.0)

    def test_perpendiculars(self):
        assert Point(1, 0).perpendicular() == Point(0, 1)
        assert Point(1, 0).perpendicular_cw() == Point(0, -1)

    def test_equality_helpers(self):
        assert Point(1, 1).equals(Point(1 + 1e-12, 1))
        assert not Point(1, 1).equals(Point(1.001, 1))
        assert close(1.0, 1.0 + 1e-7)
        assert not Point(float('nan'), 0).isfinite()

    def test_key_rounds_and_normalizes_negative_zero(self):
        assert Point(1.000001, -0.00001).key() == "1.0000,0.0000"
        assert Point(0.5, 2).key(2) == "0.50,2.00"

    def test_from_angle_and_lerp(self):
        p = Point.from_angle(math.pi / 2, 3)
        assert p.x == pytest.approx(0.0, abs=1e-12)
        assert p.y == pytest.approx(3.0)
        assert Point(0, 0).lerp(Point(10, 20), 0.25) == Point(2.5, 5)


class TestAsPoint:
    """Coercion of point-like values"""

    def test_tuple_and_list(self):
        assert as_point((1, 2)) == Point(1, 2)
        assert as_point([3.5, 4]) == Point(3.5, 4)

    def test_object_with_position(self):
        class Holder:
            position = Point(7, 8)
        assert as_point(Holder()) == Point(7, 8)

    @pytest.mark.parametrize("bad", [None, (1,), ("a", 2), (True, 1)])
    def test_bad_values(self, bad):
        with pytest.raises(ValueError):
            as_point(bad)

    def test_mean_point(self):
        assert mean_point([Point(0, 0), Point(2, 4)]) == Point(1, 2)
        assert mean_point([]) == Point(0, 0)
