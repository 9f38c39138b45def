## built-in shape factories for patterncad
## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
# 
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
# 
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Built-in shape factories.

Every factory returns one concrete ``Shape`` wrapped in a context whose
parameter setters (``radius``, ``size``, ...) rebuild the boundary in
place, keeping the current centroid and the shape's identity.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from patterncad.config import DEFAULT_SETTINGS
from patterncad.contexts import ShapeContext
from patterncad.geom import Point, PointLike, as_point
from patterncad.poly import Shape

__all__ = [
    'circle_shape',
    'rect_shape',
    'CircleContext',
    'RectContext',
    'SquareContext',
    'HexagonContext',
    'TriangleContext',
    'circle',
    'rect',
    'square',
    'hexagon',
    'triangle',
    'polygon',
    'from_points',
    'path',
]


def circle_shape(radius: float, segments: int = 32, center: PointLike = (0, 0)) -> Shape:
    return Shape.regular_polygon(max(3, int(segments)), radius, center)


def rect_shape(width: float, height: float, center: PointLike = (0, 0)) -> Shape:
    c = as_point(center)
    hw = width / 2.0
    hh = height / 2.0
    return Shape.from_points([Point(c.x - hw, c.y - hh), Point(c.x + hw, c.y - hh),
                              Point(c.x + hw, c.y + hh), Point(c.x - hw, c.y + hh)])


class _FactoryContext(ShapeContext):
    """Context that can regenerate its boundary from parameters."""

    def _build(self, center: Point) -> Shape:
        raise NotImplementedError

    def _rebuild(self):
        fresh = self._build(self._shape.centroid())
        self._shape.winding = fresh.winding
        self._shape.set_points(fresh.points)
        return self


class CircleContext(_FactoryContext):
    """Regular polygon approximating a circle.

    ``segments(n)`` sets the polygon's edge count; the edges themselves
    are read through ``shape.segments`` or ``lines``.
    """

    def __init__(self, radius: float = 10.0, segments: Optional[int] = None,
                 center: PointLike = (0, 0)):
        self._radius = radius
        self._segments = max(3, segments or DEFAULT_SETTINGS.circle_segments)
        super().__init__(circle_shape(self._radius, self._segments, center))

    def _build(self, center):
        return circle_shape(self._radius, self._segments, center)

    def radius(self, r: float) -> 'CircleContext':
        self._radius = r
        return self._rebuild()

    def segments(self, n: int) -> 'CircleContext':
        self._segments = max(3, int(n))
        return self._rebuild()


class RectContext(_FactoryContext):

    def __init__(self, width: float = 10.0, height: Optional[float] = None,
                 center: PointLike = (0, 0)):
        self._width = width
        self._height = width if height is None else height
        super().__init__(rect_shape(self._width, self._height, center))

    @property
    def w(self) -> float:
        return self._width

    @property
    def h(self) -> float:
        return self._height

    def _build(self, center):
        return rect_shape(self._width, self._height, center)

    def size(self, width: float, height: Optional[float] = None) -> 'RectContext':
        self._width = width
        self._height = width if height is None else height
        return self._rebuild()

    def width(self, w: float) -> 'RectContext':
        self._width = w
        return self._rebuild()

    def height(self, h: float) -> 'RectContext':
        self._height = h
        return self._rebuild()


class SquareContext(RectContext):

    def __init__(self, size: float = 10.0, center: PointLike = (0, 0)):
        super().__init__(size, size, center)

    def size(self, size: float, height: Optional[float] = None) -> 'SquareContext':
        return super().size(size, size)


class HexagonContext(_FactoryContext):

    def __init__(self, radius: float = 10.0, center: PointLike = (0, 0)):
        self._radius = radius
        super().__init__(self._build(as_point(center)))

    def _build(self, center):
        return Shape.regular_polygon(6, self._radius, center, math.pi / 6)

    def radius(self, r: float) -> 'HexagonContext':
        self._radius = r
        return self._rebuild()


class TriangleContext(_FactoryContext):

    def __init__(self, radius: float = 10.0, center: PointLike = (0, 0)):
        self._radius = radius
        super().__init__(self._build(as_point(center)))

    def _build(self, center):
        return Shape.regular_polygon(3, self._radius, center, -math.pi / 2)

    def radius(self, r: float) -> 'TriangleContext':
        self._radius = r
        return self._rebuild()


def circle(radius: float = 10.0, segments: Optional[int] = None) -> CircleContext:
    return CircleContext(radius, segments)


def rect(width: float = 10.0, height: Optional[float] = None) -> RectContext:
    return RectContext(width, height)


def square(size: float = 10.0) -> SquareContext:
    return SquareContext(size)


def hexagon(radius: float = 10.0) -> HexagonContext:
    return HexagonContext(radius)


def triangle(radius: float = 10.0) -> TriangleContext:
    return TriangleContext(radius)


def polygon(sides: int, radius: float = 10.0, rotation: float = 0.0) -> ShapeContext:
    """Regular polygon; ``rotation`` in degrees."""
    return ShapeContext(Shape.regular_polygon(sides, radius, (0, 0), math.radians(rotation)))


def from_points(points: Sequence[PointLike]) -> ShapeContext:
    return ShapeContext(Shape.from_points(points))


def path(points: Sequence[PointLike]):
    from patterncad.contexts import PathContext

    return PathContext.from_points(points)
