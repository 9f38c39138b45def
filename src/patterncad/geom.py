## foundational 2D point arithmetic for patterncad
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

"""foundational 2D point arithmetic for **patterncad**

====================
OVERVIEW
====================

The patterncad.geom module provides the immutable ``Point`` value type
used by every other part of the pattern engine, together with the
numeric constants and small scalar helpers shared by the kernel.

constants
=========

``epsilon`` is the general geometric tolerance (5E-6), chosen the same
way as in yapCAD.  ``vector_epsilon`` (1E-10) is the much tighter bound
used for parallel/zero-length tests on unit vectors.  ``pi2`` is 2*pi.

points
======

A ``Point`` is an immutable ``(x, y)`` pair.  It doubles as a 2D vector:
all arithmetic returns new points, so a ``Point`` can be shared freely.
Mutable positions live in ``patterncad.poly.Vertex``.

"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

__all__ = [
    'epsilon',
    'vector_epsilon',
    'pi2',
    'Point',
    'PointLike',
    'close',
    'isgoodnum',
    'as_point',
    'mean_point',
]

epsilon = 5e-6
vector_epsilon = 1e-10
pi2 = 2.0 * math.pi


def close(a: float, b: float, tol: float = epsilon) -> bool:
    """Return ``True`` if two scalars agree within ``tol``."""
    return abs(a - b) < tol


def isgoodnum(n) -> bool:
    """Return ``True`` for finite int/float values (bools excluded)."""
    return (not isinstance(n, bool)) and isinstance(n, (int, float)) \
        and math.isfinite(n)


@dataclass(frozen=True)
class Point:
    """Immutable 2D point / vector."""

    x: float = 0.0
    y: float = 0.0

    ## arithmetic
    ## ----------

    def add(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def subtract(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def multiply(self, s: float) -> 'Point':
        return Point(self.x * s, self.y * s)

    def divide(self, s: float) -> 'Point':
        """Scalar division; dividing by zero yields the zero point."""
        if s == 0:
            return Point(0.0, 0.0)
        return Point(self.x / s, self.y / s)

    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.subtract(other)

    def __mul__(self, s):
        return self.multiply(s)

    __rmul__ = __mul__

    def __truediv__(self, s):
        return self.divide(s)

    def __neg__(self):
        return Point(-self.x, -self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    ## vector products and measures
    ## ----------------------------

    def dot(self, other: 'Point') -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: 'Point') -> float:
        """z component of the 3D cross product."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def normalize(self) -> 'Point':
        ln = self.length()
        if ln == 0:
            return Point(0.0, 0.0)
        return Point(self.x / ln, self.y / ln)

    def angle(self) -> float:
        """Angle from the positive x axis, in radians."""
        return math.atan2(self.y, self.x)

    def distance_to(self, other: 'Point') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def rotate(self, angle: float, origin: 'Point' = None) -> 'Point':
        """Rotate counter-clockwise by ``angle`` radians about ``origin``."""
        ox, oy = (origin.x, origin.y) if origin is not None else (0.0, 0.0)
        c = math.cos(angle)
        s = math.sin(angle)
        dx = self.x - ox
        dy = self.y - oy
        return Point(ox + dx * c - dy * s, oy + dx * s + dy * c)

    def perpendicular(self) -> 'Point':
        """Counter-clockwise perpendicular ``(-y, x)``."""
        return Point(-self.y, self.x)

    def perpendicular_cw(self) -> 'Point':
        """Clockwise perpendicular ``(y, -x)``."""
        return Point(self.y, -self.x)

    def lerp(self, other: 'Point', t: float) -> 'Point':
        return Point(self.x + (other.x - self.x) * t,
                     self.y + (other.y - self.y) * t)

    def equals(self, other: 'Point', tol: float = vector_epsilon) -> bool:
        return abs(self.x - other.x) < tol and abs(self.y - other.y) < tol

    def isfinite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def key(self, places: int = 4) -> str:
        """Rounded string key, used to merge coincident points."""
        x = round(self.x, places) + 0.0
        y = round(self.y, places) + 0.0
        return f"{x:.{places}f},{y:.{places}f}"

    @staticmethod
    def from_angle(angle: float, length: float = 1.0) -> 'Point':
        return Point(math.cos(angle) * length, math.sin(angle) * length)

    def __repr__(self):
        return f"Point({self.x:g}, {self.y:g})"


PointLike = Union[Point, Tuple[float, float], Sequence[float]]


def as_point(p: PointLike) -> Point:
    """Coerce a point-like value (``Point``, tuple, list) to a ``Point``."""
    if isinstance(p, Point):
        return p
    if hasattr(p, 'position'):
        return p.position
    try:
        x, y = p[0], p[1]
    except (TypeError, IndexError):
        raise ValueError(f'bad point-like value: {p!r}')
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool)
               for v in (x, y)):
        raise ValueError(f'bad point-like value: {p!r}')
    return Point(float(x), float(y))


def mean_point(points: Iterable[Point]) -> Point:
    """Average of a collection of points; the origin when empty."""
    sx = 0.0
    sy = 0.0
    n = 0
    for p in points:
        sx += p.x
        sy += p.y
        n += 1
    if n == 0:
        return Point(0.0, 0.0)
    return Point(sx / n, sy / n)
