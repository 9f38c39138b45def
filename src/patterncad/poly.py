## vertex, segment and shape primitives plus polygon algorithms
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

"""polygon kernel for **patterncad**

====================
OVERVIEW
====================

A ``Shape`` is an ordered list of ``Segment`` objects whose endpoints
are shared ``Vertex`` objects.  For a closed shape the end vertex of
each segment *is* the start vertex of the next one (and the last
segment wraps around to the first), so moving a vertex moves both
adjacent edges.  Open shapes (polylines and fractal paths) drop the
wrap-around requirement.

Each shape carries a winding attribute (``'ccw'`` or ``'cw'``).  Segment
normals point outward for the declared winding, which is what
``offset`` and ``PointsView.expand`` rely on.  ``Shape.from_points``
infers the winding from the signed area, so normals of shapes built
from point lists always point away from the interior.

Polygon algorithms
==================

``offset(shape, distance)``
    mitered offset of a closed shape, with bevel fallback when a miter
    would exceed ``miter_limit`` times the distance.

``round_corners(shape, radius, indices)``
    replaces each selected corner with two fillet points, clamped to
    half the shorter adjacent edge.

``explode(shape)``
    independent two-vertex segments for every edge.

Union lives in ``patterncad.boolean``.

"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from patterncad.errors import NumericError
from patterncad.geom import (Point, PointLike, as_point, epsilon, mean_point,
                             pi2, vector_epsilon)

logger = logging.getLogger(__name__)

__all__ = [
    'Vertex',
    'Segment',
    'BoundingBox',
    'Shape',
    'check_finite',
    'offset',
    'round_corners',
    'explode',
    'point_on_boundary',
]

WINDINGS = ('ccw', 'cw')


class Vertex:
    """Mutable boundary position shared by two adjacent segments."""

    __slots__ = ('x', 'y', 'prev_segment', 'next_segment')

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = float(x)
        self.y = float(y)
        self.prev_segment: Optional[Segment] = None
        self.next_segment: Optional[Segment] = None

    @classmethod
    def at(cls, p: PointLike) -> 'Vertex':
        p = as_point(p)
        return cls(p.x, p.y)

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    @position.setter
    def position(self, p: PointLike):
        p = as_point(p)
        self.x = p.x
        self.y = p.y

    @property
    def normal(self) -> Point:
        """Outward normal: the normalized average of the adjacent edge normals."""
        prev_seg = self.prev_segment
        next_seg = self.next_segment
        if prev_seg is None and next_seg is None:
            return Point(0.0, 0.0)
        if prev_seg is None:
            return next_seg.normal
        if next_seg is None:
            return prev_seg.normal
        n1 = prev_seg.normal
        n2 = next_seg.normal
        avg = n1 + n2
        if avg.length() < vector_epsilon:
            return n1
        return avg.normalize()

    def move_along_normal(self, distance: float) -> 'Vertex':
        n = self.normal
        self.x += n.x * distance
        self.y += n.y * distance
        return self

    def clone(self) -> 'Vertex':
        """Copy of the position only; segment links are not copied."""
        return Vertex(self.x, self.y)

    def __repr__(self):
        return f"Vertex({self.x:g}, {self.y:g})"


class Segment:
    """Directed boundary edge between two vertices."""

    __slots__ = ('start', 'end', 'winding')

    def __init__(self, start: Vertex, end: Vertex, winding: str = 'ccw'):
        self.start = start
        self.end = end
        self.winding = winding
        start.next_segment = self
        end.prev_segment = self

    @classmethod
    def between(cls, p1: PointLike, p2: PointLike) -> 'Segment':
        """Free-standing segment with two fresh vertices."""
        return cls(Vertex.at(p1), Vertex.at(p2))

    @property
    def length(self) -> float:
        return self.start.position.distance_to(self.end.position)

    @property
    def direction(self) -> Point:
        return (self.end.position - self.start.position).normalize()

    @property
    def vector(self) -> Point:
        return self.end.position - self.start.position

    @property
    def midpoint(self) -> Point:
        return self.start.position.lerp(self.end.position, 0.5)

    @property
    def normal(self) -> Point:
        """Outward unit normal for the segment's winding."""
        d = self.direction
        if self.winding == 'ccw':
            return d.perpendicular_cw()
        return d.perpendicular()

    def point_at(self, t: float) -> Point:
        return self.start.position.lerp(self.end.position, t)

    def is_degenerate(self, tol: float = epsilon) -> bool:
        return self.length < tol

    def intersect(self, other: 'Segment', tol: float = 0.0) -> Optional[Point]:
        """Intersection point of two segments, or ``None``.

        Parallel (including collinear) segments never intersect here;
        ``tol`` widens the accepted parameter range at the endpoints.
        """
        p = self.start.position
        r = self.vector
        q = other.start.position
        s = other.vector
        denom = r.cross(s)
        if abs(denom) < vector_epsilon:
            return None
        qp = q - p
        t = qp.cross(s) / denom
        u = qp.cross(r) / denom
        if -tol <= t <= 1 + tol and -tol <= u <= 1 + tol:
            return p + r * t
        return None

    def intersect_ray(self, origin: PointLike, direction: PointLike) -> Optional[Point]:
        """First hit of a ray with this segment, or ``None``."""
        o = as_point(origin)
        d = as_point(direction)
        p = self.start.position
        s = self.vector
        denom = d.cross(s)
        if abs(denom) < vector_epsilon:
            return None
        po = p - o
        t = po.cross(s) / denom
        u = po.cross(d) / denom
        if t >= 0 and 0 <= u <= 1:
            return o + d * t
        return None

    def distance_to_point(self, pt: PointLike) -> float:
        p = as_point(pt)
        a = self.start.position
        ab = self.vector
        ln2 = ab.length_squared()
        if ln2 == 0:
            return a.distance_to(p)
        t = max(0.0, min(1.0, (p - a).dot(ab) / ln2))
        return (a + ab * t).distance_to(p)

    def __repr__(self):
        return f"Segment({self.start!r} -> {self.end!r})"


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box."""
    min: Point
    max: Point

    @property
    def width(self) -> float:
        return self.max.x - self.min.x

    @property
    def height(self) -> float:
        return self.max.y - self.min.y

    @property
    def center(self) -> Point:
        return self.min.lerp(self.max, 0.5)

    def overlaps(self, other: 'BoundingBox', tol: float = epsilon) -> bool:
        return not (self.max.x < other.min.x - tol or other.max.x < self.min.x - tol or
                    self.max.y < other.min.y - tol or other.max.y < self.min.y - tol)

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        return BoundingBox(Point(min(self.min.x, other.min.x), min(self.min.y, other.min.y)),
                           Point(max(self.max.x, other.max.x), max(self.max.y, other.max.y)))

    @staticmethod
    def of_points(points: Iterable[Point]) -> Optional['BoundingBox']:
        pts = list(points)
        if not pts:
            return None
        return BoundingBox(Point(min(p.x for p in pts), min(p.y for p in pts)),
                           Point(max(p.x for p in pts), max(p.y for p in pts)))


class Shape:
    """Ordered boundary of shared-vertex segments.

    ``ephemeral`` marks construction geometry that is not rendered until
    ``trace`` flips it back.
    """

    def __init__(self, segments: Optional[List[Segment]] = None,
                 winding: str = 'ccw', open: bool = False):
        if winding not in WINDINGS:
            raise ValueError(f'bad winding: {winding!r}')
        self.segments: List[Segment] = list(segments or [])
        self.winding = winding
        self.open = open
        self.ephemeral = False
        self.color = None
        self.group: Optional[str] = None
        self.connect_segments()

    ## construction
    ## ------------

    @staticmethod
    def from_points(points: Sequence[PointLike], winding: Optional[str] = None) -> 'Shape':
        """Closed shape through ``points``.

        When ``winding`` is omitted it is taken from the signed area.
        """
        pts = [as_point(p) for p in points]
        if len(pts) < 3:
            raise ValueError('a shape requires at least 3 points')
        if winding is None:
            winding = 'ccw' if _signed_area(pts) >= 0 else 'cw'
        verts = [Vertex(p.x, p.y) for p in pts]
        segs = [Segment(verts[i], verts[(i + 1) % len(verts)])
                for i in range(len(verts))]
        return Shape(segs, winding)

    @staticmethod
    def open_path(points: Sequence[PointLike], winding: str = 'ccw') -> 'Shape':
        """Open polyline through ``points``."""
        pts = [as_point(p) for p in points]
        if len(pts) < 2:
            raise ValueError('a path requires at least 2 points')
        verts = [Vertex(p.x, p.y) for p in pts]
        segs = [Segment(verts[i], verts[i + 1]) for i in range(len(verts) - 1)]
        return Shape(segs, winding, open=True)

    @staticmethod
    def regular_polygon(sides: int, radius: float, center: PointLike = (0, 0),
                        rotation: float = 0.0) -> 'Shape':
        """Regular ``sides``-gon; vertex *i* sits at ``rotation + i*2pi/sides``."""
        if sides < 3:
            raise ValueError('a regular polygon requires at least 3 sides')
        c = as_point(center)
        pts = [c + Point.from_angle(rotation + (i / sides) * pi2, radius)
               for i in range(sides)]
        return Shape.from_points(pts)

    def set_vertices(self, verts: Sequence[Vertex]) -> 'Shape':
        """Rebuild the segment list through ``verts`` (identities kept)."""
        verts = list(verts)
        for v in verts:
            v.prev_segment = None
            v.next_segment = None
        if self.open:
            segs = [Segment(verts[i], verts[i + 1]) for i in range(len(verts) - 1)]
        elif len(verts) >= 2:
            segs = [Segment(verts[i], verts[(i + 1) % len(verts)])
                    for i in range(len(verts))]
        else:
            segs = []
        self.segments = segs
        self.connect_segments()
        return self

    def set_points(self, points: Sequence[PointLike]) -> 'Shape':
        """Replace the boundary with fresh vertices at ``points``."""
        return self.set_vertices([Vertex.at(p) for p in points])

    def connect_segments(self) -> 'Shape':
        """Re-link vertices to their segments and propagate winding."""
        for seg in self.segments:
            seg.winding = self.winding
            seg.start.next_segment = seg
            seg.end.prev_segment = seg
        if self.open and self.segments:
            first = self.segments[0].start
            last = self.segments[-1].end
            if first is not last:
                first.prev_segment = None
                last.next_segment = None
        return self

    ## measures
    ## --------

    @property
    def vertices(self) -> List[Vertex]:
        """Unique vertices in boundary order."""
        segs = self.segments
        if not self.open:
            return [s.start for s in segs]
        verts: List[Vertex] = []
        for i, s in enumerate(segs):
            if i == 0 or segs[i - 1].end is not s.start:
                verts.append(s.start)
            verts.append(s.end)
        return verts

    @property
    def points(self) -> List[Point]:
        return [v.position for v in self.vertices]

    def area(self) -> float:
        """Signed shoelace area; positive for counter-clockwise order."""
        if self.open:
            return 0.0
        return _signed_area(self.points)

    def centroid(self) -> Point:
        """Area-weighted centroid for closed shapes, vertex average otherwise."""
        pts = self.points
        if not pts:
            return Point(0.0, 0.0)
        if self.open or len(pts) < 3:
            return mean_point(pts)
        a = 0.0
        cx = 0.0
        cy = 0.0
        n = len(pts)
        for i in range(n):
            p = pts[i]
            q = pts[(i + 1) % n]
            f = p.x * q.y - q.x * p.y
            a += f
            cx += (p.x + q.x) * f
            cy += (p.y + q.y) * f
        if abs(a) < vector_epsilon:
            return mean_point(pts)
        a *= 0.5
        return Point(cx / (6.0 * a), cy / (6.0 * a))

    def bounding_box(self) -> BoundingBox:
        box = BoundingBox.of_points(self.points)
        if box is None:
            return BoundingBox(Point(0.0, 0.0), Point(0.0, 0.0))
        return box

    @property
    def path_length(self) -> float:
        return sum(s.length for s in self.segments)

    def contains_point(self, pt: PointLike) -> bool:
        """Crossing-number point-in-polygon test for closed shapes."""
        if self.open or len(self.segments) < 3:
            return False
        p = as_point(pt)
        inside = False
        for seg in self.segments:
            a = seg.start
            b = seg.end
            # half-open rule: an edge counts when it straddles the ray
            if (a.y > p.y) != (b.y > p.y):
                xint = a.x + (p.y - a.y) * (b.x - a.x) / (b.y - a.y)
                if p.x < xint:
                    inside = not inside
        return inside

    def validate(self) -> bool:
        """Return ``True`` if successive segments share their vertices."""
        segs = self.segments
        if not segs:
            return False
        n = len(segs)
        limit = n - 1 if self.open else n
        for i in range(limit):
            if segs[i].end is not segs[(i + 1) % n].start:
                return False
        return True

    ## edits
    ## -----

    def reverse(self) -> 'Shape':
        """Reverse boundary order and flip the winding."""
        verts = self.vertices
        verts.reverse()
        self.winding = 'cw' if self.winding == 'ccw' else 'ccw'
        return self.set_vertices(verts)

    def ensure_winding(self, winding: str = 'ccw') -> 'Shape':
        """Reorder vertices so the geometric winding matches ``winding``."""
        if self.open:
            self.winding = winding
            return self.connect_segments()
        actual = 'ccw' if self.area() >= 0 else 'cw'
        if actual != winding:
            verts = self.vertices
            verts.reverse()
            self.set_vertices(verts)
        self.winding = winding
        return self.connect_segments()

    def remove_degenerate(self, tol: float = epsilon) -> 'Shape':
        """Drop vertices closer than ``tol`` to their predecessor."""
        verts = self.vertices
        kept: List[Vertex] = []
        for v in verts:
            if kept and kept[-1].position.distance_to(v.position) < tol:
                continue
            kept.append(v)
        if not self.open and len(kept) > 1 and \
           kept[0].position.distance_to(kept[-1].position) < tol:
            kept.pop()
        if len(kept) != len(verts):
            logger.debug("removed %d degenerate vertices from %r",
                         len(verts) - len(kept), self)
            self.set_vertices(kept)
        return self

    def clone(self) -> 'Shape':
        """Deep copy: new vertices and segments, same attributes."""
        segs = self.segments
        if self.open:
            mapping = {}

            def copy(v):
                if id(v) not in mapping:
                    mapping[id(v)] = v.clone()
                return mapping[id(v)]
            new_segs = [Segment(copy(s.start), copy(s.end)) for s in segs]
            shape = Shape(new_segs, self.winding, open=True)
        else:
            verts = [v.clone() for v in self.vertices]
            n = len(verts)
            new_segs = [Segment(verts[i], verts[(i + 1) % n]) for i in range(n)] if n > 1 else []
            shape = Shape(new_segs, self.winding)
        shape.ephemeral = self.ephemeral
        shape.color = self.color
        shape.group = self.group
        return shape

    ## transforms
    ## ----------

    def translate(self, dx: float, dy: float = 0.0) -> 'Shape':
        self._shift(dx, dy)
        return check_finite(self, 'translate')

    def _shift(self, dx: float, dy: float) -> None:
        for v in self.vertices:
            v.x += dx
            v.y += dy

    def move_to(self, target: PointLike) -> 'Shape':
        """Translate so the centroid lands on ``target``."""
        t = as_point(target)
        c = self.centroid()
        self._shift(t.x - c.x, t.y - c.y)
        return check_finite(self, 'move_to')

    def scale(self, sx: float, sy: Optional[float] = None,
              pivot: Optional[PointLike] = None) -> 'Shape':
        if sy is None:
            sy = sx
        c = as_point(pivot) if pivot is not None else self.centroid()
        for v in self.vertices:
            v.x = c.x + (v.x - c.x) * sx
            v.y = c.y + (v.y - c.y) * sy
        check_finite(self, 'scale')
        if sx * sy < 0 and not self.open:
            # mirroring flips the geometric winding
            self.ensure_winding(self.winding)
        return self

    def rotate(self, angle: float, pivot: Optional[PointLike] = None) -> 'Shape':
        """Rotate counter-clockwise by ``angle`` radians."""
        c = as_point(pivot) if pivot is not None else self.centroid()
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        for v in self.vertices:
            dx = v.x - c.x
            dy = v.y - c.y
            v.x = c.x + dx * cos_a - dy * sin_a
            v.y = c.y + dx * sin_a + dy * cos_a
        return check_finite(self, 'rotate')

    def __len__(self):
        return len(self.segments)

    def __repr__(self):
        kind = 'open' if self.open else self.winding
        flag = ', ephemeral' if self.ephemeral else ''
        return f"Shape({len(self.segments)} segments, {kind}{flag})"


def _signed_area(pts: Sequence[Point]) -> float:
    n = len(pts)
    if n < 3:
        return 0.0
    s = 0.0
    for i in range(n):
        p = pts[i]
        q = pts[(i + 1) % n]
        s += p.x * q.y - q.x * p.y
    return s / 2.0


def check_finite(shape: Shape, operation: str) -> Shape:
    """Raise ``NumericError`` if any vertex of ``shape`` is NaN/Infinity."""
    for i, v in enumerate(shape.vertices):
        if not (math.isfinite(v.x) and math.isfinite(v.y)):
            logger.error("non-finite vertex %d (%r, %r) in %r after %s",
                         i, v.x, v.y, shape, operation)
            raise NumericError(f'non-finite coordinate at vertex {i}: ({v.x}, {v.y})',
                               shape=shape, operation=operation)
    return shape


def point_on_boundary(shape: Shape, pt: PointLike, tol: float = 1e-6) -> bool:
    p = as_point(pt)
    return any(seg.distance_to_point(p) <= tol for seg in shape.segments)


## polygon algorithms
## ------------------

def offset(shape: Shape, distance: float, miter_limit: float = 4.0) -> Shape:
    """Return a new shape grown (``distance > 0``) or shrunk along the normals.

    Each corner is the intersection of the two adjacent offset edges, so
    straight edges move by exactly ``distance``.  A corner whose miter
    is longer than ``abs(distance) * miter_limit`` is beveled into two
    points.  Degenerate input yields an empty shape.
    """
    work = shape.clone()
    work.remove_degenerate()
    pts = work.points
    n = len(pts)
    if work.open or n < 3:
        logger.debug("offset skipped for degenerate %r", shape)
        result = Shape(winding=shape.winding)
        result.color = shape.color
        result.group = shape.group
        return result
    if distance == 0:
        work.ephemeral = False
        return work

    segs = work.segments
    out: List[Point] = []
    limit = abs(distance) * miter_limit
    for i in range(n):
        prev_seg = segs[i - 1]
        next_seg = segs[i]
        corner = pts[i]
        n1 = prev_seg.normal
        n2 = next_seg.normal
        a1 = prev_seg.start.position + n1 * distance
        d1 = prev_seg.vector
        a2 = next_seg.start.position + n2 * distance
        d2 = next_seg.vector
        denom = d1.cross(d2)
        if abs(denom) < vector_epsilon * max(1.0, d1.length() * d2.length()):
            out.append(corner + n1 * distance)
            continue
        t = (a2 - a1).cross(d2) / denom
        miter = a1 + d1 * t
        if miter.distance_to(corner) > limit:
            out.append(corner + n1 * distance)
            out.append(corner + n2 * distance)
        else:
            out.append(miter)

    result = Shape.from_points(out, work.winding) if len(out) >= 3 else Shape(winding=work.winding)
    result.color = shape.color
    result.group = shape.group
    return check_finite(result, 'offset')


def round_corners(shape: Shape, radius: float, indices: Optional[Iterable[int]] = None,
                  segments: int = 0) -> Shape:
    """Fillet the selected corners of ``shape`` in place.

    Every selected vertex is replaced by two new vertices, ``radius``
    back along each adjacent edge; the radius is clamped per corner to
    half the shorter adjacent edge.  Collinear corners are left alone.
    With ``segments > 0`` that many extra points are placed on the
    quadratic curve between the two fillet points.
    """
    verts = shape.vertices
    n = len(verts)
    if shape.open or n < 3 or radius <= 0:
        return shape
    selected = set(range(n)) if indices is None else {i for i in indices if 0 <= i < n}
    if not selected:
        return shape

    pts = [v.position for v in verts]
    new_verts: List[Vertex] = []
    for i, v in enumerate(verts):
        if i not in selected:
            new_verts.append(v)
            continue
        c = pts[i]
        p = pts[i - 1]
        q = pts[(i + 1) % n]
        to_prev = p - c
        to_next = q - c
        len_prev = to_prev.length()
        len_next = to_next.length()
        if len_prev < epsilon or len_next < epsilon:
            new_verts.append(v)
            continue
        if abs(to_prev.normalize().cross(to_next.normalize())) < 1e-9:
            new_verts.append(v)
            continue
        r = min(radius, len_prev / 2.0, len_next / 2.0)
        a = c + to_prev.normalize() * r
        b = c + to_next.normalize() * r
        new_verts.append(Vertex(a.x, a.y))
        for k in range(1, segments + 1):
            t = k / (segments + 1)
            # quadratic Bezier with the original corner as control point
            u = 1.0 - t
            qp = a * (u * u) + c * (2 * u * t) + b * (t * t)
            new_verts.append(Vertex(qp.x, qp.y))
        new_verts.append(Vertex(b.x, b.y))
    shape.set_vertices(new_verts)
    return check_finite(shape, 'round')


def explode(shape: Shape) -> List[Segment]:
    """Independent copies of every edge; no vertex is shared."""
    return [Segment(seg.start.clone(), seg.end.clone(), shape.winding)
            for seg in shape.segments]
