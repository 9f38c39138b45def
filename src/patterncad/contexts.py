## fluent selection contexts for patterncad
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

"""Selection contexts.

A ``ShapeContext`` wraps one ``Shape`` and exposes fluent transforms.
Its ``points`` and ``lines`` properties return selection views: light
objects that hold references to the owning shape's vertices or
segments (never copies), narrowed with ``every``, ``at`` and ``slice``.
Operations on a view write through to the owning shapes.

``ShapesView`` does the same over a collection of independent shapes.

Angles at this level are degrees.  Operations that derive a new shape
from an existing one (``explode``, ``collapse``, ring ``offset``,
``place``) mark the source shape ephemeral; ``trace`` makes it
concrete again.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Sequence, Union

from patterncad.config import DEFAULT_SETTINGS
from patterncad.geom import Point, PointLike, as_point, epsilon, mean_point
from patterncad.poly import (BoundingBox, Segment, Shape, Vertex, check_finite,
                             explode, offset, round_corners)

logger = logging.getLogger(__name__)

__all__ = [
    'ShapeContext',
    'PathContext',
    'PointContext',
    'PointsView',
    'LinesView',
    'ShapesView',
    'pull',
    'shape_of',
    'place_clones',
    'polar_positions',
]

Number = Union[int, float]


def pull(value):
    """Resolve a per-member parameter.

    ``value`` is a plain value, a zero-argument callable or an iterator;
    callables and iterators are pulled once per call.
    """
    if callable(value):
        return value()
    if hasattr(value, '__next__'):
        return next(value)
    return value


def shape_of(thing) -> Shape:
    """The ``Shape`` behind a shape, context or factory."""
    if isinstance(thing, Shape):
        return thing
    shape = getattr(thing, 'shape', None)
    if isinstance(shape, Shape):
        return shape
    raise ValueError(f'expected a shape or shape context, got {thing!r}')


def _rect_shape(box: BoundingBox) -> Shape:
    return Shape.from_points([box.min, Point(box.max.x, box.min.y),
                              box.max, Point(box.min.x, box.max.y)])


def place_clones(template: Shape, positions: Iterable[Point]) -> List[Shape]:
    """Concrete clones of ``template`` centered on each position."""
    placed = []
    for p in positions:
        c = template.clone()
        c.ephemeral = False
        c.move_to(p)
        placed.append(c)
    template.ephemeral = True
    return placed


class _Selection:
    """Index-stride/list/range selection over a list of items."""

    def __init__(self, items: Sequence, owners: Optional[Sequence] = None):
        self._items = list(items)
        self._owners = list(owners) if owners is not None else [None] * len(self._items)

    def _select(self, indices: Iterable[int]):
        idx = list(indices)
        return self._derive([self._items[i] for i in idx],
                            [self._owners[i] for i in idx])

    def _derive(self, items, owners):
        return type(self)(items, owners)

    def every(self, n: int, offset: int = 0):
        """Every ``n``-th item starting at ``offset``; empty when ``n < 1``."""
        if n < 1:
            return self._select([])
        return self._select(range(max(0, offset), len(self._items), n))

    def at(self, *indices):
        """Items at explicit indices; out-of-range indices are ignored."""
        if len(indices) == 1 and isinstance(indices[0], (list, tuple, range)):
            indices = tuple(indices[0])
        n = len(self._items)
        return self._select(i for i in indices if -n <= i < n)

    def slice(self, start: int = 0, end: Optional[int] = None):
        return self._select(range(len(self._items))[start:end])

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __getitem__(self, i):
        return self._items[i]

    @property
    def length(self) -> int:
        return len(self._items)

    def _owner_groups(self):
        """Selected items grouped per owning shape, in first-seen order."""
        groups = {}
        order = []
        for item, owner in zip(self._items, self._owners):
            if owner is None:
                continue
            key = id(owner)
            if key not in groups:
                groups[key] = (owner, [])
                order.append(key)
            groups[key][1].append(item)
        return [groups[k] for k in order]


def _owner_result(owners: List[Shape]):
    if len(owners) == 1:
        return ShapeContext(owners[0])
    return ShapesView(owners)


class PointsView(_Selection):
    """Selection of vertices."""

    @property
    def vertices(self) -> List[Vertex]:
        return list(self._items)

    @property
    def positions(self) -> List[Point]:
        return [v.position for v in self._items]

    def expand(self, distance: float) -> 'PointsView':
        """Move each selected vertex along its outward normal."""
        normals = [v.normal for v in self._items]
        for v, n in zip(self._items, normals):
            v.x += n.x * distance
            v.y += n.y * distance
        for owner, _ in self._owner_groups():
            check_finite(owner, 'expand')
        return self

    def inset(self, distance: float) -> 'PointsView':
        return self.expand(-distance)

    def move(self, dx: float, dy: float = 0.0) -> 'PointsView':
        for v in self._items:
            v.x += dx
            v.y += dy
        return self

    def round(self, radius: float, segments: int = 0):
        """Fillet the selected corners of their owning shapes."""
        owners = []
        for owner, verts in self._owner_groups():
            index = {id(v): i for i, v in enumerate(owner.vertices)}
            idx = [index[id(v)] for v in verts if id(v) in index]
            round_corners(owner, radius, idx, segments)
            owners.append(owner)
        if not owners:
            logger.debug("round on an empty or free-standing selection")
            return ShapesView([])
        return _owner_result(owners)

    def expand_to_circles(self, radius: float, segments: Optional[int] = None) -> 'ShapesView':
        """New circle shapes centered on each selected vertex."""
        from patterncad.shapes import circle_shape

        segments = segments or DEFAULT_SETTINGS.circle_segments
        return ShapesView([circle_shape(radius, segments, v.position) for v in self._items])

    def raycast(self, distance: float, direction: Union[Number, str]) -> 'PointsView':
        """Endpoints of rays cast from each vertex; nothing is mutated.

        ``direction`` is an angle in degrees, ``'outward'`` or ``'inward'``.
        """
        ends = []
        for v, owner in zip(self._items, self._owners):
            if isinstance(direction, str):
                if direction not in ('outward', 'inward'):
                    raise ValueError(f'bad raycast direction: {direction!r}')
                n = v.normal
                if n.length() > 1e-3:
                    d = n
                else:
                    center = owner.centroid() if owner is not None else mean_point(self.positions)
                    d = (v.position - center).normalize()
                if direction == 'inward':
                    d = -d
            else:
                d = Point.from_angle(math.radians(direction))
            p = v.position + d * distance
            ends.append(Vertex(p.x, p.y))
        return PointsView(ends)

    def midpoint(self) -> 'PointContext':
        return PointContext(mean_point(self.positions))

    def bbox(self) -> 'ShapeContext':
        """Ephemeral bounding rectangle of the selected points."""
        box = BoundingBox.of_points(self.positions)
        if box is None:
            box = BoundingBox(Point(0.0, 0.0), Point(0.0, 0.0))
        rect = _rect_shape(box)
        rect.ephemeral = True
        return ShapeContext(rect)

    def place(self, template) -> 'ShapesView':
        """Stamp a clone of ``template`` at each selected point."""
        return ShapesView(place_clones(shape_of(template), self.positions))


class LinesView(_Selection):
    """Selection of segments."""

    @property
    def segments(self) -> List[Segment]:
        return list(self._items)

    @property
    def length(self) -> float:
        return sum(s.length for s in self._items)

    def extrude(self, distance: float):
        """Replace each selected segment A->B with A->A'->B'->B.

        A' and B' are A and B moved ``distance`` along the segment's
        outward normal; each extruded segment adds two vertices.
        """
        if distance == 0 or not self._items:
            return self
        owners = []
        for owner, segs in self._owner_groups():
            selected = {id(s) for s in segs}
            new_verts: List[Vertex] = []
            for seg in owner.segments:
                if not new_verts or new_verts[-1] is not seg.start:
                    new_verts.append(seg.start)
                if id(seg) in selected:
                    n = seg.normal
                    a = seg.start.position + n * distance
                    b = seg.end.position + n * distance
                    new_verts.append(Vertex(a.x, a.y))
                    new_verts.append(Vertex(b.x, b.y))
                if owner.open:
                    new_verts.append(seg.end)
            owner.set_vertices(new_verts)
            check_finite(owner, 'extrude')
            owners.append(owner)
        return _owner_result(owners) if owners else self

    def subdivide(self, n: int) -> 'LinesView':
        """Split each selected segment into ``n`` equal parts in place.

        Returns a view over the new sub-segments; ``n < 2`` does nothing.
        """
        if n < 2:
            return self
        new_segments = []
        new_owners = []
        for owner, segs in self._owner_groups():
            selected = {id(s) for s in segs}
            chain_starts: List[Vertex] = []
            new_verts: List[Vertex] = []
            for seg in owner.segments:
                if not new_verts or new_verts[-1] is not seg.start:
                    new_verts.append(seg.start)
                if id(seg) in selected:
                    chain_starts.append(seg.start)
                    for k in range(1, n):
                        p = seg.point_at(k / n)
                        v = Vertex(p.x, p.y)
                        new_verts.append(v)
                        chain_starts.append(v)
                if owner.open:
                    new_verts.append(seg.end)
            owner.set_vertices(new_verts)
            for v in chain_starts:
                if v.next_segment is not None:
                    new_segments.append(v.next_segment)
                    new_owners.append(owner)
        return LinesView(new_segments, new_owners)

    def divide(self, n: int) -> PointsView:
        """Free points splitting each selected segment into ``n`` parts."""
        pts = []
        if n >= 2:
            for seg in self._items:
                for k in range(1, n):
                    p = seg.point_at(k / n)
                    pts.append(Vertex(p.x, p.y))
        return PointsView(pts)

    def collapse(self) -> PointsView:
        """Free points at the midpoint of each selected segment."""
        return PointsView([Vertex.at(seg.midpoint) for seg in self._items])

    def midpoint(self) -> 'PointContext':
        return PointContext(mean_point(seg.midpoint for seg in self._items))

    def expand_to_rect(self, width: float) -> 'ShapesView':
        """A rectangle of total ``width`` centered on each selected segment."""
        rects = []
        half = width / 2.0
        for seg in self._items:
            if seg.is_degenerate():
                continue
            side = seg.direction.perpendicular() * half
            a = seg.start.position
            b = seg.end.position
            rects.append(Shape.from_points([a - side, b - side, b + side, a + side]))
        return ShapesView(rects)

    def place(self, template) -> 'ShapesView':
        """Stamp a clone of ``template`` at each selected segment midpoint."""
        return ShapesView(place_clones(shape_of(template), [s.midpoint for s in self._items]))


class ShapesView(_Selection):
    """Selection over a collection of independent shapes."""

    def __init__(self, shapes: Sequence[Shape], owners: Optional[Sequence] = None):
        super().__init__(shapes, owners)

    def _derive(self, items, owners):
        return ShapesView(items)

    @property
    def shapes(self) -> List[Shape]:
        return list(self._items)

    @property
    def points(self) -> PointsView:
        """All vertices of all selected shapes."""
        items = []
        owners = []
        for s in self._items:
            for v in s.vertices:
                items.append(v)
                owners.append(s)
        return PointsView(items, owners)

    @property
    def lines(self) -> LinesView:
        """All segments of all selected shapes."""
        items = []
        owners = []
        for s in self._items:
            for seg in s.segments:
                items.append(seg)
                owners.append(s)
        return LinesView(items, owners)

    ## lifecycle and styling
    ## ---------------------

    def trace(self) -> 'ShapesView':
        for s in self._items:
            s.ephemeral = False
        return self

    def ephemeral(self) -> 'ShapesView':
        for s in self._items:
            s.ephemeral = True
        return self

    def color(self, value) -> 'ShapesView':
        """Fixed color, or a generator pulled once per shape."""
        for s in self._items:
            s.color = pull(value)
        return self

    def group(self, tag) -> 'ShapesView':
        for s in self._items:
            s.group = pull(tag)
        return self

    ## transforms
    ## ----------

    def scale(self, factor, factor_y=None) -> 'ShapesView':
        """Scale each shape about its own centroid."""
        for s in self._items:
            fx = pull(factor)
            fy = pull(factor_y) if factor_y is not None else fx
            s.scale(fx, fy)
        return self

    def rotate(self, degrees) -> 'ShapesView':
        """Rotate each shape about its own centroid."""
        for s in self._items:
            s.rotate(math.radians(pull(degrees)))
        return self

    def translate(self, dx, dy=0.0) -> 'ShapesView':
        for s in self._items:
            s.translate(pull(dx), pull(dy))
        return self

    def move_to(self, x, y=None) -> 'ShapesView':
        """Move every shape's centroid to the same position."""
        target = as_point((x, y)) if y is not None else as_point(x)
        for s in self._items:
            s.move_to(target)
        return self

    def xy(self, x: float, y: float) -> 'ShapesView':
        """Move the group so its bounding-box center lands on ``(x, y)``."""
        box = self.get_bounds()
        if box is None:
            return self
        c = box.center
        for s in self._items:
            s.translate(x - c.x, y - c.y)
        return self

    def spread(self, dx: float, dy: float = 0.0) -> 'ShapesView':
        """Offset member *i* by ``i * (dx, dy)``."""
        for i, s in enumerate(self._items):
            s.translate(dx * i, dy * i)
        return self

    def spread_polar(self, radius: float, arc=None, center: PointLike = (0, 0)) -> 'ShapesView':
        """Place members at equal angles on a circle of ``radius``.

        ``arc`` is ``None`` (full circle, N steps), an end angle, or a
        ``(start, end)`` pair in degrees (N-1 steps, both ends occupied).
        """
        n = len(self._items)
        if n < 2:
            return self
        positions = polar_positions(n, radius, arc, center)
        for s, p in zip(self._items, positions):
            s.move_to(p)
        return self

    def clone(self, n: int, x: float = 0.0, y: float = 0.0) -> 'ShapesView':
        """Originals plus ``n`` offset copies of the whole selection."""
        shapes = list(self._items)
        for k in range(1, n + 1):
            for s in self._items:
                c = s.clone()
                c.translate(x * k, y * k)
                shapes.append(c)
        return ShapesView(shapes)

    ## derived geometry
    ## ----------------

    def union(self, engine: str = 'native') -> 'ShapesView':
        """Boolean union of the selection; the inputs become ephemeral."""
        from patterncad.boolean import union

        result = union(self._items, engine)
        for s in self._items:
            s.ephemeral = True
        logger.debug("union of %d shapes produced %d", len(self._items), len(result))
        return ShapesView(result)

    def offset(self, distance: float, count: int = 0, miter_limit: Optional[float] = None,
               include_original: bool = False) -> 'ShapesView':
        if count > 0:
            rings = []
            for s in self._items:
                rings.extend(_rings(s, distance, count, miter_limit, include_original))
            return ShapesView(rings)
        for s in self._items:
            _offset_in_place(s, distance, miter_limit)
        return self

    def expand(self, distance: float, count: int = 0, miter_limit: Optional[float] = None,
               include_original: bool = False) -> 'ShapesView':
        return self.offset(abs(distance), count, miter_limit, include_original)

    def inset(self, distance: float, count: int = 0,
              miter_limit: Optional[float] = None) -> 'ShapesView':
        return self.offset(-abs(distance), count, miter_limit)

    def get_bounds(self) -> Optional[BoundingBox]:
        box = None
        for s in self._items:
            b = s.bounding_box()
            box = b if box is None else box.union(b)
        return box


def polar_positions(n: int, radius: float, arc=None, center: PointLike = (0, 0)) -> List[Point]:
    start = 0.0
    end = 360.0
    if arc is not None:
        if isinstance(arc, (int, float)):
            end = float(arc)
        else:
            start, end = float(arc[0]), float(arc[1])
    span = end - start
    full = abs(abs(span) - 360.0) < epsilon
    step = span / n if full else span / max(1, n - 1)
    c = as_point(center)
    return [c + Point.from_angle(math.radians(start + step * i), radius)
            for i in range(n)]


def _offset_in_place(shape: Shape, distance: float, miter_limit: Optional[float]) -> Shape:
    limit = miter_limit if miter_limit is not None else DEFAULT_SETTINGS.miter_limit
    result = offset(shape, distance, limit)
    if len(result.segments) < 3:
        return shape
    shape.winding = result.winding
    shape.set_points(result.points)
    return shape


def _rings(shape: Shape, distance: float, count: int, miter_limit: Optional[float],
           include_original: bool) -> List[Shape]:
    limit = miter_limit if miter_limit is not None else DEFAULT_SETTINGS.miter_limit
    rings = [shape] if include_original else []
    current = shape
    for _ in range(count):
        nxt = offset(current, distance, limit)
        if len(nxt.segments) < 3:
            break
        rings.append(nxt)
        current = nxt
    if not include_original:
        shape.ephemeral = True
    return rings


class ShapeContext:
    """Fluent wrapper around a single ``Shape``."""

    def __init__(self, shape: Shape):
        self._shape = shape

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def points(self) -> PointsView:
        verts = self._shape.vertices
        return PointsView(verts, [self._shape] * len(verts))

    @property
    def lines(self) -> LinesView:
        segs = self._shape.segments
        return LinesView(segs, [self._shape] * len(segs))

    @property
    def vertices(self) -> List[Vertex]:
        return self._shape.vertices

    @property
    def segments(self) -> List[Segment]:
        return self._shape.segments

    @property
    def winding(self) -> str:
        return self._shape.winding

    def centroid(self) -> Point:
        return self._shape.centroid()

    def area(self) -> float:
        return self._shape.area()

    def bounding_box(self) -> BoundingBox:
        return self._shape.bounding_box()

    ## placement and transforms
    ## ------------------------

    def move_to(self, x, y=None) -> 'ShapeContext':
        target = as_point((x, y)) if y is not None else as_point(x)
        self._shape.move_to(target)
        return self

    def xy(self, x: float, y: float) -> 'ShapeContext':
        return self.move_to(x, y)

    def x(self, value: float) -> 'ShapeContext':
        return self.move_to(value, self._shape.centroid().y)

    def y(self, value: float) -> 'ShapeContext':
        return self.move_to(self._shape.centroid().x, value)

    def translate(self, dx: float, dy: float = 0.0) -> 'ShapeContext':
        self._shape.translate(dx, dy)
        return self

    def scale(self, factor: float, factor_y: Optional[float] = None) -> 'ShapeContext':
        self._shape.scale(factor, factor_y)
        return self

    def scale_x(self, factor: float) -> 'ShapeContext':
        self._shape.scale(factor, 1.0)
        return self

    def scale_y(self, factor: float) -> 'ShapeContext':
        self._shape.scale(1.0, factor)
        return self

    def rotate(self, degrees: float) -> 'ShapeContext':
        self._shape.rotate(math.radians(degrees))
        return self

    def reverse(self) -> 'ShapeContext':
        self._shape.reverse()
        return self

    ## lifecycle and styling
    ## ---------------------

    def trace(self) -> 'ShapeContext':
        self._shape.ephemeral = False
        return self

    def ephemeral(self) -> 'ShapeContext':
        self._shape.ephemeral = True
        return self

    def color(self, value) -> 'ShapeContext':
        self._shape.color = pull(value)
        return self

    def group(self, tag: str) -> 'ShapeContext':
        self._shape.group = tag
        return self

    ## derived geometry
    ## ----------------

    def clone(self, n: int = 1, x: float = 0.0, y: float = 0.0):
        """Replicate into a ``CloneSystem`` of ``n + 1`` members."""
        from patterncad.systems.clone import CloneSystem

        return CloneSystem(self._shape, n, x, y)

    def offset(self, distance: float, count: int = 0, miter_limit: Optional[float] = None,
               include_original: bool = False):
        """Offset the boundary.

        With ``count == 0`` the shape is modified in place and this
        context is returned; otherwise a ``ShapesView`` of ``count``
        successive rings is returned.
        """
        if count > 0:
            return ShapesView(_rings(self._shape, distance, count, miter_limit,
                                     include_original))
        _offset_in_place(self._shape, distance, miter_limit)
        return self

    def expand(self, distance: float, count: int = 0, miter_limit: Optional[float] = None,
               include_original: bool = False):
        return self.offset(abs(distance), count, miter_limit, include_original)

    def inset(self, distance: float, count: int = 0, miter_limit: Optional[float] = None):
        return self.offset(-abs(distance), count, miter_limit)

    def round(self, radius: float, segments: int = 0) -> 'ShapeContext':
        round_corners(self._shape, radius, None, segments)
        return self

    def bbox(self) -> 'ShapeContext':
        """Ephemeral bounding rectangle; the shape itself is untouched."""
        rect = _rect_shape(self._shape.bounding_box())
        rect.ephemeral = True
        return ShapeContext(rect)

    def explode(self) -> ShapesView:
        """Every edge as an independent two-point path; the source becomes ephemeral."""
        self._shape.ephemeral = True
        paths = []
        for seg in explode(self._shape):
            s = Shape([seg], self._shape.winding, open=True)
            s.color = self._shape.color
            s.group = self._shape.group
            paths.append(s)
        return ShapesView(paths)

    def collapse(self) -> 'PointContext':
        """The centroid as a point; the source becomes ephemeral."""
        self._shape.ephemeral = True
        return PointContext(self._shape.centroid(), self._shape)

    def __repr__(self):
        return f"{type(self).__name__}({self._shape!r})"


class PathContext(ShapeContext):
    """Context for an open (or closed) polyline rendered as strokes."""

    def __init__(self, shape: Union[Shape, Sequence[Segment]]):
        if not isinstance(shape, Shape):
            shape = Shape(list(shape), open=True)
        super().__init__(shape)

    @staticmethod
    def from_points(points: Sequence[PointLike]) -> 'PathContext':
        return PathContext(Shape.open_path(points))

    @property
    def length(self) -> float:
        return self._shape.path_length


class PointContext:
    """A single position, e.g. a collapsed shape's centroid."""

    def __init__(self, position: PointLike, source: Optional[Shape] = None):
        self._position = as_point(position)
        self._source = source

    @property
    def position(self) -> Point:
        return self._position

    @property
    def x(self) -> float:
        return self._position.x

    @property
    def y(self) -> float:
        return self._position.y

    @property
    def source(self) -> Optional[Shape]:
        return self._source

    def expand_to_circle(self, radius: float, segments: Optional[int] = None) -> ShapeContext:
        from patterncad.shapes import circle_shape

        return ShapeContext(circle_shape(radius, segments or DEFAULT_SETTINGS.circle_segments,
                                         self._position))

    def place(self, template) -> ShapeContext:
        return ShapeContext(place_clones(shape_of(template), [self._position])[0])

    def __repr__(self):
        return f"PointContext({self._position.x:g}, {self._position.y:g})"
