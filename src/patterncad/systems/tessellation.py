## algorithmic tessellations
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

"""Algorithmic tessellations over a bounding rectangle.

Every pattern produces the same three things: a node set, an edge set
(open two-point shapes) and a tile set.  Tiles and edges are scaffold
and start ephemeral.

``truchet``
    square tiles carrying a motif rotated by a seeded multiple of 90
    degrees.
``trihexagonal``
    hexagons with an outward triangle on every edge.
``penrose``
    Robinson-triangle deflation of a ten-triangle sun.
``custom``
    a user unit repeated on a square, hexagonal or triangular lattice.

Truchet, trihexagonal and custom edges connect node pairs closer than
1.5 times the sampled nearest-neighbour distance; Penrose edges are the
triangle sides.  Output depends only on the options, so equal seeds
give identical geometry.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from patterncad.config import TessellationOptions
from patterncad.contexts import LinesView, ShapesView, shape_of
from patterncad.geom import Point
from patterncad.poly import Shape
from patterncad.systems.base import BaseSystem

logger = logging.getLogger(__name__)

__all__ = ['Lcg', 'TessellationSystem', 'proximity_edges']

PHI = (1.0 + math.sqrt(5.0)) / 2.0
SQRT3 = math.sqrt(3.0)
ARC_SEGMENTS = 8
NODE_PLACES = 6
CHUNK_CELLS = 1 << 20


class Lcg:
    """Linear congruential generator with values in [0, 1]."""

    def __init__(self, seed: int = 1):
        self.state = seed & 0x7fffffff

    def next(self) -> float:
        self.state = (self.state * 1103515245 + 12345) & 0x7fffffff
        return self.state / 0x7fffffff

    __call__ = next


def _distances(xy: np.ndarray, start: int, stop: int) -> np.ndarray:
    """Distances from rows ``start:stop`` of ``xy`` to every row."""
    diff = xy[start:stop, None, :] - xy[None, :, :]
    return np.sqrt((diff ** 2).sum(axis=2))


def proximity_edges(points: List[Point], sample: int = 10, factor: float = 1.5,
                    chunk_cells: int = CHUNK_CELLS) -> List[Tuple[int, int]]:
    """Index pairs ``(i, j)``, ``i < j``, of nodes close enough to connect.

    The threshold is ``factor`` times the mean nearest-neighbour distance
    of the first ``sample`` nodes.  Pairs come out in row-major order.
    Distances are computed a block of rows at a time, each block holding
    about ``chunk_cells`` entries and never less than one row.
    """
    n = len(points)
    if n < 2:
        return []
    xy = np.array([(p.x, p.y) for p in points], dtype=float)
    sampled = _distances(xy, 0, min(sample, n))
    sampled[sampled <= 1e-9] = np.inf
    nearest = sampled.min(axis=1)
    nearest = nearest[np.isfinite(nearest)]
    if nearest.size == 0:
        return []
    threshold = float(nearest.mean()) * factor
    step = max(1, chunk_cells // n)
    pairs = []
    for start in range(0, n, step):
        stop = min(n, start + step)
        dist = _distances(xy, start, stop)
        close = (dist <= threshold) & (dist > 1e-9)
        # keep j > i only
        close &= np.arange(n)[None, :] > np.arange(start, stop)[:, None]
        rows, cols = np.nonzero(close)
        pairs.extend((int(i) + start, int(j)) for i, j in zip(rows, cols))
    return pairs


@dataclass
class _Robinson:
    kind: str   # 'red' (36 degree apex) or 'blue' (108 degree apex)
    a: Point
    b: Point
    c: Point

    def centroid(self) -> Point:
        return Point((self.a.x + self.b.x + self.c.x) / 3.0,
                     (self.a.y + self.b.y + self.c.y) / 3.0)


def _deflate(triangles: List[_Robinson]) -> List[_Robinson]:
    out = []
    for t in triangles:
        a, b, c = t.a, t.b, t.c
        if t.kind == 'red':
            p = a + (b - a) / PHI
            out.append(_Robinson('red', c, p, b))
            out.append(_Robinson('blue', p, c, a))
        else:
            q = b + (a - b) / PHI
            r = b + (c - b) / PHI
            out.append(_Robinson('blue', r, c, a))
            out.append(_Robinson('blue', q, r, b))
            out.append(_Robinson('red', r, q, a))
    return out


class TessellationSystem(BaseSystem):
    """Truchet, trihexagonal, Penrose or custom-unit tiling."""

    def __init__(self, options=None, **kwargs):
        super().__init__()
        if isinstance(options, TessellationOptions):
            self.options = options
        else:
            self.options = TessellationOptions.from_dict(options, **kwargs)
        self._tiles: List[Shape] = []
        self._edges: List[Shape] = []
        self._unit = None
        if self.options.pattern == 'custom':
            self._unit = shape_of(self.options.unit)
            self._unit.ephemeral = True
        getattr(self, '_build_' + self.options.pattern)()
        for s in self._tiles + self._edges:
            s.ephemeral = True
        logger.debug("%s tessellation: %d nodes, %d edges, %d tiles",
                     self.options.pattern, len(self._nodes),
                     len(self._edges), len(self._tiles))

    @property
    def pattern(self) -> str:
        return self.options.pattern

    ## helpers
    ## -------

    def _connect_by_proximity(self) -> None:
        for i, j in proximity_edges(self._nodes):
            self._edges.append(Shape.open_path([self._nodes[i], self._nodes[j]]))

    def _add_unique_nodes(self, points, seen: Dict[str, int]) -> None:
        for p in points:
            k = p.key(NODE_PLACES)
            if k not in seen:
                seen[k] = len(self._nodes)
                self._nodes.append(p)

    ## truchet
    ## -------

    def _truchet_tile(self, x: float, y: float, size: float) -> List[Shape]:
        variant = self.options.variant
        if variant == 'quarter-circles':
            r = size / 2.0
            arcs = []
            for cx, cy, start in ((x, y, 0.0), (x + size, y + size, math.pi)):
                pts = [Point(cx, cy) + Point.from_angle(start + (k / ARC_SEGMENTS) * math.pi / 2, r)
                       for k in range(ARC_SEGMENTS + 1)]
                arcs.append(Shape.open_path(pts))
            return arcs
        if variant == 'diagonal':
            d = size * 0.1 / math.sqrt(2.0)
            return [Shape.from_points([(x - d, y + d), (x + d, y - d),
                                       (x + size + d, y + size - d),
                                       (x + size - d, y + size + d)])]
        return [Shape.from_points([(x, y), (x + size, y), (x, y + size)])]

    def _build_truchet(self):
        o = self.options
        w, h = o.bounds
        size = o.tile_size
        cols = int(math.ceil(w / size))
        rows = int(math.ceil(h / size))
        rand = Lcg(o.seed)
        for row in range(rows + 1):
            for col in range(cols + 1):
                self._nodes.append(Point(col * size, row * size))
        for row in range(rows):
            for col in range(cols):
                x = col * size
                y = row * size
                turns = int(rand() * 4) % 4
                center = Point(x + size / 2.0, y + size / 2.0)
                for piece in self._truchet_tile(x, y, size):
                    if turns:
                        piece.rotate(turns * math.pi / 2, pivot=center)
                    self._tiles.append(piece)
        self._connect_by_proximity()

    ## trihexagonal
    ## ------------

    def _build_trihexagonal(self):
        o = self.options
        w, h = o.bounds
        spacing = o.spacing
        radius = spacing / 2.0
        horiz = spacing * SQRT3
        vert = spacing * 1.5
        cols = int(math.ceil(w / horiz)) + 1
        rows = int(math.ceil(h / vert)) + 1
        seen: Dict[str, int] = {}
        for row in range(rows):
            for col in range(cols):
                cx = col * horiz + (row % 2) * horiz / 2.0
                cy = row * vert
                if cx < -spacing or cx > w + spacing or cy < -spacing or cy > h + spacing:
                    continue
                center = Point(cx, cy)
                hexagon = Shape.regular_polygon(6, radius, center, math.pi / 6)
                self._tiles.append(hexagon)
                verts = hexagon.points
                self._add_unique_nodes(verts, seen)
                for i in range(6):
                    v1 = verts[i]
                    v2 = verts[(i + 1) % 6]
                    mid = v1.lerp(v2, 0.5)
                    peak = mid + (mid - center).normalize() * (radius * 0.866)
                    self._add_unique_nodes([peak], seen)
                    self._tiles.append(Shape.from_points([v1, peak, v2]))
        self._connect_by_proximity()

    ## penrose
    ## -------

    def _build_penrose(self):
        o = self.options
        w, h = o.bounds
        center = Point(w / 2.0, h / 2.0)
        radius = max(w, h) * 0.6
        triangles = []
        for i in range(10):
            b = center + Point.from_angle((2 * i - 1) * math.pi / 10, radius)
            c = center + Point.from_angle((2 * i + 1) * math.pi / 10, radius)
            if i % 2 == 0:
                b, c = c, b
            triangles.append(_Robinson('red', center, b, c))
        for _ in range(o.iterations):
            triangles = _deflate(triangles)
        triangles = [t for t in triangles
                     if 0 <= t.centroid().x <= w and 0 <= t.centroid().y <= h]
        seen: Dict[str, int] = {}
        edge_keys = set()
        for t in triangles:
            self._add_unique_nodes([t.a, t.b, t.c], seen)
            self._tiles.append(Shape.from_points([t.a, t.b, t.c]))
            for p, q in ((t.a, t.b), (t.b, t.c), (t.c, t.a)):
                kp = p.key(NODE_PLACES)
                kq = q.key(NODE_PLACES)
                key = (kp, kq) if kp <= kq else (kq, kp)
                if key not in edge_keys:
                    edge_keys.add(key)
                    self._edges.append(Shape.open_path([p, q]))
        logger.debug("penrose kept %d triangles after %d deflations",
                     len(triangles), o.iterations)

    ## custom
    ## ------

    def _custom_positions(self) -> List[Point]:
        o = self.options
        w, h = o.bounds
        s = o.spacing
        cols = int(math.ceil(w / s)) + 1
        rows = int(math.ceil(h / s)) + 1
        out = []
        for row in range(rows):
            for col in range(cols):
                if o.arrangement == 'hexagonal':
                    x = col * s * SQRT3 + (row % 2) * s * SQRT3 / 2.0
                    y = row * s * 0.75
                elif o.arrangement == 'triangular':
                    x = col * s / 2.0
                    y = row * s * SQRT3 / 2.0
                else:
                    x = col * s
                    y = row * s
                if x > w + s or y > h + s:
                    continue
                out.append(Point(x, y))
        return out

    def _build_custom(self):
        seen: Dict[str, int] = {}
        for p in self._custom_positions():
            tile = self._unit.clone()
            tile.move_to(p)
            self._tiles.append(tile)
            self._add_unique_nodes(tile.points, seen)
        self._connect_by_proximity()

    ## views
    ## -----

    def _structure(self) -> List[Shape]:
        return self._tiles + self._edges

    @property
    def edges(self) -> LinesView:
        return LinesView([e.segments[0] for e in self._edges])

    @property
    def edge_shapes(self) -> ShapesView:
        return ShapesView(self._edges)

    @property
    def tiles(self) -> ShapesView:
        return ShapesView(self._tiles)

    @property
    def shapes(self) -> ShapesView:
        if self._placements:
            return self.placements
        return ShapesView(self._tiles)

    def trace(self) -> 'TessellationSystem':
        """Make the edge set concrete; trace ``tiles`` separately."""
        self._traced = True
        for e in self._edges:
            e.ephemeral = False
        return self

    def _filter_structure(self, boundary: Shape) -> None:
        self._tiles = [t for t in self._tiles if boundary.contains_point(t.centroid())]
        self._edges = [e for e in self._edges
                       if boundary.contains_point(e.segments[0].midpoint)]
