## vertex/edge graph extracted from a shape
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

"""Shape systems: a shape's vertices as placement nodes.

The source shape becomes ephemeral and a private clone is kept as
scaffold.  Nodes are the clone's vertices, or, with ``subdivide=n``,
the vertices plus ``n - 1`` evenly spaced points on every edge.  Edges
connect consecutive nodes cyclically.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from patterncad.contexts import LinesView, PointContext, ShapeContext, shape_of
from patterncad.geom import Point
from patterncad.poly import BoundingBox, Shape
from patterncad.systems.base import BaseSystem

logger = logging.getLogger(__name__)

__all__ = ['ShapeSystem']


class ShapeSystem(BaseSystem):

    def __init__(self, source, include_center: bool = False, subdivide: int = 0):
        super().__init__()
        shape = shape_of(source)
        shape.ephemeral = True
        self._source = shape.clone()
        self._source.ephemeral = True
        nodes: List[Point] = []
        if subdivide and subdivide > 1:
            for seg in self._source.segments:
                nodes.append(seg.start.position)
                nodes.extend(seg.point_at(k / subdivide) for k in range(1, subdivide))
        else:
            nodes = self._source.points
        self._nodes = nodes
        self._center: Optional[Point] = self._source.centroid() if include_center else None
        self._edges: List[Shape] = []
        n = len(nodes)
        if n >= 2:
            for i in range(n):
                a = nodes[i]
                b = nodes[(i + 1) % n]
                if a.distance_to(b) > 0:
                    edge = Shape.open_path([a, b])
                    edge.ephemeral = True
                    self._edges.append(edge)

    def _node_positions(self) -> List[Point]:
        nodes = list(self._nodes)
        if self._center is not None:
            nodes.append(self._center)
        return nodes

    def _structure(self) -> List[Shape]:
        return [self._source]

    @property
    def edges(self) -> LinesView:
        return LinesView([e.segments[0] for e in self._edges])

    @property
    def center(self) -> Optional[PointContext]:
        if self._center is None:
            return None
        return PointContext(self._center, self._source)

    @property
    def source(self) -> ShapeContext:
        return ShapeContext(self._source)

    def bbox(self) -> BoundingBox:
        return self._source.bounding_box()

    def _filter_structure(self, boundary: Shape) -> None:
        if self._center is not None and not boundary.contains_point(self._center):
            self._center = None
        self._edges = [e for e in self._edges
                       if boundary.contains_point(e.segments[0].midpoint)]

    def scale(self, factor: float) -> 'ShapeSystem':
        c = self._pivot()
        super().scale(factor)
        for e in self._edges:
            e.scale(factor, pivot=c)
        if self._center is not None:
            self._center = c + (self._center - c) * factor
        return self

    def rotate(self, degrees: float) -> 'ShapeSystem':
        c = self._pivot()
        super().rotate(degrees)
        a = math.radians(degrees)
        for e in self._edges:
            e.rotate(a, pivot=c)
        if self._center is not None:
            self._center = self._center.rotate(a, c)
        return self
