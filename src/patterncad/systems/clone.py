## linear/nested replication of shapes
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

"""Clone systems.

``CloneSystem(source, count, dx, dy)`` holds ``count + 1`` copies of a
source shape, member *i* translated by ``i * (dx, dy)``.  Cloning a
clone system replicates all of its members as one block (giving a 2D
array) and stops the inner system from rendering, so nothing is drawn
twice.  Selections made with ``every``, ``slice`` and ``at`` share
the member shapes and hand placements and masks back to the system
they came from.  Nodes sit at member centroids; the optional path connects them
in order (or as a grid for nested systems) and is drawn after
``trace()``.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from patterncad.contexts import LinesView, ShapesView, polar_positions, shape_of
from patterncad.geom import Point, PointLike
from patterncad.poly import BoundingBox, Shape
from patterncad.systems.base import BaseSystem

logger = logging.getLogger(__name__)

__all__ = ['CloneSystem']


class CloneSystem(BaseSystem):
    """``count + 1`` independent copies of a shape or of another clone system."""

    def __init__(self, source, count: int = 1, dx: float = 0.0, dy: float = 0.0):
        super().__init__()
        if count < 0:
            raise ValueError(f'clone count must be non-negative, got {count}')
        if isinstance(source, CloneSystem):
            source._ephemeral = True
            template = source.members
            self._block: Optional[int] = len(template)
        else:
            shape = shape_of(source)
            shape.ephemeral = True
            template = [shape]
            self._block = None
        self._count = count
        self._members: List[Shape] = []
        for i in range(count + 1):
            for s in template:
                c = s.clone()
                c.ephemeral = False
                c.translate(dx * i, dy * i)
                self._members.append(c)
        self._path: List[Shape] = []
        self._root: Optional['CloneSystem'] = None
        self._rebuild_path()
        logger.debug("clone system with %d members", len(self._members))

    @classmethod
    def _view(cls, members: Sequence[Shape], root: Optional['CloneSystem'] = None) -> 'CloneSystem':
        """A system sharing ``members`` (and placements) with ``root``."""
        view = cls.__new__(cls)
        BaseSystem.__init__(view)
        view._root = root
        view._block = None
        view._count = max(0, len(members) - 1)
        view._members = list(members)
        view._path = []
        view._rebuild_path()
        return view

    ## geometry
    ## --------

    @property
    def members(self) -> List[Shape]:
        return list(self._members)

    @property
    def shapes(self) -> ShapesView:
        """Live view of the member shapes."""
        return ShapesView(self._members)

    def __len__(self):
        return len(self._members)

    def _node_positions(self) -> List[Point]:
        return [s.centroid() for s in self._members]

    def _structure(self) -> List[Shape]:
        return self._path

    @property
    def path(self) -> LinesView:
        return LinesView([s.segments[0] for s in self._path])

    def _rebuild_path(self) -> None:
        nodes = self._node_positions()
        pairs = []
        block = self._block
        if block and len(nodes) == block * (self._count + 1):
            copies = self._count + 1
            for copy in range(copies):
                base = copy * block
                pairs.extend((base + i, base + i + 1) for i in range(block - 1))
            for i in range(block):
                pairs.extend((copy * block + i, (copy + 1) * block + i)
                             for copy in range(copies - 1))
        else:
            pairs = [(i, i + 1) for i in range(len(nodes) - 1)]
        path = []
        for a, b in pairs:
            if nodes[a].distance_to(nodes[b]) == 0:
                continue
            seg = Shape.open_path([nodes[a], nodes[b]])
            seg.ephemeral = not self._traced
            path.append(seg)
        self._path = path

    ## selection
    ## ---------

    def every(self, n: int, offset: int = 0) -> 'CloneSystem':
        if n < 1:
            return CloneSystem._view([], self._owner())
        return CloneSystem._view(self._members[max(0, offset)::n], self._owner())

    def slice(self, start: int = 0, end: Optional[int] = None) -> 'CloneSystem':
        return CloneSystem._view(self._members[start:end], self._owner())

    def at(self, *indices) -> 'CloneSystem':
        return CloneSystem._view(self.shapes.at(*indices).shapes, self._owner())

    def _owner(self) -> 'CloneSystem':
        return self._root if self._root is not None else self

    def clone(self, n: int = 1, x: float = 0.0, y: float = 0.0) -> 'CloneSystem':
        """Replicate the whole system; this system stops rendering."""
        return CloneSystem(self, n, x, y)

    ## layout
    ## ------

    def spread(self, dx: float, dy: float = 0.0) -> 'CloneSystem':
        """Re-space members linearly from the first member."""
        if not self._members:
            return self
        first = self._members[0].centroid()
        for i, s in enumerate(self._members):
            s.move_to(Point(first.x + dx * i, first.y + dy * i))
        self._rebuild_path()
        return self

    def spread_polar(self, radius: float, arc=None, center: PointLike = (0, 0)) -> 'CloneSystem':
        """Distribute members around a circle; fewer than two members is a no-op."""
        n = len(self._members)
        if n < 2:
            return self
        for s, p in zip(self._members, polar_positions(n, radius, arc, center)):
            s.move_to(p)
        self._rebuild_path()
        return self

    def scale(self, factor: float, factor_y: Optional[float] = None) -> 'CloneSystem':
        """Scale each member (and placement) about its own centroid."""
        for s in self._members:
            s.scale(factor, factor_y)
        for pl in self._placements:
            pl.shape.scale(factor, factor_y)
        self._rebuild_path()
        return self

    def rotate(self, degrees: float) -> 'CloneSystem':
        """Rotate each member (and placement) about its own centroid."""
        a = math.radians(degrees)
        for s in self._members:
            s.rotate(a)
        for pl in self._placements:
            pl.shape.rotate(a)
        return self

    def translate(self, dx: float, dy: float = 0.0) -> 'CloneSystem':
        for s in self._members:
            s.translate(dx, dy)
        for pl in self._placements:
            pl.shape.translate(dx, dy)
            pl.position = pl.position + Point(dx, dy)
        self._rebuild_path()
        return self

    def color(self, value) -> 'CloneSystem':
        self.shapes.color(value)
        return self

    ## masking and rendering
    ## ---------------------

    def _add_placements(self, template: Shape, positions: Sequence[Point]) -> None:
        if self._root is None:
            super()._add_placements(template, positions)
            return
        root = self._root
        start = len(root._placements)
        root._add_placements(template, positions)
        self._placements.extend(root._placements[start:])

    def _discard(self, members: Sequence[Shape], placements: Sequence) -> None:
        gone = set(map(id, members))
        dropped = set(map(id, placements))
        self._members = [s for s in self._members if id(s) not in gone]
        self._placements = [pl for pl in self._placements if id(pl) not in dropped]

    def mask(self, boundary) -> 'CloneSystem':
        shape = shape_of(boundary)
        shape.ephemeral = True
        before = len(self._members)
        outside = [s for s in self._members if not shape.contains_point(s.centroid())]
        dropped = [pl for pl in self._placements if not shape.contains_point(pl.position)]
        self._discard(outside, dropped)
        self._path = [p for p in self._path
                      if shape.contains_point(p.segments[0].midpoint)]
        if self._root is not None:
            self._root._discard(outside, dropped)
            self._root._rebuild_path()
        logger.debug("mask kept %d of %d clones", len(self._members), before)
        return self

    def trace(self) -> 'CloneSystem':
        """Make members and the connecting path concrete."""
        super().trace()
        for s in self._members:
            s.ephemeral = False
        return self

    def render_shapes(self) -> List[Shape]:
        if self._ephemeral:
            return []
        out = [s for s in self._members if not s.ephemeral]
        out.extend(s for s in self._path if not s.ephemeral)
        out.extend(pl.shape for pl in self._placements if not pl.shape.ephemeral)
        return out

    def get_bounds(self) -> Optional[BoundingBox]:
        box = super().get_bounds()
        for s in self._members:
            if not s.segments:
                continue
            b = s.bounding_box()
            box = b if box is None else box.union(b)
        return box
