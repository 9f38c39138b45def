## common machinery for generative systems
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

"""Common machinery for generative systems.

A system owns three kinds of geometry:

* **nodes**: positions used as placement targets,
* **structure**: scaffold shapes (grid cells, tiles, paths, edges) that
  start ephemeral and become output only after ``trace()``,
* **placements**: concrete clones of a template stamped at nodes.

Rendering collects every non-ephemeral structure shape and placement;
a system that has itself been cloned renders nothing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from patterncad.contexts import PointsView, ShapesView, place_clones, shape_of
from patterncad.geom import Point, as_point
from patterncad.poly import BoundingBox, Shape, Vertex

logger = logging.getLogger(__name__)

__all__ = ['Placement', 'BaseSystem', 'NodesView']


@dataclass
class Placement:
    position: Point
    shape: Shape


class NodesView(PointsView):
    """Selection of system nodes; ``place`` stamps into the owning system."""

    def __init__(self, system: 'BaseSystem', vertices: Sequence[Vertex], owners=None):
        super().__init__(vertices, None)
        self._system = system

    def _derive(self, items, owners):
        return NodesView(self._system, items)

    def place(self, template) -> 'NodesView':
        self._system._add_placements(shape_of(template), self.positions)
        return self

    @property
    def system(self) -> 'BaseSystem':
        return self._system


class BaseSystem:
    """Shared placement, masking, transform and rendering behavior."""

    def __init__(self):
        self._nodes: List[Point] = []
        self._placements: List[Placement] = []
        self._traced = False
        self._ephemeral = False

    ## hooks
    ## -----

    def _structure(self) -> List[Shape]:
        """Scaffold shapes owned by the system."""
        return []

    def _filter_structure(self, boundary: Shape) -> None:
        """Drop scaffold geometry outside ``boundary``."""

    ## nodes and placements
    ## --------------------

    @property
    def nodes(self) -> NodesView:
        return NodesView(self, [Vertex(p.x, p.y) for p in self._node_positions()])

    def _node_positions(self) -> List[Point]:
        return list(self._nodes)

    def _add_placements(self, template: Shape, positions: Sequence[Point]) -> None:
        positions = list(positions)
        for p, shape in zip(positions, place_clones(template, positions)):
            self._placements.append(Placement(p, shape))

    def place(self, template):
        """Stamp a clone of ``template`` at every node; the template becomes ephemeral."""
        self._add_placements(shape_of(template), self._node_positions())
        return self

    def mask(self, boundary):
        """Remove nodes, placements and scaffold outside ``boundary``."""
        shape = shape_of(boundary)
        shape.ephemeral = True
        before = len(self._nodes)
        self._nodes = [p for p in self._nodes if shape.contains_point(p)]
        self._placements = [pl for pl in self._placements
                            if shape.contains_point(pl.position)]
        self._filter_structure(shape)
        logger.debug("mask kept %d of %d nodes", len(self._nodes), before)
        return self

    @property
    def placements(self) -> ShapesView:
        return ShapesView([pl.shape for pl in self._placements])

    @property
    def shapes(self) -> ShapesView:
        """Placed shapes, or the scaffold when nothing is placed."""
        if self._placements:
            return self.placements
        return ShapesView(self._structure())

    def __len__(self):
        return len(self.shapes)

    @property
    def length(self) -> int:
        return len(self)

    def every(self, n: int, offset: int = 0) -> ShapesView:
        return self.shapes.every(n, offset)

    def slice(self, start: int = 0, end: Optional[int] = None) -> ShapesView:
        return self.shapes.slice(start, end)

    ## transforms
    ## ----------

    def _pivot(self) -> Point:
        box = self.get_bounds()
        return box.center if box is not None else Point(0.0, 0.0)

    def scale(self, factor: float):
        """Scale the whole system about the center of its bounds."""
        c = self._pivot()
        self._nodes = [c + (p - c) * factor for p in self._nodes]
        for s in self._structure():
            s.scale(factor, pivot=c)
        for pl in self._placements:
            pl.shape.scale(factor, pivot=c)
            pl.position = c + (pl.position - c) * factor
        return self

    def rotate(self, degrees: float):
        """Rotate the whole system about the center of its bounds."""
        c = self._pivot()
        a = math.radians(degrees)
        self._nodes = [p.rotate(a, c) for p in self._nodes]
        for s in self._structure():
            s.rotate(a, pivot=c)
        for pl in self._placements:
            pl.shape.rotate(a, pivot=c)
            pl.position = pl.position.rotate(a, c)
        return self

    ## rendering
    ## ---------

    def trace(self):
        """Make the scaffold concrete."""
        self._traced = True
        for s in self._structure():
            s.ephemeral = False
        return self

    @property
    def traced(self) -> bool:
        return self._traced

    @property
    def ephemeral(self) -> bool:
        return self._ephemeral

    def render_shapes(self) -> List[Shape]:
        """Concrete shapes this system contributes to output."""
        if self._ephemeral:
            return []
        out = [s for s in self._structure() if not s.ephemeral]
        out.extend(pl.shape for pl in self._placements if not pl.shape.ephemeral)
        return out

    def get_bounds(self) -> Optional[BoundingBox]:
        box = BoundingBox.of_points(self._node_positions())
        for s in list(self._structure()) + [pl.shape for pl in self._placements]:
            if not s.segments:
                continue
            b = s.bounding_box()
            box = b if box is None else box.union(b)
        return box

    def render(self, collector):
        """Add this system's output to ``collector``."""
        collector.collect(self)
        return collector
