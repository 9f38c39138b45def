## regular lattice systems
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

"""Lattice systems.

``GridSystem`` builds ``rows x cols`` cells of one of four kinds:

``square``
    axis-aligned rectangles; nodes are the ``(rows+1) x (cols+1)`` lattice
    intersections.
``hexagonal``
    regular hexagons, ``pointy`` (rotated 30 degrees, alternate rows
    shifted) or ``flat`` (alternate columns shifted); nodes at centers.
``triangular``
    alternating up/down triangles by ``(row + col) % 2``; nodes at
    triangle centroids.
``brick``
    rectangles with odd rows shifted by ``brick_offset * width``; nodes
    at brick centers.

Cells start ephemeral; ``trace()`` turns them into output.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List

from patterncad.config import GridOptions
from patterncad.contexts import LinesView, ShapesView
from patterncad.geom import Point
from patterncad.poly import Segment, Shape
from patterncad.systems.base import BaseSystem

logger = logging.getLogger(__name__)

__all__ = ['GridCell', 'GridSystem']

SQRT3 = math.sqrt(3.0)


@dataclass
class GridCell:
    shape: Shape
    row: int
    col: int


class GridSystem(BaseSystem):
    """Regular lattice of cells and nodes."""

    def __init__(self, options=None, **kwargs):
        super().__init__()
        if isinstance(options, GridOptions):
            self.options = options
        else:
            self.options = GridOptions.from_dict(options, **kwargs)
        self._cells: List[GridCell] = []
        builder = {
            'square': self._build_square,
            'hexagonal': self._build_hexagonal,
            'triangular': self._build_triangular,
            'brick': self._build_brick,
        }[self.options.type]
        builder()
        logger.debug("%s grid: %d nodes, %d cells", self.options.type,
                     len(self._nodes), len(self._cells))

    @classmethod
    def create(cls, options=None, **kwargs) -> 'GridSystem':
        return cls(options, **kwargs)

    @property
    def type(self) -> str:
        return self.options.type

    ## builders
    ## --------

    def _add_cell(self, shape: Shape, row: int, col: int) -> None:
        shape.ephemeral = True
        self._cells.append(GridCell(shape, row, col))

    def _build_square(self):
        o = self.options
        sx, sy = o.spacing
        ox, oy = o.offset
        for row in range(o.rows + 1):
            for col in range(o.cols + 1):
                self._nodes.append(Point(ox + col * sx, oy + row * sy))
        for row in range(o.rows):
            for col in range(o.cols):
                x = ox + col * sx
                y = oy + row * sy
                self._add_cell(Shape.from_points([(x, y), (x + sx, y),
                                                  (x + sx, y + sy), (x, y + sy)]),
                               row, col)

    def _build_hexagonal(self):
        o = self.options
        s = o.spacing[0]
        ox, oy = o.offset
        pointy = o.orientation == 'pointy'
        hex_w = s * SQRT3 if pointy else s * 2.0
        hex_h = s * 2.0 if pointy else s * SQRT3
        vert = hex_h * 0.75 if pointy else hex_h
        horiz = hex_w if pointy else hex_w * 0.75
        rotation = math.pi / 6 if pointy else 0.0
        for row in range(o.rows):
            for col in range(o.cols):
                if pointy:
                    x = ox + col * horiz + (row % 2) * hex_w / 2.0
                    y = oy + row * vert
                else:
                    x = ox + col * horiz
                    y = oy + row * vert + (col % 2) * hex_h / 2.0
                center = Point(x, y)
                self._nodes.append(center)
                self._add_cell(Shape.regular_polygon(6, s, center, rotation), row, col)

    def _build_triangular(self):
        o = self.options
        s = o.spacing[0]
        h = s * SQRT3 / 2.0
        ox, oy = o.offset
        for row in range(o.rows):
            for col in range(o.cols):
                x = ox + col * s / 2.0
                y = oy + row * h
                if (row + col) % 2 == 0:
                    pts = [(x, y), (x + s, y), (x + s / 2.0, y + h)]
                else:
                    pts = [(x, y + h), (x + s / 2.0, y), (x + s, y + h)]
                tri = Shape.from_points(pts)
                self._nodes.append(tri.centroid())
                self._add_cell(tri, row, col)

    def _build_brick(self):
        o = self.options
        w, h = o.spacing
        ox, oy = o.offset
        for row in range(o.rows):
            shift = (row % 2) * w * o.brick_offset
            for col in range(o.cols):
                x = ox + col * w + shift
                y = oy + row * h
                self._nodes.append(Point(x + w / 2.0, y + h / 2.0))
                self._add_cell(Shape.from_points([(x, y), (x + w, y),
                                                  (x + w, y + h), (x, y + h)]),
                               row, col)

    ## views
    ## -----

    def _structure(self) -> List[Shape]:
        return [c.shape for c in self._cells]

    @property
    def cells(self) -> ShapesView:
        """Live view of the cell shapes."""
        return ShapesView(self._structure())

    tiles = cells

    @property
    def grid_cells(self) -> List[GridCell]:
        return list(self._cells)

    def _unique_edges(self) -> List[Segment]:
        edges: Dict[str, Segment] = {}
        for cell in self._cells:
            for seg in cell.shape.segments:
                a = seg.start.position
                b = seg.end.position
                ka = a.key(6)
                kb = b.key(6)
                key = f"{ka}-{kb}" if ka <= kb else f"{kb}-{ka}"
                if key not in edges:
                    edges[key] = Segment.between(a, b)
        return list(edges.values())

    @property
    def rows(self) -> LinesView:
        """Cell edges that are at least as wide as they are tall."""
        return LinesView([e for e in self._unique_edges()
                          if abs(e.vector.x) >= abs(e.vector.y)])

    @property
    def columns(self) -> LinesView:
        """Cell edges that are taller than they are wide."""
        return LinesView([e for e in self._unique_edges()
                          if abs(e.vector.x) < abs(e.vector.y)])

    def _filter_structure(self, boundary: Shape) -> None:
        self._cells = [c for c in self._cells
                       if boundary.contains_point(c.shape.centroid())]
