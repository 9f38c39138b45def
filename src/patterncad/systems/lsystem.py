## string-rewriting fractal curves
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

"""L-systems: string rewriting plus a turtle interpreter.

Turtle commands::

    F, G   draw one step forward
    f      move one step without drawing
    + -    turn by +angle / -angle (counter-clockwise positive)
    |      turn around
    [ ]    push / pop position and heading; a pop records a branch tip

Other characters only take part in rewriting.  When the walk ends
within 1% of a step from where it started, a closing segment is added.
"""

from __future__ import annotations

import logging
import math
from typing import List, Mapping, Optional

from patterncad.config import LSystemOptions
from patterncad.contexts import LinesView, PathContext
from patterncad.geom import Point, epsilon
from patterncad.poly import Segment, Shape, Vertex
from patterncad.systems.base import BaseSystem, NodesView

logger = logging.getLogger(__name__)

__all__ = ['LSystem']


class LSystem(BaseSystem):
    """Fractal curve generated from an axiom and production rules."""

    def __init__(self, options=None, **kwargs):
        super().__init__()
        if isinstance(options, LSystemOptions):
            self.options = options
        else:
            self.options = LSystemOptions.from_dict(options, **kwargs)
        o = self.options
        self.string = LSystem.expand(o.axiom, o.rules, o.iterations)
        self._endpoints: List[Point] = []
        self._path = Shape([], open=True)
        self._interpret(self.string)
        self._path.ephemeral = True
        logger.debug("L-system: %d symbols, %d segments, %d nodes",
                     len(self.string), len(self._path.segments), len(self._nodes))

    @staticmethod
    def expand(axiom: str, rules: Optional[Mapping[str, str]] = None,
               iterations: int = 1) -> str:
        """Apply ``rules`` to ``axiom`` ``iterations`` times."""
        rules = rules or {}
        s = axiom
        for _ in range(iterations):
            s = ''.join(rules.get(ch, ch) for ch in s)
        return s

    def _interpret(self, commands: str) -> None:
        o = self.options
        origin = Point(*o.origin)
        step = o.length
        turn = math.radians(o.angle)
        pos = origin
        heading = math.radians(o.heading)
        stack = []
        segments: List[Segment] = []
        tail: Optional[Vertex] = None
        self._nodes = [pos]
        for ch in commands:
            if ch in 'FG':
                nxt = pos + Point.from_angle(heading, step)
                start = tail if tail is not None else Vertex(pos.x, pos.y)
                tail = Vertex(nxt.x, nxt.y)
                segments.append(Segment(start, tail))
                pos = nxt
                self._nodes.append(pos)
            elif ch == 'f':
                pos = pos + Point.from_angle(heading, step)
                tail = None
                self._nodes.append(pos)
            elif ch == '+':
                heading += turn
            elif ch == '-':
                heading -= turn
            elif ch == '|':
                heading += math.pi
            elif ch == '[':
                stack.append((pos, heading))
            elif ch == ']':
                if stack:
                    self._endpoints.append(pos)
                    pos, heading = stack.pop()
                    tail = None
        gap = pos.distance_to(origin)
        if segments and epsilon < gap < step * 0.01:
            start = tail if tail is not None else Vertex(pos.x, pos.y)
            segments.append(Segment(start, Vertex(origin.x, origin.y)))
            self._nodes.append(origin)
        self._endpoints.append(pos)
        self._path = Shape(segments, open=True)

    ## views
    ## -----

    def _structure(self) -> List[Shape]:
        return [self._path]

    @property
    def path(self) -> PathContext:
        return PathContext(self._path)

    @property
    def segments(self) -> LinesView:
        segs = self._path.segments
        return LinesView(segs, [self._path] * len(segs))

    @property
    def endpoints(self) -> NodesView:
        return NodesView(self, [Vertex(p.x, p.y) for p in self._endpoints])

    def _filter_structure(self, boundary: Shape) -> None:
        kept = [s for s in self._path.segments if boundary.contains_point(s.midpoint)]
        ephemeral = self._path.ephemeral
        self._path = Shape(kept, open=True)
        self._path.ephemeral = ephemeral
        self._endpoints = [p for p in self._endpoints if boundary.contains_point(p)]

    def scale(self, factor: float) -> 'LSystem':
        c = self._pivot()
        super().scale(factor)
        self._endpoints = [c + (p - c) * factor for p in self._endpoints]
        return self

    def rotate(self, degrees: float) -> 'LSystem':
        c = self._pivot()
        super().rotate(degrees)
        a = math.radians(degrees)
        self._endpoints = [p.rotate(a, c) for p in self._endpoints]
        return self
