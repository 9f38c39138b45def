## path collector: the rendering boundary
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

"""Collect concrete geometry as renderer-neutral path commands.

A ``Collector`` accepts shapes, contexts, views and systems, drops
everything ephemeral, checks coordinates for NaN/Infinity and records
one ``PathCommands`` per shape.  Commands are tuples::

    ('M', x, y)    move to
    ('L', x, y)    line to
    ('Z',)         close the current subpath

Subclasses override ``_emit`` to write each recorded path to a concrete
backend; see ``patterncad.ezdxf_drawable``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from patterncad.config import DEFAULT_SETTINGS, Settings
from patterncad.geom import Point
from patterncad.poly import BoundingBox, Shape, check_finite

logger = logging.getLogger(__name__)

__all__ = ['PathCommands', 'Collector', 'AUTO_COLOR']

AUTO_COLOR = 'auto'


@dataclass
class PathCommands:
    commands: List[Tuple] = field(default_factory=list)
    winding: str = 'ccw'
    color: Optional[str] = None
    group: Optional[str] = None
    closed: bool = True

    def points(self) -> List[Point]:
        return [Point(c[1], c[2]) for c in self.commands if c[0] != 'Z']

    def subpaths(self) -> List[List[Point]]:
        """Point runs split at every move command."""
        runs: List[List[Point]] = []
        for c in self.commands:
            if c[0] == 'M':
                runs.append([Point(c[1], c[2])])
            elif c[0] == 'L':
                runs[-1].append(Point(c[1], c[2]))
        return runs


def shape_commands(shape: Shape) -> List[Tuple]:
    """Move/line/close commands tracing ``shape``'s segments."""
    cmds: List[Tuple] = []
    prev_end = None
    for seg in shape.segments:
        if prev_end is not seg.start:
            cmds.append(('M', seg.start.x, seg.start.y))
        cmds.append(('L', seg.end.x, seg.end.y))
        prev_end = seg.end
    if not shape.open and cmds:
        # the last line returns to the start; close replaces it
        cmds[-1] = ('Z',)
    return cmds


class Collector:
    """Accumulates ``PathCommands`` for every concrete shape it is given."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or DEFAULT_SETTINGS
        self.palette = list(self.settings.palette)
        self._color_index = 0
        self._paths: List[PathCommands] = []

    def next_color(self) -> str:
        color = self.palette[self._color_index % len(self.palette)]
        self._color_index += 1
        return color

    def _resolve_color(self, color) -> Optional[str]:
        if color == AUTO_COLOR:
            return self.next_color()
        if color is None:
            return self.settings.default_color
        return color

    def add(self, shape: Shape) -> Optional[PathCommands]:
        """Record ``shape`` unless it is ephemeral or empty."""
        if shape.ephemeral:
            return None
        if not shape.segments:
            logger.debug("skipping empty shape %r", shape)
            return None
        check_finite(shape, 'render')
        record = PathCommands(commands=shape_commands(shape),
                              winding=shape.winding,
                              color=self._resolve_color(shape.color),
                              group=shape.group,
                              closed=not shape.open)
        self._paths.append(record)
        self._emit(record)
        return record

    def _emit(self, record: PathCommands) -> None:
        """Backend hook, called once per recorded path."""

    def collect(self, source) -> 'Collector':
        """Add a shape, context, view, system or iterable of those."""
        for shape in self._shapes_of(source):
            self.add(shape)
        return self

    def _shapes_of(self, source) -> List[Shape]:
        if isinstance(source, Shape):
            return [source]
        render_shapes = getattr(source, 'render_shapes', None)
        if callable(render_shapes):
            return list(render_shapes())
        shape = getattr(source, 'shape', None)
        if isinstance(shape, Shape):
            return [shape]
        shapes = getattr(source, 'shapes', None)
        if shapes is not None and not callable(shapes):
            return list(shapes)
        try:
            items = iter(source)
        except TypeError:
            raise ValueError(f'cannot render {source!r}')
        out: List[Shape] = []
        for item in items:
            out.extend(self._shapes_of(item))
        return out

    @property
    def commands(self) -> List[PathCommands]:
        return list(self._paths)

    def __len__(self):
        return len(self._paths)

    def bounds(self) -> Optional[BoundingBox]:
        return BoundingBox.of_points(p for rec in self._paths for p in rec.points())
