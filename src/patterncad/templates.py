## quilt block templates
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

"""Traditional quilt blocks built from squares, half-square triangles
and flying-geese units.

A block is a 2x2 or 3x3 grid of cells listed top row first.  Every
piece carries the group tag ``light`` or ``dark`` so the two fabrics
can be colored or exported on separate layers.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List

from patterncad.contexts import ShapesView
from patterncad.errors import unknown_name
from patterncad.geom import Point
from patterncad.poly import Shape

logger = logging.getLogger(__name__)

__all__ = [
    'Cell',
    'BlockTemplate',
    'BLOCKS',
    'SHORTCUTS',
    'block_names',
    'get_block',
    'build_block',
    'quilt',
]

LIGHT = 'light'
DARK = 'dark'

CELL_TYPES = ('square', 'hst', 'flying_geese')


@dataclass(frozen=True)
class Cell:
    type: str
    rotation: int = 0
    group: str = LIGHT


@dataclass(frozen=True)
class BlockTemplate:
    name: str
    grid: int
    cells: List[List[Cell]]


def _hst(rotation):
    return Cell('hst', rotation)


def _fg(rotation):
    return Cell('flying_geese', rotation)


L = Cell('square', 0, LIGHT)
D = Cell('square', 0, DARK)

BLOCKS: Dict[str, BlockTemplate] = {
    'pinwheel': BlockTemplate('pinwheel', 2, [
        [_hst(90), _hst(180)],
        [_hst(0), _hst(270)],
    ]),
    'brokenDishes': BlockTemplate('brokenDishes', 2, [
        [_hst(0), _hst(270)],
        [_hst(90), _hst(180)],
    ]),
    'bowTie': BlockTemplate('bowTie', 2, [
        [_hst(0), _hst(0)],
        [_hst(180), _hst(180)],
    ]),
    'dutchmansPuzzle': BlockTemplate('dutchmansPuzzle', 2, [
        [_fg(270), _fg(0)],
        [_fg(180), _fg(90)],
    ]),
    'friendshipStar': BlockTemplate('friendshipStar', 3, [
        [L, _hst(180), L],
        [_hst(90), D, _hst(270)],
        [L, _hst(0), L],
    ]),
    'shooFly': BlockTemplate('shooFly', 3, [
        [_hst(180), L, _hst(270)],
        [L, D, L],
        [_hst(90), L, _hst(0)],
    ]),
    'sawtoothStar': BlockTemplate('sawtoothStar', 3, [
        [L, _fg(270), L],
        [_fg(180), D, _fg(0)],
        [L, _fg(90), L],
    ]),
}

SHORTCUTS = {
    'PW': 'pinwheel',
    'BD': 'brokenDishes',
    'FS': 'friendshipStar',
    'SF': 'shooFly',
    'BT': 'bowTie',
    'DP': 'dutchmansPuzzle',
    'SS': 'sawtoothStar',
}


def block_names() -> List[str]:
    return sorted(BLOCKS)


def get_block(name: str) -> BlockTemplate:
    """Look up a block by name or two-letter shortcut."""
    key = SHORTCUTS.get(name, name)
    if key not in BLOCKS:
        raise unknown_name('quilt block', name, block_names() + sorted(SHORTCUTS))
    return BLOCKS[key]


## cell pieces
## -----------

def _corners(x, y, s):
    return {
        'tl': Point(x, y + s), 'tr': Point(x + s, y + s),
        'bl': Point(x, y), 'br': Point(x + s, y),
        'tm': Point(x + s / 2, y + s), 'bm': Point(x + s / 2, y),
        'lm': Point(x, y + s / 2), 'rm': Point(x + s, y + s / 2),
    }


# (dark, light) triangles per rotation
_HST = {
    0: (('tl', 'tr', 'bl'), ('tr', 'br', 'bl')),
    90: (('tl', 'tr', 'br'), ('tl', 'br', 'bl')),
    180: (('tr', 'br', 'bl'), ('tl', 'tr', 'bl')),
    270: (('tl', 'br', 'bl'), ('tl', 'tr', 'br')),
}

# (goose, sky, sky) per rotation
_GEESE = {
    0: (('tl', 'rm', 'bl'), ('tl', 'tr', 'rm'), ('rm', 'br', 'bl')),
    90: (('tl', 'tr', 'bm'), ('tl', 'bm', 'bl'), ('tr', 'br', 'bm')),
    180: (('lm', 'tr', 'br'), ('tl', 'tr', 'lm'), ('lm', 'br', 'bl')),
    270: (('tm', 'bl', 'br'), ('tl', 'tm', 'bl'), ('tm', 'tr', 'br')),
}


def _piece(corners, names, group) -> Shape:
    shape = Shape.from_points([corners[n] for n in names])
    shape.group = group
    return shape


def cell_pieces(cell: Cell, x: float, y: float, size: float) -> List[Shape]:
    """Shapes for one cell whose lower-left corner is ``(x, y)``."""
    c = _corners(x, y, size)
    if cell.type == 'square':
        return [_piece(c, ('bl', 'br', 'tr', 'tl'), cell.group)]
    if cell.type == 'hst':
        dark, light = _HST[cell.rotation % 360]
        return [_piece(c, dark, DARK), _piece(c, light, LIGHT)]
    if cell.type == 'flying_geese':
        goose, sky1, sky2 = _GEESE[cell.rotation % 360]
        return [_piece(c, goose, DARK), _piece(c, sky1, LIGHT), _piece(c, sky2, LIGHT)]
    raise unknown_name('cell type', cell.type, CELL_TYPES)


def build_block(template, x: float = 0.0, y: float = 0.0,
                size: float = 120.0) -> List[Shape]:
    """Pieces of one block occupying ``[x, x+size] x [y, y+size]``."""
    if isinstance(template, str):
        template = get_block(template)
    cs = size / template.grid
    shapes = []
    for r, row in enumerate(template.cells):
        cy = y + (template.grid - 1 - r) * cs
        for col, cell in enumerate(row):
            shapes.extend(cell_pieces(cell, x + col * cs, cy, cs))
    return shapes


def quilt(name: str, block_size: float = 120.0, width: float = 480.0,
          height: float = 480.0) -> ShapesView:
    """Repeat one block over a ``width`` x ``height`` area."""
    template = get_block(name)
    cols = int(math.ceil(width / block_size))
    rows = int(math.ceil(height / block_size))
    shapes = []
    for row in range(rows):
        for col in range(cols):
            shapes.extend(build_block(template, col * block_size,
                                      row * block_size, block_size))
    logger.debug("quilt %s: %dx%d blocks, %d pieces", template.name,
                 rows, cols, len(shapes))
    return ShapesView(shapes)
