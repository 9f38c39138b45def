## ezdxf-based DXF collector
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

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import ezdxf
from ezdxf import colors

from patterncad.config import Settings
from patterncad.drawable import Collector, PathCommands

logger = logging.getLogger(__name__)

__all__ = ['DxfCollector', 'PATTERN_LAYER']

PATTERN_LAYER = 'PATTERN'


def _hex_to_rgb(color: str):
    value = color.lstrip('#')
    if len(value) == 3:
        value = ''.join(ch * 2 for ch in value)
    if len(value) != 6:
        raise ValueError(f'bad color: {color!r}')
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


class DxfCollector(Collector):
    """Writes every recorded path as an ``LWPOLYLINE``.

    Ungrouped shapes go on the ``PATTERN`` layer; a shape's group tag
    names its layer.  Hex colors become DXF true colors, everything
    else is drawn BYLAYER.
    """

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__(settings)
        # setup=False avoids default blocks with SOLID entities that
        # some CAD programs cannot read
        self._doc = ezdxf.new(dxfversion=self.settings.dxf_version, setup=False)
        self._doc.header['$MEASUREMENT'] = 1  # metric
        self._doc.header['$INSUNITS'] = 4  # millimeters
        self._doc.layers.add(PATTERN_LAYER, color=7)
        self._msp = self._doc.modelspace()

    def __repr__(self):
        return f'DxfCollector({len(self)} paths)'

    @property
    def doc(self):
        return self._doc

    def _layer_for(self, group: Optional[str]) -> str:
        if not group:
            return PATTERN_LAYER
        if group not in self._doc.layers:
            self._doc.layers.add(group)
        return group

    def _emit(self, record: PathCommands) -> None:
        attribs = {'layer': self._layer_for(record.group)}
        if isinstance(record.color, str) and record.color.startswith('#'):
            attribs['true_color'] = colors.rgb2int(_hex_to_rgb(record.color))
        else:
            attribs['color'] = 256  # bylayer
        runs = record.subpaths()
        for run in runs:
            if len(run) < 2 and not record.closed:
                continue
            self._msp.add_lwpolyline([(p.x, p.y) for p in run], format='xy',
                                     close=record.closed and len(runs) == 1,
                                     dxfattribs=attribs)

    def save(self, filename) -> Path:
        """Write the drawing; ``.dxf`` is appended when missing."""
        path = Path(filename)
        if path.suffix.lower() != '.dxf':
            path = path.with_name(path.name + '.dxf')
        self._doc.saveas(path)
        logger.info("wrote %d paths to %s", len(self), path)
        return path
