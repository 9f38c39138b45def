## settings and option records for patterncad
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

"""Settings and generator options.

``Settings`` holds engine-wide defaults and can be loaded from a YAML
file.  The ``*Options`` records normalize the keyword/dict options
accepted by the lattice, tessellation and fractal systems, so that bad
parameters are reported when a system is constructed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from patterncad.errors import ConfigurationError, unknown_name
from patterncad.geom import isgoodnum

logger = logging.getLogger(__name__)

__all__ = [
    'Settings',
    'DEFAULT_SETTINGS',
    'load_settings',
    'level_number',
    'GridOptions',
    'TessellationOptions',
    'LSystemOptions',
    'GRID_TYPES',
    'TESSELLATION_PATTERNS',
    'TRUCHET_VARIANTS',
    'ARRANGEMENTS',
]

GRID_TYPES = ('square', 'hexagonal', 'triangular', 'brick')
TESSELLATION_PATTERNS = ('truchet', 'trihexagonal', 'penrose', 'custom')
TRUCHET_VARIANTS = ('quarter-circles', 'diagonal', 'triangles')
ARRANGEMENTS = ('square', 'hexagonal', 'triangular')

DEFAULT_PALETTE = [
    '#e63946', '#f4a261', '#2a9d8f', '#264653',
    '#e9c46a', '#8ab17d', '#457b9d', '#9d4edd',
]


def level_number(level) -> int:
    """Map a logging level name (any case) or number to its number."""
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    if isinstance(level, str):
        value = logging.getLevelName(level.strip().upper())
        if isinstance(value, int):
            return value
    raise ConfigurationError(f'unknown log level: {level!r}',
                             hints=['use DEBUG, INFO, WARNING, ERROR or CRITICAL'])


@dataclass
class Settings:
    """Engine-wide defaults."""
    circle_segments: int = 32
    miter_limit: float = 4.0
    default_color: Optional[str] = None
    palette: List[str] = field(default_factory=lambda: list(DEFAULT_PALETTE))
    dxf_version: str = 'R2010'
    log_level: str = 'INFO'

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Settings':
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f'unknown settings keys: {unknown}',
                                     hints=[f'valid keys: {sorted(known)}'])
        settings = replace(cls(), **dict(data))
        if not isinstance(settings.circle_segments, int) or settings.circle_segments < 3:
            raise ConfigurationError('circle_segments must be an integer >= 3')
        if not isgoodnum(settings.miter_limit) or settings.miter_limit <= 0:
            raise ConfigurationError('miter_limit must be positive')
        if not isinstance(settings.palette, list) or not settings.palette:
            raise ConfigurationError('palette must be a non-empty list of colors')
        level_number(settings.log_level)
        return settings


DEFAULT_SETTINGS = Settings()


def load_settings(path) -> Settings:
    """Read ``Settings`` overrides from a YAML mapping."""
    import yaml

    path = Path(path)
    with path.open('r', encoding='utf-8') as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f'settings file {path} must contain a mapping')
    logger.debug("Loaded settings from %s: %s", path, sorted(data))
    return Settings.from_dict(data)


def _check_keys(kind: str, data: Mapping[str, Any], allowed) -> None:
    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise ConfigurationError(f'unknown {kind} options: {unknown}',
                                 hints=[f'valid options: {sorted(allowed)}'])


def _pair(value, name: str) -> Tuple[float, float]:
    """Normalize a number, ``(x, y)`` pair or ``{'x':, 'y':}`` mapping."""
    if isinstance(value, bool):
        raise ConfigurationError(f'bad {name}: {value!r}')
    if isinstance(value, (int, float)):
        x = y = value
    elif isinstance(value, Mapping):
        try:
            x, y = value['x'], value['y']
        except KeyError:
            raise ConfigurationError(f'bad {name}: {value!r}')
    else:
        try:
            x, y = value
        except (TypeError, ValueError):
            raise ConfigurationError(f'bad {name}: {value!r}')
    if not (isgoodnum(x) and isgoodnum(y)):
        raise ConfigurationError(f'bad {name}: {value!r}')
    return float(x), float(y)


def _count(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(f'{name} must be a non-negative integer, got {value!r}')
    return value


@dataclass
class GridOptions:
    """Options for ``GridSystem``.

    ``rows``/``cols`` take precedence over ``count``; ``spacing`` and
    ``size`` are synonyms and accept a number, an ``(x, y)`` pair or a
    ``{'x':, 'y':}`` mapping.
    """
    type: str = 'square'
    rows: int = 3
    cols: int = 3
    spacing: Tuple[float, float] = (40.0, 40.0)
    offset: Tuple[float, float] = (0.0, 0.0)
    orientation: str = 'pointy'
    brick_offset: float = 0.5

    KEYS = ('type', 'rows', 'cols', 'count', 'spacing', 'size', 'offset',
            'orientation', 'brick_offset')

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]] = None, **kwargs) -> 'GridOptions':
        data = dict(data or {}, **kwargs)
        _check_keys('grid', data, cls.KEYS)
        opts = cls()
        opts.type = data.get('type', 'square')
        if opts.type not in GRID_TYPES:
            raise unknown_name('grid type', opts.type, GRID_TYPES)
        if 'rows' in data or 'cols' in data:
            opts.rows = _count(data.get('rows', 3), 'rows')
            opts.cols = _count(data.get('cols', 3), 'cols')
        elif 'count' in data:
            count = data['count']
            if isinstance(count, int) and not isinstance(count, bool):
                opts.rows = opts.cols = _count(count, 'count')
            else:
                try:
                    rows, cols = count
                except (TypeError, ValueError):
                    raise ConfigurationError(f'bad count: {count!r}')
                opts.rows = _count(rows, 'count')
                opts.cols = _count(cols, 'count')
        spacing = data.get('spacing', data.get('size', 40))
        opts.spacing = _pair(spacing, 'spacing')
        if opts.spacing[0] <= 0 or opts.spacing[1] <= 0:
            raise ConfigurationError(f'spacing must be positive, got {spacing!r}')
        opts.offset = _pair(data.get('offset', (0, 0)), 'offset')
        opts.orientation = data.get('orientation', 'pointy')
        if opts.orientation not in ('pointy', 'flat'):
            raise unknown_name('orientation', opts.orientation, ('pointy', 'flat'))
        opts.brick_offset = float(data.get('brick_offset', 0.5))
        return opts


@dataclass
class TessellationOptions:
    """Options for ``TessellationSystem``."""
    pattern: str = 'truchet'
    bounds: Tuple[float, float] = (400.0, 400.0)
    seed: int = 1
    tile_size: float = 40.0
    variant: str = 'quarter-circles'
    spacing: Optional[float] = None
    iterations: int = 4
    unit: Any = None
    arrangement: str = 'square'

    KEYS = ('pattern', 'bounds', 'seed', 'tile_size', 'size', 'variant',
            'spacing', 'iterations', 'unit', 'arrangement')

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]] = None, **kwargs) -> 'TessellationOptions':
        data = dict(data or {}, **kwargs)
        _check_keys('tessellation', data, cls.KEYS)
        opts = cls()
        opts.pattern = data.get('pattern', 'truchet')
        if opts.pattern not in TESSELLATION_PATTERNS:
            raise unknown_name('tessellation pattern', opts.pattern,
                               TESSELLATION_PATTERNS)
        bounds = data.get('bounds', (400, 400))
        if isinstance(bounds, Mapping):
            bounds = (bounds.get('width', 400), bounds.get('height', 400))
        opts.bounds = _pair(bounds, 'bounds')
        if opts.bounds[0] <= 0 or opts.bounds[1] <= 0:
            raise ConfigurationError(f'bounds must be positive, got {bounds!r}')
        seed = data.get('seed', 1)
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise ConfigurationError(f'seed must be an integer, got {seed!r}')
        opts.seed = seed
        opts.tile_size = float(data.get('tile_size', data.get('size', 40)))
        if opts.tile_size <= 0:
            raise ConfigurationError('tile_size must be positive')
        opts.variant = data.get('variant', 'quarter-circles')
        if opts.variant not in TRUCHET_VARIANTS:
            raise unknown_name('truchet variant', opts.variant, TRUCHET_VARIANTS)
        spacing = data.get('spacing')
        if spacing is None:
            spacing = 30.0 if opts.pattern == 'trihexagonal' else 40.0
        opts.spacing = float(spacing)
        if opts.spacing <= 0:
            raise ConfigurationError('spacing must be positive')
        opts.iterations = _count(data.get('iterations', 4), 'iterations')
        opts.unit = data.get('unit')
        opts.arrangement = data.get('arrangement', 'square')
        if opts.arrangement not in ARRANGEMENTS:
            raise unknown_name('arrangement', opts.arrangement, ARRANGEMENTS)
        if opts.pattern == 'custom' and opts.unit is None:
            raise ConfigurationError('custom tessellation requires a unit shape',
                                     hints=["pass unit=<shape or context>"],
                                     code="C103")
        return opts


@dataclass
class LSystemOptions:
    """Options for ``LSystem``; ``angle`` and ``heading`` are degrees."""
    axiom: str = ''
    rules: Dict[str, str] = field(default_factory=dict)
    iterations: int = 1
    angle: float = 90.0
    length: float = 10.0
    origin: Tuple[float, float] = (0.0, 0.0)
    heading: float = 0.0

    KEYS = ('axiom', 'rules', 'iterations', 'angle', 'length', 'origin',
            'heading')

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]] = None, **kwargs) -> 'LSystemOptions':
        data = dict(data or {}, **kwargs)
        _check_keys('L-system', data, cls.KEYS)
        if 'axiom' not in data:
            raise ConfigurationError('L-system requires an axiom', code="C103")
        opts = cls()
        opts.axiom = data['axiom']
        if not isinstance(opts.axiom, str):
            raise ConfigurationError(f'axiom must be a string, got {opts.axiom!r}')
        rules = data.get('rules', {}) or {}
        if not isinstance(rules, Mapping) or \
           not all(isinstance(k, str) and len(k) == 1 and isinstance(v, str)
                   for k, v in rules.items()):
            raise ConfigurationError('rules must map single characters to strings')
        opts.rules = dict(rules)
        opts.iterations = _count(data.get('iterations', 1), 'iterations')
        opts.angle = float(data.get('angle', 90))
        opts.length = float(data.get('length', 10))
        opts.origin = _pair(data.get('origin', (0, 0)), 'origin')
        opts.heading = float(data.get('heading', 0))
        return opts
