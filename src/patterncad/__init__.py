# -*- coding: utf-8 -*-
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("patterncad")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from patterncad.errors import ConfigurationError, Diagnostic, NumericError, PatternError
from patterncad.geom import Point
from patterncad.poly import BoundingBox, Segment, Shape, Vertex
from patterncad.contexts import (LinesView, PathContext, PointContext, PointsView,
                                 ShapeContext, ShapesView)
from patterncad.shapes import (circle, from_points, hexagon, path, polygon, rect,
                               square, triangle)
from patterncad.systems import (CloneSystem, GridSystem, LSystem, ShapeSystem,
                                TessellationSystem)
from patterncad.drawable import Collector, PathCommands
from patterncad.config import Settings, load_settings
from patterncad.logging_config import setup_logging


def grid(options=None, **kwargs) -> GridSystem:
    return GridSystem(options, **kwargs)


def tessellation(options=None, **kwargs) -> TessellationSystem:
    return TessellationSystem(options, **kwargs)


def lsystem(options=None, **kwargs) -> LSystem:
    return LSystem(options, **kwargs)


def shape_system(source, include_center: bool = False, subdivide: int = 0) -> ShapeSystem:
    return ShapeSystem(source, include_center=include_center, subdivide=subdivide)
