"""Generative systems: clones, vertex graphs, lattices, tessellations
and L-systems."""

from patterncad.systems.base import BaseSystem, NodesView, Placement
from patterncad.systems.clone import CloneSystem
from patterncad.systems.grid import GridCell, GridSystem
from patterncad.systems.lsystem import LSystem
from patterncad.systems.shape_system import ShapeSystem
from patterncad.systems.tessellation import Lcg, TessellationSystem, proximity_edges

__all__ = [
    'BaseSystem',
    'NodesView',
    'Placement',
    'CloneSystem',
    'ShapeSystem',
    'GridCell',
    'GridSystem',
    'TessellationSystem',
    'Lcg',
    'proximity_edges',
    'LSystem',
]
