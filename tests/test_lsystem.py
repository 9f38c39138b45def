"""Tests for L-system rewriting and turtle interpretation."""

import pytest

from patterncad.contexts import PathContext
from patterncad.errors import ConfigurationError
from patterncad.geom import Point
from patterncad.shapes import circle, rect
from patterncad.systems import LSystem


KOCH = {'F': 'F+F-F-F+F'}


class TestRewriting:

    def test_expand(self):
        assert LSystem.expand('F', KOCH, 1) == 'F+F-F-F+F'
        assert LSystem.expand('AB', {'A': 'AB', 'B': 'A'}, 3) == 'ABAABABA'

    def test_zero_iterations(self):
        assert LSystem.expand('F+F', KOCH, 0) == 'F+F'

    def test_unmatched_symbols_copied(self):
        assert LSystem.expand('X[F]', {'F': 'FF'}, 2) == 'X[FFFF]'


class TestTurtle:
    """Turtle interpretation of the rewritten string"""

    def test_koch_segments(self):
        ls = LSystem(axiom='F', rules=KOCH, iterations=1, angle=90, length=10)
        assert len(ls.segments) == 5
        last = ls.nodes.positions[-1]
        assert last.x == pytest.approx(30)
        assert last.y == pytest.approx(0, abs=1e-9)

    def test_snowflake_closes(self):
        ls = LSystem(axiom='F++F++F', rules={'F': 'F-F++F-F'}, iterations=2,
                     angle=60, length=5)
        nodes = ls.nodes.positions
        assert nodes[0].distance_to(nodes[-1]) == pytest.approx(0, abs=1e-6)
        assert len(ls.segments) >= 48

    def test_branching_plant(self):
        ls = LSystem(axiom='X', rules={'X': 'F[+X][-X]FX', 'F': 'FF'}, iterations=1,
                     angle=25, length=10)
        assert len(ls.segments) == 2
        # two branch tips plus the final position
        assert len(ls.endpoints) == 3

    def test_single_step_length(self):
        ls = LSystem(axiom='F', length=20)
        assert ls.path.length == pytest.approx(20)
        assert isinstance(ls.path, PathContext)

    def test_move_without_drawing(self):
        ls = LSystem(axiom='FfF', length=10)
        assert len(ls.segments) == 2
        assert ls.path.length == pytest.approx(20)
        assert len(ls.nodes) == 4

    def test_turn_around_and_heading(self):
        ls = LSystem(axiom='F|F', length=10, heading=90)
        first = ls.nodes.positions[1]
        assert first.y == pytest.approx(10)
        # walking back onto the start needs no closing segment
        assert len(ls.segments) == 2

    def test_unknown_commands_ignored(self):
        ls = LSystem(axiom='FXYZF', length=1)
        assert ls.path.length == pytest.approx(2)

    def test_connected_segments_share_vertices(self):
        ls = LSystem(axiom='F+F', angle=90)
        a, b = ls.segments
        assert a.end is b.start

    def test_origin(self):
        ls = LSystem(axiom='F', origin=(5, 5), length=1)
        assert ls.nodes.positions[0] == Point(5, 5)


class TestLSystemOperations:

    def make(self):
        return LSystem(axiom='F', rules=KOCH, iterations=1, angle=90, length=10)

    def test_path_is_scaffold_until_traced(self):
        ls = self.make()
        assert ls.render_shapes() == []
        ls.trace()
        assert len(ls.render_shapes()) == 1

    def test_place_on_endpoints(self):
        ls = LSystem(axiom='X', rules={'X': 'F[+X][-X]FX', 'F': 'FF'}, iterations=1,
                     angle=25)
        ls.endpoints.place(circle(1, 6))
        assert len(ls.placements) == 3

    def test_place_on_nodes(self):
        ls = self.make()
        ls.place(circle(1, 6))
        assert len(ls.placements) == 6

    def test_mask(self):
        ls = self.make()
        ls.mask(rect(12, 30).move_to(10, 0))
        assert all(4 <= p.x <= 16 for p in ls.nodes.positions)
        # midpoints (5, 0), (10, 5) and (15, 10) lie inside
        assert len(ls.segments) == 3

    def test_mask_keeps_segments_by_midpoint(self):
        """A segment with one endpoint inside but its midpoint outside is dropped"""
        ls = self.make()
        ls.mask(rect(12, 30).move_to(12, 0))
        mids = [s.midpoint for s in ls.segments.segments]
        assert len(mids) == 2
        assert mids[0].x == pytest.approx(10)
        assert mids[1].x == pytest.approx(15)

    def test_rotate(self):
        ls = self.make().rotate(180)
        box = ls.get_bounds()
        assert box.width == pytest.approx(30)

    def test_scale(self):
        ls = self.make().scale(2)
        assert ls.path.length == pytest.approx(100)


class TestOptions:

    def test_axiom_required(self):
        with pytest.raises(ConfigurationError):
            LSystem(rules=KOCH)

    def test_rules_must_be_single_characters(self):
        with pytest.raises(ConfigurationError):
            LSystem(axiom='F', rules={'FF': 'F'})
