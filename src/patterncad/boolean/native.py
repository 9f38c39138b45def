"""Native 2D union engine.

Shapes are merged pairwise until no two remaining shapes overlap.  For
a pair, every edge is split at the points where it meets the other
boundary; the fragments that lie outside the other shape (or on a
shared boundary running the same way) are kept and stitched back into
loops, turning as far left as possible at junctions.  The largest loop
is the merged outline.

Exactly coincident duplicates are detected up front and collapse to
one shape without any intersection math.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from patterncad.geom import Point, epsilon
from patterncad.poly import Shape, check_finite

logger = logging.getLogger(__name__)

__all__ = ['union', 'merge_pair', 'coincident']

# tolerance for on-boundary and coincidence tests
TOL = 1e-6
KEY_PLACES = 5


def union(shapes: Sequence[Shape]) -> List[Shape]:
    """Merge every overlapping group of ``shapes``; inputs are not modified."""
    work: List[Shape] = []
    for s in shapes:
        if s.open or len(s.vertices) < 3:
            logger.debug("union skipping degenerate %r", s)
            continue
        c = s.clone()
        c.remove_degenerate()
        if len(c.vertices) < 3:
            continue
        c.ensure_winding('ccw')
        c.ephemeral = False
        work.append(c)

    merged = True
    while merged:
        merged = False
        for i in range(len(work)):
            for j in range(i + 1, len(work)):
                a = work[i]
                b = work[j]
                if not a.bounding_box().overlaps(b.bounding_box(), TOL):
                    continue
                result = merge_pair(a, b)
                if result is None:
                    continue
                logger.debug("union merged shapes %d and %d", i, j)
                work[i] = result
                del work[j]
                merged = True
                break
            if merged:
                break
    for s in work:
        check_finite(s, 'union')
    return work


def coincident(a: Shape, b: Shape, tol: float = TOL) -> bool:
    """``True`` if both boundaries have the same vertices in the same cyclic order."""
    pa = a.points
    pb = b.points
    if len(pa) != len(pb) or not pa:
        return False
    n = len(pa)
    for shift in range(n):
        if pa[0].distance_to(pb[shift]) > tol:
            continue
        if all(pa[k].distance_to(pb[(k + shift) % n]) <= tol for k in range(n)):
            return True
    return False


def _boundary_direction(shape: Shape, p: Point, tol: float = TOL) -> Optional[Point]:
    for seg in shape.segments:
        if seg.distance_to_point(p) <= tol:
            return seg.direction
    return None


def _split_params(shape: Shape, other: Shape) -> List[List[Tuple[float, Point]]]:
    """Per edge of ``shape``: sorted ``(t, point)`` split positions."""
    result = []
    other_pts = other.points
    for seg in shape.segments:
        p = seg.start.position
        r = seg.vector
        ln2 = r.length_squared()
        splits: Dict[str, Tuple[float, Point]] = {}
        if ln2 > 0:
            for oseg in other.segments:
                x = seg.intersect(oseg, tol=1e-9)
                if x is not None:
                    t = (x - p).dot(r) / ln2
                    if 1e-9 < t < 1 - 1e-9:
                        splits.setdefault(x.key(KEY_PLACES), (t, x))
            for q in other_pts:
                if seg.distance_to_point(q) <= TOL:
                    t = (q - p).dot(r) / ln2
                    if 1e-9 < t < 1 - 1e-9:
                        splits.setdefault(q.key(KEY_PLACES), (t, q))
        result.append(sorted(splits.values(), key=lambda item: item[0]))
    return result


def _fragments(shape: Shape, splits) -> List[Tuple[Point, Point]]:
    frags = []
    for seg, cuts in zip(shape.segments, splits):
        pts = [seg.start.position] + [x for _, x in cuts] + [seg.end.position]
        for k in range(len(pts) - 1):
            if pts[k].distance_to(pts[k + 1]) > epsilon:
                frags.append((pts[k], pts[k + 1]))
    return frags


def _classify(frags, other: Shape, keep_same_direction: bool):
    """Split fragments into kept and dropped lists against ``other``."""
    kept = []
    dropped = 0
    for a, b in frags:
        mid = a.lerp(b, 0.5)
        direction = _boundary_direction(other, mid)
        if direction is not None:
            same = direction.dot((b - a).normalize()) > 0
            if same and keep_same_direction:
                kept.append((a, b))
            else:
                dropped += 1
        elif other.contains_point(mid):
            dropped += 1
        else:
            kept.append((a, b))
    return kept, dropped


def _stitch(frags: List[Tuple[Point, Point]]) -> List[List[Point]]:
    outgoing: Dict[str, List[int]] = {}
    for idx, (a, _) in enumerate(frags):
        outgoing.setdefault(a.key(KEY_PLACES), []).append(idx)
    used = [False] * len(frags)
    loops = []
    for start in range(len(frags)):
        if used[start]:
            continue
        start_key = frags[start][0].key(KEY_PLACES)
        loop = []
        current = start
        closed = False
        while True:
            used[current] = True
            a, b = frags[current]
            loop.append(a)
            end_key = b.key(KEY_PLACES)
            if end_key == start_key:
                closed = True
                break
            candidates = [k for k in outgoing.get(end_key, []) if not used[k]]
            if not candidates:
                break
            d_in = (b - a).normalize()

            def turn(k):
                d_out = (frags[k][1] - frags[k][0]).normalize()
                return math.atan2(d_in.cross(d_out), d_in.dot(d_out))
            current = max(candidates, key=turn)
        if closed and len(loop) >= 3:
            loops.append(loop)
        elif loop:
            logger.debug("union dropped an unclosed chain of %d points", len(loop))
    return loops


def merge_pair(a: Shape, b: Shape) -> Optional[Shape]:
    """Union of two counter-clockwise shapes, or ``None`` when they do not overlap."""
    if coincident(a, b):
        return a
    frags_a = _fragments(a, _split_params(a, b))
    frags_b = _fragments(b, _split_params(b, a))
    kept_a, dropped_a = _classify(frags_a, b, keep_same_direction=True)
    kept_b, dropped_b = _classify(frags_b, a, keep_same_direction=False)
    if dropped_a == 0 and dropped_b == 0:
        # disjoint interiors, possibly touching at isolated points
        return None
    if not kept_b:
        return a
    if not kept_a:
        return b

    loops = _stitch(kept_a + kept_b)
    if not loops:
        logger.debug("union could not stitch %r and %r", a, b)
        return None
    best = max(loops, key=lambda pts: abs(_area(pts)))
    if len(loops) > 1:
        logger.debug("union kept outer loop, discarded %d inner loops", len(loops) - 1)
    merged = Shape.from_points(best)
    merged.ensure_winding('ccw')
    merged.color = a.color
    merged.group = a.group
    return merged


def _area(pts: Sequence[Point]) -> float:
    s = 0.0
    n = len(pts)
    for i in range(n):
        s += pts[i].x * pts[(i + 1) % n].y - pts[(i + 1) % n].x * pts[i].y
    return s / 2.0
