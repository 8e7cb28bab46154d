"""
Face boundary loop classification.

A face is bounded by one or more closed edge loops: outer boundaries and
holes. We sort the loops by nesting (each outer loop followed by the holes
directly inside it), decide which ones are outer boundaries by their
orientation seen from above, and turn them into vertex-id rings.

Outer loops run counter-clockwise around +Z, holes run clockwise. A face
seen from below (a bottom face) has a clockwise outer loop and contributes
nothing; the top faces of the same solid cover that area.

Holes are classified but not emitted unless asked for: by default the
footprint is the solid silhouette of the outer boundaries.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from .geometry import CurveLoop, Face
from .rings import Polygon, remove_consecutive_duplicates, signed_area, winding_number
from .vertex_table import VertexTable

logger = logging.getLogger(__name__)


@dataclass
class ClassifiedLoops:
    """Rings from one face, split by role."""

    outer: List[Polygon] = field(default_factory=list)
    holes: List[Polygon] = field(default_factory=list)
    downward: int = 0


def tessellate_loop(loop: CurveLoop, segments_per_turn: int) -> List[Tuple[float, float, float]]:
    """
    Tessellate every curve of a loop and concatenate the points.

    Consecutive curves share their joint point; the duplicate is dropped.
    """
    points: List[Tuple[float, float, float]] = []
    for curve in loop:
        for p in curve.tessellate(segments_per_turn):
            p = tuple(p)
            if not points or points[-1] != p:
                points.append(p)
    if len(points) > 1 and points[0] == points[-1]:
        points.pop()
    return points


def _projected(points) -> List[Tuple[float, float]]:
    return [(p[0], p[1]) for p in points]


def _is_nested(inner, inner_area: float, outer, outer_area: float) -> bool:
    # A loop can only sit inside a strictly larger one. Majority vote on the
    # vertices tolerates holes that touch their outer boundary.
    if abs(inner_area) >= abs(outer_area) or not inner:
        return False
    inside = sum(1 for p in inner if winding_number(p, outer) != 0)
    return inside * 2 > len(inner)


def sort_curve_loops(loops: List[CurveLoop], segments_per_turn: int) -> List[List[CurveLoop]]:
    """
    Group loops by nesting so outer loops come first.

    Each group is an outer loop followed by the loops nested directly inside
    it. Loops at even nesting depth start a group, loops at odd depth join
    the group of their immediate parent. Groups keep the input order of
    their outer loop.

    Args:
        loops: Boundary loops of one face, in any order
        segments_per_turn: Arc tessellation density

    Returns:
        List of loop groups, outer loop first in each
    """
    rings = [_projected(tessellate_loop(loop, segments_per_turn)) for loop in loops]
    areas = [signed_area(r) for r in rings]

    parents: List[int] = []
    for j in range(len(loops)):
        parent = -1
        for i in range(len(loops)):
            if i == j or not _is_nested(rings[j], areas[j], rings[i], areas[i]):
                continue
            # The immediate parent is the smallest enclosing loop
            if parent < 0 or abs(areas[i]) < abs(areas[parent]):
                parent = i
        parents.append(parent)

    def depth(k: int) -> int:
        d = 0
        while parents[k] >= 0:
            k = parents[k]
            d += 1
        return d

    groups: List[List[CurveLoop]] = []
    for k in range(len(loops)):
        if depth(k) % 2 == 0:
            children = [loops[c] for c in range(len(loops)) if parents[c] == k]
            groups.append([loops[k]] + children)
    return groups


def loop_to_polygon(loop: CurveLoop, table: VertexTable, segments_per_turn: int) -> Polygon:
    """
    Map a loop's tessellated points through the vertex table.

    A point landing on the same vertex as the previous one is dropped, so
    there are no zero-length segments.
    """
    polygon: Polygon = []
    for curve in loop:
        for p in curve.tessellate(segments_per_turn):
            vid = table.get_or_add(p)
            if not polygon or polygon[-1] != vid:
                polygon.append(vid)
    return remove_consecutive_duplicates(polygon)


def _loop_area(loop: CurveLoop, segments_per_turn: int) -> float:
    return signed_area(_projected(tessellate_loop(loop, segments_per_turn)))


def classify_loops(face: Face, table: VertexTable, segments_per_turn: int = 72) -> ClassifiedLoops:
    """
    Split a face's boundary loops into outer rings and holes.

    The first loop of each nesting group is its outer boundary. If it runs
    counter-clockwise seen from above, it becomes an outer ring and the
    loops nested in it become holes (forced clockwise). A clockwise outer
    boundary means the face looks down; the whole group is counted in
    ``downward`` and produces no rings.

    Orientation is decided on the unquantized tessellation so loops that
    collapse on the grid are still classified correctly (their rings get
    dropped later as degenerate).
    """
    result = ClassifiedLoops()
    for group in sort_curve_loops(face.get_edges_as_curve_loops(), segments_per_turn):
        outer, holes = group[0], group[1:]
        area = _loop_area(outer, segments_per_turn)
        if area <= 0:
            if area < 0:
                result.downward += 1
            else:
                logger.debug("Skipping loop with zero projected area")
            continue

        result.outer.append(loop_to_polygon(outer, table, segments_per_turn))
        for hole in holes:
            ring = loop_to_polygon(hole, table, segments_per_turn)
            if _loop_area(hole, segments_per_turn) > 0:
                ring.reverse()
            result.holes.append(ring)
    return result


def classify(
    face: Face,
    table: VertexTable,
    segments_per_turn: int = 72,
    include_holes: bool = False
) -> List[Polygon]:
    """
    Return the subject rings contributed by one face.

    Only outer (counter-clockwise) rings by default. With include_holes the
    clockwise hole rings are appended too, so a positive-fill union carves
    them out of the footprint.
    """
    loops = classify_loops(face, table, segments_per_turn)
    if include_holes:
        return loops.outer + loops.holes
    return loops.outer
