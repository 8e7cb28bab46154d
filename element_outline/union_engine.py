"""
Polygon union engine using shapely.

Collects the subject rings of one element and merges them into the
smallest set of simple, non-overlapping rings covering the same area.

The fill rule is "positive": a point is inside the result when the summed
winding number of all subject rings around it is greater than zero. For
the common case (every subject a valid counter-clockwise ring) that is
plain shapely unary_union. Clockwise or self-intersecting subjects take the
general path: node all ring edges, polygonize the arrangement, and keep
the faces whose winding number is positive.

All input coordinates are integers from the vertex table. The overlay runs
with a grid size of 1, so GEOS rounds the vertices it creates at edge
intersections onto the integer grid while it builds a valid result. They
are registered in the same table, so callers only ever see vertex ids.
Exactly collinear result vertices are removed.
"""

import logging
from typing import Dict, List, Sequence, Tuple

from shapely.errors import GEOSException
from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiPolygon,
    Polygon as ShapelyPolygon,
    box
)
from shapely.geometry.polygon import orient
from shapely import unary_union
from shapely.ops import polygonize
from shapely.strtree import STRtree

from .errors import UnionError
from .rings import Polygon, remove_consecutive_duplicates, signed_area, winding_number
from .vertex_table import Point2D, VertexTable

logger = logging.getLogger(__name__)

# Overlay precision: results are computed directly on the integer grid
GRID_SIZE = 1.0


def remove_collinear(points: List[Point2D]) -> List[int]:
    """
    Indices of the vertices to keep once exactly collinear ones are removed.

    Integer cross products, so the test is exact.
    """
    keep = list(range(len(points)))
    changed = True
    while changed and len(keep) >= 3:
        changed = False
        for k in range(len(keep)):
            ax, ay = points[keep[k - 1]]
            bx, by = points[keep[k]]
            cx, cy = points[keep[(k + 1) % len(keep)]]
            if (bx - ax) * (cy - by) - (by - ay) * (cx - bx) == 0:
                del keep[k]
                changed = True
                break
    return keep


def _polygons_of(geometry) -> List[ShapelyPolygon]:
    """Flatten a union result to its polygon parts."""
    if geometry.is_empty:
        return []
    if isinstance(geometry, ShapelyPolygon):
        return [geometry]
    if isinstance(geometry, (MultiPolygon, GeometryCollection)):
        parts: List[ShapelyPolygon] = []
        for g in geometry.geoms:
            parts.extend(_polygons_of(g))
        return parts
    # Lines and points left over from degenerate overlaps carry no area
    return []


def positive_fill_union(rings: Sequence[Sequence[Point2D]]):
    """
    Union of closed rings under the positive fill rule.

    Args:
        rings: Open rings of 2D points (closing point implied)

    Returns:
        shapely geometry (Polygon, MultiPolygon or empty collection) with
        every vertex on the integer grid
    """
    shapes = [ShapelyPolygon(r) for r in rings]
    if all(signed_area(r) > 0 for r in rings) and all(s.is_valid for s in shapes):
        return unary_union(shapes, grid_size=GRID_SIZE)

    logger.debug(f"General winding union over {len(rings)} rings")
    edges = [LineString(list(r) + [r[0]]) for r in rings]
    noded = unary_union(edges)
    tree = STRtree([box(*e.bounds) for e in edges])

    kept = []
    for face in polygonize(noded):
        point = face.representative_point()
        candidates = tree.query(point)
        wn = sum(winding_number((point.x, point.y), rings[int(i)]) for i in candidates)
        if wn > 0:
            kept.append(face)
    if not kept:
        return GeometryCollection()
    return unary_union(kept, grid_size=GRID_SIZE)


class UnionEngine:
    """
    Accumulates subject rings and computes their positive-fill union.

    The engine is reused across elements: call clear() before each one.
    """

    def __init__(self, table: VertexTable):
        self.table = table
        self._subjects: List[Polygon] = []
        self.stats: Dict[str, int] = {'subjects': 0, 'degenerate': 0}

    @property
    def subjects(self) -> Tuple[Polygon, ...]:
        return tuple(self._subjects)

    def clear(self) -> None:
        self._subjects.clear()

    def add_subject(self, polygon: Sequence[int]) -> bool:
        """
        Add one subject ring.

        Rings with fewer than 3 distinct vertices, or whose vertices all lie
        on one line, are dropped rather than handed to the union.

        Returns:
            True if the ring was kept
        """
        ring = remove_consecutive_duplicates(list(polygon))
        if len(set(ring)) < 3 or len(remove_collinear(self.table.points(ring))) < 3:
            self.stats['degenerate'] += 1
            logger.debug(f"Dropping degenerate ring with {len(set(ring))} distinct vertices")
            return False
        self._subjects.append(ring)
        self.stats['subjects'] += 1
        return True

    def add_subjects(self, polygons: Sequence[Sequence[int]]) -> int:
        """Add several rings, returning how many were kept."""
        return sum(1 for p in polygons if self.add_subject(p))

    def union(self) -> List[Polygon]:
        """
        Compute the union of all subjects.

        Returns:
            Rings of vertex ids. Each result region contributes its exterior
            (counter-clockwise) followed by its holes (clockwise). Regions
            are ordered by their lower-left bounds.

        Raises:
            UnionError: If shapely/GEOS cannot compute the union
        """
        if not self._subjects:
            return []

        rings = [self.table.points(s) for s in self._subjects]
        try:
            merged = positive_fill_union(rings)
            parts = _polygons_of(merged)
        except (GEOSException, ValueError) as e:
            raise UnionError(f"Union of {len(rings)} rings failed: {e}") from e

        parts.sort(key=lambda p: (p.bounds[0], p.bounds[1], p.bounds[2], p.bounds[3]))

        result: List[Polygon] = []
        for part in parts:
            part = orient(part, sign=1.0)
            for ring in [part.exterior] + list(part.interiors):
                ids = self._ring_to_ids(ring.coords)
                if ids:
                    result.append(ids)
        return result

    def _ring_to_ids(self, coords) -> Polygon:
        # Coordinates are already whole numbers from the fixed-precision overlay
        snapped = remove_consecutive_duplicates([(int(round(x)), int(round(y))) for x, y in list(coords)[:-1]])
        snapped = [snapped[k] for k in remove_collinear(snapped)]
        if len(snapped) < 3 or signed_area(snapped) == 0:
            return []
        return [self.table.add_point(q) for q in snapped]
