"""
Vertex table: projected, quantized and deduplicated 2D vertices.

Every 3D point we see is dropped onto the XY plane, scaled and rounded to
an integer grid, and then looked up here. Two points that land on the same
grid cell always get the same vertex id, so the union engine downstream
only ever sees exact integer coordinates. No floating point fuzz!
"""

import math
from typing import Dict, List, Sequence, Tuple

from .constants import DEFAULT_SCALE

Point2D = Tuple[int, int]


def quantize(point: Sequence[float], scale: float = DEFAULT_SCALE) -> Point2D:
    """
    Project a 3D point onto the XY plane and snap it to the integer grid.

    Rounds half up (floor(v * scale + 0.5)) so the grid is the same on both
    sides of the origin.

    Raises:
        ValueError: If X or Y is not finite
    """
    x, y = float(point[0]), float(point[1])
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Cannot quantize non-finite point {tuple(point)}")
    return (int(math.floor(x * scale + 0.5)), int(math.floor(y * scale + 0.5)))


class VertexTable:
    """
    One-to-one mapping between quantized 2D points and vertex ids.

    Ids are dense integers handed out in insertion order. The table is built
    for one element and cleared (not replaced) before the next.
    """

    def __init__(self, scale: float = DEFAULT_SCALE):
        self.scale = scale
        self._ids: Dict[Point2D, int] = {}
        self._points: List[Point2D] = []

    def get_or_add(self, point: Sequence[float]) -> int:
        """Return the vertex id for a 3D point, adding it if it's new."""
        return self.add_point(quantize(point, self.scale))

    def add_point(self, q: Point2D) -> int:
        """Return the vertex id for an already-quantized point."""
        vid = self._ids.get(q)
        if vid is None:
            vid = len(self._points)
            self._ids[q] = vid
            self._points.append(q)
        return vid

    def point(self, vid: int) -> Point2D:
        return self._points[vid]

    def points(self, ids: Sequence[int]) -> List[Point2D]:
        return [self._points[i] for i in ids]

    def clear(self) -> None:
        self._ids.clear()
        self._points.clear()

    def __contains__(self, q: Point2D) -> bool:
        return q in self._ids

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        return f"VertexTable(vertices={len(self._points)}, scale={self.scale})"
