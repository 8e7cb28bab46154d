"""
Small helpers for closed rings of 2D points and vertex ids.

A ring is stored open: the closing vertex is implied, never repeated.
Orientation follows the usual right-handed convention with +Z up:
positive signed area means counter-clockwise.
"""

from typing import List, Sequence, Tuple

Polygon = List[int]


def remove_consecutive_duplicates(ring: Sequence) -> list:
    """
    Collapse runs of identical consecutive entries, including the wrap-around
    from the last entry back to the first.
    """
    out: list = []
    for v in ring:
        if not out or out[-1] != v:
            out.append(v)
    while len(out) > 1 and out[0] == out[-1]:
        out.pop()
    return out


def signed_area(points: Sequence[Tuple[float, float]]) -> float:
    """
    Shoelace signed area of a ring (positive = counter-clockwise).

    With integer input the result is exact (a multiple of 0.5).
    """
    n = len(points)
    if n < 3:
        return 0
    twice = 0
    for i in range(n):
        x1, y1 = points[i][0], points[i][1]
        x2, y2 = points[(i + 1) % n][0], points[(i + 1) % n][1]
        twice += x1 * y2 - x2 * y1
    return twice / 2


def is_counterclockwise(points: Sequence[Tuple[float, float]]) -> bool:
    return signed_area(points) > 0


def winding_number(point: Tuple[float, float], ring: Sequence[Tuple[float, float]]) -> int:
    """
    Winding number of a ring around a point.

    Counter-clockwise rings give +1 for points inside, clockwise rings -1,
    and 0 for points outside. Points exactly on an edge are unspecified,
    so callers should test with interior points.
    """
    px, py = point[0], point[1]
    wn = 0
    n = len(ring)
    for i in range(n):
        x1, y1 = ring[i][0], ring[i][1]
        x2, y2 = ring[(i + 1) % n][0], ring[(i + 1) % n][1]
        is_left = (x2 - x1) * (py - y1) - (px - x1) * (y2 - y1)
        if y1 <= py:
            if y2 > py and is_left > 0:
                wn += 1
        elif y2 <= py and is_left < 0:
            wn -= 1
    return wn
