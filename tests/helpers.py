"""
Test helper utilities for building geometry fixtures.

Boxes, squares and scene document nodes used across the test modules.
"""

from typing import Dict, List, Tuple

from element_outline.geometry import CurveLoop, Face, Line, Mesh, Solid
from element_outline.rings import signed_area


def polygon_loop(points: List[Tuple[float, float, float]]) -> CurveLoop:
    """Closed loop of straight edges through the given points."""
    n = len(points)
    return CurveLoop([Line(points[i], points[(i + 1) % n]) for i in range(n)])


def square_loop(x0: float, y0: float, x1: float, y1: float, z: float = 0.0, ccw: bool = True) -> CurveLoop:
    """Axis-aligned rectangle loop, counter-clockwise seen from above unless ccw=False."""
    points = [(x0, y0, z), (x1, y0, z), (x1, y1, z), (x0, y1, z)]
    if not ccw:
        points.reverse()
    return polygon_loop(points)


def box_solid(x0: float, y0: float, z0: float, x1: float, y1: float, z1: float) -> Solid:
    """
    Axis-aligned box with outward normals and right-handed loops.

    Top loop runs counter-clockwise seen from above, bottom loop clockwise,
    and the four side faces are vertical.
    """
    top = Face([square_loop(x0, y0, x1, y1, z1)], normal=(0.0, 0.0, 1.0))
    bottom = Face([square_loop(x0, y0, x1, y1, z0, ccw=False)], normal=(0.0, 0.0, -1.0))
    sides = [
        Face([polygon_loop([(x0, y0, z0), (x1, y0, z0), (x1, y0, z1), (x0, y0, z1)])], normal=(0.0, -1.0, 0.0)),
        Face([polygon_loop([(x1, y0, z0), (x1, y1, z0), (x1, y1, z1), (x1, y0, z1)])], normal=(1.0, 0.0, 0.0)),
        Face([polygon_loop([(x1, y1, z0), (x0, y1, z0), (x0, y1, z1), (x1, y1, z1)])], normal=(0.0, 1.0, 0.0)),
        Face([polygon_loop([(x0, y1, z0), (x0, y0, z0), (x0, y0, z1), (x0, y1, z1)])], normal=(-1.0, 0.0, 0.0)),
    ]
    return Solid([top, bottom] + sides)


def unit_cube(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Solid:
    return box_solid(x, y, z, x + 1.0, y + 1.0, z + 1.0)


def square_mesh(x0: float, y0: float, x1: float, y1: float, z: float = 0.0) -> Mesh:
    """Flat rectangle made of two counter-clockwise triangles."""
    vertices = [(x0, y0, z), (x1, y0, z), (x1, y1, z), (x0, y1, z)]
    return Mesh(vertices, [(0, 1, 2), (0, 2, 3)])


def outline_area(outline) -> float:
    """Net area of an outline: outer loops add, holes subtract."""
    return sum(signed_area(loop) for loop in outline)


def square_points(x0: float, y0: float, x1: float, y1: float, z: float = 0.0) -> List[List[float]]:
    """Counter-clockwise rectangle as a JSON point list."""
    return [[x0, y0, z], [x1, y0, z], [x1, y1, z], [x0, y1, z]]


def box_scene_node(x0: float, y0: float, x1: float, y1: float, z0: float = 0.0, z1: float = 1.0) -> Dict:
    """JSON solid node for an axis-aligned box (top and bottom faces only)."""
    return {
        "type": "solid",
        "faces": [
            {"normal": [0, 0, 1], "loops": [{"points": square_points(x0, y0, x1, y1, z1)}]},
            {"normal": [0, 0, -1], "loops": [{"points": list(reversed(square_points(x0, y0, x1, y1, z0)))}]},
            {"normal": [1, 0, 0], "loops": [{"points": [[x1, y0, z0], [x1, y1, z0], [x1, y1, z1], [x1, y0, z1]]}]}
        ]
    }
