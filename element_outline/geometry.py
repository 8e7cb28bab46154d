"""
Geometry tree types for building elements.

An element's 3D representation is a tree: a GeometryElement holds geometry
objects, and an Instance holds another GeometryElement under its own
transform. The object kinds are a closed set:

- Curve (Line, Arc, PolyLine): no area, ignored by the projector
- Solid: a set of Faces, each bounded by one or more CurveLoops
- Mesh: vertices plus triangles (3 vertex indices each)
- Instance: a transform plus nested geometry
- Other: anything else the host might hand us (points, text, ...)

Transforms are 4x4 affine matrices stored as numpy arrays. Every type can
produce a transformed copy so callers always work in world coordinates.
"""

import math
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Iterator, Sequence, Union

import numpy as np

Point3D = Tuple[float, float, float]

IDENTITY = np.identity(4)


def make_transform(
    translation: Sequence[float] = (0.0, 0.0, 0.0),
    rotation_z_deg: float = 0.0,
    scale: float = 1.0
) -> np.ndarray:
    """
    Build a 4x4 affine transform: scale, then rotate about Z, then translate.

    Args:
        translation: (x, y, z) offset
        rotation_z_deg: Rotation about the Z axis in degrees (counter-clockwise)
        scale: Uniform scale factor

    Returns:
        4x4 numpy array
    """
    a = math.radians(rotation_z_deg)
    c, s = math.cos(a), math.sin(a)
    m = np.identity(4)
    m[0, 0], m[0, 1] = c * scale, -s * scale
    m[1, 0], m[1, 1] = s * scale, c * scale
    m[2, 2] = scale
    m[0:3, 3] = translation
    return m


def as_transform(matrix) -> np.ndarray:
    """Coerce a nested list / array into a validated 4x4 float transform."""
    m = np.asarray(matrix, dtype=float)
    if m.shape != (4, 4):
        raise ValueError(f"transform must be 4x4, got shape {m.shape}")
    if not np.all(np.isfinite(m)):
        raise ValueError("transform contains non-finite values")
    return m


def is_identity(matrix: np.ndarray) -> bool:
    return bool(np.array_equal(matrix, IDENTITY))


def transform_points(matrix: np.ndarray, points: Sequence[Point3D]) -> List[Point3D]:
    """Apply an affine transform to a sequence of 3D points."""
    if len(points) == 0:
        return []
    pts = np.asarray(points, dtype=float)
    out = pts @ matrix[0:3, 0:3].T + matrix[0:3, 3]
    return [tuple(p) for p in out.tolist()]


def transform_vector(matrix: np.ndarray, vector: Sequence[float]) -> Point3D:
    """Apply only the linear part of a transform (no translation)."""
    v = matrix[0:3, 0:3] @ np.asarray(vector, dtype=float)
    return tuple(v.tolist())


# ============================================================================
# Curves
# ============================================================================

@dataclass
class Line:
    """A straight segment between two points."""

    start: Point3D
    end: Point3D

    def tessellate(self, segments_per_turn: int = 72) -> List[Point3D]:
        return [tuple(self.start), tuple(self.end)]

    def transformed(self, matrix: np.ndarray) -> 'Line':
        start, end = transform_points(matrix, [self.start, self.end])
        return Line(start, end)


@dataclass
class Arc:
    """
    A circular arc.

    Points are center + radius * (cos(t) * x_axis + sin(t) * y_axis) for t
    running from start_angle to end_angle (radians). A negative sweep runs
    clockwise. Axes are kept unnormalized after transformation so that
    scaled instances stay correct.
    """

    center: Point3D
    radius: float
    start_angle: float
    end_angle: float
    x_axis: Point3D = (1.0, 0.0, 0.0)
    y_axis: Point3D = (0.0, 1.0, 0.0)

    def tessellate(self, segments_per_turn: int = 72) -> List[Point3D]:
        sweep = self.end_angle - self.start_angle
        n = max(1, int(math.ceil(segments_per_turn * abs(sweep) / (2.0 * math.pi))))
        c = np.asarray(self.center, dtype=float)
        x = np.asarray(self.x_axis, dtype=float)
        y = np.asarray(self.y_axis, dtype=float)
        points = []
        for i in range(n + 1):
            t = self.start_angle + sweep * i / n
            p = c + self.radius * (math.cos(t) * x + math.sin(t) * y)
            points.append(tuple(p.tolist()))
        return points

    def transformed(self, matrix: np.ndarray) -> 'Arc':
        (center,) = transform_points(matrix, [self.center])
        return Arc(
            center=center,
            radius=self.radius,
            start_angle=self.start_angle,
            end_angle=self.end_angle,
            x_axis=transform_vector(matrix, self.x_axis),
            y_axis=transform_vector(matrix, self.y_axis)
        )


@dataclass
class PolyLine:
    """An open chain of straight segments."""

    points: List[Point3D]

    def tessellate(self, segments_per_turn: int = 72) -> List[Point3D]:
        return [tuple(p) for p in self.points]

    def transformed(self, matrix: np.ndarray) -> 'PolyLine':
        return PolyLine(transform_points(matrix, self.points))


Curve = Union[Line, Arc, PolyLine]
CURVE_TYPES = (Line, Arc, PolyLine)


# ============================================================================
# Faces and solids
# ============================================================================

@dataclass
class CurveLoop:
    """A closed chain of curves, each ending where the next one starts."""

    curves: List[Curve]

    def __iter__(self) -> Iterator[Curve]:
        return iter(self.curves)

    def __len__(self) -> int:
        return len(self.curves)

    def transformed(self, matrix: np.ndarray) -> 'CurveLoop':
        return CurveLoop([c.transformed(matrix) for c in self.curves])


@dataclass
class Face:
    """
    A bounded surface patch of a solid.

    Attributes:
        loops: Boundary edge loops (outer boundaries and holes, any order)
        normal: Face normal for planar faces, None for curved faces
    """

    loops: List[CurveLoop]
    normal: Optional[Point3D] = None

    @property
    def is_planar(self) -> bool:
        return self.normal is not None

    def get_edges_as_curve_loops(self) -> List[CurveLoop]:
        return list(self.loops)

    def transformed(self, matrix: np.ndarray) -> 'Face':
        normal = None
        linear = matrix[0:3, 0:3]
        # A transform that flattens the face leaves no usable normal; the
        # loops still carry the projected shape, so treat it as non-planar
        if self.normal is not None and np.linalg.matrix_rank(linear) == 3:
            # Normals transform by the inverse transpose of the linear part
            n = np.linalg.inv(linear).T @ np.asarray(self.normal, dtype=float)
            length = np.linalg.norm(n)
            normal = tuple((n / length).tolist()) if length > 0 else tuple(n.tolist())
        return Face([loop.transformed(matrix) for loop in self.loops], normal)


@dataclass
class Solid:
    """A closed volume described by its boundary faces."""

    faces: List[Face]

    def transformed(self, matrix: np.ndarray) -> 'Solid':
        return Solid([f.transformed(matrix) for f in self.faces])


@dataclass
class Mesh:
    """
    A triangle mesh.

    Attributes:
        vertices: List of (x, y, z) coordinates
        triangles: List of (v0, v1, v2) vertex indices (0-indexed)
    """

    vertices: List[Point3D]
    triangles: List[Tuple[int, int, int]]

    @property
    def num_triangles(self) -> int:
        return len(self.triangles)

    def get_triangle(self, index: int) -> Tuple[Point3D, Point3D, Point3D]:
        a, b, c = self.triangles[index]
        return self.vertices[a], self.vertices[b], self.vertices[c]

    def transformed(self, matrix: np.ndarray) -> 'Mesh':
        return Mesh(transform_points(matrix, self.vertices), list(self.triangles))

    def __repr__(self) -> str:
        return f"Mesh(vertices={len(self.vertices)}, triangles={len(self.triangles)})"


# ============================================================================
# Containers
# ============================================================================

@dataclass
class GeometryElement:
    """An ordered collection of geometry objects."""

    objects: List['GeometryObject'] = field(default_factory=list)

    def __iter__(self) -> Iterator['GeometryObject']:
        return iter(self.objects)

    def __len__(self) -> int:
        return len(self.objects)


@dataclass
class Instance:
    """Nested geometry placed under its own transform."""

    transform: np.ndarray
    geometry: GeometryElement


@dataclass
class Other:
    """A geometry object kind the outline pipeline does not handle."""

    kind: str
    data: dict = field(default_factory=dict)


GeometryObject = Union[Line, Arc, PolyLine, Solid, Mesh, Instance, Other]
