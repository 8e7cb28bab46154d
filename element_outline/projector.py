"""
Geometry projector: from a 3D geometry tree to 2D subject rings.

Walks an element's geometry tree and flattens everything with area onto
the XY plane:

- Curves have no area and are skipped
- Solids contribute their non-vertical faces via the loop classifier
- Meshes contribute one triangle ring per mesh triangle
- Instances are expanded under their composed transform

Anything else is an invariant failure and raises GeometryKindError. The
projector returns new rings instead of feeding the union engine directly,
so it can be exercised (and tested) on its own.
"""

import logging
from typing import Dict, List

import numpy as np

from .config import OutlineConfig
from .errors import GeometryKindError
from .geometry import (
    CURVE_TYPES,
    IDENTITY,
    Face,
    GeometryElement,
    Instance,
    Mesh,
    Solid,
    is_identity
)
from .loop_classifier import classify
from .rings import Polygon, signed_area
from .vertex_table import VertexTable

logger = logging.getLogger(__name__)


def is_vertical_planar_face(face: Face, tolerance: float) -> bool:
    """True for a planar face whose normal lies in the XY plane."""
    return face.is_planar and abs(face.normal[2]) <= tolerance


class GeometryProjector:
    """
    Projects geometry trees into rings of vertex-table ids.

    The vertex table is shared with the union engine and cleared by the
    caller between elements. Stats are cumulative until reset_stats().
    """

    def __init__(self, table: VertexTable, config: OutlineConfig):
        self.table = table
        self.config = config
        self.stats: Dict[str, int] = {}
        self.reset_stats()

    def reset_stats(self) -> None:
        self.stats = {
            'faces': 0,
            'vertical_faces': 0,
            'triangles': 0,
            'degenerate_triangles': 0,
            'instances': 0
        }

    def project(self, node, transform: np.ndarray = IDENTITY) -> List[Polygon]:
        """
        Project a geometry node (and everything below it) to subject rings.

        Args:
            node: GeometryElement or a single geometry object
            transform: 4x4 transform from the node's coordinates to world

        Returns:
            List of rings (vertex id lists)

        Raises:
            GeometryKindError: If the tree contains an unsupported object kind
        """
        if isinstance(node, GeometryElement):
            polygons: List[Polygon] = []
            for obj in node:
                polygons.extend(self.project(obj, transform))
            return polygons

        if isinstance(node, CURVE_TYPES):
            return []

        if isinstance(node, Solid):
            if not is_identity(transform):
                node = node.transformed(transform)
            return self.project_solid(node)

        if isinstance(node, Mesh):
            if not is_identity(transform):
                node = node.transformed(transform)
            return self.project_mesh(node)

        if isinstance(node, Instance):
            self.stats['instances'] += 1
            return self.project(node.geometry, transform @ node.transform)

        raise GeometryKindError(
            f"Expected only solid, mesh, curve or instance geometry, got {type(node).__name__}"
            + (f" ({node.kind})" if hasattr(node, 'kind') else "")
        )

    def project_solid(self, solid: Solid) -> List[Polygon]:
        polygons: List[Polygon] = []
        for face in solid.faces:
            self.stats['faces'] += 1
            # Pretty common case: vertical planar face, zero projected area
            if is_vertical_planar_face(face, self.config.vertical_tolerance):
                self.stats['vertical_faces'] += 1
                continue
            polygons.extend(classify(
                face,
                self.table,
                self.config.arc_segments_per_turn,
                include_holes=self.config.subtract_holes
            ))
        return polygons

    def project_mesh(self, mesh: Mesh) -> List[Polygon]:
        """
        One ring per triangle.

        Triangles are oriented counter-clockwise so each one adds filled area
        under the positive fill rule whatever the mesh winding. Triangles that
        collapse on the integer grid are dropped.
        """
        polygons: List[Polygon] = []
        for i in range(mesh.num_triangles):
            self.stats['triangles'] += 1
            triangle = [self.table.get_or_add(p) for p in mesh.get_triangle(i)]
            area = signed_area(self.table.points(triangle))
            if len(set(triangle)) < 3 or area == 0:
                self.stats['degenerate_triangles'] += 1
                continue
            if area < 0:
                triangle.reverse()
            polygons.append(triangle)
        logger.debug(
            f"Mesh with {mesh.num_triangles} triangles -> {len(polygons)} rings"
        )
        return polygons
