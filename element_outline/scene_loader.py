"""
Scene document loader.

The host model is represented by a JSON scene file listing elements and
their geometry trees:

    {
      "title": "Level 1",
      "selection": [101, 102],
      "elements": [
        {"id": 101, "geometry": [ {node}, ... ]}
      ]
    }

Node types:
    solid      {"faces": [{"normal": [x, y, z], "loops": [loop, ...]}]}
               a loop is a list of curves or {"points": [[x, y, z], ...]}
    mesh       {"vertices": [[x, y, z], ...], "triangles": [[a, b, c], ...]}
    mesh_file  {"path": "part.stl"} (any format trimesh loads, relative to the scene file)
    instance   {"transform": 4x4 nested list, "geometry": [ {node}, ... ]}
    line       {"start": [...], "end": [...]}
    arc        {"center": [...], "radius": r, "start_angle": a, "end_angle": b}
    polyline   {"points": [...]}

Any other "type" loads as an Other object; the projector rejects it.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import trimesh

from .errors import DocumentError
from .geometry import (
    Arc,
    CurveLoop,
    Face,
    GeometryElement,
    Instance,
    Line,
    Mesh,
    Other,
    PolyLine,
    Solid,
    as_transform
)

logger = logging.getLogger(__name__)


@dataclass
class SceneDocument:
    """A loaded scene: a title, the elements, and an optional selection."""

    title: str
    elements: Dict[int, GeometryElement] = field(default_factory=dict)
    selection: Optional[List[int]] = None

    def __repr__(self) -> str:
        return f"SceneDocument(title={self.title!r}, elements={len(self.elements)})"


def _point(value) -> tuple:
    if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
        raise ValueError(f"expected a 2D or 3D point, got {value!r}")
    x, y = float(value[0]), float(value[1])
    z = float(value[2]) if len(value) == 3 else 0.0
    return (x, y, z)


def _parse_curve(data: Dict[str, Any]):
    if not isinstance(data, dict):
        raise ValueError(f"expected a curve object, got {data!r}")
    kind = data.get("type")
    if kind == "line":
        return Line(_point(data["start"]), _point(data["end"]))
    if kind == "arc":
        return Arc(
            center=_point(data["center"]),
            radius=float(data["radius"]),
            start_angle=float(data["start_angle"]),
            end_angle=float(data["end_angle"]),
            x_axis=_point(data.get("x_axis", (1.0, 0.0, 0.0))),
            y_axis=_point(data.get("y_axis", (0.0, 1.0, 0.0)))
        )
    if kind == "polyline":
        return PolyLine([_point(p) for p in data["points"]])
    raise ValueError(f"unknown curve type {kind!r}")


def _parse_loop(data) -> CurveLoop:
    if isinstance(data, dict) and "points" in data:
        # Shorthand: a closed chain of straight edges
        points = [_point(p) for p in data["points"]]
        if len(points) < 2:
            raise ValueError("a point loop needs at least 2 points")
        return CurveLoop([Line(points[i], points[(i + 1) % len(points)]) for i in range(len(points))])
    if not isinstance(data, list):
        raise ValueError(f"expected a list of curves or a points loop, got {data!r}")
    return CurveLoop([_parse_curve(c) for c in data])


def _load_mesh_file(path: Path) -> Mesh:
    loaded = trimesh.load(str(path), force='mesh')
    logger.debug(f"Loaded {path.name}: {len(loaded.vertices)} vertices, {len(loaded.faces)} faces")
    return Mesh(
        vertices=[tuple(v) for v in loaded.vertices.tolist()],
        triangles=[tuple(f) for f in loaded.faces.tolist()]
    )


def parse_node(data: Dict[str, Any], base_dir: Path):
    """Turn one JSON node into a geometry object."""
    if not isinstance(data, dict):
        raise ValueError(f"expected a geometry node object, got {data!r}")
    kind = data.get("type")
    if kind == "solid":
        faces = []
        for f in data["faces"]:
            if not isinstance(f, dict):
                raise ValueError(f"expected a face object, got {f!r}")
            normal = _point(f["normal"]) if f.get("normal") is not None else None
            faces.append(Face([_parse_loop(loop) for loop in f["loops"]], normal))
        return Solid(faces)
    if kind == "mesh":
        triangles = [tuple(int(i) for i in t) for t in data["triangles"]]
        vertices = [_point(v) for v in data["vertices"]]
        for t in triangles:
            if len(t) != 3 or not all(0 <= i < len(vertices) for i in t):
                raise ValueError(f"invalid triangle {t}")
        return Mesh(vertices, triangles)
    if kind == "mesh_file":
        path = base_dir / data["path"]
        if not path.exists():
            raise ValueError(f"mesh file not found: {path}")
        return _load_mesh_file(path)
    if kind == "instance":
        return Instance(as_transform(data["transform"]), parse_geometry(data["geometry"], base_dir))
    if kind in ("line", "arc", "polyline"):
        return _parse_curve(data)
    if not isinstance(kind, str):
        raise ValueError(f"geometry node without a type: {data!r}")
    return Other(kind, {k: v for k, v in data.items() if k != "type"})


def parse_geometry(nodes: List[Dict[str, Any]], base_dir: Path) -> GeometryElement:
    if not isinstance(nodes, list):
        raise ValueError(f"expected a list of geometry nodes, got {nodes!r}")
    return GeometryElement([parse_node(n, base_dir) for n in nodes])


def load_scene(path: str) -> SceneDocument:
    """
    Load a scene document from a JSON file.

    Raises:
        DocumentError: If the file is missing, is not valid JSON, or
                       describes malformed geometry
    """
    scene_path = Path(path)
    if not scene_path.is_file():
        raise DocumentError(f"Scene document not found: {path}")

    try:
        data = json.loads(scene_path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DocumentError(f"Cannot read scene document {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("elements"), list):
        raise DocumentError(f"Scene document {path} has no 'elements' list")

    title = str(data.get("title") or scene_path.stem)
    document = SceneDocument(title=title)

    for entry in data["elements"]:
        try:
            element_id = int(entry["id"])
            geometry = parse_geometry(entry.get("geometry", []), scene_path.parent)
        except (KeyError, TypeError, ValueError) as e:
            raise DocumentError(f"Invalid element in {path}: {e}") from e
        if element_id in document.elements:
            raise DocumentError(f"Duplicate element id {element_id} in {path}")
        document.elements[element_id] = geometry

    selection = data.get("selection")
    if selection is not None:
        try:
            document.selection = [int(i) for i in selection]
        except (TypeError, ValueError) as e:
            raise DocumentError(f"Invalid selection in {path}: {e}") from e

    logger.info(f"Loaded {document}")
    return document
