"""
Element 2D Boolean Outline Package

Extract the plan footprint of building elements by projecting their solid
faces and mesh triangles onto the XY plane and computing the union of the
projected polygons on an integer grid.
"""

from .constants import __version__

# Make the CLI main function easily accessible
from .cli import main

# Core pipeline and configuration
from .element_outline import (
    OutlineContext,
    OutlineRun,
    compute_element_outline,
    compute_outlines,
    extract_document_outlines
)
from .config import OutlineConfig
from .errors import OutlineError, GeometryKindError, UnionError, DocumentError

# Building blocks
from .vertex_table import VertexTable, quantize
from .projector import GeometryProjector
from .loop_classifier import classify, classify_loops, sort_curve_loops
from .union_engine import UnionEngine
from .outline_converter import to_outline

__all__ = [
    "__version__",
    "main",
    "OutlineContext",
    "OutlineRun",
    "compute_element_outline",
    "compute_outlines",
    "extract_document_outlines",
    "OutlineConfig",
    "OutlineError",
    "GeometryKindError",
    "UnionError",
    "DocumentError",
    "VertexTable",
    "quantize",
    "GeometryProjector",
    "classify",
    "classify_loops",
    "sort_curve_loops",
    "UnionEngine",
    "to_outline"
]
