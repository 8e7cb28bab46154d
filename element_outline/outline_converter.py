"""
Convert union result rings back into integer point loops.
"""

from typing import List, Sequence, Tuple

from .vertex_table import VertexTable

Loop = List[Tuple[int, int]]
Outline = List[Loop]


def to_outline(polygons: Sequence[Sequence[int]], table: VertexTable) -> Outline:
    """
    Map each ring's vertex ids to their grid coordinates.

    Ring order and vertex order are kept as they are; nothing is reoriented.
    """
    return [list(table.points(polygon)) for polygon in polygons]
