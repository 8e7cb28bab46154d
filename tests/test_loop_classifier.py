"""
Tests for face loop sorting and classification.
"""

import math
import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from element_outline.geometry import Arc, CurveLoop, Face, Line
from element_outline.loop_classifier import (
    classify,
    classify_loops,
    loop_to_polygon,
    sort_curve_loops,
    tessellate_loop
)
from element_outline.rings import signed_area
from element_outline.vertex_table import VertexTable
from tests.helpers import polygon_loop, square_loop


class TestTessellateLoop(unittest.TestCase):

    def test_shared_joints_dropped(self):
        loop = square_loop(0, 0, 2, 2)
        points = tessellate_loop(loop, 72)
        self.assertEqual(len(points), 4)
        self.assertEqual(points[0], (0, 0, 0.0))

    def test_arc_segments(self):
        """A half circle with 72 segments per turn gives 36 segments."""
        arc = Arc(center=(0.0, 0.0, 0.0), radius=10.0, start_angle=0.0, end_angle=math.pi)
        points = arc.tessellate(72)
        self.assertEqual(len(points), 37)
        self.assertAlmostEqual(points[0][0], 10.0)
        self.assertAlmostEqual(points[-1][0], -10.0)

    def test_circle_loop(self):
        """A full circle closes on its start vertex, which is not repeated."""
        table = VertexTable(scale=1.0)
        loop = CurveLoop([Arc((0.0, 0.0, 0.0), 50.0, 0.0, 2 * math.pi)])
        polygon = loop_to_polygon(loop, table, 16)
        self.assertEqual(len(polygon), 16)
        self.assertEqual(table.point(polygon[0]), (50, 0))


class TestSortCurveLoops(unittest.TestCase):

    def test_outer_loop_comes_first(self):
        hole = square_loop(1, 1, 2, 2, ccw=False)
        outer = square_loop(0, 0, 3, 3)
        groups = sort_curve_loops([hole, outer], 72)
        self.assertEqual(len(groups), 1)
        self.assertIs(groups[0][0], outer)
        self.assertIs(groups[0][1], hole)

    def test_separate_outer_loops(self):
        a = square_loop(0, 0, 1, 1)
        b = square_loop(5, 5, 6, 6)
        groups = sort_curve_loops([a, b], 72)
        self.assertEqual(groups, [[a], [b]])

    def test_island_in_hole_starts_own_group(self):
        outer = square_loop(0, 0, 10, 10)
        hole = square_loop(2, 2, 8, 8, ccw=False)
        island = square_loop(4, 4, 6, 6)
        groups = sort_curve_loops([island, hole, outer], 72)
        self.assertEqual(len(groups), 2)
        roots = [g[0] for g in groups]
        self.assertIn(outer, roots)
        self.assertIn(island, roots)
        outer_group = next(g for g in groups if g[0] is outer)
        self.assertEqual(outer_group, [outer, hole])


class TestLoopToPolygon(unittest.TestCase):

    def test_repeated_vertices_elided(self):
        """Points collapsing on the same grid cell produce a single vertex."""
        table = VertexTable(scale=1.0)
        loop = polygon_loop([
            (0.0, 0.0, 0.0), (0.1, 0.0, 0.0), (4.0, 0.0, 0.0), (4.0, 4.0, 0.0), (0.0, 4.0, 0.0)
        ])
        polygon = loop_to_polygon(loop, table, 72)
        self.assertEqual(len(polygon), 4)
        self.assertEqual(len(set(polygon)), 4)

    def test_single_closed_ring_per_loop(self):
        table = VertexTable(scale=1.0)
        polygon = loop_to_polygon(square_loop(0, 0, 3, 3), table, 72)
        self.assertEqual(table.points(polygon), [(0, 0), (3, 0), (3, 3), (0, 3)])


class TestClassifyLoops(unittest.TestCase):

    def setUp(self):
        self.table = VertexTable(scale=1.0)

    def test_outer_and_hole_partition(self):
        """One counter-clockwise outer ring and one clockwise hole."""
        face = Face([square_loop(0, 0, 10, 10), square_loop(3, 3, 6, 6, ccw=False)], normal=(0, 0, 1))
        loops = classify_loops(face, self.table)
        self.assertEqual(len(loops.outer), 1)
        self.assertEqual(len(loops.holes), 1)
        self.assertGreater(signed_area(self.table.points(loops.outer[0])), 0)
        self.assertLess(signed_area(self.table.points(loops.holes[0])), 0)

    def test_classify_emits_outer_only_by_default(self):
        face = Face([square_loop(0, 0, 10, 10), square_loop(3, 3, 6, 6, ccw=False)], normal=(0, 0, 1))
        polygons = classify(face, self.table)
        self.assertEqual(len(polygons), 1)
        self.assertEqual(signed_area(self.table.points(polygons[0])), 100)

    def test_classify_with_holes(self):
        face = Face([square_loop(0, 0, 10, 10), square_loop(3, 3, 6, 6, ccw=False)], normal=(0, 0, 1))
        polygons = classify(face, self.table, include_holes=True)
        self.assertEqual(len(polygons), 2)
        self.assertEqual(signed_area(self.table.points(polygons[1])), -9)

    def test_hole_forced_clockwise(self):
        """A hole loop given counter-clockwise is still emitted clockwise."""
        face = Face([square_loop(0, 0, 10, 10), square_loop(3, 3, 6, 6)], normal=(0, 0, 1))
        loops = classify_loops(face, self.table)
        self.assertLess(signed_area(self.table.points(loops.holes[0])), 0)

    def test_downward_face_contributes_nothing(self):
        face = Face([square_loop(0, 0, 1, 1, ccw=False)], normal=(0, 0, -1))
        loops = classify_loops(face, self.table)
        self.assertEqual(loops.outer, [])
        self.assertEqual(loops.holes, [])
        self.assertEqual(loops.downward, 1)

    def test_sloped_face(self):
        """A sloped face projects to its plan area."""
        loop = polygon_loop([(0, 0, 0), (4, 0, 0), (4, 2, 3), (0, 2, 3)])
        face = Face([loop], normal=(0.0, -0.83, 0.55))
        polygons = classify(face, self.table)
        self.assertEqual(len(polygons), 1)
        self.assertEqual(signed_area(self.table.points(polygons[0])), 8)

    def test_curved_face_with_arc(self):
        """Half disc bounded by an arc and its diameter."""
        loop = CurveLoop([
            Arc((0.0, 0.0, 0.0), 100.0, 0.0, math.pi),
            Line((-100.0, 0.0, 0.0), (100.0, 0.0, 0.0))
        ])
        polygons = classify(Face([loop]), self.table, segments_per_turn=72)
        self.assertEqual(len(polygons), 1)
        area = signed_area(self.table.points(polygons[0]))
        self.assertAlmostEqual(area, math.pi * 100 ** 2 / 2, delta=200)

    def test_zero_area_loop_skipped(self):
        loop = polygon_loop([(0, 0, 0), (5, 0, 0), (5, 0, 3), (0, 0, 3)])
        self.assertEqual(classify(Face([loop]), self.table), [])


if __name__ == '__main__':
    unittest.main()
