"""
Tests for the vertex table: quantization and deduplication.
"""

import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from element_outline.vertex_table import VertexTable, quantize


class TestQuantize(unittest.TestCase):

    def test_drops_z(self):
        self.assertEqual(quantize((1.0, 2.0, 99.0), scale=1.0), (1, 2))

    def test_scales_and_rounds(self):
        # One foot is 304.8 mm, rounded to 305
        self.assertEqual(quantize((1.0, 0.0, 0.0)), (305, 0))
        self.assertEqual(quantize((0.4, 0.6, 0.0), scale=1.0), (0, 1))

    def test_rounds_half_up_on_both_sides(self):
        self.assertEqual(quantize((0.5, -0.5, 0.0), scale=1.0), (1, 0))
        self.assertEqual(quantize((-1.5, -1.4, 0.0), scale=1.0), (-1, -1))

    def test_non_finite_raises(self):
        with self.assertRaises(ValueError):
            quantize((float('nan'), 0.0, 0.0))
        with self.assertRaises(ValueError):
            quantize((0.0, float('inf'), 0.0))

    def test_integer_type(self):
        x, y = quantize((1.23, 4.56, 0.0), scale=10.0)
        self.assertIsInstance(x, int)
        self.assertIsInstance(y, int)


class TestVertexTable(unittest.TestCase):

    def setUp(self):
        self.table = VertexTable(scale=1.0)

    def test_get_or_add_is_idempotent(self):
        a = self.table.get_or_add((1.0, 2.0, 3.0))
        b = self.table.get_or_add((1.0, 2.0, 3.0))
        self.assertEqual(a, b)
        self.assertEqual(len(self.table), 1)

    def test_same_grid_cell_same_id(self):
        """Points differing only in Z or below grid resolution share an id."""
        a = self.table.get_or_add((1.0, 2.0, 0.0))
        b = self.table.get_or_add((1.2, 1.9, 10.0))
        self.assertEqual(a, b)

    def test_distinct_points_distinct_ids(self):
        ids = [self.table.get_or_add((x, 0.0, 0.0)) for x in range(5)]
        self.assertEqual(ids, [0, 1, 2, 3, 4])

    def test_point_lookup(self):
        vid = self.table.get_or_add((3.0, -4.0, 0.0))
        self.assertEqual(self.table.point(vid), (3, -4))
        self.assertEqual(self.table.points([vid, vid]), [(3, -4), (3, -4)])

    def test_add_point_shares_ids_with_get_or_add(self):
        a = self.table.get_or_add((7.0, 8.0, 0.0))
        self.assertEqual(self.table.add_point((7, 8)), a)
        self.assertIn((7, 8), self.table)

    def test_clear_resets(self):
        self.table.get_or_add((1.0, 1.0, 0.0))
        self.table.get_or_add((2.0, 2.0, 0.0))
        self.table.clear()
        self.assertEqual(len(self.table), 0)
        self.assertNotIn((1, 1), self.table)
        # Ids start over after a clear
        self.assertEqual(self.table.get_or_add((5.0, 5.0, 0.0)), 0)

    def test_repr(self):
        self.table.get_or_add((0.0, 0.0, 0.0))
        self.assertIn("vertices=1", repr(self.table))


if __name__ == '__main__':
    unittest.main()
