"""
Pruning and Nested-Quad Tests
=============================

Unit tests for the candidate filters: the 4-vertex / minimum-area pruning
step and the nested-quad containment test.
"""

import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import unittest

import numpy as np

from detection.pruning import (
    contains_other,
    find_nested_quads,
    is_candidate_quad,
    prune_polygons,
)


def quad(*points):
    return np.array(points, dtype=np.int32)


OUTER = quad((0, 0), (100, 0), (100, 100), (0, 100))
INNER = quad((40, 40), (60, 40), (60, 60), (40, 60))


class TestPrunePolygons(unittest.TestCase):
    def test_rejects_non_quads_regardless_of_area(self):
        triangle = quad((0, 0), (300, 0), (150, 300))
        pentagon = quad((0, 0), (300, 0), (300, 300), (150, 400), (0, 300))
        self.assertEqual(prune_polygons([triangle, pentagon], min_area=0), [])

    def test_rejects_small_quads(self):
        # bounding rect is 11 x 11 = 121 px²
        small = quad((0, 0), (10, 0), (10, 10), (0, 10))
        self.assertFalse(is_candidate_quad(small, min_area=500))
        self.assertFalse(is_candidate_quad(small, min_area=121))
        self.assertTrue(is_candidate_quad(small, min_area=120))

    def test_keeps_large_quads_in_order(self):
        a = quad((0, 0), (50, 0), (50, 50), (0, 50))
        b = quad((100, 100), (200, 100), (200, 200), (100, 200))
        noise = quad((0, 0), (2, 0), (2, 2))
        kept = prune_polygons([b, noise, a], min_area=500)
        self.assertEqual(len(kept), 2)
        self.assertIs(kept[0], b)
        self.assertIs(kept[1], a)

    def test_empty_input(self):
        self.assertEqual(prune_polygons([], min_area=500), [])


class TestNestedQuads(unittest.TestCase):
    def test_outer_kept_inner_dropped(self):
        targets = find_nested_quads([INNER, OUTER])
        self.assertEqual(len(targets), 1)
        self.assertIs(targets[0], OUTER)

    def test_single_quad_has_nothing_to_contain(self):
        self.assertEqual(find_nested_quads([OUTER]), [])
        self.assertEqual(find_nested_quads([]), [])

    def test_disjoint_quads_are_rejected(self):
        far = quad((200, 200), (300, 200), (300, 300), (200, 300))
        self.assertEqual(find_nested_quads([OUTER, far]), [])

    def test_boundary_point_does_not_count(self):
        # first vertex sits exactly on OUTER's top edge
        touching = quad((50, 0), (150, 0), (150, 100), (50, 100))
        self.assertFalse(contains_other(0, [OUTER, touching]))

    def test_containing_one_of_several_is_enough(self):
        far = quad((200, 200), (300, 200), (300, 300), (200, 300))
        self.assertTrue(contains_other(0, [OUTER, far, INNER]))
        self.assertEqual(find_nested_quads([OUTER, far, INNER]), [OUTER])

    def test_two_target_pairs(self):
        outer2 = quad((200, 0), (300, 0), (300, 100), (200, 100))
        inner2 = quad((240, 40), (260, 40), (260, 60), (240, 60))
        targets = find_nested_quads([OUTER, INNER, outer2, inner2])
        self.assertEqual(len(targets), 2)
        self.assertIs(targets[0], OUTER)
        self.assertIs(targets[1], outer2)


if __name__ == "__main__":
    unittest.main()
