"""
Measurement, Classification and Tension Tests
=============================================

Unit tests for the per-quad measurements (centre, size, range, bearing),
the height classifier and the tension model.
"""

import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import unittest

import numpy as np

import hparams as HP
from detection.classifier import (
    approximate_height,
    classify_height,
    high_offset,
    low_offset,
    middle_offset,
)
from detection.metrics import (
    angle_from_center,
    center_of,
    compute_measurement,
    compute_measurements,
    distance_from_height,
    distance_from_width,
    size_of,
)
from detection.models import HeightCategory, Measurement
from detection.tension import apply_tension, distance_to_tension


class TestGeometry(unittest.TestCase):
    def test_center_is_vertex_mean(self):
        self.assertEqual(center_of(np.array([[0, 0], [10, 0], [10, 20], [0, 20]])), (5.0, 10.0))

    def test_size_of_axis_aligned_rectangle(self):
        self.assertEqual(size_of(np.array([[0, 0], [40, 0], [40, 30], [0, 30]])), (40.0, 30.0))

    def test_size_of_is_independent_of_start_vertex(self):
        rect = np.array([[0, 0], [40, 0], [40, 30], [0, 30]])
        self.assertEqual(size_of(np.roll(rect, 1, axis=0)), (40.0, 30.0))

    def test_size_of_takes_larger_edge_pair(self):
        # left edge 60 tall, right edge 40 tall: vertical estimate is (60 + 40) / 2
        skewed = np.array([[0, 0], [100, 10], [100, 50], [0, 60]])
        sx, sy = size_of(skewed)
        self.assertEqual(sx, 100.0)
        self.assertEqual(sy, 50.0)


class TestRangeAndBearing(unittest.TestCase):
    def test_distance_models_match_calibration(self):
        self.assertAlmostEqual(distance_from_width(100.0), 9952.5956566118 * 100.0 ** -1.0154997664)
        self.assertAlmostEqual(distance_from_height(100.0), 7560.3188994048 * 100.0 ** -1.0190855673)

    def test_distances_strictly_decrease_with_size(self):
        sizes = [0.5, 1.0, 5.0, 20.0, 80.0, 160.0, 400.0, 1000.0]
        for fn in (distance_from_width, distance_from_height):
            values = [fn(s) for s in sizes]
            for closer, farther in zip(values, values[1:]):
                self.assertGreater(closer, farther)

    def test_angle_sign_convention(self):
        self.assertAlmostEqual(angle_from_center(100.0, 320), 0.1105 * 60)
        self.assertAlmostEqual(angle_from_center(220.0, 320), -0.1105 * 60)
        self.assertEqual(angle_from_center(160.0, 320), 0.0)

    def test_angle_uses_integer_midline(self):
        self.assertAlmostEqual(angle_from_center(160.0, 321), 0.0)


class TestHeightClassifier(unittest.TestCase):
    def test_approximate_height_band(self):
        self.assertTrue(approximate_height(100, 100))
        self.assertFalse(approximate_height(121, 100))
        self.assertTrue(approximate_height(80.01, 100))
        self.assertFalse(approximate_height(79.9, 100))

    def test_offset_models(self):
        self.assertAlmostEqual(low_offset(100.0), 0.1418 * 100.0 + 133.97)
        self.assertAlmostEqual(middle_offset(100.0), 0.809 * 100.0 - 55.7)
        self.assertEqual(high_offset(5.0), 232.0)
        self.assertEqual(high_offset(500.0), 232.0)

    def test_low_matches(self):
        # low_offset(40) = 139.642
        self.assertEqual(classify_height(40.0, 140.0), HeightCategory.LOW)

    def test_middle_matches(self):
        # at 300 in: low 176.51 (outside 184..276), middle 187.0 (inside)
        self.assertFalse(approximate_height(low_offset(300.0), 230.0))
        self.assertTrue(approximate_height(middle_offset(300.0), 230.0))
        self.assertEqual(classify_height(300.0, 230.0), HeightCategory.MIDDLE)

    def test_high_matches(self):
        # at 100 in: low 148.15, middle 25.2, high 232
        self.assertEqual(classify_height(100.0, 240.0), HeightCategory.HIGH)

    def test_low_wins_when_several_models_fit(self):
        # at 230 in: low 166.584, middle 130.37; both within (128, 192)
        self.assertTrue(approximate_height(middle_offset(230.0), 160.0))
        self.assertEqual(classify_height(230.0, 160.0), HeightCategory.LOW)

    def test_unknown_when_nothing_fits(self):
        self.assertEqual(classify_height(100.0, 20.0), HeightCategory.UNKNOWN)


class TestComputeMeasurement(unittest.TestCase):
    def test_measurement_fields(self):
        q = np.array([[100, 40], [300, 40], [300, 200], [100, 200]], dtype=np.int32)
        m = compute_measurement(q, image_width=320)

        self.assertTrue(m.valid)
        self.assertEqual((m.center_x, m.center_y), (200.0, 120.0))
        self.assertEqual((m.size_x, m.size_y), (200.0, 160.0))
        self.assertAlmostEqual(m.distance_x, distance_from_width(200.0))
        self.assertAlmostEqual(m.distance_y, distance_from_height(160.0))
        self.assertAlmostEqual(m.angle_x, 0.1105 * (160 - 200))
        self.assertEqual(m.tension, 0.0)
        self.assertEqual(m.category, HeightCategory.LOW)
        np.testing.assert_array_equal(m.points, q)

    def test_rejects_non_quads(self):
        with self.assertRaises(ValueError):
            compute_measurement(np.array([[0, 0], [10, 0], [5, 10]]), image_width=320)

    def test_one_measurement_per_quad(self):
        quads = [
            np.array([[0, 0], [50, 0], [50, 50], [0, 50]]),
            np.array([[100, 0], [150, 0], [150, 50], [100, 50]]),
        ]
        self.assertEqual(len(compute_measurements(quads, 320)), 2)
        self.assertEqual(compute_measurements([], 320), [])

    def test_default_measurement_is_invalid(self):
        m = Measurement()
        self.assertFalse(m.valid)
        self.assertEqual(m.category, HeightCategory.UNKNOWN)


class TestTension(unittest.TestCase):
    def test_intercept(self):
        self.assertAlmostEqual(distance_to_tension(0), 253.3795124961)

    def test_monotonic_increasing(self):
        values = [distance_to_tension(d) for d in (0, 10, 50, 120, 400)]
        self.assertEqual(values, sorted(values))
        self.assertEqual(len(set(values)), len(values))

    def test_slope(self):
        self.assertAlmostEqual(
            distance_to_tension(100.0) - distance_to_tension(0.0),
            HP.TENSION_SLOPE * 100.0,
        )

    def test_apply_tension_only_to_valid_targets(self):
        target = Measurement(distance_y=100.0, valid=True)
        apply_tension(target)
        self.assertAlmostEqual(target.tension, 1.7144399877 * 100.0 + 253.3795124961)

        unfilled = Measurement(distance_y=100.0)
        apply_tension(unfilled)
        self.assertEqual(unfilled.tension, 0.0)


if __name__ == "__main__":
    unittest.main()
