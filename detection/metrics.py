"""
Per-quad measurements: centre, apparent size, range and bearing.

Range is estimated monocularly from apparent size using power-law fits
taken against a tape measure with this camera, separately for width and
height.  The bearing is a linear gain on the horizontal offset from the
image midline (positive when the target is left of centre).
"""
from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

import hparams as HP
from .classifier import classify
from .models import Measurement


def center_of(points: np.ndarray) -> Tuple[float, float]:
    """Arithmetic mean of the corner coordinates."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    return float(pts[:, 0].mean()), float(pts[:, 1].mean())


def size_of(points: np.ndarray) -> Tuple[float, float]:
    """
    Rotation-tolerant width and height of a quad.

    Each axis is estimated twice, once per pair of opposite edges
    (P0-P1 with P2-P3, and P1-P2 with P3-P0), averaging the two edge deltas.
    The larger estimate is kept, which compensates for perspective skew
    when the target is viewed at an angle.
    """
    p = np.asarray(points, dtype=np.float64).reshape(-1, 2)

    def _axis(k: int) -> float:
        first = (abs(p[0, k] - p[1, k]) + abs(p[2, k] - p[3, k])) / 2.0
        second = (abs(p[1, k] - p[2, k]) + abs(p[3, k] - p[0, k])) / 2.0
        return max(first, second)

    return _axis(0), _axis(1)


def distance_from_width(size_x: float) -> float:
    return HP.DISTANCE_X_COEFF * size_x ** HP.DISTANCE_X_EXPONENT


def distance_from_height(size_y: float) -> float:
    return HP.DISTANCE_Y_COEFF * size_y ** HP.DISTANCE_Y_EXPONENT


def angle_from_center(center_x: float, image_width: int) -> float:
    """Signed bearing; the midline is the integer pixel column ``width // 2``."""
    return HP.ANGLE_GAIN * (image_width // 2 - center_x)


def compute_measurement(quad: np.ndarray, image_width: int) -> Measurement:
    """Build and classify the :class:`Measurement` for one 4-point quad."""
    points = np.asarray(quad).reshape(-1, 2)
    if len(points) != 4:
        raise ValueError(f"expected a 4-point quad, got {len(points)} points")

    cx, cy = center_of(points)
    sx, sy = size_of(points)
    measurement = Measurement(
        points=points,
        center_x=cx,
        center_y=cy,
        size_x=sx,
        size_y=sy,
        distance_x=distance_from_width(sx),
        distance_y=distance_from_height(sy),
        angle_x=angle_from_center(cx, image_width),
        valid=True,
    )
    return classify(measurement)


def compute_measurements(quads: Sequence[np.ndarray], image_width: int) -> List[Measurement]:
    return [compute_measurement(q, image_width) for q in quads]
