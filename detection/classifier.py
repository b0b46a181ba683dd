"""
Height classification.

Each known mounting height has a calibrated model of where the target's
centre should appear vertically in the image for a given estimated range.
A measurement takes the first model, tested in the order Low → Middle →
High, whose prediction falls within the tolerance band around the observed
centre-Y.  Distance estimates are noisy, so when several models fit the
lowest-mounted one wins.
"""
from __future__ import annotations

from typing import Callable, List, Tuple

import hparams as HP
from .models import HeightCategory, Measurement


def low_offset(distance: float) -> float:
    return HP.LOW_OFFSET_SLOPE * distance + HP.LOW_OFFSET_INTERCEPT


def middle_offset(distance: float) -> float:
    return HP.MIDDLE_OFFSET_SLOPE * distance + HP.MIDDLE_OFFSET_INTERCEPT


def high_offset(distance: float) -> float:
    # The camera can't see the high target move with range.
    return HP.HIGH_OFFSET


_HEIGHT_MODELS: List[Tuple[HeightCategory, Callable[[float], float]]] = [
    (HeightCategory.LOW, low_offset),
    (HeightCategory.MIDDLE, middle_offset),
    (HeightCategory.HIGH, high_offset),
]


def approximate_height(
    value: float,
    baseline: float,
    tolerance: float = HP.HEIGHT_TOLERANCE,
) -> bool:
    """Is *value* strictly within ±*tolerance* of *baseline*?"""
    return baseline * (1.0 - tolerance) < value < baseline * (1.0 + tolerance)


def classify_height(distance_y: float, center_y: float) -> HeightCategory:
    """Return the first height category whose expected centre-Y matches *center_y*."""
    for category, model in _HEIGHT_MODELS:
        if approximate_height(model(distance_y), center_y):
            return category
    return HeightCategory.UNKNOWN


def classify(measurement: Measurement) -> Measurement:
    """Assign ``measurement.category`` in place and return it."""
    measurement.category = classify_height(measurement.distance_y, measurement.center_y)
    return measurement
