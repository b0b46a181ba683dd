"""
Slot assignment and canonical target selection.

The field has one high, one low and two middle targets (left and right).
Classified measurements are sorted into those slots, a lone middle target
is resolved to left or right, and one target is selected for reporting
with the priority high → low → combined middles → left → right.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

import hparams as HP
from .models import HeightCategory, Measurement, TargetSlots

SLOT_RANKINGS = ("first", "largest")


def targets_of_type(
    measurements: Sequence[Measurement],
    category: HeightCategory,
) -> List[Measurement]:
    return [m for m in measurements if m.category == category]


def pick_slot(candidates: Sequence[Measurement], ranking: str = HP.SLOT_RANKING) -> Optional[Measurement]:
    """
    Choose the measurement for a single-occupancy slot (high or low).

    ``"first"`` keeps the first candidate in list order; ``"largest"`` keeps
    the one with the largest apparent height, i.e. the closest target.
    """
    if not candidates:
        return None
    if ranking == "first":
        return candidates[0]
    if ranking == "largest":
        return max(candidates, key=lambda m: m.size_y)
    raise ValueError(f"Unknown slot ranking '{ranking}'. Valid options: {', '.join(SLOT_RANKINGS)}")


def _assign_middle(slots: TargetSlots, measurement: Measurement, left: bool) -> None:
    if left:
        measurement.category = HeightCategory.MIDDLE_LEFT
        slots.middle_left = measurement
    else:
        measurement.category = HeightCategory.MIDDLE_RIGHT
        slots.middle_right = measurement


def combine_middles(left: Measurement, right: Measurement) -> Measurement:
    """Component-wise average of the two middle targets; carries no points."""
    return Measurement(
        center_x=(left.center_x + right.center_x) / 2,
        center_y=(left.center_y + right.center_y) / 2,
        size_x=(left.size_x + right.size_x) / 2,
        size_y=(left.size_y + right.size_y) / 2,
        distance_x=(left.distance_x + right.distance_x) / 2,
        distance_y=(left.distance_y + right.distance_y) / 2,
        angle_x=(left.angle_x + right.angle_x) / 2,
        category=HeightCategory.MIDDLE_COMBINED,
        valid=True,
    )


def select_target(slots: TargetSlots) -> Measurement:
    if slots.high.valid:
        return slots.high
    if slots.low.valid:
        return slots.low
    if slots.middle_left.valid and slots.middle_right.valid:
        return combine_middles(slots.middle_left, slots.middle_right)
    if slots.middle_left.valid:
        return slots.middle_left
    if slots.middle_right.valid:
        return slots.middle_right
    return Measurement()


def group_targets(
    measurements: Sequence[Measurement],
    image_width: int,
    slot_ranking: str = HP.SLOT_RANKING,
) -> TargetSlots:
    """
    Sort classified *measurements* into :class:`TargetSlots` and select one.

    Middle measurements are re-tagged in place as ``MIDDLE_LEFT`` or
    ``MIDDLE_RIGHT`` when they are resolved.  With zero or more than two
    middle candidates no middle slot is filled.
    """
    slots = TargetSlots()

    high = pick_slot(targets_of_type(measurements, HeightCategory.HIGH), slot_ranking)
    if high is not None:
        slots.high = high

    low = pick_slot(targets_of_type(measurements, HeightCategory.LOW), slot_ranking)
    if low is not None:
        slots.low = low

    middles = targets_of_type(measurements, HeightCategory.MIDDLE)
    if len(middles) == 2:
        left, right = sorted(middles, key=lambda m: m.center_x)
        _assign_middle(slots, left, left=True)
        _assign_middle(slots, right, left=False)
    elif len(middles) == 1:
        middle = middles[0]
        # A visible centre target is a better reference than the image midline.
        if slots.high.valid:
            reference_x = slots.high.center_x
        elif slots.low.valid:
            reference_x = slots.low.center_x
        else:
            reference_x = image_width / 2.0
        _assign_middle(slots, middle, left=middle.center_x < reference_x)

    slots.selected = select_target(slots)
    return slots
