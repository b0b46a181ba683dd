from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import numpy as np


class HeightCategory(Enum):
    """Mounting height of a target on the field."""

    UNKNOWN = "Unknown"
    HIGH = "High"
    MIDDLE = "Middle"
    MIDDLE_RIGHT = "MiddleRight"
    MIDDLE_LEFT = "MiddleLeft"
    LOW = "Low"
    MIDDLE_COMBINED = "MiddleCombined"

    def __str__(self) -> str:
        return self.value


@dataclass
class Measurement:
    """Measured geometry of one target quad (or of a merged middle pair)."""

    points: Optional[np.ndarray] = None          # (4, 2) corners; None when synthesised
    center_x: float = 0.0
    center_y: float = 0.0
    size_x: float = 0.0
    size_y: float = 0.0
    distance_x: float = 0.0
    distance_y: float = 0.0
    angle_x: float = 0.0
    tension: float = 0.0
    category: HeightCategory = HeightCategory.UNKNOWN
    valid: bool = False

    def describe(self) -> str:
        """One console line in the style of the target dump."""
        pts = "" if self.points is None else " ".join(
            f"({x:g}, {y:g})" for x, y in np.asarray(self.points).reshape(-1, 2)
        )
        return (
            f"Poly Points[{pts}] "
            f"Center ({self.center_x:f}, {self.center_y:f}) "
            f"Size ({self.size_x:f}, {self.size_y:f}) "
            f"Type {self.category}"
        )


@dataclass
class TargetSlots:
    """One frame's grouping outcome; every slot starts out invalid."""

    high: Measurement = field(default_factory=Measurement)
    middle_left: Measurement = field(default_factory=Measurement)
    middle_right: Measurement = field(default_factory=Measurement)
    low: Measurement = field(default_factory=Measurement)
    selected: Measurement = field(default_factory=Measurement)


@dataclass
class FrameResult:
    """Everything the pipeline produced for a single frame."""

    quads: List[np.ndarray]
    targets: List[np.ndarray]
    measurements: List[Measurement]
    slots: TargetSlots
    report: Optional[str] = None
    debug_images: Dict[str, np.ndarray] = field(default_factory=dict)

    @property
    def has_target(self) -> bool:
        return self.slots.selected.valid
