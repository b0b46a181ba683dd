"""
Debug windows and segmentation sliders (``--gui-all`` mode).

The sliders are read once at the start of each frame into a fresh
:class:`SegmentationConfig`, so the pipeline only ever sees an immutable
snapshot.
"""
from __future__ import annotations

from typing import Dict, Tuple

import cv2

import hparams as HP
from config import SegmentationConfig

DEBUG_WINDOWS: Tuple[str, ...] = (
    "Source", "Color", "Dilate", "Threshold Raw",
    "Polygon", "PrunedPolygon", "Targets", "Final",
)

# field → (trackbar label, window, max)
_SLIDERS: Dict[str, Tuple[str, str, int]] = {
    "min_area":      ("minsize", "PrunedPolygon", HP.MIN_AREA_MAX),
    "threshold":     ("threshold", "Threshold Raw", HP.THRESHOLD_MAX),
    "poly_epsilon":  ("Poly epsilon", "Polygon", HP.POLY_EPSILON_MAX),
    "morph_element": ("Element: 0:Rect 1:Cross 2:Ellipse", "Dilate", HP.MORPH_ELEMENT_MAX),
    "morph_size":    ("Kernel size: 2n+1", "Dilate", HP.MORPH_SIZE_MAX),
    "erode_count":   ("Erode", "Dilate", HP.ERODE_COUNT_MAX),
}


class TuningPanel:
    """Creates the debug windows with their sliders, seeded from *initial*."""

    def __init__(self, initial: SegmentationConfig) -> None:
        for name in DEBUG_WINDOWS:
            cv2.namedWindow(name, cv2.WINDOW_AUTOSIZE)
        for field_name, (label, window, maximum) in _SLIDERS.items():
            cv2.createTrackbar(label, window, getattr(initial, field_name), maximum, _ignore)

    @staticmethod
    def snapshot() -> SegmentationConfig:
        values = {
            field_name: cv2.getTrackbarPos(label, window)
            for field_name, (label, window, _) in _SLIDERS.items()
        }
        return SegmentationConfig(**values)


def _ignore(_value: int) -> None:
    # Sliders are polled each frame; no callback work needed.
    pass
