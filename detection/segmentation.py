"""
Image segmentation: BGR frame → simplified polygon outlines.

Steps
-----
1. Colour-plane differencing: ``primary − ½·secondary − ½·tertiary``
   isolates the ring-light colour reflected by the tape.
2. Close: one dilation followed by ``erode_count`` erosions.
3. Binary threshold.
4. Contours (full hierarchy, so the inner outline of the tape is kept),
   convex hull per contour, and Douglas-Peucker simplification of each hull.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

import cv2
import numpy as np

import hparams as HP
from config import ColourPlanes, SegmentationConfig

_MORPH_SHAPES = (cv2.MORPH_RECT, cv2.MORPH_CROSS, cv2.MORPH_ELLIPSE)


@dataclass
class SegmentationResult:
    """Polygons for one frame plus the intermediate images for debugging."""

    polygons: List[np.ndarray]        # (N, 2) int32, one per contour
    hulls: List[np.ndarray]           # (M, 2) int32, aligned with polygons
    images: Dict[str, np.ndarray] = field(default_factory=dict)


def structuring_element(element: int, size: int) -> np.ndarray:
    """(2·size+1)² kernel anchored at its centre; element 0 rect, 1 cross, 2 ellipse."""
    k = 2 * size + 1
    return cv2.getStructuringElement(_MORPH_SHAPES[element], (k, k), (size, size))


def isolate_colour(bgr: np.ndarray, planes: ColourPlanes) -> np.ndarray:
    channels = cv2.split(bgr)
    colour = cv2.addWeighted(
        channels[planes.primary], 1.0,
        channels[planes.secondary], HP.SECONDARY_PLANE_WEIGHT, 0,
    )
    return cv2.addWeighted(colour, 1.0, channels[planes.tertiary], HP.TERTIARY_PLANE_WEIGHT, 0)


def close_mask(gray: np.ndarray, cfg: SegmentationConfig) -> np.ndarray:
    kernel = structuring_element(cfg.morph_element, cfg.morph_size)
    out = cv2.dilate(gray, kernel)
    for _ in range(cfg.erode_count):
        out = cv2.erode(out, kernel)
    return out


def segment_frame(
    bgr: np.ndarray,
    cfg: SegmentationConfig,
    planes: ColourPlanes,
) -> SegmentationResult:
    """Run the full segmentation chain on *bgr* with one config snapshot."""
    colour = isolate_colour(bgr, planes)
    closed = close_mask(colour, cfg)
    _, binary = cv2.threshold(closed, cfg.threshold, 255, cv2.THRESH_BINARY)

    contours, _ = cv2.findContours(binary, cv2.RETR_TREE, cv2.CHAIN_APPROX_SIMPLE)

    polygons: List[np.ndarray] = []
    hulls: List[np.ndarray] = []
    for cnt in contours:
        hull = cv2.convexHull(cnt)
        poly = cv2.approxPolyDP(hull, cfg.poly_epsilon, True)
        hulls.append(hull.reshape(-1, 2))
        polygons.append(poly.reshape(-1, 2))

    return SegmentationResult(
        polygons=polygons,
        hulls=hulls,
        images={"Color": colour, "Dilate": closed, "Threshold Raw": binary},
    )
