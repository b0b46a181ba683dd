"""
Candidate filtering: keep well-formed quads, then keep only the quads that
enclose another candidate.

The physical target is a double outline of reflective tape, so a genuine
target shows up as an outer quad with the inner quad's corner inside it.
Single quads (noise blobs, lights) never contain anything and are dropped.
"""
from __future__ import annotations

from typing import List, Sequence

import cv2
import numpy as np

import hparams as HP


def _as_contour(polygon: np.ndarray) -> np.ndarray:
    """Reshape to (N, 1, 2) with a dtype OpenCV accepts (int32 or float32)."""
    pts = np.asarray(polygon)
    dtype = np.float32 if np.issubdtype(pts.dtype, np.floating) else np.int32
    return pts.astype(dtype).reshape(-1, 1, 2)


def is_candidate_quad(polygon: np.ndarray, min_area: float = HP.MIN_AREA) -> bool:
    """True for 4-vertex polygons whose bounding rectangle exceeds *min_area*."""
    if len(polygon) != 4:
        return False
    _, _, w, h = cv2.boundingRect(_as_contour(polygon))
    return w * h > min_area


def prune_polygons(
    polygons: Sequence[np.ndarray],
    min_area: float = HP.MIN_AREA,
) -> List[np.ndarray]:
    """Filter *polygons* down to sufficiently large quadrilaterals, order preserved."""
    return [p for p in polygons if is_candidate_quad(p, min_area)]


def contains_other(i: int, quads: Sequence[np.ndarray]) -> bool:
    """
    Return ``True`` when the first vertex of any other quad lies strictly
    inside ``quads[i]``.  Points on the boundary do not count.
    """
    outline = _as_contour(quads[i])
    for j, other in enumerate(quads):
        if i == j:
            continue
        x, y = np.asarray(other).reshape(-1, 2)[0]
        if cv2.pointPolygonTest(outline, (float(x), float(y)), False) > 0:
            return True
    return False


def find_nested_quads(quads: Sequence[np.ndarray]) -> List[np.ndarray]:
    """Keep the quads that contain at least one other candidate, order preserved."""
    if len(quads) < 2:
        return []
    return [q for i, q in enumerate(quads) if contains_other(i, quads)]
