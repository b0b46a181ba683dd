"""
Optional sub-pixel corner refinement.

Polygon simplification snaps corners to contour pixels, which may sit a
pixel or two off the true corner.  A refiner may replace the coarse
vertices of a target quad with better ones before measurements are taken.
The base :class:`CornerRefiner` is a passthrough, so the pipeline behaves
identically when refinement is disabled.

:class:`LineFitCornerRefiner` fits a line to the hull points supporting
each quad edge and takes the intersections of consecutive edge lines as
the new corners.
"""
from __future__ import annotations

from typing import Optional, Tuple

import cv2
import numpy as np

import hparams as HP

# (vx, vy, x0, y0) as returned by cv2.fitLine
Line = Tuple[float, float, float, float]


def intersect_lines(
    line1: Line,
    line2: Line,
    eps: float = HP.REFINE_PARALLEL_EPS,
) -> Optional[Tuple[float, float]]:
    """Intersection of two parametric lines, or ``None`` when (nearly) parallel."""
    vx1, vy1, x1, y1 = line1
    vx2, vy2, x2, y2 = line2
    cross = vx1 * vy2 - vy1 * vx2
    if abs(cross) < eps:
        return None
    t = ((x2 - x1) * vy2 - (y2 - y1) * vx2) / cross
    return x1 + t * vx1, y1 + t * vy1


class CornerRefiner:
    """Identity refiner: returns the quad unchanged."""

    def refine(self, quad: np.ndarray, hull: Optional[np.ndarray] = None) -> np.ndarray:
        return quad


class LineFitCornerRefiner(CornerRefiner):
    """
    Refine quad corners as intersections of least-squares edge lines.

    Parameters
    ----------
    edge_tolerance_px : float
        Hull points within this perpendicular distance of an edge (and
        projecting onto the edge segment) support that edge's line.  An
        edge with fewer than two supporting points keeps the line through
        its coarse vertices.
    """

    def __init__(self, edge_tolerance_px: float = HP.REFINE_EDGE_TOLERANCE_PX) -> None:
        if edge_tolerance_px < 0:
            raise ValueError(f"edge_tolerance_px must be non-negative, got {edge_tolerance_px}")
        self.edge_tolerance_px = edge_tolerance_px

    # ------------------------------------------------------------------ public
    def refine(self, quad: np.ndarray, hull: Optional[np.ndarray] = None) -> np.ndarray:
        corners = np.asarray(quad, dtype=np.float64).reshape(-1, 2)
        support = (
            np.empty((0, 2)) if hull is None
            else np.asarray(hull, dtype=np.float64).reshape(-1, 2)
        )
        n = len(corners)
        lines = [
            self._fit_edge(corners[k], corners[(k + 1) % n], support)
            for k in range(n)
        ]

        refined = corners.copy()
        for k in range(n):
            # corner k joins edge k-1 and edge k
            point = intersect_lines(lines[k - 1], lines[k])
            if point is not None:
                refined[k] = point
        return refined.astype(np.float32)

    # ----------------------------------------------------------------- private
    def _fit_edge(self, a: np.ndarray, b: np.ndarray, support: np.ndarray) -> Line:
        pts = self._edge_support(a, b, support)
        if len(pts) < 2:
            pts = np.vstack([a, b])
        vx, vy, x0, y0 = cv2.fitLine(pts.astype(np.float32), cv2.DIST_L2, 0, 0.01, 0.01).ravel()
        return float(vx), float(vy), float(x0), float(y0)

    def _edge_support(self, a: np.ndarray, b: np.ndarray, support: np.ndarray) -> np.ndarray:
        if len(support) == 0:
            return support
        d = b - a
        length = float(np.hypot(d[0], d[1]))
        if length < 1e-9:
            return support[:0]
        rel = support - a
        t = (rel @ d) / (length * length)
        dist = np.abs(rel[:, 0] * d[1] - rel[:, 1] * d[0]) / length
        mask = (t >= 0.0) & (t <= 1.0) & (dist <= self.edge_tolerance_px)
        return support[mask]
