"""
Per-frame target pipeline.

Chains segmentation, pruning, nested-quad detection, optional corner
refinement, measurement, grouping and tension into one call per frame.
Nothing is carried from one frame to the next.

Usage
-----
pipeline = TargetPipeline(PipelineConfig())
result: FrameResult = pipeline.process(bgr_frame)
if result.report is not None:
    reporter.send_text(result.report)
annotated = pipeline.draw(bgr_frame, result)
"""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import cv2
import numpy as np

from comms.reporter import format_report
from config import PipelineConfig, SegmentationConfig
from .grouping import SLOT_RANKINGS, group_targets
from .metrics import compute_measurements
from .models import FrameResult
from .pruning import find_nested_quads, prune_polygons
from .refinement import CornerRefiner, LineFitCornerRefiner
from .segmentation import segment_frame
from .tension import apply_tension

_WHITE = (255, 255, 255)
_MAGENTA = (255, 0, 255)


class TargetPipeline:
    """
    Turns a frame (or an already-extracted polygon list) into a
    :class:`FrameResult`.

    Parameters
    ----------
    config : PipelineConfig
        Segmentation defaults, colour planes, slot ranking and whether to
        refine corners.
    refiner : CornerRefiner | None
        Explicit refiner; overrides ``config.refine_corners`` when given.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        refiner: Optional[CornerRefiner] = None,
    ) -> None:
        self._cfg = config or PipelineConfig()
        if self._cfg.slot_ranking not in SLOT_RANKINGS:
            raise ValueError(
                f"Unknown slot ranking '{self._cfg.slot_ranking}'. "
                f"Valid options: {', '.join(SLOT_RANKINGS)}"
            )
        if refiner is None:
            refiner = LineFitCornerRefiner() if self._cfg.refine_corners else CornerRefiner()
        self._refiner = refiner

    @property
    def config(self) -> PipelineConfig:
        return self._cfg

    # ------------------------------------------------------------------ public
    def process(
        self,
        bgr: np.ndarray,
        segmentation: Optional[SegmentationConfig] = None,
        debug: bool = False,
    ) -> FrameResult:
        """
        Segment *bgr* and run the geometric pipeline.

        *segmentation* is this frame's tunables snapshot (e.g. from the
        sliders); the configured defaults are used when omitted.  With
        *debug* the intermediate images and outline drawings are attached
        to ``result.debug_images``.
        """
        seg_cfg = segmentation or self._cfg.segmentation
        seg = segment_frame(bgr, seg_cfg, self._cfg.planes)
        result = self.process_polygons(
            seg.polygons,
            image_width=bgr.shape[1],
            hulls=seg.hulls,
            min_area=seg_cfg.min_area,
        )
        if debug:
            shape = bgr.shape[:2]
            result.debug_images = dict(seg.images)
            result.debug_images["Polygon"] = self.draw_outlines(shape, seg.polygons)
            result.debug_images["PrunedPolygon"] = self.draw_outlines(shape, result.quads)
            result.debug_images["Targets"] = self.draw_outlines(shape, result.targets)
        return result

    def process_polygons(
        self,
        polygons: Sequence[np.ndarray],
        image_width: int,
        hulls: Optional[Sequence[np.ndarray]] = None,
        min_area: Optional[float] = None,
    ) -> FrameResult:
        """Run pruning → nesting → refinement → metrics → grouping → tension."""
        if min_area is None:
            min_area = self._cfg.segmentation.min_area

        quads = prune_polygons(polygons, min_area)
        targets = find_nested_quads(quads)
        targets = self._refine(targets, polygons, hulls)

        measurements = compute_measurements(targets, image_width)
        slots = group_targets(measurements, image_width, self._cfg.slot_ranking)

        report = None
        selected = slots.selected
        if selected.valid:
            apply_tension(selected)
            report = format_report(selected.distance_y, selected.angle_x, selected.tension)

        return FrameResult(
            quads=quads,
            targets=targets,
            measurements=measurements,
            slots=slots,
            report=report,
        )

    def draw(self, bgr: np.ndarray, result: FrameResult) -> np.ndarray:
        """Return a copy of *bgr* with target outlines, per-target text and the selection."""
        out = bgr.copy()
        outlines = [np.round(np.asarray(t)).astype(np.int32).reshape(-1, 1, 2) for t in result.targets]
        if outlines:
            cv2.drawContours(out, outlines, -1, _WHITE, 1)

        for m in result.measurements:
            cx, cy = int(m.center_x), int(m.center_y)
            cv2.circle(out, (cx, cy), 10, _WHITE)
            lines = [
                f"Center: X: {m.center_x:g} Y: {m.center_y:g}",
                f"Size: X: {m.size_x:g} Y: {m.size_y:g}",
                f"Distance: X: {m.distance_x:g} Y: {m.distance_y:g}",
                f"Angle: X: {m.angle_x:g}",
                str(m.category),
            ]
            for row, text in enumerate(lines):
                cv2.putText(
                    out, text, (cx - 50, cy + 35 + 20 * row),
                    cv2.FONT_HERSHEY_PLAIN, 0.7, _WHITE,
                )

        selected = result.slots.selected
        if selected.valid:
            cv2.circle(out, (int(selected.center_x), int(selected.center_y)), 20, _MAGENTA)
            cv2.putText(
                out, f"Tension: {selected.tension:g}",
                (int(selected.center_x) - 50, int(selected.center_y) + 135),
                cv2.FONT_HERSHEY_PLAIN, 0.7, _MAGENTA,
            )
        return out

    @staticmethod
    def draw_outlines(shape: Sequence[int], polygons: Sequence[np.ndarray]) -> np.ndarray:
        """Polygons drawn white on a black canvas of *shape* (h, w)."""
        canvas = np.zeros((shape[0], shape[1], 3), dtype=np.uint8)
        outlines = [np.round(np.asarray(p)).astype(np.int32).reshape(-1, 1, 2) for p in polygons]
        if outlines:
            cv2.drawContours(canvas, outlines, -1, _WHITE, 1)
        return canvas

    # ----------------------------------------------------------------- private
    def _refine(
        self,
        targets: List[np.ndarray],
        polygons: Sequence[np.ndarray],
        hulls: Optional[Sequence[np.ndarray]],
    ) -> List[np.ndarray]:
        # Filtering keeps the original array objects, so hulls are found by identity.
        hull_by_poly: Dict[int, np.ndarray] = {}
        if hulls is not None:
            hull_by_poly = {id(p): h for p, h in zip(polygons, hulls)}
        return [self._refiner.refine(t, hull_by_poly.get(id(t))) for t in targets]
