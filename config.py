"""
Central place for default constants and configuration dataclasses.

Import from here rather than hard-coding values spread across modules.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import hparams as HP


# ──────────────────────────────────────────────────────────────
# Segmentation tunables
# ──────────────────────────────────────────────────────────────

_SEGMENTATION_RANGES = {
    "threshold":     (0, HP.THRESHOLD_MAX),
    "poly_epsilon":  (0, HP.POLY_EPSILON_MAX),
    "min_area":      (0, HP.MIN_AREA_MAX),
    "morph_element": (0, HP.MORPH_ELEMENT_MAX),
    "morph_size":    (0, HP.MORPH_SIZE_MAX),
    "erode_count":   (0, HP.ERODE_COUNT_MAX),
}


@dataclass(frozen=True)
class SegmentationConfig:
    """
    Snapshot of the segmentation tunables for one frame.

    Frozen: the sliders produce a new snapshot each frame instead of
    mutating this one.
    """

    threshold: int = HP.THRESHOLD
    poly_epsilon: int = HP.POLY_EPSILON
    min_area: int = HP.MIN_AREA
    morph_element: int = HP.MORPH_ELEMENT
    morph_size: int = HP.MORPH_SIZE
    erode_count: int = HP.ERODE_COUNT

    def __post_init__(self) -> None:
        for name, (lo, hi) in _SEGMENTATION_RANGES.items():
            value = getattr(self, name)
            if not lo <= value <= hi:
                raise ValueError(f"{name} must be in [{lo}, {hi}], got {value}")


@dataclass(frozen=True)
class ColourPlanes:
    """BGR channel roles for colour-plane differencing."""

    primary: int = HP.GREEN_PLANE
    secondary: int = HP.RED_PLANE
    tertiary: int = HP.BLUE_PLANE

    @classmethod
    def preset(cls, name: str) -> "ColourPlanes":
        if name not in HP._PLANE_PRESETS:
            raise ValueError(
                f"Unknown plane preset '{name}'. "
                f"Valid options: {', '.join(HP._PLANE_PRESETS)}"
            )
        primary, secondary, tertiary = HP._PLANE_PRESETS[name]
        return cls(primary=primary, secondary=secondary, tertiary=tertiary)


# ──────────────────────────────────────────────────────────────
# Pipeline
# ──────────────────────────────────────────────────────────────

@dataclass
class PipelineConfig:
    segmentation: SegmentationConfig = field(default_factory=SegmentationConfig)
    planes: ColourPlanes = field(default_factory=ColourPlanes)
    slot_ranking: str = HP.SLOT_RANKING
    refine_corners: bool = HP.REFINE_CORNERS


# ──────────────────────────────────────────────────────────────
# Video source / recording
# ──────────────────────────────────────────────────────────────

@dataclass
class SourceConfig:
    url: str = HP.CAMERA_URL
    file: Optional[str] = None     # video file or still image; overrides url
    record_path: Optional[str] = HP.RECORD_PATH
    record_fps: float = HP.RECORD_FPS

    @property
    def is_still_image(self) -> bool:
        return self.file is not None and self.file.lower().endswith(HP.STILL_IMAGE_SUFFIXES)

    @property
    def should_record(self) -> bool:
        """Only moving sources are recorded."""
        return self.record_path is not None and not self.is_still_image


# ──────────────────────────────────────────────────────────────
# Reporting
# ──────────────────────────────────────────────────────────────

@dataclass
class ReportConfig:
    host: str = HP.REPORT_HOST
    port: int = HP.REPORT_PORT


# ──────────────────────────────────────────────────────────────
# Display
# ──────────────────────────────────────────────────────────────

@dataclass
class DisplayConfig:
    view: bool = False       # show the annotated final frame
    gui_all: bool = False    # show every intermediate image plus sliders
    verbose: bool = False    # dump per-target data to the console


# ──────────────────────────────────────────────────────────────
# Convenience: bundle all configs together
# ──────────────────────────────────────────────────────────────

@dataclass
class AppConfig:
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
