"""
Hyperparameters and calibration constants for the target vision pipeline.

All tunable numbers live here so they can be changed in one place without
touching business logic in the detection, capture, or comms packages.
"""
from typing import Dict, Tuple

# ──────────────────────────────────────────────────────────────
# Colour planes  (OpenCV BGR channel indices)
# The target is lit with a green ring light; WPI sample images
# use red targets, so the primary and secondary planes swap.
# ──────────────────────────────────────────────────────────────
BLUE_PLANE: int = 0
GREEN_PLANE: int = 1
RED_PLANE: int = 2

_PLANE_PRESETS: Dict[str, Tuple[int, int, int]] = {
    # (primary, secondary, tertiary)
    "green": (GREEN_PLANE, RED_PLANE, BLUE_PLANE),
    "red":   (RED_PLANE, GREEN_PLANE, BLUE_PLANE),
}
SECONDARY_PLANE_WEIGHT: float = -0.5
TERTIARY_PLANE_WEIGHT: float = -0.5

# ──────────────────────────────────────────────────────────────
# Segmentation tunables  (value, and valid range for the sliders)
# ──────────────────────────────────────────────────────────────
THRESHOLD: int = 40            # binary threshold level
THRESHOLD_MAX: int = 255
POLY_EPSILON: int = 10         # approxPolyDP epsilon [px]
POLY_EPSILON_MAX: int = 50
MIN_AREA: int = 500            # bounding-rect area a quad must exceed [px²]
MIN_AREA_MAX: int = 10000
MORPH_ELEMENT: int = 0         # 0: rect  1: cross  2: ellipse
MORPH_ELEMENT_MAX: int = 2
MORPH_SIZE: int = 4            # kernel is (2n+1) x (2n+1)
MORPH_SIZE_MAX: int = 21
ERODE_COUNT: int = 1           # erosions applied after one dilation
ERODE_COUNT_MAX: int = 20

# ──────────────────────────────────────────────────────────────
# Range / bearing calibration  (power-law fits against measured data)
#   distance = coeff * size ** exponent
# ──────────────────────────────────────────────────────────────
DISTANCE_X_COEFF: float = 9952.5956566118
DISTANCE_X_EXPONENT: float = -1.0154997664
DISTANCE_Y_COEFF: float = 7560.3188994048
DISTANCE_Y_EXPONENT: float = -1.0190855673
ANGLE_GAIN: float = 0.1105     # degrees per pixel from the image midline

# ──────────────────────────────────────────────────────────────
# Height classification  (expected centre-Y [px] vs. distance)
# ──────────────────────────────────────────────────────────────
LOW_OFFSET_SLOPE: float = 0.1418
LOW_OFFSET_INTERCEPT: float = 133.97
MIDDLE_OFFSET_SLOPE: float = 0.809
MIDDLE_OFFSET_INTERCEPT: float = -55.7
HIGH_OFFSET: float = 232.0     # high target leaves the frame before perspective shows
HEIGHT_TOLERANCE: float = 0.2  # ±20 % band around the observed centre-Y

# ──────────────────────────────────────────────────────────────
# Tension calibration  (linear fit against shot data)
# ──────────────────────────────────────────────────────────────
TENSION_SLOPE: float = 1.7144399877
TENSION_INTERCEPT: float = 253.3795124961

# ──────────────────────────────────────────────────────────────
# Grouping
# ──────────────────────────────────────────────────────────────
SLOT_RANKING: str = "first"    # "first" | "largest"

# ──────────────────────────────────────────────────────────────
# Corner refinement
# ──────────────────────────────────────────────────────────────
REFINE_CORNERS: bool = False
REFINE_EDGE_TOLERANCE_PX: float = 3.0   # hull points this close to an edge support its line
REFINE_PARALLEL_EPS: float = 1e-6       # |cross| below this → lines treated as parallel

# ──────────────────────────────────────────────────────────────
# Video source / recording
# ──────────────────────────────────────────────────────────────
CAMERA_URL: str = (
    "http://10.17.68.90/axis-cgi/mjpg/video.cgi"
    "?resolution=320x240&req_fps=30&.mjpg"
)
STILL_IMAGE_SUFFIXES: Tuple[str, ...] = (".jpg", ".jpeg", ".png")
RECORD_PATH: str = "RobotVideo.mjpg"
RECORD_FOURCC: str = "MJPG"
RECORD_FPS: float = 30.0

# ──────────────────────────────────────────────────────────────
# Reporting  (UDP to the robot controller)
# ──────────────────────────────────────────────────────────────
REPORT_HOST: str = "10.17.68.2"
REPORT_PORT: int = 9999

# ──────────────────────────────────────────────────────────────
# Loop / display
# ──────────────────────────────────────────────────────────────
LIVE_WAIT_MS: int = 1          # waitKey delay between live frames
STILL_WAIT_MS: int = 1000      # waitKey delay when re-processing a still image
QUIT_KEY: str = "q"
FPS_LOG_EVERY_N: int = 30      # print the frame rate every N frames
