from __future__ import annotations

from typing import Dict, Iterable, Optional

import cv2
import numpy as np

from detection.models import Measurement


# ──────────────────────────────────────────────────────────────
# Window display
# ──────────────────────────────────────────────────────────────

def show_images(images: Dict[str, np.ndarray], only: Optional[Iterable[str]] = None) -> None:
    """``imshow`` each named image, optionally restricted to the names in *only*."""
    wanted = None if only is None else set(only)
    for name, img in images.items():
        if wanted is None or name in wanted:
            cv2.imshow(name, img)


def poll_quit(delay_ms: int, quit_key: str) -> bool:
    """Pump the GUI event loop for *delay_ms* and report whether *quit_key* was hit."""
    key = cv2.waitKey(delay_ms) & 0xFF
    return key == ord(quit_key)


# ──────────────────────────────────────────────────────────────
# Console dump
# ──────────────────────────────────────────────────────────────

def format_targets(measurements: Iterable[Measurement]) -> str:
    """Multi-line dump of every measurement, separated by a rule line."""
    lines = ["-" * 64]
    lines.extend(m.describe() for m in measurements)
    return "\n".join(lines)
