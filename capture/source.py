from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

from config import SourceConfig


class FrameSource:
    """
    Supplies BGR frames from a network stream, a video file or a still image.

    A still image is loaded once and returned on every :meth:`read`, so
    slider changes can be re-applied to the same picture.

    Raises
    ------
    RuntimeError
        When the stream, file or image cannot be opened.
    """

    def __init__(self, config: SourceConfig) -> None:
        self._cfg = config
        self._cap: Optional[cv2.VideoCapture] = None
        self._still: Optional[np.ndarray] = None

        if config.is_still_image:
            self._still = cv2.imread(config.file, cv2.IMREAD_COLOR)
            if self._still is None:
                raise RuntimeError(f"Unable to read image '{config.file}'.")
        else:
            location = config.file if config.file is not None else config.url
            self._cap = cv2.VideoCapture(location)
            if not self._cap.isOpened():
                raise RuntimeError(f"Unable to open video source '{location}'.")

    # ------------------------------------------------------------------ public
    @property
    def is_still(self) -> bool:
        return self._still is not None

    @property
    def description(self) -> str:
        return self._cfg.file if self._cfg.file is not None else self._cfg.url

    def read(self) -> Optional[np.ndarray]:
        """Next frame, or ``None`` once a video runs out."""
        if self._still is not None:
            return self._still.copy()
        ok, frame = self._cap.read()
        if not ok:
            return None
        return frame

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
