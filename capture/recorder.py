from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

import hparams as HP


class VideoRecorder:
    """
    Streams raw frames to a video file as they arrive.

    The writer is opened on the first frame, when the frame size is known.

    Raises
    ------
    RuntimeError
        When the output file cannot be opened for writing.
    """

    def __init__(
        self,
        path: str = HP.RECORD_PATH,
        fps: float = HP.RECORD_FPS,
        fourcc: str = HP.RECORD_FOURCC,
    ) -> None:
        self.path = path
        self._fps = fps
        self._fourcc = cv2.VideoWriter_fourcc(*fourcc)
        self._writer: Optional[cv2.VideoWriter] = None
        self.frame_count = 0

    def write(self, frame: np.ndarray) -> None:
        if self._writer is None:
            h, w = frame.shape[:2]
            self._writer = cv2.VideoWriter(self.path, self._fourcc, self._fps, (w, h), True)
            if not self._writer.isOpened():
                self._writer = None
                raise RuntimeError(f"VideoWriter failed to open '{self.path}'.")
        self._writer.write(frame)
        self.frame_count += 1

    def release(self) -> None:
        if self._writer is not None:
            self._writer.release()
            self._writer = None
            print(f"[VideoRecorder] Saved {self.frame_count} frames → {self.path}")
