from __future__ import annotations

import time
from typing import Callable, Optional


class FrameRateCounter:
    """
    Average frames per second since the last :meth:`reset`.

    Call :meth:`reset` when the capture loop starts, then :meth:`tick`
    once per processed frame.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._start: Optional[float] = None
        self.frames = 0

    def reset(self) -> None:
        self._start = self._clock()
        self.frames = 0

    def tick(self) -> float:
        if self._start is None:
            self.reset()
        self.frames += 1
        return self.fps

    @property
    def fps(self) -> float:
        """0.0 until measurable time has elapsed."""
        if self._start is None:
            return 0.0
        elapsed = self._clock() - self._start
        if elapsed <= 0.0:
            return 0.0
        return self.frames / elapsed
