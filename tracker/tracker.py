from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

import hparams
from capture import FrameSource, VideoRecorder
from comms import UdpReporter
from config import AppConfig, SegmentationConfig
from detection import FrameResult, TargetPipeline
from utils import FrameRateCounter, format_targets, poll_quit, show_images
from utils.tuning import TuningPanel


class Tracker:
    """
    Frame loop: acquire → record → pipeline → report → display.

    Every frame is handled independently; a frame without a selected
    target simply sends nothing.  The loop ends when the video runs out
    or the quit key is pressed in a preview window.

    Usage
    -----
    cfg = AppConfig()
    tracker = Tracker(cfg)
    tracker.run()   # blocks until the source ends or 'q' is pressed

    Raises
    ------
    RuntimeError
        At construction or on the first frame when the source or the
        recording sink cannot be opened.
    """

    def __init__(self, config: AppConfig) -> None:
        self._cfg = config
        self._pipeline = TargetPipeline(config.pipeline)
        self._reporter = UdpReporter(config.report.host, config.report.port)
        self._fps = FrameRateCounter()
        self._source = FrameSource(config.source)
        self._recorder: Optional[VideoRecorder] = None
        if config.source.should_record:
            self._recorder = VideoRecorder(config.source.record_path, config.source.record_fps)
        self._panel: Optional[TuningPanel] = None

    # ------------------------------------------------------------------ public
    def run(self) -> int:
        """Process frames until the source ends or the user quits; return frame count."""
        print(
            f"[Tracker] Starting — source='{self._source.description}' | "
            f"report={self._reporter.host}:{self._reporter.port} | "
            f"recording={self._recorder.path if self._recorder else 'off'}"
        )
        display = self._cfg.display
        if display.gui_all:
            self._panel = TuningPanel(self._cfg.pipeline.segmentation)

        delay_ms = hparams.STILL_WAIT_MS if self._source.is_still else hparams.LIVE_WAIT_MS
        self._fps.reset()
        try:
            while True:
                frame = self._source.read()
                if frame is None:
                    print("[Tracker] End of video source.")
                    break
                if self._recorder is not None:
                    self._recorder.write(frame)

                result = self.process_frame(frame, self._segmentation_snapshot())

                fps = self._fps.tick()
                if self._fps.frames % hparams.FPS_LOG_EVERY_N == 0:
                    print(f"[FPS] {fps:.2f}")

                if display.view or display.gui_all:
                    self._show(frame, result)
                    if poll_quit(delay_ms, hparams.QUIT_KEY):
                        print("[Tracker] User pressed 'q' — stopping.")
                        break
                elif self._source.is_still:
                    # Without a window there are no sliders to re-apply.
                    break
        finally:
            self._cleanup()

        return self._fps.frames

    def process_frame(
        self,
        frame: np.ndarray,
        segmentation: Optional[SegmentationConfig] = None,
    ) -> FrameResult:
        """Run the pipeline on one frame and send the report if a target was selected."""
        display = self._cfg.display
        result = self._pipeline.process(frame, segmentation, debug=display.gui_all)

        if display.verbose:
            print(format_targets(result.measurements))

        if result.report is not None:
            selected = result.slots.selected
            print(
                f"dist={selected.distance_y:f} angle={selected.angle_x:f} "
                f"type={selected.category}"
            )
            self._reporter.send_text(result.report)
        return result

    # ----------------------------------------------------------------- private
    def _segmentation_snapshot(self) -> Optional[SegmentationConfig]:
        if self._panel is None:
            return None
        return self._panel.snapshot()

    def _show(self, frame: np.ndarray, result: FrameResult) -> None:
        final = self._pipeline.draw(frame, result)
        if self._cfg.display.gui_all:
            show_images(result.debug_images)
            show_images({"Source": frame})
        show_images({"Final": final})

    def _cleanup(self) -> None:
        self._source.release()
        if self._recorder is not None:
            self._recorder.release()
        if self._cfg.display.view or self._cfg.display.gui_all:
            cv2.destroyAllWindows()
        print(
            f"[Tracker] Stopped after {self._fps.frames} frames "
            f"({self._reporter.sent_count} reports sent, {self._reporter.failed_count} failed)."
        )
