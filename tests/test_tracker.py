"""
Tracker Loop Tests
==================

Drives the frame loop with a mocked frame source, reporter and recorder,
so no camera, network or display is needed.
"""

import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import unittest
from unittest.mock import MagicMock, patch

import cv2
import numpy as np

from config import AppConfig, DisplayConfig, SourceConfig
from detection import HeightCategory, Measurement
from tracker import Tracker
from utils import format_targets


def ring_image():
    img = np.zeros((240, 320, 3), dtype=np.uint8)
    cv2.rectangle(img, (60, 40), (260, 200), (0, 255, 0), -1)
    cv2.rectangle(img, (80, 60), (240, 180), (0, 0, 0), -1)
    return img


def blank_image():
    return np.zeros((240, 320, 3), dtype=np.uint8)


class TrackerTestCase(unittest.TestCase):
    def setUp(self):
        patches = {
            "source": patch("tracker.tracker.FrameSource"),
            "reporter": patch("tracker.tracker.UdpReporter"),
            "recorder": patch("tracker.tracker.VideoRecorder"),
        }
        self.mocks = {}
        for name, p in patches.items():
            self.mocks[name] = p.start()
            self.addCleanup(p.stop)

        self.source = MagicMock()
        self.source.is_still = False
        self.source.description = "match.mjpg"
        self.mocks["source"].return_value = self.source

        self.reporter = MagicMock()
        self.reporter.sent_count = 0
        self.reporter.failed_count = 0
        self.mocks["reporter"].return_value = self.reporter

        self.recorder = MagicMock()
        self.mocks["recorder"].return_value = self.recorder

        # keep the loop's console output out of the test log
        stdout = patch("sys.stdout")
        stdout.start()
        self.addCleanup(stdout.stop)

    def make_tracker(self, **source_kwargs):
        source_kwargs.setdefault("record_path", None)
        return Tracker(AppConfig(source=SourceConfig(**source_kwargs)))


class TestProcessFrame(TrackerTestCase):
    def test_target_is_reported(self):
        tracker = self.make_tracker()
        result = tracker.process_frame(ring_image())
        self.assertIsNotNone(result.report)
        self.reporter.send_text.assert_called_once_with(result.report)

    def test_no_target_sends_nothing(self):
        tracker = self.make_tracker()
        result = tracker.process_frame(blank_image())
        self.assertIsNone(result.report)
        self.reporter.send_text.assert_not_called()

    def test_reporter_built_from_config(self):
        self.make_tracker()
        self.mocks["reporter"].assert_called_once_with("10.17.68.2", 9999)

    def test_verbose_dumps_every_measurement(self):
        cfg = AppConfig(source=SourceConfig(record_path=None), display=DisplayConfig(verbose=True))
        with patch("tracker.tracker.format_targets", return_value="dump") as dump:
            result = Tracker(cfg).process_frame(ring_image())
        dump.assert_called_once_with(result.measurements)

    def test_target_dump_lines(self):
        text = format_targets(
            [Measurement(points=np.array([[1, 2], [3, 4]]), center_x=2, center_y=3,
                         category=HeightCategory.LOW)]
        )
        lines = text.splitlines()
        self.assertEqual(lines[0], "-" * 64)
        self.assertIn("Poly Points[(1, 2) (3, 4)]", lines[1])
        self.assertTrue(lines[1].endswith("Type Low"))


class TestRun(TrackerTestCase):
    def test_runs_until_source_ends(self):
        self.source.read.side_effect = [ring_image(), blank_image(), ring_image(), None]
        tracker = self.make_tracker()

        self.assertEqual(tracker.run(), 3)
        self.assertEqual(self.reporter.send_text.call_count, 2)
        self.source.release.assert_called_once()
        self.mocks["recorder"].assert_not_called()

    def test_headless_still_image_processed_once(self):
        self.source.is_still = True
        self.source.read.return_value = ring_image()
        tracker = self.make_tracker(file="target.jpg")

        self.assertEqual(tracker.run(), 1)
        self.reporter.send_text.assert_called_once()

    def test_moving_source_is_recorded(self):
        frames = [ring_image(), ring_image()]
        self.source.read.side_effect = frames + [None]
        tracker = self.make_tracker(file="match.mjpg", record_path="out.mjpg")

        tracker.run()
        self.mocks["recorder"].assert_called_once()
        self.assertEqual(self.recorder.write.call_count, 2)
        self.recorder.release.assert_called_once()

    def test_quit_key_stops_preview(self):
        self.source.read.return_value = ring_image()
        cfg = AppConfig(source=SourceConfig(record_path=None), display=DisplayConfig(view=True))
        with patch("tracker.tracker.show_images") as show, \
                patch("tracker.tracker.poll_quit", side_effect=[False, True]), \
                patch("tracker.tracker.cv2") as cv2_mock:
            frames = Tracker(cfg).run()

        self.assertEqual(frames, 2)
        self.assertTrue(show.called)
        cv2_mock.destroyAllWindows.assert_called_once()
        self.source.release.assert_called_once()

    def test_source_released_when_pipeline_fails(self):
        self.source.read.return_value = ring_image()
        tracker = self.make_tracker()
        with patch.object(tracker, "process_frame", side_effect=RuntimeError("boom")):
            with self.assertRaises(RuntimeError):
                tracker.run()
        self.source.release.assert_called_once()


if __name__ == "__main__":
    unittest.main()
