#!/usr/bin/env python3
"""
Entry point for the retro-reflective target tracker.

Each frame from the camera stream (or a video file / still image) is
searched for the double-outlined tape targets.  The best target's
distance, bearing and shooter tension are sent to the robot controller
as one UDP datagram per frame.

Run:
    python main.py                               # network camera, headless
    python main.py --view                        # show the annotated frame
    python main.py --file match.mjpg --gui-all   # every debug window + sliders
    python main.py --file target.jpg --wpi-images --verbose
"""
from __future__ import annotations

import argparse
import sys

import hparams as HP
from config import (
    AppConfig,
    ColourPlanes,
    DisplayConfig,
    PipelineConfig,
    ReportConfig,
    SegmentationConfig,
    SourceConfig,
)
from detection.grouping import SLOT_RANKINGS
from tracker import Tracker


def build_arg_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    ap = argparse.ArgumentParser(
        description="Find reflective-tape targets and report distance, angle and tension.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Source
    g_src = ap.add_argument_group("Source")
    g_src.add_argument("-f", "--file",   type=str, default=None,          help="Process a video file or a .jpg/.png image instead of the camera")
    g_src.add_argument("--url",          type=str, default=HP.CAMERA_URL, help="Network camera stream URL")
    g_src.add_argument("--record",       type=str, default=HP.RECORD_PATH, help="Record raw frames to this video file")
    g_src.add_argument("--no-record",    action="store_true",              help="Do not record the video source")

    # Display
    g_disp = ap.add_argument_group("Display")
    g_disp.add_argument("--view",        action="store_true", help="Show the annotated final frame")
    g_disp.add_argument("--gui-all",     action="store_true", help="Display all debugging windows and tuning sliders")
    g_disp.add_argument("-v", "--verbose", action="store_true", help="Print every target's data each frame")

    # Detection
    g_det = ap.add_argument_group("Detection")
    g_det.add_argument("-w", "--wpi-images", action="store_true", help="Process WPI type images (red targets)")
    g_det.add_argument("--threshold",    type=int, default=HP.THRESHOLD,    help="Binary threshold level")
    g_det.add_argument("--epsilon",      type=int, default=HP.POLY_EPSILON, help="Polygon simplification epsilon (px)")
    g_det.add_argument("--min-area",     type=int, default=HP.MIN_AREA,     help="Minimum quad bounding-rect area (px²)")
    g_det.add_argument("--refine-corners", action="store_true",             help="Refine quad corners by edge-line intersection")
    g_det.add_argument("--slot-ranking", choices=SLOT_RANKINGS, default=HP.SLOT_RANKING,
                       help="How to pick among several high or low targets")

    # Reporting
    g_rep = ap.add_argument_group("Reporting")
    g_rep.add_argument("--host", type=str, default=HP.REPORT_HOST, help="Controller address")
    g_rep.add_argument("--port", type=int, default=HP.REPORT_PORT, help="Controller UDP port")

    return ap


def build_config(args: argparse.Namespace) -> AppConfig:
    """Validate parsed args and construct the full :class:`AppConfig`."""
    try:
        segmentation = SegmentationConfig(
            threshold=args.threshold,
            poly_epsilon=args.epsilon,
            min_area=args.min_area,
        )
    except ValueError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        sys.exit(1)

    return AppConfig(
        pipeline=PipelineConfig(
            segmentation=segmentation,
            planes=ColourPlanes.preset("red" if args.wpi_images else "green"),
            slot_ranking=args.slot_ranking,
            refine_corners=args.refine_corners,
        ),
        source=SourceConfig(
            url=args.url,
            file=args.file,
            record_path=None if args.no_record else args.record,
        ),
        report=ReportConfig(host=args.host, port=args.port),
        display=DisplayConfig(
            view=args.view,
            gui_all=args.gui_all,
            verbose=args.verbose,
        ),
    )


def main() -> None:
    parser = build_arg_parser()
    args   = parser.parse_args()
    config = build_config(args)

    try:
        tracker = Tracker(config)
        tracker.run()
    except (RuntimeError, ValueError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("[INFO] Stopping the tracker.")


if __name__ == "__main__":
    main()
