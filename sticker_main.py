"""
Sticker Demo

Pins an animated image sequence (a GIF or numbered frames) to the
chessboard in the live camera feed. The sequence advances one frame for
every camera frame in which the board is found.

Usage:
    python sticker_main.py --frames kerm/input-{}.png
    python sticker_main.py --frames kermit.gif
"""

import argparse
import sys

from ar_modules import (ChessboardDetector, PoseEstimator,
                        StickerOverlay, load_calibration, load_sticker_frames)
from ar_modules.calibration import format_calibration
from ar_modules.sticker_overlay import target_points
from capture import CaptureError, open_capture, run_loop
from config import ARConfig
from pipeline import parse_pattern

WINDOW = "Sticker"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Warp an image sequence onto the chessboard.')
    parser.add_argument('--device', default=str(ARConfig.CAPTURE['DEVICE']),
                        help='Camera index or video file. Default: 0')
    parser.add_argument('--calibration', default=ARConfig.CALIBRATION['DEFAULT_PATH'],
                        help='Calibration CSV or JSON file. Default: calibration.csv')
    parser.add_argument('--frames', default=ARConfig.STICKER['DEFAULT_SOURCE'],
                        help='Frame directory, numbered pattern with {} or a GIF/video file.')
    parser.add_argument('--pattern', type=parse_pattern, default=ARConfig.CHESSBOARD['PATTERN_SIZE'],
                        help='Inner corners as COLSxROWS. Default: 9x6')
    parser.add_argument('--verbose', action='store_true', help='Print the projected quad of every frame.')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        calibration = load_calibration(args.calibration)
        frames = load_sticker_frames(args.frames)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}")
        return 1

    print(format_calibration(calibration))
    print()
    print(f"✓ Loaded {len(frames)} sticker frame(s) from {args.frames}")

    detector = ChessboardDetector(pattern_size=args.pattern)
    estimator = PoseEstimator(calibration)
    overlay = StickerOverlay(frames)
    board_points = detector.object_points()
    quad = target_points(detector.pattern_size)

    try:
        cap = open_capture(args.device)
    except CaptureError as exc:
        print(exc)
        return 1

    def process(frame):
        found, corners = detector.detect(frame)
        if not found:
            return frame.copy()
        pose = estimator.estimate(board_points, corners)
        if pose is None:
            return frame.copy()
        image_points = estimator.project(quad, pose)
        if args.verbose:
            print("Image Points:", " ".join(f"({x:.1f}, {y:.1f})" for x, y in image_points))
        return overlay.apply(frame, image_points)

    run_loop(cap, WINDOW, process)
    return 0


if __name__ == "__main__":
    sys.exit(main())
