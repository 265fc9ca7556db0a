"""
Chessboard AR Demo

Detects the chessboard in the live camera feed, estimates its pose and
draws axes, a cube, a house or an OBJ model on top of it.

Keys:
    a  axes          n  house          c  cube
    e  OBJ model     s  save snapshot  q  quit

Usage:
    python ar_main.py [--calibration calibration.csv] [--model shuttle.obj]
"""

import argparse
import sys

from ar_modules import CalibrationError, ObjParseError
from ar_modules.calibration import format_calibration
from ar_modules.obj_loader import describe
from ar_modules.visualization import add_label_to_image
from capture import CaptureError, SnapshotWriter, open_capture, run_loop
from config import ARConfig
from pipeline import DisplayMode, load_pipeline, parse_pattern

WINDOW = "Cal/AR"

MODE_KEYS = {
    ord('a'): DisplayMode.AXES,
    ord('c'): DisplayMode.CUBE,
    ord('n'): DisplayMode.HOUSE,
    ord('e'): DisplayMode.MODEL,
}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Project 3D geometry onto a chessboard in the live feed.')
    parser.add_argument('--device', default=str(ARConfig.CAPTURE['DEVICE']),
                        help='Camera index or video file. Default: 0')
    parser.add_argument('--calibration', default=ARConfig.CALIBRATION['DEFAULT_PATH'],
                        help='Calibration CSV or JSON file. Default: calibration.csv')
    parser.add_argument('--model', default=ARConfig.MODEL['DEFAULT_PATH'],
                        help='OBJ model shown with the e key. Default: shuttle.obj')
    parser.add_argument('--pattern', type=parse_pattern, default=ARConfig.CHESSBOARD['PATTERN_SIZE'],
                        help='Inner corners as COLSxROWS. Default: 9x6')
    parser.add_argument('--snapshots', default=ARConfig.CAPTURE['SNAPSHOT_DIR'],
                        help='Directory for s-key snapshots. Default: imgs')
    parser.add_argument('--verbose', action='store_true', help='Print the pose of every detected frame.')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        pipeline = load_pipeline(args.calibration, args.pattern, args.model)
    except (FileNotFoundError, CalibrationError, ObjParseError) as exc:
        print(f"Error: {exc}")
        return 1

    print(format_calibration(pipeline.pose_estimator.calibration))
    print()
    if pipeline.model is not None:
        print(describe(pipeline.model))
        print()
    else:
        print(f"⚠️ Model not found: {args.model} (e key disabled)")

    try:
        cap = open_capture(args.device)
    except CaptureError as exc:
        print(exc)
        return 1

    snapshots = SnapshotWriter(args.snapshots)

    def process(frame):
        results = pipeline.process_frame(frame)
        if results['found'] and args.verbose:
            print("pattern found")
            print(pipeline.pose_estimator.format_pose(results['pose']))
            print()
        dst = pipeline.render(frame, results)
        status = "pattern found" if results['found'] else "searching for pattern"
        return add_label_to_image(dst, f"{pipeline.mode.value} | {status}", position='bottom')

    def on_key(key, dst):
        if key in MODE_KEYS:
            mode = pipeline.toggle(MODE_KEYS[key])
            print(f"Mode: {mode.value}")
        elif key == ord('s'):
            path = snapshots.save(dst)
            print(f"Saved: {path}")

    run_loop(cap, WINDOW, process, on_key)
    return 0


if __name__ == "__main__":
    sys.exit(main())
