"""
Chessboard Calibration

Collects chessboard views from the live camera feed and writes the
calibration file read by the AR demos.

Keys:
    s  store the current view (only when the board is found)
    c  calibrate and write the output file
    q  quit
"""

import argparse
import sys

from ar_modules import CalibrationError, CameraCalibrator, ChessboardDetector
from ar_modules.calibration import format_calibration, save_calibration
from ar_modules.visualization import add_label_to_image
from capture import CaptureError, open_capture, run_loop
from config import ARConfig
from pipeline import parse_pattern

WINDOW = "Calibration"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Calibrate the camera from live chessboard views.')
    parser.add_argument('--device', default=str(ARConfig.CAPTURE['DEVICE']),
                        help='Camera index or video file. Default: 0')
    parser.add_argument('--output', default=ARConfig.CALIBRATION['DEFAULT_PATH'],
                        help='Output CSV (or .json). Default: calibration.csv')
    parser.add_argument('--pattern', type=parse_pattern, default=ARConfig.CHESSBOARD['PATTERN_SIZE'],
                        help='Inner corners as COLSxROWS. Default: 9x6')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    detector = ChessboardDetector(pattern_size=args.pattern)
    calibrator = CameraCalibrator(detector.object_points())
    last = {'corners': None, 'size': None}

    try:
        cap = open_capture(args.device)
    except CaptureError as exc:
        print(exc)
        return 1

    def process(frame):
        found, corners = detector.detect(frame)
        last['corners'] = corners if found else None
        last['size'] = (frame.shape[1], frame.shape[0])
        vis = detector.draw(frame, corners, found)
        return add_label_to_image(vis, f"views: {calibrator.count} | s: store  c: calibrate",
                                  position='bottom')

    def on_key(key, dst):
        if key == ord('s'):
            if last['corners'] is None:
                print("⚠️ No pattern in view, nothing stored")
                return
            try:
                calibrator.add_observation(last['corners'], last['size'])
            except CalibrationError as exc:
                print(f"⚠️ {exc}")
                return
            print(f"✓ Stored view {calibrator.count}")
        elif key == ord('c'):
            try:
                data = calibrator.calibrate()
            except CalibrationError as exc:
                print(f"⚠️ {exc}")
                return
            path = save_calibration(args.output, data)
            print(format_calibration(data))
            print(f"\nReprojection error: {data.reprojection_error:.4f} px")
            print(f"✓ Wrote calibration to {path}")

    run_loop(cap, WINDOW, process, on_key)
    return 0


if __name__ == "__main__":
    sys.exit(main())
