"""
Harris Corners Demo

Marks strong Harris corner responses in the live camera feed.

Keys:
    s  save snapshot   q  quit
"""

import argparse
import sys

from ar_modules import HarrisCornerDetector
from capture import CaptureError, SnapshotWriter, open_capture, run_loop
from config import ARConfig

WINDOW = "Harris Corners"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Show Harris corners in the live feed.')
    parser.add_argument('--device', default=str(ARConfig.CAPTURE['DEVICE']),
                        help='Camera index or video file. Default: 0')
    parser.add_argument('--threshold', type=float, default=ARConfig.HARRIS['THRESHOLD'],
                        help=f"Threshold on the 0-255 normalized response. Default: {ARConfig.HARRIS['THRESHOLD']}")
    parser.add_argument('--snapshots', default=ARConfig.CAPTURE['SNAPSHOT_DIR'],
                        help='Directory for s-key snapshots. Default: imgs')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    if not 0 <= args.threshold <= 255:
        print("Error: threshold must be within 0-255")
        return 1

    detector = HarrisCornerDetector(threshold=args.threshold)
    snapshots = SnapshotWriter(args.snapshots)

    try:
        cap = open_capture(args.device)
    except CaptureError as exc:
        print(exc)
        return 1

    def process(frame):
        return detector.draw(frame, detector.detect(frame))

    def on_key(key, dst):
        if key == ord('s'):
            path = snapshots.save(dst)
            print(f"Saved: {path}")

    run_loop(cap, WINDOW, process, on_key)
    return 0


if __name__ == "__main__":
    sys.exit(main())
