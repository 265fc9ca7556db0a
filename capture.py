"""
Live capture glue shared by the demos: open the camera, run the
read-process-show loop, dispatch key presses and save snapshots.
"""

import cv2
import numpy as np
from pathlib import Path
from typing import Callable, Optional, Union

from config import ARConfig

QUIT_KEYS = (27, ord('q'))


class CaptureError(RuntimeError):
    """Raised when the video device cannot be opened."""


def open_capture(device: Union[int, str] = None) -> cv2.VideoCapture:
    """
    Open a camera index or a video file.

    Numeric strings are treated as camera indices.
    """
    if device is None:
        device = ARConfig.CAPTURE['DEVICE']
    if isinstance(device, str) and device.isdigit():
        device = int(device)

    cap = cv2.VideoCapture(device)
    if not cap.isOpened():
        cap.release()
        raise CaptureError(f"Unable to open video device: {device}")

    width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
    height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
    print(f"Expected size: {width} {height}")
    return cap


class SnapshotWriter:
    """Writes numbered PNG snapshots (image0.png, image1.png, ...)."""

    def __init__(self, directory=None, prefix: str = None):
        self.directory = Path(directory or ARConfig.CAPTURE['SNAPSHOT_DIR'])
        self.prefix = prefix or ARConfig.CAPTURE['SNAPSHOT_PREFIX']

    def next_path(self) -> Path:
        index = 0
        while (self.directory / f"{self.prefix}{index}.png").exists():
            index += 1
        return self.directory / f"{self.prefix}{index}.png"

    def save(self, image: np.ndarray) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.next_path()
        if not cv2.imwrite(str(path), image):
            raise OSError(f"Could not write snapshot: {path}")
        return path


def run_loop(capture: cv2.VideoCapture,
             window: str,
             process: Callable[[np.ndarray], np.ndarray],
             on_key: Optional[Callable[[int, np.ndarray], None]] = None,
             delay_ms: int = None) -> int:
    """
    Read, process and display frames until 'q'/Esc or the stream ends.

    Args:
        capture: Opened capture handle, released on exit
        window: Window name
        process: Maps a camera frame to the frame to display
        on_key: Called with (key, displayed_frame) for any other key press
        delay_ms: waitKey delay

    Returns:
        Number of frames shown
    """
    delay_ms = ARConfig.CAPTURE['DELAY_MS'] if delay_ms is None else delay_ms
    shown = 0

    cv2.namedWindow(window, cv2.WINDOW_AUTOSIZE)
    try:
        while True:
            ok, frame = capture.read()
            if not ok or frame is None or frame.size == 0:
                print("frame is empty")
                break

            dst = process(frame)
            cv2.imshow(window, dst)
            shown += 1

            key = cv2.waitKey(delay_ms) & 0xFF
            if key in QUIT_KEYS:
                break
            if key != 0xFF and on_key is not None:
                on_key(key, dst)
    finally:
        capture.release()
        cv2.destroyAllWindows()

    print("Bye!")
    return shown
