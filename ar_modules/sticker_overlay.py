"""
Sticker Overlay Module

Warps a sequence of images onto the chessboard plane with a homography,
one sequence frame per detected camera frame, which plays the sequence
back as an animation pinned to the board.
"""

import re
import cv2
import numpy as np
from pathlib import Path
from typing import List, Tuple
import sys

sys.path.append(str(Path(__file__).parent.parent))
from config import ARConfig


def _natural_key(path: Path):
    return [int(part) if part.isdigit() else part.lower()
            for part in re.split(r'(\d+)', path.name)]


def _read_pattern(pattern: str, max_frames: int) -> List[np.ndarray]:
    frames = []
    for index in range(max_frames):
        try:
            path = Path(pattern.format(index, index=index))
        except (KeyError, IndexError, ValueError):
            raise ValueError(f"Frame pattern must contain a single {{}} field: {pattern}")
        if not path.exists():
            break
        image = cv2.imread(str(path))
        if image is None:
            break
        frames.append(image)
    return frames


def _read_video(path: Path, max_frames: int) -> List[np.ndarray]:
    frames = []
    cap = cv2.VideoCapture(str(path))
    try:
        while len(frames) < max_frames:
            ok, frame = cap.read()
            if not ok or frame is None:
                break
            frames.append(frame)
    finally:
        cap.release()
    return frames


def load_sticker_frames(source, config: dict = None) -> List[np.ndarray]:
    """
    Load the sticker sequence.

    Args:
        source: Directory of images, a pattern such as 'kerm/input-{}.png',
            or a GIF/video file
        config: Optional config dict, uses ARConfig.STICKER if None

    Returns:
        List of BGR frames in playback order
    """
    config = config or ARConfig.STICKER
    max_frames = config['MAX_FRAMES']
    source = str(source)

    if '{' in source:
        frames = _read_pattern(source, max_frames)
    else:
        path = Path(source)
        if path.is_dir():
            files = [f for f in path.iterdir()
                     if f.is_file() and f.suffix.lower() in config['EXTENSIONS']]
            frames = []
            for f in sorted(files, key=_natural_key)[:max_frames]:
                image = cv2.imread(str(f))
                if image is not None:
                    frames.append(image)
        elif path.is_file():
            image = None
            if path.suffix.lower() in config['EXTENSIONS']:
                image = cv2.imread(str(path))
            frames = [image] if image is not None else _read_video(path, max_frames)
        else:
            frames = []

    if not frames:
        raise FileNotFoundError(f"No sticker frames found at: {source}")
    return frames


def target_points(pattern_size: Tuple[int, int]) -> np.ndarray:
    """Board quad the sticker is pinned to, in board units."""
    cols, rows = pattern_size
    return np.array([
        [0, 0, 0],
        [cols, 0, 0],
        [cols, -rows, 0],
        [0, -rows, 0],
    ], dtype=np.float32)


class StickerOverlay:
    """Cycles through sticker frames, warping each onto a projected quad."""

    def __init__(self, frames: List[np.ndarray], config: dict = None):
        if not frames:
            raise ValueError("StickerOverlay needs at least one frame")
        self.config = config or ARConfig.STICKER
        self.frames = frames
        self.interpolation = self.config['INTERPOLATION']
        self.index = 0

    def __len__(self):
        return len(self.frames)

    @property
    def current(self) -> np.ndarray:
        return self.frames[self.index]

    def advance(self) -> int:
        self.index = (self.index + 1) % len(self.frames)
        return self.index

    @staticmethod
    def source_points(sticker: np.ndarray) -> np.ndarray:
        h, w = sticker.shape[:2]
        return np.array([[0, 0], [w, 0], [w, h], [0, h]], dtype=np.float32)

    def warp(self, frame: np.ndarray, image_points: np.ndarray):
        """
        Warp the current sticker onto the quad.

        Returns:
            (warped, mask), or (None, None) if no homography exists
        """
        quad = np.asarray(image_points, dtype=np.float32).reshape(-1, 2)
        if len(quad) != 4 or not np.all(np.isfinite(quad)):
            return None, None

        sticker = self.current
        try:
            homography, _ = cv2.findHomography(self.source_points(sticker), quad)
        except cv2.error:
            return None, None
        if homography is None:
            return None, None

        h, w = frame.shape[:2]
        warped = cv2.warpPerspective(sticker, homography, (w, h), flags=self.interpolation)

        mask = np.zeros((h, w), dtype=np.uint8)
        cv2.fillConvexPoly(mask, quad.astype(np.int32), 255, cv2.LINE_AA)
        return warped, mask

    def apply(self, frame: np.ndarray, image_points: np.ndarray) -> np.ndarray:
        """Composite the current sticker into a copy of the frame and advance."""
        dst = frame.copy()
        warped, mask = self.warp(frame, image_points)
        if warped is None:
            return dst

        if warped.ndim == 2:
            warped = cv2.cvtColor(warped, cv2.COLOR_GRAY2BGR)
        if dst.ndim == 2:
            dst = cv2.cvtColor(dst, cv2.COLOR_GRAY2BGR)
        np.copyto(dst, warped, where=(mask > 0)[:, :, None])

        self.advance()
        return dst
