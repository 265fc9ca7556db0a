"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import cv2
import numpy as np
import pytest

# Repo root holds config.py, pipeline.py and the ar_modules package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from ar_modules.calibration import CalibrationData
from ar_modules.pose_estimation import Pose

SQUARE_PX = 40
MARGIN_PX = 60


def render_chessboard(pattern_size=(9, 6), square=SQUARE_PX, margin=MARGIN_PX) -> np.ndarray:
    """Frontal BGR chessboard with a white border."""
    cols, rows = pattern_size
    squares_x, squares_y = cols + 1, rows + 1
    h = squares_y * square + 2 * margin
    w = squares_x * square + 2 * margin

    img = np.full((h, w), 255, dtype=np.uint8)
    for r in range(squares_y):
        for c in range(squares_x):
            if (r + c) % 2 == 0:
                y0 = margin + r * square
                x0 = margin + c * square
                img[y0:y0 + square, x0:x0 + square] = 0
    return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)


def expected_corners(pattern_size=(9, 6), square=SQUARE_PX, margin=MARGIN_PX) -> np.ndarray:
    """Pixel positions of the inner corners of render_chessboard."""
    cols, rows = pattern_size
    pts = [(margin + square * (j + 1), margin + square * (i + 1))
           for i in range(rows) for j in range(cols)]
    return np.array(pts, dtype=np.float32)


@pytest.fixture
def chessboard_image() -> np.ndarray:
    return render_chessboard()


@pytest.fixture
def calibration() -> CalibrationData:
    """Pinhole camera without distortion matching the rendered board size."""
    camera_matrix = np.array([
        [800.0, 0.0, 260.0],
        [0.0, 800.0, 200.0],
        [0.0, 0.0, 1.0]
    ])
    return CalibrationData(camera_matrix, np.zeros(5), (520, 400))


@pytest.fixture
def board_pose() -> Pose:
    """Board tilted in front of the camera, z axis towards the camera."""
    rvec = np.array([[np.pi - 0.2], [0.15], [0.05]])
    tvec = np.array([[-4.0], [-2.5], [20.0]])
    return Pose(rvec, tvec)


@pytest.fixture
def blank_image() -> np.ndarray:
    return np.full((240, 320, 3), 127, dtype=np.uint8)
