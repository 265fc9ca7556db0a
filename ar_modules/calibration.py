"""
Calibration Module

Reads and writes camera intrinsics (camera matrix and distortion
coefficients) and runs chessboard calibration from collected observations.

CSV layout, one labelled row per quantity:

    camera_matrix,fx,0,cx,0,fy,cy,0,0,1
    distortion_coefficients,k1,k2,p1,p2,k3
    image_size,w,h                      (optional)
    reprojection_error,e                (optional)
"""

import csv
import json
import cv2
import numpy as np
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple
import sys

sys.path.append(str(Path(__file__).parent.parent))
from config import ARConfig


CAMERA_MATRIX_LABEL = 'camera_matrix'
DIST_COEFFS_LABEL = 'distortion_coefficients'
IMAGE_SIZE_LABEL = 'image_size'
ERROR_LABEL = 'reprojection_error'


class CalibrationError(ValueError):
    """Raised when calibration data is malformed or cannot be computed."""


@dataclass
class CalibrationData:
    """Camera intrinsics used for pose estimation and projection."""

    camera_matrix: np.ndarray
    dist_coeffs: np.ndarray
    image_size: Optional[Tuple[int, int]] = None
    reprojection_error: Optional[float] = None

    def __post_init__(self):
        self.camera_matrix = np.asarray(self.camera_matrix, dtype=np.float64).reshape(3, 3)
        self.dist_coeffs = np.asarray(self.dist_coeffs, dtype=np.float64).reshape(-1, 1)


def _parse_row(row: List[str], line_no: int) -> Tuple[str, List[float]]:
    label = row[0].strip().lower()
    try:
        values = [float(v) for v in row[1:] if v.strip()]
    except ValueError:
        raise CalibrationError(f"Line {line_no}: non-numeric value in '{label}' row")
    return label, values


def load_calibration_csv(path) -> CalibrationData:
    """Load calibration data from a labelled CSV file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Calibration file not found: {path}")

    rows = {}
    with path.open('r', encoding='utf-8', newline='') as handle:
        for line_no, row in enumerate(csv.reader(handle), 1):
            if not row or not row[0].strip() or row[0].lstrip().startswith('#'):
                continue
            label, values = _parse_row(row, line_no)
            rows[label] = values

    if CAMERA_MATRIX_LABEL not in rows:
        raise CalibrationError(f"{path}: missing '{CAMERA_MATRIX_LABEL}' row")
    if DIST_COEFFS_LABEL not in rows:
        raise CalibrationError(f"{path}: missing '{DIST_COEFFS_LABEL}' row")

    cam = rows[CAMERA_MATRIX_LABEL]
    if len(cam) != 9:
        raise CalibrationError(f"{path}: camera matrix needs 9 values, got {len(cam)}")
    dist = rows[DIST_COEFFS_LABEL]
    if not dist:
        raise CalibrationError(f"{path}: distortion coefficients row is empty")

    image_size = None
    if IMAGE_SIZE_LABEL in rows:
        size = rows[IMAGE_SIZE_LABEL]
        if len(size) != 2:
            raise CalibrationError(f"{path}: image size needs 2 values, got {len(size)}")
        image_size = (int(size[0]), int(size[1]))

    error = None
    if rows.get(ERROR_LABEL):
        error = rows[ERROR_LABEL][0]

    return CalibrationData(np.array(cam), np.array(dist), image_size, error)


def save_calibration_csv(path, data: CalibrationData) -> Path:
    """Write calibration data as a labelled CSV file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w', encoding='utf-8', newline='') as handle:
        writer = csv.writer(handle)
        writer.writerow([CAMERA_MATRIX_LABEL] + [repr(float(v)) for v in data.camera_matrix.flatten()])
        writer.writerow([DIST_COEFFS_LABEL] + [repr(float(v)) for v in data.dist_coeffs.flatten()])
        if data.image_size is not None:
            writer.writerow([IMAGE_SIZE_LABEL, int(data.image_size[0]), int(data.image_size[1])])
        if data.reprojection_error is not None:
            writer.writerow([ERROR_LABEL, repr(float(data.reprojection_error))])
    return path


def load_calibration_json(path) -> CalibrationData:
    """Load calibration data from the JSON written by the ChArUco scripts."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Calibration file not found: {path}")

    try:
        with path.open('r', encoding='utf-8') as handle:
            payload = json.load(handle)
        camera_matrix = np.array(payload['camera_matrix'], dtype=np.float64)
        dist_coeffs = np.array(payload['dist_coeffs'], dtype=np.float64)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
        raise CalibrationError(f"{path}: invalid calibration JSON ({exc})")

    if camera_matrix.size != 9:
        raise CalibrationError(f"{path}: camera matrix needs 9 values, got {camera_matrix.size}")

    image_size = payload.get('image_size')
    if image_size is not None:
        image_size = (int(image_size[0]), int(image_size[1]))
    error = payload.get('reprojection_error')

    return CalibrationData(camera_matrix, dist_coeffs, image_size,
                           float(error) if error is not None else None)


def save_calibration_json(path, data: CalibrationData) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    result = {
        'camera_matrix': data.camera_matrix.tolist(),
        'dist_coeffs': data.dist_coeffs.tolist(),
    }
    if data.image_size is not None:
        result['image_size'] = [int(data.image_size[0]), int(data.image_size[1])]
    if data.reprojection_error is not None:
        result['reprojection_error'] = float(data.reprojection_error)
    with path.open('w', encoding='utf-8') as handle:
        json.dump(result, handle, indent=2)
    return path


def load_calibration(path) -> CalibrationData:
    """Load calibration data, choosing the format from the file suffix."""
    if Path(path).suffix.lower() == '.json':
        return load_calibration_json(path)
    return load_calibration_csv(path)


def save_calibration(path, data: CalibrationData) -> Path:
    if Path(path).suffix.lower() == '.json':
        return save_calibration_json(path, data)
    return save_calibration_csv(path, data)


def format_calibration(data: CalibrationData) -> str:
    """Human-readable camera matrix and distortion coefficients."""
    lines = ["Camera Matrix"]
    for row in data.camera_matrix:
        lines.append(" ".join(f"{v:.4f}" for v in row))
    lines.append("")
    lines.append("Distortion Coefficients")
    lines.append(" ".join(f"{v:.4f}" for v in data.dist_coeffs.flatten()))
    return "\n".join(lines)


class CameraCalibrator:
    """Collects chessboard observations and runs cv2.calibrateCamera."""

    def __init__(self, object_points: np.ndarray, config: dict = None):
        """
        Initialize calibrator.

        Args:
            object_points: (N, 3) board points matching each observation's corners
            config: Optional config dict, uses ARConfig.CALIBRATION if None
        """
        self.config = config or ARConfig.CALIBRATION
        self.min_frames = self.config['MIN_FRAMES']
        self.board_points = np.asarray(object_points, dtype=np.float32).reshape(-1, 3)
        self.image_points = []
        self.image_size = None

    @property
    def count(self) -> int:
        return len(self.image_points)

    def add_observation(self, corners: np.ndarray, image_size: Tuple[int, int]):
        """
        Store one set of detected corners.

        Args:
            corners: (N, 1, 2) corners from ChessboardDetector.detect
            image_size: (width, height) of the frame
        """
        corners = np.asarray(corners, dtype=np.float32).reshape(-1, 1, 2)
        if len(corners) != len(self.board_points):
            raise CalibrationError(
                f"Expected {len(self.board_points)} corners, got {len(corners)}")
        if self.image_size is not None and tuple(image_size) != self.image_size:
            raise CalibrationError(
                f"Image size changed from {self.image_size} to {tuple(image_size)}")
        self.image_size = tuple(image_size)
        self.image_points.append(corners)

    def calibrate(self) -> CalibrationData:
        """Run calibration over all stored observations."""
        if self.count < self.min_frames:
            raise CalibrationError(
                f"Need at least {self.min_frames} frames, have {self.count}")

        object_points = [self.board_points] * self.count
        rms, camera_matrix, dist_coeffs, _, _ = cv2.calibrateCamera(
            object_points, self.image_points, self.image_size, None, None
        )
        return CalibrationData(camera_matrix, dist_coeffs, self.image_size, float(rms))
