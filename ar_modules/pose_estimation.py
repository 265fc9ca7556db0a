"""
Pose Estimation Module

Estimates the board pose (rotation/translation) from detected corners with
solvePnP and projects 3D board-space points into the image.
"""

import cv2
import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple
from scipy.spatial.transform import Rotation as R

from .calibration import CalibrationData


@dataclass
class Pose:
    """Board pose in camera coordinates."""

    rvec: np.ndarray
    tvec: np.ndarray


class PoseEstimator:
    """Wraps solvePnP / projectPoints for one calibrated camera."""

    def __init__(self, calibration: CalibrationData):
        self.calibration = calibration
        self.camera_matrix = calibration.camera_matrix
        self.dist_coeffs = calibration.dist_coeffs

    def estimate(self, object_points: np.ndarray, image_points: np.ndarray) -> Optional[Pose]:
        """
        Estimate the pose of the board relative to the camera.

        Args:
            object_points: (N, 3) board points
            image_points: (N, 1, 2) or (N, 2) detected corners

        Returns:
            Pose, or None if there are fewer than 4 points or the solver fails
        """
        object_points = np.asarray(object_points, dtype=np.float32).reshape(-1, 3)
        image_points = np.asarray(image_points, dtype=np.float32).reshape(-1, 2)

        if len(object_points) < 4 or len(object_points) != len(image_points):
            return None

        try:
            success, rvec, tvec = cv2.solvePnP(
                object_points, image_points, self.camera_matrix, self.dist_coeffs,
                flags=cv2.SOLVEPNP_ITERATIVE
            )
        except cv2.error:
            return None

        if not success:
            return None

        return Pose(rvec.reshape(3, 1), tvec.reshape(3, 1))

    def project(self, points: np.ndarray, pose: Pose) -> np.ndarray:
        """Project (N, 3) board points to (N, 2) image points."""
        points = np.asarray(points, dtype=np.float32).reshape(-1, 3)
        if len(points) == 0:
            return np.zeros((0, 2), dtype=np.float32)

        image_points, _ = cv2.projectPoints(
            points, pose.rvec, pose.tvec, self.camera_matrix, self.dist_coeffs
        )
        return image_points.reshape(-1, 2).astype(np.float32)

    def reprojection_error(self, object_points: np.ndarray,
                           image_points: np.ndarray, pose: Pose) -> float:
        """Mean pixel distance between observed and re-projected points."""
        projected = self.project(object_points, pose)
        observed = np.asarray(image_points, dtype=np.float32).reshape(-1, 2)
        return float(np.mean(np.linalg.norm(observed - projected, axis=1)))

    @staticmethod
    def camera_position(pose: Pose) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Convert the board pose to the camera position and orientation in
        board coordinates.

        Returns:
            (position, forward, up) as flat 3-vectors
        """
        R_board_to_cam, _ = cv2.Rodrigues(pose.rvec)

        # C = -R^T * t
        position = -R_board_to_cam.T @ pose.tvec
        R_cam_to_world = R_board_to_cam.T

        forward = R_cam_to_world @ np.array([[0], [0], [1]])
        up = R_cam_to_world @ np.array([[0], [-1], [0]])

        return position.flatten(), forward.flatten(), up.flatten()

    @staticmethod
    def euler_angles(pose: Pose) -> np.ndarray:
        """Board rotation as XYZ Euler angles in degrees."""
        return R.from_rotvec(pose.rvec.flatten()).as_euler('xyz', degrees=True)

    @staticmethod
    def format_pose(pose: Pose) -> str:
        lines = [
            "Rotations:",
            " ".join(f"{v:.4f}" for v in pose.rvec.flatten()),
            "",
            "Translations:",
            " ".join(f"{v:.4f}" for v in pose.tvec.flatten()),
        ]
        return "\n".join(lines)
