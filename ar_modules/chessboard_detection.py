"""
Chessboard Detection Module

Finds the inner corners of the chessboard calibration target and refines
them to sub-pixel accuracy. Also provides the matching 3D board points.
"""

import cv2
import numpy as np
from typing import Optional, Tuple
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from config import ARConfig


class ChessboardDetector:
    """Detects the chessboard target in camera frames."""

    def __init__(self, config: dict = None, pattern_size: Tuple[int, int] = None):
        """
        Initialize chessboard detector.

        Args:
            config: Optional config dict, uses ARConfig.CHESSBOARD if None
            pattern_size: Optional (columns, rows) of inner corners, overrides config
        """
        self.config = config or ARConfig.CHESSBOARD
        self.pattern_size = tuple(pattern_size or self.config['PATTERN_SIZE'])
        self.flags = self.config['FLAGS']
        self.window = tuple(self.config['SUBPIX_WINDOW'])
        self.zero_zone = tuple(self.config['SUBPIX_ZERO_ZONE'])
        self.criteria = self.config['SUBPIX_CRITERIA']

    @staticmethod
    def to_gray(image: np.ndarray) -> np.ndarray:
        """Convert a BGR image to grayscale, pass grayscale through."""
        if len(image.shape) == 2:
            return image
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

    def detect(self, image: np.ndarray) -> Tuple[bool, Optional[np.ndarray]]:
        """
        Main detection method.

        Args:
            image: BGR or grayscale input image

        Returns:
            Tuple of (found, corners)
            - found: True if the full pattern was located
            - corners: (N, 1, 2) float32 refined corners, None if not found
        """
        gray = self.to_gray(image)
        found, corners = cv2.findChessboardCorners(gray, self.pattern_size, flags=self.flags)

        if not found or corners is None:
            return False, None

        corners = cv2.cornerSubPix(gray, corners.astype(np.float32),
                                   self.window, self.zero_zone, self.criteria)
        return True, corners.reshape(-1, 1, 2).astype(np.float32)

    def object_points(self, pattern_size: Tuple[int, int] = None) -> np.ndarray:
        """
        3D board points matching the detected corner order.

        Row i, column j maps to (j, -i, 0), one unit per square.
        """
        cols, rows = pattern_size or self.pattern_size
        points = [(j, -i, 0) for i in range(rows) for j in range(cols)]
        return np.array(points, dtype=np.float32)

    def draw(self, image: np.ndarray, corners: Optional[np.ndarray], found: bool) -> np.ndarray:
        """Draw the detected corners on a copy of the image."""
        vis = image.copy()
        if corners is not None:
            cv2.drawChessboardCorners(vis, self.pattern_size, corners, found)
        return vis
