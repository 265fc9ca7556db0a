"""
Harris Corner Module

Computes the Harris corner response of a frame and marks every pixel whose
normalized response passes the threshold.
"""

import cv2
import numpy as np
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from config import ARConfig, ShapeColors


class HarrisCornerDetector:
    """Thresholded Harris corner response."""

    def __init__(self, config: dict = None, threshold: float = None):
        """
        Initialize Harris detector.

        Args:
            config: Optional config dict, uses ARConfig.HARRIS if None
            threshold: Optional threshold on the 0-255 normalized response
        """
        self.config = config or ARConfig.HARRIS
        self.block_size = self.config['BLOCK_SIZE']
        self.aperture = self.config['APERTURE']
        self.k = self.config['K']
        self.threshold = self.config['THRESHOLD'] if threshold is None else threshold
        self.radius = self.config['CIRCLE_RADIUS']
        self.thickness = self.config['CIRCLE_THICKNESS']

    def response(self, image: np.ndarray) -> np.ndarray:
        """Raw float32 Harris response of the grayscale image."""
        if len(image.shape) == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            gray = image
        return cv2.cornerHarris(np.float32(gray), self.block_size, self.aperture, self.k)

    @staticmethod
    def normalized(response: np.ndarray) -> np.ndarray:
        """Min-max scale the response to 0-255."""
        if float(response.max() - response.min()) == 0.0:
            return np.zeros_like(response, dtype=np.float32)
        return cv2.normalize(response, None, 0, 255, cv2.NORM_MINMAX, cv2.CV_32FC1)

    def detect(self, image: np.ndarray) -> np.ndarray:
        """
        Find corner pixels.

        Returns:
            (N, 2) int array of (x, y) positions
        """
        norm = self.normalized(self.response(image))
        rows, cols = np.nonzero(norm.astype(np.int32) > self.threshold)
        return np.stack([cols, rows], axis=1).astype(int)

    def draw(self, image: np.ndarray, points: np.ndarray) -> np.ndarray:
        vis = image.copy()
        for x, y in points:
            cv2.circle(vis, (int(x), int(y)), self.radius, ShapeColors.HARRIS, self.thickness, cv2.LINE_8)
        return vis
