"""
AR Overlay Modules

This package contains the components behind the AR demos:
- chessboard_detection: Finds and refines chessboard target corners
- calibration: Reads/writes camera intrinsics, runs calibration
- pose_estimation: solvePnP pose and point projection
- geometry: Axes, cube, house and OBJ wireframes in board units
- obj_loader: Wavefront OBJ vertices and faces
- harris_detection: Thresholded Harris corner response
- sticker_overlay: Homography-warped image sequence on the board
"""

from .chessboard_detection import ChessboardDetector
from .calibration import CalibrationData, CalibrationError, CameraCalibrator, load_calibration
from .pose_estimation import Pose, PoseEstimator
from .geometry import Wireframe, build_axes, build_cube, build_house, build_model
from .obj_loader import ObjModel, ObjParseError, load_obj
from .harris_detection import HarrisCornerDetector
from .sticker_overlay import StickerOverlay, load_sticker_frames

__all__ = [
    'ChessboardDetector',
    'CalibrationData',
    'CalibrationError',
    'CameraCalibrator',
    'load_calibration',
    'Pose',
    'PoseEstimator',
    'Wireframe',
    'build_axes',
    'build_cube',
    'build_house',
    'build_model',
    'ObjModel',
    'ObjParseError',
    'load_obj',
    'HarrisCornerDetector',
    'StickerOverlay',
    'load_sticker_frames'
]
