"""
Configuration settings for the AR overlay demos.
Centralized configuration for all modules.
"""

import cv2
from dataclasses import dataclass


@dataclass
class ShapeColors:
    """BGR colors for the projected geometry."""

    AXIS_X = (0, 0, 255)
    AXIS_Y = (0, 255, 0)
    AXIS_Z = (255, 0, 0)
    CUBE = (0, 255, 255)
    WALLS = (255, 0, 0)
    ROOF = (0, 0, 255)
    DOOR = (0, 0, 0)
    MODEL = (255, 0, 0)
    HARRIS = (255, 0, 0)


class ARConfig:
    """Configuration for the AR demos and the offline tools."""

    # Chessboard Detection (inner corners, columns x rows)
    CHESSBOARD = {
        'PATTERN_SIZE': (9, 6),
        'FLAGS': cv2.CALIB_CB_FAST_CHECK,
        'SUBPIX_WINDOW': (11, 11),
        'SUBPIX_ZERO_ZONE': (-1, -1),
        'SUBPIX_CRITERIA': (cv2.TERM_CRITERIA_EPS + cv2.TERM_CRITERIA_MAX_ITER, 30, 0.1)
    }

    # Calibration
    CALIBRATION = {
        'DEFAULT_PATH': 'calibration.csv',
        'MIN_FRAMES': 5
    }

    # Geometry drawn on the board (units are chessboard squares)
    AXES = {
        'SCALE': 1.0,
        'THICKNESS': 2
    }

    CUBE = {
        'ORIGIN': (3.0, -1.0, 0.0),
        'SCALE': 2.0,
        'THICKNESS': 2
    }

    HOUSE = {
        'CENTER': (4.5, -3.0, 0.0),
        'WALL_SIZE': (3.0, 4.0, 5.5),
        'ROOF_HEIGHT': 2.0,
        'DOOR_FRACTION': 0.25,
        'KNOB': (0.2, 0.6),
        'KNOB_RADIUS': 2,
        'KNOB_THICKNESS': 3,
        'THICKNESS': 2
    }

    # Custom OBJ model
    MODEL = {
        'DEFAULT_PATH': 'shuttle.obj',
        'OFFSET': (4.5, -3.0, 1.0),
        'SCALE': 1.0,
        'THICKNESS': 1
    }

    # Harris Corners
    HARRIS = {
        'BLOCK_SIZE': 2,
        'APERTURE': 3,
        'K': 0.04,
        'THRESHOLD': 190,
        'CIRCLE_RADIUS': 5,
        'CIRCLE_THICKNESS': 2
    }

    # Sticker (warped image sequence)
    STICKER = {
        'DEFAULT_SOURCE': 'kerm/input-{}.png',
        'INTERPOLATION': cv2.INTER_CUBIC,
        'EXTENSIONS': ('.png', '.jpg', '.jpeg', '.bmp'),
        'MAX_FRAMES': 1000
    }

    # Live capture
    CAPTURE = {
        'DEVICE': 0,
        'DELAY_MS': 10,
        'SNAPSHOT_DIR': 'imgs',
        'SNAPSHOT_PREFIX': 'image'
    }

    # Visualization
    VIZ = {
        'BG_DIM': 0.3,
        'LABEL_BG': (0, 0, 0),
        'FOUND_COLOR': (0, 255, 0),
        'MISSING_COLOR': (0, 0, 255)
    }
