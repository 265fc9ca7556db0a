"""
Chessboard AR Pipeline

Orchestrates the modules for one frame at a time.
Process: Chessboard Detection -> Pose Estimation -> Projection -> Drawing

Usage:
    python pipeline.py <image_directory> --calibration calibration.csv [--mode house] [--visualize]
"""

import cv2
import numpy as np
import sys
import argparse
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple

from ar_modules import (ChessboardDetector, PoseEstimator, CalibrationData, CalibrationError,
                        ObjModel, ObjParseError, load_calibration, load_obj,
                        build_axes, build_cube, build_house, build_model)
from ar_modules.visualization import draw_wireframe
from config import ARConfig


class DisplayMode(Enum):
    AXES = 'axes'
    CUBE = 'cube'
    HOUSE = 'house'
    MODEL = 'model'


class ARPipeline:
    """Main pipeline for chessboard AR overlays."""

    def __init__(self,
                 calibration: CalibrationData,
                 pattern_size: Tuple[int, int] = None,
                 model: Optional[ObjModel] = None):
        """
        Initialize the detector, the pose estimator and the scene geometry.

        Args:
            calibration: Camera matrix and distortion coefficients
            pattern_size: (columns, rows) of inner corners, ARConfig default if None
            model: Optional OBJ model for DisplayMode.MODEL
        """
        self.detector = ChessboardDetector(pattern_size=pattern_size)
        self.pose_estimator = PoseEstimator(calibration)
        self.object_points = self.detector.object_points()
        self.model = model
        self.mode = DisplayMode.AXES

        self.wireframes = {
            DisplayMode.AXES: build_axes(),
            DisplayMode.CUBE: build_cube(),
            DisplayMode.HOUSE: build_house(),
        }
        if model is not None:
            self.wireframes[DisplayMode.MODEL] = build_model(model)

    @property
    def pattern_size(self) -> Tuple[int, int]:
        return self.detector.pattern_size

    def toggle(self, mode: DisplayMode) -> DisplayMode:
        """
        Switch display mode. Selecting the active mode returns to the axes;
        the model mode is ignored when no model is loaded.
        """
        if mode not in self.wireframes:
            return self.mode
        self.mode = DisplayMode.AXES if mode == self.mode else mode
        return self.mode

    def process_frame(self, frame: np.ndarray) -> Dict:
        """
        Run detection, pose estimation and projection on a frame.

        Args:
            frame: BGR input image

        Returns:
            Dictionary with keys 'found', 'corners', 'pose', 'image_points'
            and 'wireframe'
        """
        results = {
            'found': False,
            'corners': None,
            'pose': None,
            'image_points': None,
            'wireframe': self.wireframes[self.mode],
        }

        found, corners = self.detector.detect(frame)
        results['corners'] = corners
        if not found:
            return results

        pose = self.pose_estimator.estimate(self.object_points, corners)
        if pose is None:
            return results

        results['found'] = True
        results['pose'] = pose
        results['image_points'] = self.pose_estimator.project(results['wireframe'].points, pose)
        return results

    def render(self, frame: np.ndarray, results: Dict) -> np.ndarray:
        """Copy of the frame with the projected wireframe when a pose was found."""
        if not results.get('found') or results.get('image_points') is None:
            return frame.copy()
        return draw_wireframe(frame, results['image_points'], results['wireframe'])


def load_pipeline(calibration_path, pattern_size=None, model_path=None) -> ARPipeline:
    """Build a pipeline from files; a missing model file only disables MODEL."""
    calibration = load_calibration(calibration_path)
    model = None
    if model_path is not None and Path(model_path).exists():
        model = load_obj(model_path, ARConfig.MODEL['SCALE'])
    return ARPipeline(calibration, pattern_size, model)


def parse_pattern(text: str) -> Tuple[int, int]:
    """Parse 'COLSxROWS' such as '9x6'."""
    try:
        cols, rows = (int(v) for v in text.lower().split('x'))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Pattern must look like 9x6, got '{text}'")
    if cols < 2 or rows < 2:
        raise argparse.ArgumentTypeError("Pattern needs at least 2x2 inner corners")
    return cols, rows


def main():
    parser = argparse.ArgumentParser(description='Chessboard AR Pipeline (still images)')
    parser.add_argument('input_dir', type=str, help='Directory containing input images')
    parser.add_argument('--calibration', '-c', type=str, default=ARConfig.CALIBRATION['DEFAULT_PATH'],
                        help='Calibration CSV or JSON file')
    parser.add_argument('--pattern', type=parse_pattern, default=ARConfig.CHESSBOARD['PATTERN_SIZE'],
                        help='Inner corners as COLSxROWS (default: 9x6)')
    parser.add_argument('--mode', '-m', choices=[m.value for m in DisplayMode], default='axes',
                        help='Geometry to draw')
    parser.add_argument('--model', type=str, default=None, help='OBJ model for --mode model')
    parser.add_argument('--output', '-o', type=str, help='Output directory (default: input_dir/ar_results)')
    parser.add_argument('--visualize', '-v', action='store_true', help='Save overlay images')

    args = parser.parse_args()

    input_dir = Path(args.input_dir)
    if not input_dir.exists():
        print(f"Error: Input directory does not exist: {input_dir}")
        sys.exit(1)

    try:
        pipeline = load_pipeline(args.calibration, args.pattern, args.model)
    except (FileNotFoundError, CalibrationError, ObjParseError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    mode = DisplayMode(args.mode)
    if pipeline.toggle(mode) != mode and mode != DisplayMode.AXES:
        print(f"Error: mode '{mode.value}' needs --model")
        sys.exit(1)

    output_dir = Path(args.output) if args.output else input_dir / "ar_results"
    output_dir.mkdir(exist_ok=True, parents=True)

    image_files = []
    for ext in ['*.jpg', '*.jpeg', '*.png', '*.JPG', '*.JPEG', '*.PNG']:
        image_files.extend(input_dir.glob(ext))
    image_files = sorted(set(image_files))

    print(f"Found {len(image_files)} image(s) to process\n")

    if not image_files:
        print("No images found!")
        sys.exit(1)

    found_count = 0
    for idx, img_path in enumerate(image_files, 1):
        print(f"[{idx}/{len(image_files)}] Processing {img_path.name}...")

        image = cv2.imread(str(img_path))
        if image is None:
            print(f"  Warning: Could not read image")
            continue

        results = pipeline.process_frame(image)

        if results['found']:
            found_count += 1
            angles = pipeline.pose_estimator.euler_angles(results['pose'])
            tvec = results['pose'].tvec.flatten()
            print(f"  ✓ Pattern found | Euler (deg): [{angles[0]:.1f}, {angles[1]:.1f}, {angles[2]:.1f}]"
                  f" | t: [{tvec[0]:.2f}, {tvec[1]:.2f}, {tvec[2]:.2f}]")
        else:
            print(f"  ✗ Pattern not found")

        if args.visualize:
            vis = pipeline.render(image, results)
            out_path = output_dir / f"{img_path.stem}_{mode.value}.jpg"
            cv2.imwrite(str(out_path), vis)
            print(f"  Saved: {out_path.name}")

    print(f"\nDone! Pattern found in {found_count}/{len(image_files)} image(s). Results in: {output_dir}")


if __name__ == "__main__":
    main()
