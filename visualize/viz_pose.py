"""
Visualize Pose Overlays

Standalone script to test the chessboard pipeline on still images: draws
the detected corners, the axes and the house for every image and saves a
labelled 3-panel strip per image.

Usage:
    python viz_pose.py <image_directory> [calibration.csv]
"""

import cv2
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from ar_modules import build_house, load_calibration
from ar_modules.visualization import (add_label_to_image, create_grid_visualization,
                                      dim_image, draw_wireframe)
from config import ARConfig
from pipeline import ARPipeline


def render_pose_strip(pipeline, house, image, config: dict = None):
    """
    Corners over a dimmed background, axes and house side by side.

    Returns:
        Tuple of (strip image, status text)
    """
    config = config or ARConfig.VIZ

    results = pipeline.process_frame(image)
    v1 = pipeline.detector.draw(dim_image(image, config['BG_DIM']), results['corners'], results['found'])

    if results['found']:
        v2 = pipeline.render(image, results)
        house_points = pipeline.pose_estimator.project(house.points, results['pose'])
        v3 = draw_wireframe(image, house_points, house)
        error = pipeline.pose_estimator.reprojection_error(
            pipeline.object_points, results['corners'], results['pose'])
        status = f"pattern found, reprojection error {error:.2f} px"
        status_color = config['FOUND_COLOR']
    else:
        v2 = image.copy()
        v3 = image.copy()
        status = "pattern not found"
        status_color = config['MISSING_COLOR']

    strip = create_grid_visualization(
        [v1, v2, v3],
        ["1. Corners", "2. Axes", "3. House"],
        grid_size=(1, 3)
    )
    strip = add_label_to_image(strip, status, color=status_color,
                               bg_color=config['LABEL_BG'], position='bottom')
    return strip, status


def main():
    if len(sys.argv) < 2:
        print("Usage: python viz_pose.py <image_directory> [calibration.csv]")
        sys.exit(1)

    input_dir = Path(sys.argv[1])
    if not input_dir.exists():
        print(f"Error: Path does not exist: {input_dir}")
        sys.exit(1)

    calibration_path = sys.argv[2] if len(sys.argv) > 2 else ARConfig.CALIBRATION['DEFAULT_PATH']
    try:
        calibration = load_calibration(calibration_path)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    output_dir = input_dir / "viz_pose"
    output_dir.mkdir(exist_ok=True)

    pipeline = ARPipeline(calibration)
    house = build_house()

    image_files = sorted(list(input_dir.glob('*.jpg')) + list(input_dir.glob('*.png')))
    print(f"Processing {len(image_files)} images...\n")

    for idx, img_path in enumerate(image_files, 1):
        image = cv2.imread(str(img_path))
        if image is None:
            continue

        strip, status = render_pose_strip(pipeline, house, image)

        out_path = output_dir / f"{img_path.stem}_pose.jpg"
        cv2.imwrite(str(out_path), strip)
        print(f"[{idx}] Saved {out_path.name} ({status})")

    print(f"\nResults saved to: {output_dir}")


if __name__ == "__main__":
    main()
