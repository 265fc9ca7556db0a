"""
Visualize Harris Corners

Standalone script to test the Harris detector on still images. Saves an
annotated copy per image and a summary grid of all results.

Usage:
    python viz_harris.py <image_directory> [threshold]
"""

import cv2
import sys
from pathlib import Path
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

sys.path.append(str(Path(__file__).parent.parent))

from ar_modules import HarrisCornerDetector


def create_summary_visualization(annotated_files, output_path: Path, cols: int = 3) -> Path:
    """Lay out the annotated images in a matplotlib grid and save it."""
    n_images = len(annotated_files)
    cols = min(cols, n_images)
    rows = (n_images + cols - 1) // cols

    fig, axes = plt.subplots(rows, cols, figsize=(6 * cols, 5 * rows), squeeze=False)

    for idx, img_file in enumerate(annotated_files):
        ax = axes[idx // cols, idx % cols]
        img = cv2.cvtColor(cv2.imread(str(img_file)), cv2.COLOR_BGR2RGB)
        ax.imshow(img)
        ax.set_title(img_file.name.replace("harris_", ""), fontsize=10)
        ax.axis('off')

    for idx in range(n_images, rows * cols):
        axes[idx // cols, idx % cols].axis('off')

    plt.tight_layout()
    summary_file = output_path / "summary_grid.png"
    plt.savefig(summary_file, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return summary_file


def main():
    if len(sys.argv) < 2:
        print("Usage: python viz_harris.py <image_directory> [threshold]")
        sys.exit(1)

    input_dir = Path(sys.argv[1])
    if not input_dir.exists():
        print(f"Error: Path does not exist: {input_dir}")
        sys.exit(1)

    threshold = float(sys.argv[2]) if len(sys.argv) > 2 else None
    detector = HarrisCornerDetector(threshold=threshold)

    output_dir = input_dir / "viz_harris"
    output_dir.mkdir(exist_ok=True)

    image_files = sorted(list(input_dir.glob('*.jpg')) + list(input_dir.glob('*.png')))
    print(f"Processing {len(image_files)} images (threshold {detector.threshold})...\n")

    annotated = []
    for idx, img_path in enumerate(image_files, 1):
        image = cv2.imread(str(img_path))
        if image is None:
            continue

        points = detector.detect(image)
        vis = detector.draw(image, points)

        out_path = output_dir / f"harris_{img_path.stem}.png"
        cv2.imwrite(str(out_path), vis)
        annotated.append(out_path)
        print(f"[{idx}] {img_path.name}: {len(points)} corner pixels")

    if annotated:
        summary = create_summary_visualization(annotated, output_dir)
        print(f"\nSummary grid saved: {summary}")
    print(f"Results saved to: {output_dir}")


if __name__ == "__main__":
    main()
