"""
Visualize Camera Poses

Estimates where the camera was for every still image of the chessboard and
shows the positions around the board in an interactive 3D plot.

Usage:
    python viz_camera_poses.py <image_directory> [calibration.csv]
"""

import cv2
import numpy as np
import sys
from pathlib import Path
import plotly.graph_objects as go

sys.path.append(str(Path(__file__).parent.parent))

from ar_modules import ChessboardDetector, PoseEstimator, load_calibration


def estimate_camera_poses(image_files, detector, estimator):
    """Camera position/orientation per image in board units."""
    board_points = detector.object_points()
    results = []

    for img_path in image_files:
        image = cv2.imread(str(img_path))
        if image is None:
            print(f"  ⚠️ Could not load {img_path.name}")
            continue

        found, corners = detector.detect(image)
        if not found:
            print(f"  ⚠️ No pattern in {img_path.name}")
            continue

        pose = estimator.estimate(board_points, corners)
        if pose is None:
            print(f"  ⚠️ Could not estimate pose for {img_path.name}")
            continue

        position, forward, up = estimator.camera_position(pose)
        print(f"  ✓ {img_path.name}: camera at [{position[0]:.2f}, {position[1]:.2f}, {position[2]:.2f}]")

        results.append({
            'filename': img_path.name,
            'pose': pose,
            'camera_position': position,
            'camera_forward': forward,
            'camera_up': up,
            'euler': estimator.euler_angles(pose),
            'error': estimator.reprojection_error(board_points, corners, pose)
        })

    return results


def board_outline(pattern_size):
    """Closed outline through the outer inner-corners of the board."""
    cols, rows = pattern_size
    w, h = cols - 1, rows - 1
    return np.array([[0, 0, 0], [w, 0, 0], [w, -h, 0], [0, -h, 0], [0, 0, 0]], dtype=float)


def create_pose_figure(results, pattern_size) -> go.Figure:
    """Interactive 3D plot of the board and every camera."""
    fig = go.Figure()

    outline = board_outline(pattern_size)
    fig.add_trace(go.Scatter3d(
        x=outline[:, 0], y=outline[:, 1], z=outline[:, 2],
        mode='lines',
        line=dict(color='blue', width=5),
        name='Chessboard'
    ))

    colors = ['#FF6B6B', '#4ECDC4', '#45B7D1', '#96CEB4',
              '#FFEAA7', '#DDA0DD', '#98D8C8', '#F7DC6F']

    for i, result in enumerate(results):
        pos = result['camera_position']
        forward = result['camera_forward']
        color = colors[i % len(colors)]

        fig.add_trace(go.Scatter3d(
            x=[pos[0]], y=[pos[1]], z=[pos[2]],
            mode='markers+text',
            marker=dict(size=6, color=color, symbol='diamond'),
            text=[f"Cam {i+1}"],
            textposition='top center',
            name=f"{result['filename']} ({result['error']:.2f} px)"
        ))

        end = pos + 2.0 * forward
        fig.add_trace(go.Scatter3d(
            x=[pos[0], end[0]], y=[pos[1], end[1]], z=[pos[2], end[2]],
            mode='lines',
            line=dict(color=color, width=4),
            showlegend=False,
            hoverinfo='skip'
        ))

    for axis, color, tip in (('X', 'red', (1, 0, 0)), ('Y', 'green', (0, 1, 0)), ('Z', 'blue', (0, 0, 1))):
        fig.add_trace(go.Scatter3d(
            x=[0, tip[0]], y=[0, tip[1]], z=[0, tip[2]],
            mode='lines+text',
            line=dict(color=color, width=3),
            text=['', axis],
            textposition='top center',
            showlegend=False
        ))

    fig.update_layout(
        title=dict(text='Camera Poses around the Chessboard', font=dict(size=20)),
        scene=dict(
            xaxis=dict(title='X (squares)'),
            yaxis=dict(title='Y (squares)'),
            zaxis=dict(title='Z (squares)'),
            aspectmode='data'
        ),
        margin=dict(l=0, r=0, t=50, b=0),
        showlegend=True
    )
    return fig


def print_pose_summary(results):
    """Print a summary table of all camera poses."""
    print("\n" + "=" * 80)
    print("CAMERA POSE SUMMARY")
    print("=" * 80)
    print(f"{'Image':<30} {'Err(px)':>8} {'X':>8} {'Y':>8} {'Z':>8} {'Rx':>7} {'Ry':>7} {'Rz':>7}")
    print("-" * 80)

    for r in results:
        pos = r['camera_position']
        rx, ry, rz = r['euler']
        print(f"{r['filename']:<30} {r['error']:>8.2f} {pos[0]:>8.2f} {pos[1]:>8.2f} {pos[2]:>8.2f}"
              f" {rx:>7.1f} {ry:>7.1f} {rz:>7.1f}")

    print("-" * 80)

    if len(results) > 1:
        print("\nRELATIVE DISTANCES BETWEEN CAMERAS (squares):")
        for i in range(len(results)):
            for j in range(i + 1, len(results)):
                distance = np.linalg.norm(results[i]['camera_position'] - results[j]['camera_position'])
                print(f"  Cam {i+1} ↔ Cam {j+1}: {distance:.2f}")


def main():
    if len(sys.argv) < 2:
        print("Usage: python viz_camera_poses.py <image_directory> [calibration.csv]")
        sys.exit(1)

    input_dir = Path(sys.argv[1])
    if not input_dir.exists():
        print(f"Error: Path does not exist: {input_dir}")
        sys.exit(1)

    calibration_path = sys.argv[2] if len(sys.argv) > 2 else "calibration.csv"
    try:
        calibration = load_calibration(calibration_path)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    detector = ChessboardDetector()
    estimator = PoseEstimator(calibration)

    image_files = sorted(list(input_dir.glob('*.jpg')) + list(input_dir.glob('*.png')))
    print(f"Found {len(image_files)} images")

    results = estimate_camera_poses(image_files, detector, estimator)
    if not results:
        print("\nNo valid poses could be estimated.")
        sys.exit(1)

    print_pose_summary(results)

    fig = create_pose_figure(results, detector.pattern_size)
    output_html = input_dir / "camera_poses_3d.html"
    fig.write_html(str(output_html))
    print(f"\n✅ Interactive 3D visualization saved to: {output_html}")


if __name__ == "__main__":
    main()
