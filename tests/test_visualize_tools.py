import cv2
import numpy as np

from ar_modules import ChessboardDetector, PoseEstimator, build_house
from pipeline import ARPipeline
from visualize.viz_camera_poses import (board_outline, create_pose_figure,
                                        estimate_camera_poses, print_pose_summary)
from visualize.viz_harris import create_summary_visualization
from visualize.viz_pose import render_pose_strip


def test_board_outline_is_closed():
    outline = board_outline((9, 6))
    assert outline.shape == (5, 3)
    assert np.array_equal(outline[0], outline[-1])
    assert outline[2].tolist() == [8, -5, 0]


def test_camera_poses_from_images(tmp_path, calibration, chessboard_image, blank_image, capsys):
    board = tmp_path / "board.png"
    blank = tmp_path / "blank.png"
    cv2.imwrite(str(board), chessboard_image)
    cv2.imwrite(str(blank), blank_image)

    results = estimate_camera_poses([blank, board], ChessboardDetector(), PoseEstimator(calibration))

    assert [r['filename'] for r in results] == ["board.png"]
    # Frontal view: camera straight above the board plane
    assert results[0]['camera_position'][2] > 0
    assert results[0]['error'] < 1.0

    print_pose_summary(results)
    assert "board.png" in capsys.readouterr().out

    fig = create_pose_figure(results, (9, 6))
    names = [trace.name for trace in fig.data]
    assert "Chessboard" in names
    assert any(name and name.startswith("board.png") for name in names)


def test_harris_summary_grid(tmp_path):
    files = []
    for i in range(4):
        path = tmp_path / f"harris_{i}.png"
        cv2.imwrite(str(path), np.full((30, 40, 3), i * 50, dtype=np.uint8))
        files.append(path)

    summary = create_summary_visualization(files, tmp_path)

    assert summary.exists()
    assert cv2.imread(str(summary)) is not None


def test_pose_strip_dims_corner_panel_and_marks_status(calibration, chessboard_image):
    pipeline = ARPipeline(calibration)

    strip, status = render_pose_strip(pipeline, build_house(), chessboard_image)

    assert strip.shape == (400, 3 * 520, 3)
    assert status.startswith("pattern found")
    # White border of the first panel is dimmed
    assert tuple(strip[100, 5]) == (76, 76, 76)
    assert tuple(strip[100, 520 + 5]) == (255, 255, 255)
    banner = strip[-20:]
    assert np.any((banner[:, :, 1] > 200) & (banner[:, :, 2] < 50))


def test_pose_strip_without_pattern(calibration, blank_image):
    strip, status = render_pose_strip(ARPipeline(calibration), build_house(), blank_image)

    assert status == "pattern not found"
    banner = strip[-10:]
    assert np.any((banner[:, :, 2] > 200) & (banner[:, :, 1] < 50))
