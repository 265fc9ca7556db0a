import cv2
import numpy as np
import pytest

from ar_modules import ChessboardDetector, Pose, PoseEstimator


@pytest.fixture
def estimator(calibration):
    return PoseEstimator(calibration)


@pytest.fixture
def object_points():
    return ChessboardDetector().object_points()


def test_estimate_recovers_known_pose(estimator, object_points, board_pose):
    image_points = estimator.project(object_points, board_pose)

    pose = estimator.estimate(object_points, image_points.reshape(-1, 1, 2))

    assert pose is not None
    assert pose.rvec.shape == (3, 1)
    assert pose.tvec.shape == (3, 1)
    assert np.allclose(pose.tvec, board_pose.tvec, atol=1e-2)
    R_expected, _ = cv2.Rodrigues(board_pose.rvec)
    R_actual, _ = cv2.Rodrigues(pose.rvec)
    assert np.allclose(R_actual, R_expected, atol=1e-3)
    assert estimator.reprojection_error(object_points, image_points, pose) < 1e-2


def test_estimate_needs_four_points(estimator, object_points, board_pose):
    image_points = estimator.project(object_points[:3], board_pose)
    assert estimator.estimate(object_points[:3], image_points) is None


def test_estimate_rejects_mismatched_counts(estimator, object_points, board_pose):
    image_points = estimator.project(object_points, board_pose)
    assert estimator.estimate(object_points, image_points[:10]) is None


def test_project_shapes(estimator, board_pose):
    projected = estimator.project([(0, 0, 0), (1, 0, 0)], board_pose)
    assert projected.shape == (2, 2)
    assert projected.dtype == np.float32

    empty = estimator.project(np.zeros((0, 3)), board_pose)
    assert empty.shape == (0, 2)


def test_frontal_projection_of_axes(estimator):
    # Camera looking straight at the board origin from 10 units away
    pose = Pose(np.array([[np.pi], [0.0], [0.0]]), np.array([[0.0], [0.0], [10.0]]))

    origin, z_tip, x_tip, y_tip = estimator.project(
        [(0, 0, 0), (0, 0, 1), (1, 0, 0), (0, 1, 0)], pose)

    assert np.allclose(origin, [260, 200], atol=1e-3)
    assert np.allclose(z_tip, [260, 200], atol=1e-3)
    assert np.allclose(x_tip, [340, 200], atol=1e-3)
    # Board +y is up in the image
    assert np.allclose(y_tip, [260, 120], atol=1e-3)


def test_camera_position_frontal():
    # Board flipped about x and 10 units straight ahead of the camera
    pose = Pose(np.array([[np.pi], [0.0], [0.0]]), np.array([[0.0], [0.0], [10.0]]))

    position, forward, up = PoseEstimator.camera_position(pose)

    assert np.allclose(position, [0, 0, 10], atol=1e-6)
    assert np.allclose(forward, [0, 0, -1], atol=1e-6)
    assert np.allclose(up, [0, 1, 0], atol=1e-6)


def test_euler_angles_degrees():
    pose = Pose(np.array([[0.0], [0.0], [np.pi / 2]]), np.zeros((3, 1)))
    angles = PoseEstimator.euler_angles(pose)
    assert np.allclose(angles, [0, 0, 90], atol=1e-6)


def test_format_pose_prints_translation(board_pose):
    text = PoseEstimator.format_pose(board_pose)
    lines = text.splitlines()

    assert lines[0] == "Rotations:"
    assert lines[3] == "Translations:"
    assert lines[4] == "-4.0000 -2.5000 20.0000"
