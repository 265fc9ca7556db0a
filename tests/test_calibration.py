import json

import cv2
import numpy as np
import pytest

from ar_modules import CalibrationError, CameraCalibrator, ChessboardDetector
from ar_modules.calibration import (CalibrationData, format_calibration, load_calibration,
                                    load_calibration_csv, load_calibration_json,
                                    save_calibration, save_calibration_csv)

CSV_TEXT = """# webcam, 640x480
camera_matrix,812.5,0,319.2,0,810.1,241.7,0,0,1
distortion_coefficients,0.11,-0.25,0.001,-0.002,0.09
"""


def test_load_csv(tmp_path):
    path = tmp_path / "calibration.csv"
    path.write_text(CSV_TEXT)

    data = load_calibration_csv(path)

    assert data.camera_matrix.shape == (3, 3)
    assert data.camera_matrix[0, 0] == pytest.approx(812.5)
    assert data.camera_matrix[1, 2] == pytest.approx(241.7)
    assert data.dist_coeffs.shape == (5, 1)
    assert data.dist_coeffs[1, 0] == pytest.approx(-0.25)
    assert data.image_size is None
    assert data.reprojection_error is None


def test_save_then_load_keeps_optional_rows(tmp_path, calibration):
    calibration.reprojection_error = 0.3125
    path = save_calibration_csv(tmp_path / "out" / "calibration.csv", calibration)

    loaded = load_calibration_csv(path)

    assert np.allclose(loaded.camera_matrix, calibration.camera_matrix)
    assert np.allclose(loaded.dist_coeffs, calibration.dist_coeffs)
    assert loaded.image_size == (520, 400)
    assert loaded.reprojection_error == pytest.approx(0.3125)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_calibration(tmp_path / "nope.csv")


@pytest.mark.parametrize("text", [
    "distortion_coefficients,0,0,0,0,0\n",
    "camera_matrix,1,0,0,0,1,0,0,0,1\n",
    "camera_matrix,1,0,0,0,1,0,0,0\ndistortion_coefficients,0,0,0,0,0\n",
    "camera_matrix,1,0,x,0,1,0,0,0,1\ndistortion_coefficients,0,0,0,0,0\n",
    "camera_matrix,1,0,0,0,1,0,0,0,1\ndistortion_coefficients\n",
])
def test_malformed_csv_raises(tmp_path, text):
    path = tmp_path / "bad.csv"
    path.write_text(text)
    with pytest.raises(CalibrationError):
        load_calibration_csv(path)


def test_load_json_from_charuco_output(tmp_path):
    payload = {
        "image_size": [640, 480],
        "reprojection_error": 0.42,
        "camera_matrix": [[600.0, 0.0, 320.0], [0.0, 601.0, 240.0], [0.0, 0.0, 1.0]],
        "dist_coeffs": [[0.1, -0.2, 0.0, 0.0, 0.05]],
        "calibration_method": "calibrateCameraCharuco",
    }
    path = tmp_path / "calibration.json"
    path.write_text(json.dumps(payload))

    data = load_calibration(path)

    assert data.camera_matrix[1, 1] == pytest.approx(601.0)
    assert data.dist_coeffs.shape == (5, 1)
    assert data.image_size == (640, 480)
    assert data.reprojection_error == pytest.approx(0.42)


def test_json_without_camera_matrix_raises(tmp_path):
    path = tmp_path / "calibration.json"
    path.write_text(json.dumps({"dist_coeffs": [0, 0, 0, 0, 0]}))
    with pytest.raises(CalibrationError):
        load_calibration_json(path)


def test_save_dispatches_on_suffix(tmp_path, calibration):
    json_path = save_calibration(tmp_path / "cal.json", calibration)
    assert json.loads(json_path.read_text())["image_size"] == [520, 400]

    csv_path = save_calibration(tmp_path / "cal.csv", calibration)
    assert csv_path.read_text().startswith("camera_matrix,")


def test_format_calibration(calibration):
    text = format_calibration(calibration)
    lines = text.splitlines()

    assert lines[0] == "Camera Matrix"
    assert lines[1] == "800.0000 0.0000 260.0000"
    assert "Distortion Coefficients" in lines
    assert lines[-1] == "0.0000 0.0000 0.0000 0.0000 0.0000"


def _synthetic_views(calibration, object_points):
    views = []
    for rx, ry in [(0.3, 0.0), (-0.3, 0.1), (0.1, 0.35), (0.2, -0.3), (-0.25, -0.2), (0.0, 0.25)]:
        rvec = np.array([np.pi + rx, ry, 0.05])
        tvec = np.array([-4.0, -2.5, 22.0])
        pts, _ = cv2.projectPoints(object_points, rvec, tvec,
                                   calibration.camera_matrix, calibration.dist_coeffs)
        views.append(pts.astype(np.float32))
    return views


def test_calibrator_recovers_focal_length(calibration):
    object_points = ChessboardDetector().object_points()
    calibrator = CameraCalibrator(object_points)

    for corners in _synthetic_views(calibration, object_points):
        calibrator.add_observation(corners, (520, 400))

    result = calibrator.calibrate()

    assert calibrator.count == 6
    assert result.image_size == (520, 400)
    assert result.reprojection_error < 0.1
    assert result.camera_matrix[0, 0] == pytest.approx(800.0, rel=0.02)
    assert result.camera_matrix[1, 1] == pytest.approx(800.0, rel=0.02)


def test_calibrator_needs_min_frames(calibration):
    object_points = ChessboardDetector().object_points()
    calibrator = CameraCalibrator(object_points)
    calibrator.add_observation(_synthetic_views(calibration, object_points)[0], (520, 400))

    with pytest.raises(CalibrationError):
        calibrator.calibrate()


def test_calibrator_rejects_bad_observations():
    calibrator = CameraCalibrator(ChessboardDetector().object_points())

    with pytest.raises(CalibrationError):
        calibrator.add_observation(np.zeros((10, 1, 2)), (520, 400))

    calibrator.add_observation(np.zeros((54, 1, 2)), (520, 400))
    with pytest.raises(CalibrationError):
        calibrator.add_observation(np.zeros((54, 1, 2)), (640, 480))


def test_calibration_data_normalizes_shapes():
    data = CalibrationData(np.eye(3).flatten().tolist(), [0.1, 0.2, 0.0, 0.0, 0.0])
    assert data.camera_matrix.shape == (3, 3)
    assert data.dist_coeffs.shape == (5, 1)
    assert data.camera_matrix.dtype == np.float64
