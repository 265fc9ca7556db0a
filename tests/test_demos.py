import numpy as np
import pytest

import ar_main
import calibrate_main
from ar_modules.calibration import save_calibration_csv
from conftest import render_chessboard


@pytest.fixture
def calibration_file(tmp_path, calibration):
    return save_calibration_csv(tmp_path / "calibration.csv", calibration)


@pytest.fixture
def model_file(tmp_path):
    path = tmp_path / "tri.obj"
    path.write_text("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n")
    return path


def fake_loop(frames, keys):
    """run_loop stand-in: show each frame, then press the keys on the last one."""
    def run(capture, window, process, on_key=None, delay_ms=None):
        dst = None
        for frame, frame_keys in zip(frames, keys):
            dst = process(frame)
            for key in frame_keys:
                on_key(ord(key), dst)
        return len(frames)
    return run


def _mode_lines(out):
    return [line.split(": ")[1] for line in out.splitlines() if line.startswith("Mode: ")]


def test_ar_keys_toggle_modes_and_save(monkeypatch, tmp_path, capsys,
                                       calibration_file, model_file, chessboard_image):
    monkeypatch.setattr(ar_main, 'open_capture', lambda device: object())
    monkeypatch.setattr(ar_main, 'run_loop', fake_loop([chessboard_image], ["ncceas"]))
    snapshots = tmp_path / "imgs"

    status = ar_main.main(['--calibration', str(calibration_file), '--model', str(model_file),
                           '--snapshots', str(snapshots)])

    assert status == 0
    out = capsys.readouterr().out
    assert _mode_lines(out) == ["house", "cube", "axes", "model", "axes"]
    assert "Camera Matrix" in out
    assert (snapshots / "image0.png").exists()


def test_ar_model_key_ignored_without_model(monkeypatch, tmp_path, capsys,
                                            calibration_file, chessboard_image):
    monkeypatch.setattr(ar_main, 'open_capture', lambda device: object())
    monkeypatch.setattr(ar_main, 'run_loop', fake_loop([chessboard_image], ["e"]))

    status = ar_main.main(['--calibration', str(calibration_file), '--model', str(tmp_path / "none.obj")])

    assert status == 0
    out = capsys.readouterr().out
    assert "Model not found" in out
    assert _mode_lines(out) == ["axes"]


def test_ar_missing_calibration(tmp_path, capsys):
    assert ar_main.main(['--calibration', str(tmp_path / "missing.csv")]) == 1
    assert "Error" in capsys.readouterr().out


def test_calibrate_rejects_view_of_other_size(monkeypatch, tmp_path, capsys, chessboard_image):
    larger = render_chessboard(margin=80)
    blank = np.full_like(chessboard_image, 255)
    monkeypatch.setattr(calibrate_main, 'open_capture', lambda device: object())
    monkeypatch.setattr(calibrate_main, 'run_loop',
                        fake_loop([chessboard_image, larger, blank], ["s", "s", "sc"]))

    status = calibrate_main.main(['--output', str(tmp_path / "out.csv")])

    assert status == 0
    out = capsys.readouterr().out
    assert "✓ Stored view 1" in out
    assert out.count("⚠️") == 3
    assert "Stored view 2" not in out
    assert not (tmp_path / "out.csv").exists()
