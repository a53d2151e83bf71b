"""Capture service tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

from mss.exception import ScreenShotError

from core.errors import ToolFailed
from os_controller.screen_capture import MssCapture, ScrotCapture
from world_model.desktop_state import WindowGeometry


def test_scrot_writes_to_per_window_path(tmp_path: Path) -> None:
    shots = tmp_path / "screenshots"
    capture = ScrotCapture(shots)
    with patch("os_controller.screen_capture.run_tool", return_value="") as run:
        path = capture.capture("0x03a00004", WindowGeometry())

    assert path == shots / "0x03a00004.png"
    assert shots.is_dir()
    run.assert_called_once_with(["scrot", "-u", "-z", "-o", str(shots / "0x03a00004.png")], timeout=None)


def test_scrot_failure_returns_none(tmp_path: Path) -> None:
    capture = ScrotCapture(tmp_path)
    with patch("os_controller.screen_capture.run_tool", side_effect=ToolFailed("exit 2")):
        assert capture.capture("0x1", WindowGeometry()) is None


def test_mss_skips_empty_rectangle(tmp_path: Path) -> None:
    capture = MssCapture(tmp_path)
    with patch("os_controller.screen_capture.mss.mss") as grabber:
        assert capture.capture("0x1", WindowGeometry(x=0, y=0, w=0, h=10)) is None
    grabber.assert_not_called()


def test_mss_grabs_window_rectangle_and_writes_png(tmp_path: Path) -> None:
    shots = tmp_path / "screenshots"
    capture = MssCapture(shots)
    with patch("os_controller.screen_capture.mss.mss") as grabber:
        sct = grabber.return_value.__enter__.return_value
        sct.grab.return_value = MagicMock(size=(2, 1), bgra=b"\x00" * 8)
        path = capture.capture("0x03a00004", WindowGeometry(x=100, y=50, w=800, h=600))

    assert path == shots / "0x03a00004.png"
    assert path.read_bytes().startswith(b"\x89PNG")
    sct.grab.assert_called_once_with({"left": 100, "top": 50, "width": 800, "height": 600})


def test_mss_grab_error_returns_none(tmp_path: Path) -> None:
    capture = MssCapture(tmp_path)
    with patch("os_controller.screen_capture.mss.mss") as grabber:
        grabber.return_value.__enter__.return_value.grab.side_effect = ScreenShotError("XGetImage failed")
        assert capture.capture("0x1", WindowGeometry(x=0, y=0, w=10, h=10)) is None
    assert not (tmp_path / "0x1.png").exists()
