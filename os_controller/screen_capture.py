"""Per-window screen capture to overwritable PNG files."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import mss
from mss.exception import ScreenShotError
from PIL import Image

from core.errors import IOFailure, SnapshotError
from os_controller.base_controller import CaptureService
from os_controller.process_runner import run_tool
from world_model.desktop_state import WindowGeometry

DEFAULT_CAPTURE_CMD = ("scrot", "-u", "-z", "-o")


def capture_path(screenshot_dir: Path, window_id: str) -> Path:
    """Deterministic per-window image path, overwritten on every run."""
    return screenshot_dir / f"{window_id}.png"


def ensure_screenshot_dir(screenshot_dir: Path) -> None:
    try:
        screenshot_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFailure(f"cannot create screenshot dir {screenshot_dir}: {exc}") from exc


class ScrotCapture(CaptureService):
    """Captures the focused window with ``scrot -u``."""

    def __init__(
        self,
        screenshot_dir: Path,
        capture_cmd: Sequence[str] = DEFAULT_CAPTURE_CMD,
        timeout: float | None = None,
    ) -> None:
        self.screenshot_dir = screenshot_dir
        self.capture_cmd = list(capture_cmd)
        self.timeout = timeout
        self.logger = logging.getLogger("ds.capture")

    def capture(self, window_id: str, geometry: WindowGeometry) -> Path | None:
        """Capture the focused window; ``geometry`` is unused since scrot -u finds it."""
        path = capture_path(self.screenshot_dir, window_id)
        try:
            ensure_screenshot_dir(self.screenshot_dir)
            run_tool([*self.capture_cmd, str(path)], timeout=self.timeout)
        except SnapshotError as exc:
            self.logger.warning("Capture failed for window %s: %s", window_id, exc)
            return None
        return path


class MssCapture(CaptureService):
    """Grabs the window rectangle from the X server with mss."""

    def __init__(self, screenshot_dir: Path) -> None:
        self.screenshot_dir = screenshot_dir
        self.logger = logging.getLogger("ds.capture")

    def capture(self, window_id: str, geometry: WindowGeometry) -> Path | None:
        if geometry.w <= 0 or geometry.h <= 0:
            self.logger.warning("Window %s has an empty rectangle, skipping capture", window_id)
            return None
        path = capture_path(self.screenshot_dir, window_id)
        box = {"left": geometry.x, "top": geometry.y, "width": geometry.w, "height": geometry.h}
        try:
            ensure_screenshot_dir(self.screenshot_dir)
            with mss.mss() as sct:
                shot = sct.grab(box)
            Image.frombytes("RGB", shot.size, shot.bgra, "raw", "BGRX").save(path, format="PNG")
        except (ScreenShotError, SnapshotError, OSError, ValueError) as exc:
            self.logger.warning("Capture failed for window %s: %s", window_id, exc)
            return None
        return path
