"""Linux (X11) window listing and focus control via command-line tools."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from core.errors import ParseFailure, SnapshotError
from os_controller.base_controller import FocusController, WindowEnumerator
from os_controller.process_runner import run_tool
from world_model.desktop_state import ListedWindow, WindowGeometry

DEFAULT_WINDOW_LIST_CMD = ("wmctrl", "-lG")
DEFAULT_DESKTOP_GEOMETRY_CMD = ("xprop", "-root", "_NET_DESKTOP_GEOMETRY")
DEFAULT_ACTIVE_WINDOW_CMD = ("xdotool", "getactivewindow")
DEFAULT_FOCUS_WINDOW_CMD = ("xdotool", "windowfocus", "--sync")

# wmctrl -lG: ID DESKTOP X Y W H HOST TITLE...
_MIN_LISTING_COLUMNS = 8


def _int_or_zero(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        return 0


def _size_or_zero(raw: str) -> int:
    return max(0, _int_or_zero(raw))


def parse_window_listing(text: str) -> list[ListedWindow]:
    """Parse ``wmctrl -lG`` style output, dropping short lines."""
    windows: list[ListedWindow] = []
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < _MIN_LISTING_COLUMNS:
            continue
        geometry = WindowGeometry(
            x=_int_or_zero(parts[2]),
            y=_int_or_zero(parts[3]),
            w=_size_or_zero(parts[4]),
            h=_size_or_zero(parts[5]),
        )
        windows.append(ListedWindow(id=parts[0], title=" ".join(parts[7:]), geometry=geometry))
    return windows


def parse_desktop_geometry(text: str) -> tuple[int, int]:
    """Parse ``_NET_DESKTOP_GEOMETRY(CARDINAL) = 1920, 1080``."""
    _, sep, rest = text.partition("=")
    if not sep:
        raise ParseFailure(f"no '=' in desktop geometry output: {text.strip()[:100]!r}")
    values: list[int] = []
    for chunk in rest.split(","):
        try:
            values.append(int(chunk.strip()))
        except ValueError:
            continue
    if len(values) != 2:
        raise ParseFailure(f"expected two values in desktop geometry, got {len(values)}")
    return values[0], values[1]


class LinuxController(WindowEnumerator, FocusController):
    """X11 desktop queries through wmctrl, xprop and xdotool."""

    def __init__(
        self,
        window_list_cmd: Sequence[str] = DEFAULT_WINDOW_LIST_CMD,
        desktop_geometry_cmd: Sequence[str] = DEFAULT_DESKTOP_GEOMETRY_CMD,
        active_window_cmd: Sequence[str] = DEFAULT_ACTIVE_WINDOW_CMD,
        focus_window_cmd: Sequence[str] = DEFAULT_FOCUS_WINDOW_CMD,
        timeout: float | None = None,
    ) -> None:
        self.window_list_cmd = list(window_list_cmd)
        self.desktop_geometry_cmd = list(desktop_geometry_cmd)
        self.active_window_cmd = list(active_window_cmd)
        self.focus_window_cmd = list(focus_window_cmd)
        self.timeout = timeout
        self.logger = logging.getLogger("ds.linux_controller")

    def desktop_size(self) -> tuple[int, int]:
        try:
            output = run_tool(self.desktop_geometry_cmd, timeout=self.timeout)
            return parse_desktop_geometry(output)
        except SnapshotError as exc:
            self.logger.warning("Could not read desktop size: %s", exc)
            return 0, 0

    def list_windows(self) -> list[ListedWindow]:
        try:
            output = run_tool(self.window_list_cmd, timeout=self.timeout)
        except SnapshotError as exc:
            self.logger.warning("Window listing failed: %s", exc)
            return []
        return parse_window_listing(output)

    def get_focused(self) -> str:
        try:
            return run_tool(self.active_window_cmd, timeout=self.timeout).strip()
        except SnapshotError as exc:
            self.logger.warning("Could not read focused window: %s", exc)
            return ""

    def set_focused(self, window_id: str) -> bool:
        try:
            run_tool([*self.focus_window_cmd, window_id], timeout=self.timeout)
        except SnapshotError as exc:
            self.logger.warning("Failed to focus window %s: %s", window_id, exc)
            return False
        return True
