"""Tests for external tool invocation."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from core.errors import ToolFailed, ToolUnavailable
from os_controller.process_runner import run_tool


def test_returns_stdout_on_success() -> None:
    completed = MagicMock(returncode=0, stdout="1920, 1080\n", stderr="")
    with patch("os_controller.process_runner.subprocess.run", return_value=completed) as run:
        assert run_tool(["xprop", "-root"]) == "1920, 1080\n"
    assert run.call_args.args[0] == ["xprop", "-root"]


def test_missing_executable_is_unavailable() -> None:
    with patch("os_controller.process_runner.subprocess.run", side_effect=FileNotFoundError()):
        with pytest.raises(ToolUnavailable):
            run_tool(["wmctrl", "-lG"])


def test_nonzero_exit_and_timeout_are_failures() -> None:
    completed = MagicMock(returncode=1, stdout="", stderr="Cannot open display")
    with patch("os_controller.process_runner.subprocess.run", return_value=completed):
        with pytest.raises(ToolFailed, match="Cannot open display"):
            run_tool(["wmctrl", "-lG"])
    with patch(
        "os_controller.process_runner.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="scrot", timeout=2),
    ):
        with pytest.raises(ToolFailed, match="timed out"):
            run_tool(["scrot"], timeout=2)


def test_unlaunchable_executable_is_unavailable() -> None:
    failures = [
        PermissionError(13, "Permission denied"),
        OSError(8, "Exec format error"),
        NotADirectoryError(20, "Not a directory"),
    ]
    for failure in failures:
        with patch("os_controller.process_runner.subprocess.run", side_effect=failure):
            with pytest.raises(ToolUnavailable, match="could not be started"):
                run_tool(["./xdotool", "getactivewindow"])
