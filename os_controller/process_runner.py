"""Blocking invocation of external desktop tools."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

from core.errors import ToolFailed, ToolUnavailable


def run_tool(args: Sequence[str], timeout: float | None = None) -> str:
    """Run a tool to completion and return its stdout.

    Raises ``ToolUnavailable`` when the executable cannot be started and
    ``ToolFailed`` on a nonzero exit or timeout.
    """
    argv = [str(a) for a in args]
    try:
        proc = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise ToolUnavailable(f"{argv[0]} not found") from exc
    except OSError as exc:
        raise ToolUnavailable(f"{argv[0]} could not be started: {exc}") from exc
    except subprocess.TimeoutExpired as exc:
        raise ToolFailed(f"{argv[0]} timed out after {timeout}s") from exc
    if proc.returncode != 0:
        raise ToolFailed(f"{argv[0]} exited with {proc.returncode}: {proc.stderr.strip()[:300]}")
    return proc.stdout
