"""Error taxonomy for snapshot collaborators."""

from __future__ import annotations


class SnapshotError(RuntimeError):
    """Base class for recoverable snapshot failures."""


class ToolUnavailable(SnapshotError):
    """External executable is missing."""


class ToolFailed(SnapshotError):
    """External executable exited nonzero or timed out."""


class ParseFailure(SnapshotError):
    """Tool output did not have the expected shape."""


class PersistenceFailure(SnapshotError):
    """State file could not be read or written."""


class IOFailure(SnapshotError):
    """Image file could not be read or written."""
