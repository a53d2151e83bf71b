"""Capability interfaces for the external desktop collaborators.

Every implementation is fail-soft: failures are logged and mapped to a safe
default value instead of being raised to the caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from world_model.desktop_state import ListedWindow, OCRResult, WindowGeometry


class WindowEnumerator(ABC):
    """Lists the windows of the desktop session."""

    @abstractmethod
    def desktop_size(self) -> tuple[int, int]:
        """Return (width, height), or (0, 0) when unknown."""

    @abstractmethod
    def list_windows(self) -> list[ListedWindow]:
        """Return windows in listing order, empty on failure."""


class FocusController(ABC):
    """Reads and moves input focus."""

    @abstractmethod
    def get_focused(self) -> str:
        """Return the focused window id, or an empty string."""

    @abstractmethod
    def set_focused(self, window_id: str) -> bool:
        """Focus a window and wait until the focus change is applied."""


class CaptureService(ABC):
    """Writes a still image of a focused window."""

    @abstractmethod
    def capture(self, window_id: str, geometry: WindowGeometry) -> Path | None:
        """Capture a window to its per-id path, or return None."""


class TextExtractor(ABC):
    """Recognizes text in a captured window image."""

    @abstractmethod
    def extract(self, image_path: Path, geometry: WindowGeometry) -> OCRResult:
        """Return full text and word elements in desktop coordinates."""
