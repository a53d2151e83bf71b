"""Desktop snapshot schema."""

from __future__ import annotations

from typing import TypedDict

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WindowGeometry(BaseModel):
    """Absolute desktop position and size of a window."""

    model_config = ConfigDict(frozen=True)

    x: int = 0
    y: int = 0
    w: int = Field(default=0, ge=0)
    h: int = Field(default=0, ge=0)


class ListedWindow(BaseModel):
    """One row from the window listing."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    geometry: WindowGeometry = Field(default_factory=WindowGeometry)


class TextElement(BaseModel):
    """A recognized word with its bounding box in absolute desktop coordinates.

    To click an element, aim at its center: ``(x + w // 2, y + h // 2)``.
    """

    text: str
    x: int
    y: int
    w: int = Field(ge=0)
    h: int = Field(ge=0)
    confidence: float = Field(ge=0.0, le=100.0)


class WindowRecord(BaseModel):
    """Per-window entry of a snapshot."""

    id: str
    title: str
    geometry: WindowGeometry
    ocr_text: str = ""
    elements: list[TextElement] = Field(default_factory=list)
    changed: bool

    @model_validator(mode="after")
    def _elements_only_when_changed(self) -> WindowRecord:
        if not self.changed and self.elements:
            raise ValueError("unchanged windows carry no text elements")
        return self


class PersistedState(BaseModel):
    """Window id to content fingerprint, carried between runs."""

    windows: dict[str, str] = Field(default_factory=dict)


class SnapshotResult(BaseModel):
    """The structured output of one inspection run."""

    model_config = ConfigDict(frozen=True)

    timestamp: str
    desktop_size: tuple[int, int] = (0, 0)
    focused_window: str = ""
    windows: list[WindowRecord] = Field(default_factory=list)
    changes_since_last: list[str] = Field(default_factory=list)


class OCRResult(TypedDict):
    """Text recognized in one window capture."""

    text: str
    elements: list[TextElement]
