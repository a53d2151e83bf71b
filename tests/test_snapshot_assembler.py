"""End-to-end pipeline tests with canned desktop collaborators."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

from core.errors import PersistenceFailure
from core.snapshot_assembler import SnapshotAssembler
from memory.state_store import StateStore
from os_controller.base_controller import (
    CaptureService,
    FocusController,
    TextExtractor,
    WindowEnumerator,
)
from world_model.desktop_state import ListedWindow, OCRResult, TextElement, WindowGeometry

EPOCH_2024_02_29 = 19782 * 86400


class FakeDesktop(WindowEnumerator, FocusController):
    def __init__(self, windows: list[ListedWindow], focused: str = "0xa") -> None:
        self.windows = windows
        self.focused = focused
        self.focus_calls: list[str] = []
        self.refuse: set[str] = set()

    def desktop_size(self) -> tuple[int, int]:
        return 1920, 1080

    def list_windows(self) -> list[ListedWindow]:
        return list(self.windows)

    def get_focused(self) -> str:
        return self.focused

    def set_focused(self, window_id: str) -> bool:
        self.focus_calls.append(window_id)
        if window_id in self.refuse:
            return False
        self.focused = window_id
        return True


class FakeCapture(CaptureService):
    def __init__(self, shots: Path, desktop: FakeDesktop) -> None:
        self.shots = shots
        self.desktop = desktop
        self.pixels: dict[str, bytes] = {}
        self.fail: set[str] = set()

    def capture(self, window_id: str, geometry: WindowGeometry) -> Path | None:
        assert self.desktop.focused == window_id
        if window_id in self.fail:
            return None
        self.shots.mkdir(parents=True, exist_ok=True)
        path = self.shots / f"{window_id}.png"
        path.write_bytes(self.pixels.get(window_id, window_id.encode()))
        return path


class FakeExtractor(TextExtractor):
    def __init__(self) -> None:
        self.calls: list[str] = []

    def extract(self, image_path: Path, geometry: WindowGeometry) -> OCRResult:
        self.calls.append(image_path.stem)
        element = TextElement(text=image_path.stem, x=geometry.x + 1, y=geometry.y + 2, w=10, h=5, confidence=90.0)
        return {"text": image_path.stem, "elements": [element]}


def build(tmp_path: Path, ids: list[str] | None = None) -> tuple[SnapshotAssembler, FakeDesktop, FakeCapture, FakeExtractor]:
    windows = [
        ListedWindow(id=wid, title=f"title {wid}", geometry=WindowGeometry(x=100 * i, y=50, w=300, h=200))
        for i, wid in enumerate(ids or ["0xa", "0xb", "0xc"])
    ]
    desktop = FakeDesktop(windows)
    capture = FakeCapture(tmp_path / "shots", desktop)
    extractor = FakeExtractor()
    assembler = SnapshotAssembler(
        enumerator=desktop,
        focus=desktop,
        capture=capture,
        extractor=extractor,
        state_store=StateStore(tmp_path / "state.json"),
        clock=lambda: EPOCH_2024_02_29 + 61,
    )
    return assembler, desktop, capture, extractor


def test_first_run_reports_every_window_changed(tmp_path: Path) -> None:
    assembler, _, _, extractor = build(tmp_path)
    result = assembler.run()

    assert result.timestamp == "2024-02-29T00:01:01Z"
    assert result.desktop_size == (1920, 1080)
    assert result.focused_window == "0xa"
    assert result.changes_since_last == ["0xa", "0xb", "0xc"]
    assert extractor.calls == ["0xa", "0xb", "0xc"]
    second = result.windows[1]
    assert second.ocr_text == "0xb"
    assert (second.elements[0].x, second.elements[0].y) == (101, 52)


def test_second_run_on_unchanged_desktop_is_quiet(tmp_path: Path) -> None:
    assembler, _, _, extractor = build(tmp_path)
    assembler.run()
    extractor.calls.clear()

    result = assembler.run()

    assert result.changes_since_last == []
    assert extractor.calls == []
    for record in result.windows:
        assert record.changed is False
        assert record.ocr_text == ""
        assert record.elements == []


def test_only_modified_window_is_reprocessed(tmp_path: Path) -> None:
    assembler, _, capture, extractor = build(tmp_path)
    assembler.run()
    extractor.calls.clear()
    capture.pixels["0xb"] = b"new pixels"

    result = assembler.run()

    assert result.changes_since_last == ["0xb"]
    assert extractor.calls == ["0xb"]


def test_corrupt_state_marks_all_changed(tmp_path: Path) -> None:
    assembler, _, _, _ = build(tmp_path)
    assembler.run()
    (tmp_path / "state.json").write_text("{not json", encoding="utf-8")

    result = assembler.run()

    assert result.changes_since_last == ["0xa", "0xb", "0xc"]


def test_changes_only_filters_windows_but_not_change_list(tmp_path: Path) -> None:
    assembler, _, capture, _ = build(tmp_path)
    assembler.run()
    capture.pixels["0xc"] = b"scrolled"
    full = assembler.run()

    capture.pixels["0xc"] = b"scrolled again"
    filtered = assembler.run(changes_only=True)

    assert [w.id for w in full.windows] == ["0xa", "0xb", "0xc"]
    assert [w.id for w in filtered.windows] == ["0xc"]
    assert full.changes_since_last == filtered.changes_since_last == ["0xc"]


def test_focus_and_capture_failures_count_as_changed_without_state(tmp_path: Path) -> None:
    assembler, desktop, capture, extractor = build(tmp_path)
    assembler.run()
    desktop.refuse.add("0xa")
    capture.fail.add("0xb")
    extractor.calls.clear()

    result = assembler.run()

    assert result.changes_since_last == ["0xa", "0xb"]
    assert extractor.calls == []
    assert all(w.ocr_text == "" for w in result.windows)
    assert assembler.state_store.load().windows.keys() == {"0xc"}


def test_original_focus_restored_last(tmp_path: Path) -> None:
    assembler, desktop, _, _ = build(tmp_path)
    desktop.focused = "0xb"
    assembler.run()

    assert desktop.focus_calls == ["0xa", "0xb", "0xc", "0xb"]
    assert desktop.focused == "0xb"


def test_vanished_windows_are_forgotten(tmp_path: Path) -> None:
    assembler, desktop, _, _ = build(tmp_path)
    assembler.run()
    desktop.windows = desktop.windows[:1]
    assembler.run()

    assert set(assembler.state_store.load().windows) == {"0xa"}


def test_empty_fingerprint_is_never_trusted(tmp_path: Path) -> None:
    assembler, _, _, extractor = build(tmp_path, ids=["0xa"])
    assembler.fingerprinter = lambda path: ""
    assembler.run()
    result = assembler.run()

    assert result.changes_since_last == ["0xa"]
    assert extractor.calls == ["0xa", "0xa"]
    assert assembler.state_store.load().windows == {}


def test_state_save_failure_still_returns_result(tmp_path: Path) -> None:
    assembler, _, _, _ = build(tmp_path)
    store = MagicMock(spec=StateStore)
    store.load.return_value = StateStore(tmp_path / "missing.json").load()
    store.save.side_effect = PersistenceFailure("read-only filesystem")
    assembler.state_store = store

    result = assembler.run()

    assert result.changes_since_last == ["0xa", "0xb", "0xc"]
    store.save.assert_called_once()


def test_no_windows_listed(tmp_path: Path) -> None:
    assembler, desktop, _, _ = build(tmp_path)
    desktop.windows = []

    result = assembler.run()

    assert result.windows == []
    assert result.changes_since_last == []
