"""Snapshot pipeline: enumerate → focus → capture → fingerprint → OCR → diff.

Windows are processed strictly one after another. Focus and capture act on
the single shared desktop session, so a capture must finish before the next
window is focused.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from core.errors import PersistenceFailure
from core.timestamps import format_timestamp
from memory.state_store import StateStore
from os_controller.base_controller import (
    CaptureService,
    FocusController,
    TextExtractor,
    WindowEnumerator,
)
from vision.fingerprint import fingerprint
from world_model.desktop_state import (
    ListedWindow,
    OCRResult,
    PersistedState,
    SnapshotResult,
    WindowRecord,
)

logger = logging.getLogger("ds.assembler")

_NO_TEXT: OCRResult = {"text": "", "elements": []}


def _record(window: ListedWindow, changed: bool, ocr: OCRResult = _NO_TEXT) -> WindowRecord:
    return WindowRecord(
        id=window.id,
        title=window.title,
        geometry=window.geometry,
        ocr_text=ocr["text"],
        elements=list(ocr["elements"]),
        changed=changed,
    )


class SnapshotAssembler:
    """Runs one inspection pass and assembles the ``SnapshotResult``."""

    def __init__(
        self,
        enumerator: WindowEnumerator,
        focus: FocusController,
        capture: CaptureService,
        extractor: TextExtractor,
        state_store: StateStore,
        fingerprinter: Callable[[Path], str] = fingerprint,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.enumerator = enumerator
        self.focus = focus
        self.capture = capture
        self.extractor = extractor
        self.state_store = state_store
        self.fingerprinter = fingerprinter
        self.clock = clock

    def inspect_window(self, window: ListedWindow, previous: dict[str, str]) -> tuple[WindowRecord, str]:
        """Process one window. Returns its record and new fingerprint ("" if none).

        Any failed stage ends the sequence with the window marked changed and
        no text, since its content is unknown.
        """
        if not self.focus.set_focused(window.id):
            return _record(window, changed=True), ""

        path = self.capture.capture(window.id, window.geometry)
        if path is None:
            return _record(window, changed=True), ""

        digest = self.fingerprinter(path)
        if digest and previous.get(window.id) == digest:
            return _record(window, changed=False), digest

        return _record(window, changed=True, ocr=self.extractor.extract(path, window.geometry)), digest

    def run(self, changes_only: bool = False) -> SnapshotResult:
        """Inspect every window; with ``changes_only`` emit only changed records."""
        timestamp = format_timestamp(self.clock())
        desktop_size = self.enumerator.desktop_size()
        focused_window = self.focus.get_focused()
        listed = self.enumerator.list_windows()
        previous = self.state_store.load().windows

        new_state = PersistedState()
        records: list[WindowRecord] = []
        for window in listed:
            record, digest = self.inspect_window(window, previous)
            if digest:
                new_state.windows[window.id] = digest
            records.append(record)

        if focused_window and not self.focus.set_focused(focused_window):
            logger.warning("Could not restore focus to window %s", focused_window)

        try:
            self.state_store.save(new_state)
        except PersistenceFailure as exc:
            logger.warning("State not saved, next run will over-report changes: %s", exc)

        changes: list[str] = []
        for record in records:
            if record.changed and record.id not in changes:
                changes.append(record.id)
        logger.info("Inspected %d window(s), %d changed", len(records), len(changes))

        return SnapshotResult(
            timestamp=timestamp,
            desktop_size=desktop_size,
            focused_window=focused_window,
            windows=[r for r in records if r.changed] if changes_only else records,
            changes_since_last=changes,
        )
