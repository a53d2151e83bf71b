"""OCR engine built on Tesseract's TSV output.

Each recognized word comes back with its bounding box relative to the
captured image. Boxes are shifted by the window origin so agents get
absolute desktop coordinates they can click directly.

Known limitation: some window managers include the title bar in the capture
while the listing reports the client-area origin, so ``y`` can be off by the
title bar height. No correction is applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pytesseract

from os_controller.base_controller import TextExtractor
from world_model.desktop_state import OCRResult, TextElement, WindowGeometry

# Real UI text scores well above 80; rendering artifacts stay below 30.
DEFAULT_MIN_CONFIDENCE = 40.0

_WORD_LEVEL = 5
# level page block par line word left top width height conf text
_TSV_COLUMNS = 12


@dataclass(frozen=True)
class TsvWord:
    """A word-level TSV row in image-local coordinates."""

    line_num: int
    left: int
    top: int
    width: int
    height: int
    confidence: float
    text: str


def _int_or_zero(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        return 0


def parse_tsv_words(tsv: str) -> list[TsvWord]:
    """Return word rows from Tesseract TSV, skipping the header and short rows."""
    words: list[TsvWord] = []
    for row in tsv.splitlines()[1:]:
        parts = row.split("\t")
        if len(parts) < _TSV_COLUMNS:
            continue
        if _int_or_zero(parts[0]) != _WORD_LEVEL:
            continue
        try:
            confidence = float(parts[10])
        except ValueError:
            confidence = -1.0
        words.append(
            TsvWord(
                line_num=_int_or_zero(parts[4]),
                left=_int_or_zero(parts[6]),
                top=_int_or_zero(parts[7]),
                width=max(0, _int_or_zero(parts[8])),
                height=max(0, _int_or_zero(parts[9])),
                confidence=confidence,
                text="\t".join(parts[11:]).strip(),
            )
        )
    return words


def to_desktop_element(word: TsvWord, geometry: WindowGeometry) -> TextElement:
    """Shift an image-local word box to absolute desktop coordinates."""
    return TextElement(
        text=word.text,
        x=geometry.x + word.left,
        y=geometry.y + word.top,
        w=word.width,
        h=word.height,
        confidence=min(100.0, max(0.0, word.confidence)),
    )


def join_lines(words: list[TsvWord]) -> str:
    """Rebuild text: runs of words sharing a line index form one line."""
    lines: list[list[str]] = []
    current_line: int | None = None
    for word in words:
        if not lines or word.line_num != current_line:
            lines.append([])
            current_line = word.line_num
        lines[-1].append(word.text)
    return "\n".join(" ".join(line) for line in lines)


def build_result(
    tsv: str,
    geometry: WindowGeometry,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
) -> OCRResult:
    """Filter TSV words by confidence and assemble text plus desktop elements."""
    kept = [w for w in parse_tsv_words(tsv) if w.text and w.confidence >= min_confidence]
    return {
        "text": join_lines(kept),
        "elements": [to_desktop_element(w, geometry) for w in kept],
    }


class OCREngine(TextExtractor):
    """Runs Tesseract through pytesseract and parses its TSV table."""

    def __init__(
        self,
        languages: str = "eng",
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
        timeout: float | None = None,
    ) -> None:
        self.languages = languages
        self.min_confidence = min_confidence
        self.timeout = timeout or 0
        self.logger = logging.getLogger("ds.ocr")

    def extract(self, image_path: Path, geometry: WindowGeometry) -> OCRResult:
        """Recognize words in ``image_path``; empty result on any tool failure."""
        try:
            tsv = pytesseract.image_to_data(
                str(image_path),
                lang=self.languages,
                output_type=pytesseract.Output.STRING,
                timeout=self.timeout,
            )
        except pytesseract.TesseractNotFoundError as exc:
            self.logger.warning("Tesseract is not installed: %s", exc)
            return {"text": "", "elements": []}
        except (pytesseract.TesseractError, RuntimeError, OSError, ValueError) as exc:
            self.logger.warning("Tesseract failed on %s: %s", image_path, exc)
            return {"text": "", "elements": []}
        result = build_result(tsv, geometry, self.min_confidence)
        self.logger.debug("OCR %s: %d words", image_path.name, len(result["elements"]))
        return result
