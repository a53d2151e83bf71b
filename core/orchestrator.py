"""Top-level application orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.policy_runtime import load_effective_config, resolve_paths
from core.snapshot_assembler import SnapshotAssembler
from memory.state_store import StateStore
from os_controller.base_controller import CaptureService
from os_controller.linux_controller import LinuxController
from os_controller.screen_capture import MssCapture, ScrotCapture
from vision.ocr.ocr_engine import OCREngine


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    paths: dict[str, Path]
    state_store: StateStore
    assembler: SnapshotAssembler


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(
        self,
        root: Path | None = None,
        config_path: Path | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self.config_path = config_path
        self.overrides = overrides or {}

    def build(self) -> RuntimeBundle:
        config = load_effective_config(self.root, self.config_path)
        for key, value in self.overrides.items():
            if value is not None:
                config.setdefault("paths", {})[key] = str(value)
        paths = resolve_paths(self.root, config)

        tools_cfg = config.get("tools", {})
        timeout = tools_cfg.get("timeout_seconds")
        controller = LinuxController(
            window_list_cmd=tools_cfg["window_list"],
            desktop_geometry_cmd=tools_cfg["desktop_geometry"],
            active_window_cmd=tools_cfg["active_window"],
            focus_window_cmd=tools_cfg["focus_window"],
            timeout=timeout,
        )
        ocr_cfg = config.get("ocr", {})
        extractor = OCREngine(
            languages=str(ocr_cfg.get("languages", "eng")),
            min_confidence=float(ocr_cfg.get("min_confidence", 40.0)),
            timeout=timeout,
        )
        state_store = StateStore(paths["state_path"])
        assembler = SnapshotAssembler(
            enumerator=controller,
            focus=controller,
            capture=self._capture(config, paths["screenshot_dir"], timeout),
            extractor=extractor,
            state_store=state_store,
        )
        return RuntimeBundle(config=config, paths=paths, state_store=state_store, assembler=assembler)

    @staticmethod
    def _capture(config: dict[str, Any], screenshot_dir: Path, timeout: float | None) -> CaptureService:
        backend = str(config.get("capture", {}).get("backend", "scrot")).lower()
        if backend == "mss":
            return MssCapture(screenshot_dir)
        if backend != "scrot":
            raise ValueError(f"Unknown capture backend: {backend}")
        return ScrotCapture(
            screenshot_dir,
            capture_cmd=config.get("tools", {})["capture"],
            timeout=timeout,
        )
