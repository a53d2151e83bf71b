"""Configuration bootstrapping."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "paths": {
        "state_path": "/shared/lg-state.json",
        "screenshot_dir": "/shared/screenshots",
    },
    "capture": {"backend": "scrot"},
    "ocr": {"languages": "eng", "min_confidence": 40.0},
    "tools": {
        "window_list": ["wmctrl", "-lG"],
        "desktop_geometry": ["xprop", "-root", "_NET_DESKTOP_GEOMETRY"],
        "active_window": ["xdotool", "getactivewindow"],
        "focus_window": ["xdotool", "windowfocus", "--sync"],
        "capture": ["scrot", "-u", "-z", "-o"],
        "timeout_seconds": None,
    },
    "logging": {"level": "WARNING"},
}


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_paths(root: Path, config: dict[str, Any]) -> dict[str, Path]:
    """Resolve configured paths; relative entries are taken from ``root``."""
    paths_cfg = config.get("paths", {})
    return {
        "state_path": (root / paths_cfg.get("state_path", "state/lg-state.json")).resolve(),
        "screenshot_dir": (root / paths_cfg.get("screenshot_dir", "state/screenshots")).resolve(),
    }


def load_effective_config(root: Path, user_config: Path | None = None) -> dict[str, Any]:
    """Merge built-in defaults, ``config/default.yaml`` and an optional user file."""
    merged = merge_dicts(copy.deepcopy(DEFAULT_CONFIG), load_yaml(root / "config" / "default.yaml"))
    if user_config is not None:
        if not user_config.exists():
            raise FileNotFoundError(f"Config file not found: {user_config}")
        merged = merge_dicts(merged, load_yaml(user_config))
    for section, default in DEFAULT_CONFIG.items():
        if not isinstance(default, dict):
            continue
        if merged.get(section) is None:
            merged[section] = copy.deepcopy(default)
        elif not isinstance(merged[section], dict):
            raise ValueError(f"Config section '{section}' must be a mapping")
    return merged
