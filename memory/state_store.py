"""Fingerprint state persisted between inspection runs."""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from core.errors import PersistenceFailure
from world_model.desktop_state import PersistedState


class StateStore:
    """Loads and atomically replaces the id -> fingerprint JSON document."""

    def __init__(self, state_path: Path) -> None:
        self.state_path = state_path
        self.logger = logging.getLogger("ds.state_store")

    @property
    def tmp_path(self) -> Path:
        return self.state_path.with_name(self.state_path.name + ".tmp")

    def load(self) -> PersistedState:
        """Return the stored state; missing or corrupt files load as empty."""
        try:
            raw = self.state_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return PersistedState()
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Failed to read state file %s: %s", self.state_path, exc)
            return PersistedState()
        try:
            return PersistedState.model_validate_json(raw)
        except ValidationError as exc:
            self.logger.warning(
                "Corrupt state file %s, resetting: %d error(s)", self.state_path, exc.error_count()
            )
            return PersistedState()

    def save(self, state: PersistedState) -> None:
        """Write to a sibling temp file, then rename over the real path."""
        try:
            self.state_path.parent.mkdir(parents=True, exist_ok=True)
            self.tmp_path.write_text(state.model_dump_json(indent=2), encoding="utf-8")
            os.replace(self.tmp_path, self.state_path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                self.tmp_path.unlink(missing_ok=True)
            raise PersistenceFailure(f"failed to save state to {self.state_path}: {exc}") from exc

    def reset(self) -> bool:
        """Delete the state file. Returns whether one existed."""
        try:
            self.state_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise PersistenceFailure(f"failed to remove {self.state_path}: {exc}") from exc
        return True
