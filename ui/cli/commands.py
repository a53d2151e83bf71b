"""Typer command handlers."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import typer

from core.errors import PersistenceFailure
from core.orchestrator import Orchestrator, RuntimeBundle

_LOG_FORMAT = "[desktop-snapshot] %(levelname)s %(name)s: %(message)s"


def _runtime(
    config_path: Path | None = None,
    state_path: Path | None = None,
    screenshot_dir: Path | None = None,
    root: Path | None = None,
) -> RuntimeBundle:
    bundle = Orchestrator(
        root=root,
        config_path=config_path,
        overrides={"state_path": state_path, "screenshot_dir": screenshot_dir},
    ).build()
    return bundle


def configure_logging(config: dict[str, Any], verbose: bool = False) -> None:
    """Send diagnostics to stderr so stdout carries only the JSON result."""
    level_name = "DEBUG" if verbose else str(config.get("logging", {}).get("level", "WARNING")).upper()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.WARNING),
        format=_LOG_FORMAT,
        force=True,
    )


def inspect(
    changes_only: bool = False,
    config_path: Path | None = None,
    state_path: Path | None = None,
    screenshot_dir: Path | None = None,
    verbose: bool = False,
) -> None:
    """Run one snapshot pass and print the result document."""
    bundle = _runtime(config_path, state_path, screenshot_dir)
    configure_logging(bundle.config, verbose)
    result = bundle.assembler.run(changes_only=changes_only)
    typer.echo(result.model_dump_json(indent=2))


def state_show(config_path: Path | None = None, state_path: Path | None = None) -> None:
    """Print the persisted fingerprint map."""
    bundle = _runtime(config_path, state_path)
    configure_logging(bundle.config)
    typer.echo(bundle.state_store.load().model_dump_json(indent=2))


def state_reset(config_path: Path | None = None, state_path: Path | None = None) -> None:
    """Forget all fingerprints so the next run reports every window as changed."""
    bundle = _runtime(config_path, state_path)
    configure_logging(bundle.config)
    try:
        removed = bundle.state_store.reset()
    except PersistenceFailure as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    if removed:
        typer.echo(f"Removed {bundle.paths['state_path']}")
    else:
        typer.echo(f"No state file at {bundle.paths['state_path']}")


def config_show(config_path: Path | None = None) -> None:
    """Show effective runtime config."""
    bundle = _runtime(config_path)
    typer.echo(json.dumps(bundle.config, indent=2))
