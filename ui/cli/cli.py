"""CLI entrypoint for desktop-snapshot."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ui.cli import commands

app = typer.Typer(help="Change-aware desktop snapshots for automated agents")
state_app = typer.Typer(help="Fingerprint state commands")
config_app = typer.Typer(help="Configuration commands")

ConfigOption = typer.Option(None, "--config", help="YAML file merged over the defaults")
StatePathOption = typer.Option(None, "--state-path", help="Override paths.state_path")


@app.command("inspect")
def inspect_cmd(
    changes_only: bool = typer.Option(
        False, "--changes-only", help="Only list windows that changed since the last run"
    ),
    config: Optional[Path] = ConfigOption,
    state_path: Optional[Path] = StatePathOption,
    screenshot_dir: Optional[Path] = typer.Option(
        None, "--screenshot-dir", help="Override paths.screenshot_dir"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    """Snapshot all windows and print the result as JSON."""
    commands.inspect(
        changes_only=changes_only,
        config_path=config,
        state_path=state_path,
        screenshot_dir=screenshot_dir,
        verbose=verbose,
    )


@state_app.command("show")
def state_show_cmd(
    config: Optional[Path] = ConfigOption,
    state_path: Optional[Path] = StatePathOption,
) -> None:
    """Show stored window fingerprints."""
    commands.state_show(config_path=config, state_path=state_path)


@state_app.command("reset")
def state_reset_cmd(
    config: Optional[Path] = ConfigOption,
    state_path: Optional[Path] = StatePathOption,
) -> None:
    """Delete stored fingerprints."""
    commands.state_reset(config_path=config, state_path=state_path)


@config_app.command("show")
def config_show_cmd(config: Optional[Path] = ConfigOption) -> None:
    """Show effective configuration."""
    commands.config_show(config_path=config)


app.add_typer(state_app, name="state")
app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
