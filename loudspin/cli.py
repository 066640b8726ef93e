"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
import os
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import typer

from loudspin.core.config_loader import DEFAULT_CONFIG_PATH, load_config
from loudspin.core.errors import LoudspinError, format_error_chain
from loudspin.core.model import Loudness
from loudspin.core.service import LoudspinService

LOG_ENV_VAR = "LOUDSPIN_LOG"

app = typer.Typer(help="Set the acoustic management level of configured hard disks via hdparm")


def _configure_logging() -> None:
    level_name = os.environ.get(LOG_ENV_VAR, "").strip().upper()
    level = getattr(logging, level_name, logging.WARNING) if level_name else logging.WARNING
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _warn(message: str) -> None:
    typer.echo(f"Warning: {message}", err=True)


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        typer.echo(f"loudspin {version('loudspin')}")
    except PackageNotFoundError:
        typer.echo("loudspin (not installed)")
    raise typer.Exit()


@app.command()
def main(
    loudness: Loudness = typer.Argument(
        Loudness.SHOW,
        metavar="LOUDNESS_LEVEL",
        help="quiet, loud, or show to query the current level",
    ),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Configuration file"),
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Apply LOUDNESS_LEVEL to every device matched by the configuration."""
    _configure_logging()
    try:
        loaded = load_config(config, loudness)
        LoudspinService(loaded, on_warning=_warn).run()
    except LoudspinError as exc:
        typer.echo(f"Error: {format_error_chain(exc)}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
