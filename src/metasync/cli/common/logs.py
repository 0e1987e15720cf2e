"""Logging setup for the CLI."""

import logging

import typer
from rich.logging import RichHandler

from metasync.cli.common.output import err_console


def setup_logging(level: str) -> None:
    """Route log records from all metasync modules through a Rich handler on stderr."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise typer.BadParameter(f"Unknown log level: {level}", param_hint="--log-level")
    logging.basicConfig(
        level=numeric,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
