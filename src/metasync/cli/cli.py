"""CLI application for metastore sync tooling."""

from pathlib import Path

import typer

from metasync.cli.commands.config import config_app
from metasync.cli.commands.partitions import partitions_app
from metasync.cli.commands.schema import schema_app
from metasync.cli.common.context import build_app_context
from metasync.cli.common.logs import setup_logging
from metasync.cli.common.options import ConfigOpt, LogLevelOpt, VerboseOpt

app = typer.Typer(
    help="metasync - Hive Metastore sync tooling",
    no_args_is_help=True,
)


@app.callback()
def _init(
    ctx: typer.Context,
    config: Path | None = ConfigOpt,
    log_level: str = LogLevelOpt,
    verbose: bool = VerboseOpt,
):
    """Load configuration and set up logging."""
    setup_logging("INFO" if verbose else log_level)
    ctx.obj = build_app_context(config)


app.add_typer(schema_app, name="schema")
app.add_typer(partitions_app, name="partitions")
app.add_typer(config_app, name="config")


if __name__ == "__main__":
    app()
