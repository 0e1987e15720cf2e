"""Commands for inspecting the effective configuration."""

from __future__ import annotations

import typer

from metasync.cli.common.context import AppContext
from metasync.cli.common.output import out

config_app = typer.Typer(
    help="Inspect metasync configuration.",
    no_args_is_help=True,
)


@config_app.command("show")
def show(ctx: typer.Context):
    """Show the effective configuration (environment > TOML > defaults)."""
    appctx: AppContext = ctx.obj
    out.header("Configuration")
    if appctx.config_path:
        out.info(f"Config file: {appctx.config_path}")
    items = appctx.config.as_dict()
    items["partition_fields"] = ", ".join(appctx.config.partition_fields) or "-"
    out.kv(items)
