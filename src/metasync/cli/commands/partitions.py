"""Commands for previewing partition registration."""

from __future__ import annotations

import typer

from metasync.cli.common.context import AppContext
from metasync.cli.common.exits import die, exit_from_exc
from metasync.cli.common.options import (
    BasePathOpt,
    BatchSizeOpt,
    DefaultFsOpt,
    ExtractorOpt,
    PartitionFieldOpt,
)
from metasync.cli.common.output import out
from metasync.core.batches import plan_batches
from metasync.core.errors import MetaSyncError
from metasync.core.extractors import available_extractors, create_extractor
from metasync.core.partitions import build_partition_spec
from metasync.core.paths import FileSystem

partitions_app = typer.Typer(
    help="Preview partition values and locations.",
    no_args_is_help=True,
)


@partitions_app.command("preview")
def preview(
    ctx: typer.Context,
    paths: list[str] = typer.Argument(..., help="Partition paths relative to the base path"),
    base_path: str | None = BasePathOpt,
    extractor: str | None = ExtractorOpt,
    default_fs: str | None = DefaultFsOpt,
    partition_field: list[str] = PartitionFieldOpt,
    batch_size: int | None = BatchSizeOpt,
):
    """Show the values and location each partition would be registered with."""
    appctx: AppContext = ctx.obj
    config = appctx.with_overrides(
        base_path=base_path,
        partition_extractor=extractor,
        default_fs=default_fs,
        partition_fields=tuple(partition_field) or None,
        batch_sync_partition_num=batch_size,
    )
    if not config.base_path:
        die("Missing base path. Provide --base-path or set base_path in the config.", code=2)

    keys = list(config.partition_fields) or None
    try:
        value_extractor = create_extractor(config.partition_extractor)
        filesystem = FileSystem.from_uri(config.default_fs) if config.default_fs else None
        specs = [
            build_partition_spec(p, value_extractor, config.base_path, filesystem, keys)
            for p in paths
        ]
    except MetaSyncError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    batches = plan_batches(specs, config.batch_sync_partition_num)

    out.header("Partitions")
    out.info(f"Base path: {config.base_path} | Extractor: {config.partition_extractor}")
    out.partitions_table(specs, keys, title="Partitions")
    out.info(
        f"Partitions: {len(specs)} | Add batches: {len(batches)} "
        f"(batch size {config.batch_sync_partition_num})"
    )


@partitions_app.command("extractors")
def extractors():
    """List registered partition value extractors."""
    try:
        names = available_extractors()
    except MetaSyncError as exc:
        exit_from_exc(exc, message=str(exc), code=1)
    out.names_table(names, title="Partition value extractors")
