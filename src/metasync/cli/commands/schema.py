"""Commands for inspecting storage schemas."""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import typer

from metasync.cli.common.context import AppContext
from metasync.cli.common.exits import exit_from_exc
from metasync.cli.common.options import PartitionFieldOpt, SupportTimestampOpt
from metasync.cli.common.output import out
from metasync.core.errors import SchemaTranslationError
from metasync.core.hms import FieldSchema
from metasync.core.schema import ArrowSchemaTranslator, read_parquet_schema

schema_app = typer.Typer(
    help="Inspect storage schemas.",
    no_args_is_help=True,
)


@schema_app.command("show")
def show(
    ctx: typer.Context,
    parquet_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Parquet data file of the table"
    ),
    support_timestamp: bool | None = SupportTimestampOpt,
    partition_field: list[str] = PartitionFieldOpt,
):
    """Show the catalog columns a Parquet file's schema translates to."""
    appctx: AppContext = ctx.obj
    config = appctx.with_overrides(
        support_timestamp=support_timestamp,
        partition_fields=tuple(partition_field) or None,
    )

    try:
        with out.status("Reading schema..."):
            schema = read_parquet_schema(parquet_file)
    except (OSError, pa.ArrowException) as exc:
        exit_from_exc(exc, message=f"Cannot read Parquet schema from {parquet_file}: {exc}", code=1)

    translator = ArrowSchemaTranslator()
    try:
        column_map = translator.to_column_map(schema, config.support_timestamp)
    except SchemaTranslationError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    columns = translator.to_field_schemas(column_map, translator.column_comments(schema))
    out.header("Schema")
    out.info(f"File: {parquet_file.name} | Columns: {len(columns)}")
    out.columns_table(columns, title="Columns")

    if config.partition_fields:
        keys = [
            FieldSchema(key, translator.partition_key_type(column_map, key).lower())
            for key in config.partition_fields
        ]
        out.columns_table(keys, title="Partition keys")
