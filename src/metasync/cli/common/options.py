"""Common CLI options for the CLI."""

import typer

ConfigOpt = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to a metasync TOML config (default: ./metasync.toml or pyproject.toml)",
    dir_okay=False,
)

LogLevelOpt = typer.Option(
    "WARNING",
    "--log-level",
    help="Log level (DEBUG, INFO, WARNING, ERROR)",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Shortcut for --log-level INFO",
)

BasePathOpt = typer.Option(
    None,
    "--base-path",
    help="Table base path (overrides config)",
)

ExtractorOpt = typer.Option(
    None,
    "--extractor",
    "-e",
    help="Partition value extractor name (overrides config)",
)

DefaultFsOpt = typer.Option(
    None,
    "--default-fs",
    help="Default filesystem URI for hdfs paths, e.g. hdfs://namenode:8020",
)

PartitionFieldOpt = typer.Option(
    [],
    "--partition-field",
    "-f",
    help="Partition key name, in order. This is reusable.",
    show_default=False,
)

BatchSizeOpt = typer.Option(
    None,
    "--batch-size",
    help="Partitions per add call (<= 0 means a single call)",
)

SupportTimestampOpt = typer.Option(
    None,
    "--support-timestamp/--no-support-timestamp",
    help="Map storage timestamps to timestamp instead of bigint (overrides config)",
    show_default=False,
)
