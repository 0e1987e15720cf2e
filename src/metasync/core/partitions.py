"""Partition specs and the partition drop helper.

A PartitionSpec is built per call from a relative partition path: its values
come from the configured extractor and its location from the path resolver.
Specs are never cached between operations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from metasync.core.client import CatalogClient
from metasync.core.errors import PartitionValuesError
from metasync.core.extractors import PartitionValueExtractor
from metasync.core.paths import FileSystem, resolve_partition_location

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartitionSpec:
    """A partition identified by its relative path, with derived values and location."""

    relative_path: str
    values: tuple[str, ...]
    location: str


def extract_values(
    extractor: PartitionValueExtractor,
    partition_path: str,
    partition_keys: Sequence[str] | None = None,
) -> tuple[str, ...]:
    """
    Extract partition values and check them against the partition key names.

    Raises:
        PartitionValuesError: If `partition_keys` is given and the number of
            extracted values differs from it.
    """
    values = tuple(extractor.extract_partition_values(partition_path))
    if partition_keys is not None and len(values) != len(partition_keys):
        raise PartitionValuesError(
            f"Partition path {partition_path!r} yields {len(values)} value(s) "
            f"{list(values)} but the table has {len(partition_keys)} partition "
            f"key(s) {list(partition_keys)}"
        )
    return values


def build_partition_spec(
    partition_path: str,
    extractor: PartitionValueExtractor,
    base_path: str,
    filesystem: FileSystem | None = None,
    partition_keys: Sequence[str] | None = None,
) -> PartitionSpec:
    """Build the PartitionSpec for one relative partition path."""
    return PartitionSpec(
        relative_path=partition_path,
        values=extract_values(extractor, partition_path, partition_keys),
        location=resolve_partition_location(base_path, partition_path, filesystem),
    )


def drop_partition(
    client: CatalogClient,
    db_name: str,
    table_name: str,
    partition_path: str,
    extractor: PartitionValueExtractor,
    partition_keys: Sequence[str] | None = None,
) -> None:
    """
    Drop the catalog entry of one partition, keeping its data files.

    Client errors propagate unchanged; the caller decides how to wrap them.
    """
    values = extract_values(extractor, partition_path, partition_keys)
    logger.debug("Dropping partition %s %s on %s.%s", partition_path, values, db_name, table_name)
    client.drop_partition(db_name, table_name, list(values), False)
