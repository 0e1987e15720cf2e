"""Core domain models for Hive Metastore objects.

These models mirror the metastore's database, table, partition and storage
descriptor records in a simple, immutable form. They are intentionally free of
any RPC/transport types; catalog clients translate to and from their own wire
objects.

Every model is a frozen dataclass. Deriving a modified copy (a partition's
storage descriptor with its own location, a table with new columns) always
produces a new instance, so a descriptor fetched once can be shared as a
template without overrides leaking between partitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Mapping, Sequence

# EnvironmentContext keys understood by alter_table.
CASCADE = "CASCADE"
TRUE = "true"

SERIALIZATION_FORMAT = "serialization.format"
EXTERNAL = "EXTERNAL"


class TableType(str, Enum):
    """Metastore table types written by the sync executor."""

    MANAGED_TABLE = "MANAGED_TABLE"
    EXTERNAL_TABLE = "EXTERNAL_TABLE"


@dataclass(frozen=True)
class FieldSchema:
    """A column (or partition key) definition."""

    name: str
    type: str
    comment: str = ""

    def with_comment(self, comment: str) -> FieldSchema:
        """Return a copy of this column with a new comment."""
        return replace(self, comment=comment)


@dataclass(frozen=True)
class SerDeInfo:
    """Serializer/deserializer settings of a storage descriptor."""

    name: str | None = None
    serialization_lib: str | None = None
    parameters: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class StorageDescriptor:
    """Physical layout of a table or partition: columns, formats, serde, location."""

    cols: tuple[FieldSchema, ...] = ()
    location: str | None = None
    input_format: str | None = None
    output_format: str | None = None
    serde_info: SerDeInfo = field(default_factory=SerDeInfo)

    def with_location(self, location: str) -> StorageDescriptor:
        """Return an independent copy of this descriptor pointing at `location`."""
        return replace(
            self,
            location=location,
            serde_info=replace(
                self.serde_info, parameters=dict(self.serde_info.parameters)
            ),
        )

    def with_cols(self, cols: Sequence[FieldSchema]) -> StorageDescriptor:
        """Return a copy of this descriptor with a replaced column list."""
        return replace(self, cols=tuple(cols))


@dataclass(frozen=True)
class Table:
    """A metastore table entry."""

    db_name: str
    table_name: str
    sd: StorageDescriptor
    partition_keys: tuple[FieldSchema, ...] = ()
    owner: str | None = None
    create_time: int = 0
    parameters: Mapping[str, str] = field(default_factory=dict)
    table_type: TableType = TableType.MANAGED_TABLE

    @property
    def full_name(self) -> str:
        return f"{self.db_name}.{self.table_name}"


@dataclass(frozen=True)
class Partition:
    """A registered partition of a table."""

    values: tuple[str, ...]
    db_name: str
    table_name: str
    sd: StorageDescriptor
    create_time: int = 0
    last_access_time: int = 0
    parameters: Mapping[str, str] | None = None


@dataclass(frozen=True)
class Database:
    """A metastore database entry."""

    name: str
    description: str | None = None
    location_uri: str | None = None
    parameters: Mapping[str, str] | None = None


@dataclass(frozen=True)
class EnvironmentContext:
    """Extra properties passed along with alter calls (e.g. CASCADE)."""

    properties: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def cascade(cls) -> EnvironmentContext:
        return cls({CASCADE: TRUE})
