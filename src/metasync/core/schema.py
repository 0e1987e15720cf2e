"""Storage schema to catalog column translation.

The storage schema of a table is the Arrow schema of its data files (read from
a Parquet footer with `read_parquet_schema`). It is translated in two steps:
first to an ordered ``name -> hive type`` mapping, then to FieldSchema column
definitions. Partition key types are looked up in the same mapping.
"""

from __future__ import annotations

import os
from typing import Mapping, Protocol

import pyarrow as pa
import pyarrow.parquet as pq

from metasync.core.errors import SchemaTranslationError
from metasync.core.hms import FieldSchema

DEFAULT_PARTITION_KEY_TYPE = "string"
COMMENT_METADATA_KEY = b"comment"


class SchemaTranslator(Protocol):
    """Interface for the schema translation used by the sync executor."""

    def to_column_map(self, schema: pa.Schema, support_timestamp: bool) -> dict[str, str]:
        """Return an ordered mapping of column name to hive type."""
        ...

    def to_field_schemas(
        self, column_map: Mapping[str, str], comments: Mapping[str, str] | None = None
    ) -> list[FieldSchema]:
        """Return ordered column definitions for `column_map`."""
        ...

    def column_comments(self, schema: pa.Schema) -> dict[str, str]:
        """Return column comments carried by the storage schema."""
        ...

    def partition_key_type(self, column_map: Mapping[str, str], key: str) -> str:
        """Return the hive type of partition key `key`."""
        ...


def hive_type(data_type: pa.DataType, support_timestamp: bool = False) -> str:
    """
    Return the hive type string for an Arrow data type.

    Raises:
        SchemaTranslationError: If the type has no hive equivalent.
    """
    t = pa.types
    if t.is_null(data_type) or t.is_string(data_type) or t.is_large_string(data_type):
        return "string"
    if t.is_boolean(data_type):
        return "boolean"
    if t.is_int8(data_type):
        return "tinyint"
    if t.is_int16(data_type):
        return "smallint"
    if t.is_int32(data_type) or t.is_uint8(data_type) or t.is_uint16(data_type):
        return "int"
    if t.is_int64(data_type) or t.is_uint32(data_type) or t.is_uint64(data_type):
        return "bigint"
    if t.is_float16(data_type) or t.is_float32(data_type):
        return "float"
    if t.is_float64(data_type):
        return "double"
    if t.is_decimal(data_type):
        return f"decimal({data_type.precision},{data_type.scale})"
    if t.is_date(data_type):
        return "date"
    if t.is_timestamp(data_type):
        return "timestamp" if support_timestamp else "bigint"
    if t.is_time(data_type):
        return "bigint"
    if (
        t.is_binary(data_type)
        or t.is_large_binary(data_type)
        or t.is_fixed_size_binary(data_type)
    ):
        return "binary"
    if t.is_dictionary(data_type):
        return hive_type(data_type.value_type, support_timestamp)
    if t.is_map(data_type):
        key = hive_type(data_type.key_type, support_timestamp)
        item = hive_type(data_type.item_type, support_timestamp)
        return f"map<{key},{item}>"
    if t.is_list(data_type) or t.is_large_list(data_type) or t.is_fixed_size_list(data_type):
        return f"array<{hive_type(data_type.value_type, support_timestamp)}>"
    if t.is_struct(data_type):
        members = ",".join(
            f"{data_type.field(i).name}:{hive_type(data_type.field(i).type, support_timestamp)}"
            for i in range(data_type.num_fields)
        )
        return f"struct<{members}>"
    raise SchemaTranslationError(f"Unsupported storage type: {data_type}")


class ArrowSchemaTranslator:
    """Default SchemaTranslator working on pyarrow schemas."""

    def to_column_map(self, schema: pa.Schema, support_timestamp: bool) -> dict[str, str]:
        column_map: dict[str, str] = {}
        for f in schema:
            try:
                column_map[f.name] = hive_type(f.type, support_timestamp)
            except SchemaTranslationError as exc:
                raise SchemaTranslationError(f"Column {f.name}: {exc}") from exc
        return column_map

    def to_field_schemas(
        self, column_map: Mapping[str, str], comments: Mapping[str, str] | None = None
    ) -> list[FieldSchema]:
        comments = comments or {}
        return [
            FieldSchema(name=name, type=type_, comment=comments.get(name, ""))
            for name, type_ in column_map.items()
        ]

    def column_comments(self, schema: pa.Schema) -> dict[str, str]:
        out: dict[str, str] = {}
        for f in schema:
            raw = (f.metadata or {}).get(COMMENT_METADATA_KEY)
            if raw:
                out[f.name] = raw.decode("utf-8")
        return out

    def partition_key_type(self, column_map: Mapping[str, str], key: str) -> str:
        # Partition columns are usually not stored in the data files.
        return column_map.get(key, DEFAULT_PARTITION_KEY_TYPE)


def read_parquet_schema(path: str | os.PathLike[str]) -> pa.Schema:
    """Read the Arrow schema embedded in a Parquet file footer."""
    return pq.read_schema(path)
