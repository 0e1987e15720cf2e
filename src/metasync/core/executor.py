"""Metadata synchronization executor.

MetastoreSyncExecutor applies a reconciliation plan to a metastore through an
injected CatalogClient: it creates databases and tables, evolves the table
column list, and adds, updates and drops partitions. Deciding *what* to change
is the caller's job; every operation here is a direct, single-attempt
translation of one plan step into catalog calls.

Failure semantics:
  - every catalog failure is wrapped into CatalogOperationError (or
    PartitionBatchError for batched adds) and raised; nothing is retried
  - partition add submits batches sequentially; batches before a failing
    one stay applied
  - fetch-then-alter operations (schema and comment updates) are not guarded
    against concurrent external modification of the same table

The executor keeps no state between calls apart from its configuration and
client handle. It is meant for sequential use from one thread.
"""

from __future__ import annotations

import getpass
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator, Mapping, Sequence

import pyarrow as pa

from metasync.core.batches import plan_batches
from metasync.core.client import CatalogClient
from metasync.core.config import SyncConfig
from metasync.core.errors import CatalogOperationError, MetaSyncError, PartitionBatchError
from metasync.core.extractors import PartitionValueExtractor, create_extractor
from metasync.core.hms import (
    EXTERNAL,
    SERIALIZATION_FORMAT,
    Database,
    EnvironmentContext,
    FieldSchema,
    Partition,
    SerDeInfo,
    StorageDescriptor,
    Table,
    TableType,
)
from metasync.core.partitions import PartitionSpec, build_partition_spec, drop_partition
from metasync.core.paths import FileSystem
from metasync.core.schema import ArrowSchemaTranslator, SchemaTranslator

logger = logging.getLogger(__name__)

DATABASE_DESCRIPTION = "automatically created by metasync"

CommentUpdate = str | tuple[str | None, str]


@dataclass(frozen=True)
class PartitionSyncResult:
    """Outcome of a partition add/update/drop call."""

    operation: str
    table: str
    requested: int
    applied: int
    batches: int = 0
    skipped: bool = False

    @classmethod
    def skip(cls, operation: str, table: str) -> PartitionSyncResult:
        return cls(operation=operation, table=table, requested=0, applied=0, skipped=True)


def _comment_of(update: CommentUpdate) -> str:
    """Return the new comment from a plain comment or a (type, comment) pair."""
    if isinstance(update, str):
        return update
    return update[-1] or ""


class MetastoreSyncExecutor:
    """Executes catalog DDL for one database/base path through a CatalogClient."""

    def __init__(
        self,
        config: SyncConfig,
        client: CatalogClient | None,
        *,
        extractor: PartitionValueExtractor | None = None,
        filesystem: FileSystem | None = None,
        translator: SchemaTranslator | None = None,
    ) -> None:
        """
        Create an executor.

        Args:
            config: Read-only sync settings.
            client: Metastore client all catalog calls go through.
            extractor: Partition value extractor; created from
                `config.partition_extractor` when omitted.
            filesystem: Active distributed filesystem; built from
                `config.default_fs` when omitted.
            translator: Storage schema translator; pyarrow-based by default.

        Raises:
            SyncConfigError: If the extractor or filesystem cannot be set up.
        """
        self.config = config
        self.database_name = config.database_name
        self.client = client
        self.partition_value_extractor = extractor or create_extractor(
            config.partition_extractor
        )
        if filesystem is None and config.default_fs:
            filesystem = FileSystem.from_uri(config.default_fs)
        self.filesystem = filesystem
        self.translator = translator or ArrowSchemaTranslator()
        self._closed = False

    def __enter__(self) -> MetastoreSyncExecutor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @contextmanager
    def _catalog_call(
        self, table_name: str | None, operation: str, database: str | None = None
    ) -> Iterator[None]:
        """Wrap client failures into CatalogOperationError; let metasync errors through."""
        database = database or self.database_name
        try:
            yield
        except MetaSyncError:
            raise
        except Exception as exc:
            target = f"{database}.{table_name}" if table_name else database
            logger.error("%s %s failed: %s", target, operation, exc)
            raise CatalogOperationError(database, table_name, operation) from exc

    def _owner(self) -> str:
        return self.config.owner or getpass.getuser()

    def _field_schemas(self, schema: pa.Schema) -> list[FieldSchema]:
        column_map = self.translator.to_column_map(schema, self.config.support_timestamp)
        return self.translator.to_field_schemas(
            column_map, self.translator.column_comments(schema)
        )

    def _partition_specs(self, table: Table, partitions: Sequence[str]) -> list[PartitionSpec]:
        keys = [k.name for k in table.partition_keys]
        return [
            build_partition_spec(
                p,
                self.partition_value_extractor,
                self.config.base_path,
                self.filesystem,
                keys,
            )
            for p in partitions
        ]

    def _partition(self, spec: PartitionSpec, table_name: str, sd: StorageDescriptor) -> Partition:
        return Partition(
            values=spec.values,
            db_name=self.database_name,
            table_name=table_name,
            sd=sd.with_location(spec.location),
            create_time=0,
            last_access_time=0,
            parameters=None,
        )

    def create_database(self, database_name: str) -> None:
        """Create a database entry; an existing database is reported as an error."""
        with self._catalog_call(None, "create database", database=database_name):
            self.client.create_database(
                Database(database_name, DATABASE_DESCRIPTION, None, None)
            )
        logger.info("Created database %s", database_name)

    def create_table(
        self,
        table_name: str,
        storage_schema: pa.Schema,
        input_format: str,
        output_format: str,
        serde_class: str,
        serde_properties: Mapping[str, str] | None = None,
        table_properties: Mapping[str, str] | None = None,
    ) -> Table:
        """
        Register a new table for the configured base path.

        Columns come from `storage_schema`; partition keys come from the
        configured partition fields, typed from the same schema (lowercased,
        `string` when the key is not stored in the data files).

        Returns:
            The table entry submitted to the catalog.
        """
        with self._catalog_call(table_name, "create table"):
            column_map = self.translator.to_column_map(
                storage_schema, self.config.support_timestamp
            )
            columns = self.translator.to_field_schemas(
                column_map, self.translator.column_comments(storage_schema)
            )
            partition_keys = tuple(
                FieldSchema(
                    key, self.translator.partition_key_type(column_map, key).lower(), ""
                )
                for key in self.config.partition_fields
            )

            serde_params = dict(serde_properties or {})
            serde_params[SERIALIZATION_FORMAT] = "1"
            sd = StorageDescriptor(
                cols=tuple(columns),
                location=self.config.base_path,
                input_format=input_format,
                output_format=output_format,
                serde_info=SerDeInfo(None, serde_class, serde_params),
            )

            parameters: dict[str, str] = {}
            table_type = TableType.MANAGED_TABLE
            if self.config.create_external_table:
                parameters[EXTERNAL] = "TRUE"
                table_type = TableType.EXTERNAL_TABLE
            parameters.update(table_properties or {})

            table = Table(
                db_name=self.database_name,
                table_name=table_name,
                sd=sd,
                partition_keys=partition_keys,
                owner=self._owner(),
                create_time=int(time.time()),
                parameters=parameters,
                table_type=table_type,
            )
            self.client.create_table(table)
        logger.info("Created table %s.%s", self.database_name, table_name)
        return table

    def update_table_definition(self, table_name: str, new_schema: pa.Schema) -> None:
        """
        Replace the table's column list with the translation of `new_schema`.

        Partition keys are left untouched. For partitioned tables the change
        cascades to the schema recorded on existing partitions.
        """
        cascade = self.config.is_partitioned
        with self._catalog_call(table_name, "update table"):
            columns = self._field_schemas(new_schema)
            table = self.client.get_table(self.database_name, table_name)
            new_table = replace(table, sd=table.sd.with_cols(columns))
            env_context = EnvironmentContext()
            if cascade:
                logger.info("Partitioned table %s, altering with cascade", table_name)
                env_context = EnvironmentContext.cascade()
            self.client.alter_table(self.database_name, table_name, new_table, env_context)

    def get_table_schema(self, table_name: str) -> dict[str, str]:
        """Return ``column name -> upper-cased type`` with partition keys listed first."""
        start = time.perf_counter()
        with self._catalog_call(table_name, "get table schema"):
            table = self.client.get_table(self.database_name, table_name)
        schema: dict[str, str] = {}
        for f in (*table.partition_keys, *table.sd.cols):
            schema[f.name] = f.type.upper()
        logger.info(
            "Time taken to get_table_schema: %d ms.", (time.perf_counter() - start) * 1000
        )
        return schema

    def add_partitions_to_table(
        self, table_name: str, partitions: Sequence[str]
    ) -> PartitionSyncResult:
        """
        Register new partitions, `config.batch_sync_partition_num` per catalog call.

        Partitions that already exist are skipped by the catalog. Every path is
        validated before the first batch is submitted.

        Raises:
            PartitionValuesError: If a path does not match the partition keys.
            PartitionBatchError: If a batch fails; earlier batches stay applied.
        """
        operation = "add partition"
        if not partitions:
            logger.info("No partitions to add for %s.", table_name)
            return PartitionSyncResult.skip(operation, table_name)

        logger.info("Adding partitions %d to table %s.", len(partitions), table_name)
        with self._catalog_call(table_name, operation):
            table = self.client.get_table(self.database_name, table_name)
        specs = self._partition_specs(table, partitions)
        batches = plan_batches(specs, self.config.batch_sync_partition_num)

        applied = 0
        for index, batch in enumerate(batches):
            partition_list = [self._partition(spec, table_name, table.sd) for spec in batch]
            try:
                self.client.add_partitions(partition_list, True, False)
            except Exception as exc:
                logger.error(
                    "%s.%s add partition batch %d/%d failed: %s",
                    self.database_name,
                    table_name,
                    index + 1,
                    len(batches),
                    exc,
                )
                raise PartitionBatchError(
                    self.database_name,
                    table_name,
                    operation,
                    batch_index=index,
                    batch_count=len(batches),
                    partitions_applied=applied,
                ) from exc
            applied += len(partition_list)
            logger.info("Add a batch partitions done: %d.", len(partition_list))

        return PartitionSyncResult(
            operation=operation,
            table=table_name,
            requested=len(partitions),
            applied=applied,
            batches=len(batches),
        )

    def update_partitions_to_table(
        self, table_name: str, partitions: Sequence[str]
    ) -> PartitionSyncResult:
        """
        Re-point existing partitions at their current locations in one alter call.

        Locations are re-resolved, so a partition registered with an
        unqualified hdfs path is rewritten with a namenode host/port.
        """
        operation = "update partition"
        if not partitions:
            logger.info("No partitions to change for %s.", table_name)
            return PartitionSyncResult.skip(operation, table_name)

        logger.info("Changing partitions %d on %s.", len(partitions), table_name)
        with self._catalog_call(table_name, operation):
            table = self.client.get_table(self.database_name, table_name)
        partition_list = [
            self._partition(spec, table_name, table.sd)
            for spec in self._partition_specs(table, partitions)
        ]
        with self._catalog_call(table_name, operation):
            self.client.alter_partitions(self.database_name, table_name, partition_list, None)

        return PartitionSyncResult(
            operation=operation,
            table=table_name,
            requested=len(partitions),
            applied=len(partition_list),
            batches=1,
        )

    def drop_partitions_to_table(
        self, table_name: str, partitions: Sequence[str]
    ) -> PartitionSyncResult:
        """Drop partitions one by one; the first failure aborts the rest."""
        operation = "drop partition"
        if not partitions:
            logger.info("No partitions to drop for %s.", table_name)
            return PartitionSyncResult.skip(operation, table_name)

        logger.info("Dropping partitions %d on %s.", len(partitions), table_name)
        keys = self.config.partition_fields or None
        dropped = 0
        with self._catalog_call(table_name, operation):
            for partition in partitions:
                drop_partition(
                    self.client,
                    self.database_name,
                    table_name,
                    partition,
                    self.partition_value_extractor,
                    keys,
                )
                dropped += 1
                logger.info("Drop partition %s on %s.", partition, table_name)

        return PartitionSyncResult(
            operation=operation,
            table=table_name,
            requested=len(partitions),
            applied=dropped,
        )

    def update_table_comments(
        self, table_name: str, alter_schema: Mapping[str, CommentUpdate]
    ) -> None:
        """
        Overwrite comments of existing columns named in `alter_schema`.

        Values are either the new comment or a ``(type, comment)`` pair; only
        the comment is applied. Names that are not table columns are ignored.
        """
        with self._catalog_call(table_name, "update table comments"):
            table = self.client.get_table(self.database_name, table_name)
            cols = [
                c.with_comment(_comment_of(alter_schema[c.name])) if c.name in alter_schema else c
                for c in table.sd.cols
            ]
            new_table = replace(table, sd=table.sd.with_cols(cols))
            self.client.alter_table(
                self.database_name, table_name, new_table, EnvironmentContext()
            )

    def close(self) -> None:
        """Release the client's session state. Safe to call more than once."""
        if self._closed or self.client is None:
            return
        self._closed = True
        with self._catalog_call(None, "close"):
            self.client.close()
