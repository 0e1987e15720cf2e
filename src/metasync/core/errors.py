"""Exception types raised by metasync.

Catalog failures are always wrapped into CatalogOperationError so callers see
one error type carrying the database/table identity and the operation that
failed. The original client exception is chained as ``__cause__``.
"""

from __future__ import annotations


class MetaSyncError(Exception):
    """Base class for all metasync errors."""


class SyncConfigError(MetaSyncError):
    """Raised when the sync configuration is invalid or cannot be applied."""


class SchemaTranslationError(MetaSyncError):
    """Raised when a storage schema field has no catalog column equivalent."""


class PartitionValuesError(MetaSyncError):
    """Raised when a partition path does not line up with the table's partition keys."""


class CatalogOperationError(MetaSyncError):
    """Raised when a call to the metadata catalog fails."""

    def __init__(
        self,
        database: str,
        table: str | None,
        operation: str,
        message: str | None = None,
    ) -> None:
        self.database = database
        self.table = table
        self.operation = operation
        target = f"{database}.{table}" if table else database
        super().__init__(message or f"{target} {operation} failed")


class PartitionBatchError(CatalogOperationError):
    """
    Raised when one batch of a multi-batch partition add fails.

    Batches before ``batch_index`` were already applied to the catalog; callers
    should re-derive the remaining partitions before retrying.
    """

    def __init__(
        self,
        database: str,
        table: str,
        operation: str,
        *,
        batch_index: int,
        batch_count: int,
        partitions_applied: int,
    ) -> None:
        self.batch_index = batch_index
        self.batch_count = batch_count
        self.partitions_applied = partitions_applied
        super().__init__(
            database,
            table,
            operation,
            f"{database}.{table} {operation} failed at batch "
            f"{batch_index + 1}/{batch_count} "
            f"({partitions_applied} partition(s) already applied)",
        )
