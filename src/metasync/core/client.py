"""Interface of the metadata catalog client consumed by the sync executor.

Any metastore RPC client can be used as long as it provides these calls.
Transport concerns (connections, auth, timeouts, retries) stay with the
client; the executor calls each method exactly once per attempt.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from metasync.core.hms import Database, EnvironmentContext, Partition, Table


class CatalogClient(Protocol):
    """Interface for metastore calls used by the core domain."""

    def create_database(self, database: Database) -> None:
        """Create a database; fails if it already exists."""
        ...

    def create_table(self, table: Table) -> None:
        """Create a table; fails if it already exists."""
        ...

    def get_table(self, db_name: str, table_name: str) -> Table:
        """Return the current table entry; fails if it does not exist."""
        ...

    def alter_table(
        self,
        db_name: str,
        table_name: str,
        new_table: Table,
        env_context: EnvironmentContext | None,
    ) -> None:
        """Replace the table entry; CASCADE in `env_context` also updates partitions."""
        ...

    def add_partitions(
        self,
        partitions: Sequence[Partition],
        if_not_exists: bool,
        need_result: bool,
    ) -> list[Partition] | int | None:
        """Add partitions; existing ones are skipped when `if_not_exists` is set."""
        ...

    def alter_partitions(
        self,
        db_name: str,
        table_name: str,
        partitions: Sequence[Partition],
        env_context: EnvironmentContext | None,
    ) -> None:
        """Replace existing partition entries."""
        ...

    def drop_partition(
        self,
        db_name: str,
        table_name: str,
        values: Sequence[str],
        delete_data: bool,
    ) -> bool:
        """Drop one partition; fails if it does not exist."""
        ...

    def close(self) -> None:
        """Release the client's session state."""
        ...
