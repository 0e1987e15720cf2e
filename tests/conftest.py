from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from metasync.core.config import SyncConfig  # noqa: E402
from metasync.core.hms import CASCADE, TRUE  # noqa: E402


class AlreadyExistsException(Exception):
    pass


class NoSuchObjectException(Exception):
    pass


class FakeCatalogClient:
    """In-memory metastore with the semantics the executor relies on."""

    def __init__(self):
        self.databases = {}
        self.tables = {}
        self.partitions = {}
        self.calls: list[tuple] = []
        self.add_calls: list[list] = []
        self.closed = 0
        self.fail_add_call: int | None = None

    def _store(self, db_name, table_name):
        return self.partitions.setdefault((db_name, table_name), {})

    def create_database(self, database):
        self.calls.append(("create_database", database.name))
        if database.name in self.databases:
            raise AlreadyExistsException(f"Database {database.name} already exists")
        self.databases[database.name] = database

    def create_table(self, table):
        self.calls.append(("create_table", table.db_name, table.table_name))
        key = (table.db_name, table.table_name)
        if key in self.tables:
            raise AlreadyExistsException(f"Table {table.full_name} already exists")
        self.tables[key] = table

    def get_table(self, db_name, table_name):
        self.calls.append(("get_table", db_name, table_name))
        try:
            return self.tables[(db_name, table_name)]
        except KeyError:
            raise NoSuchObjectException(f"{db_name}.{table_name} table not found") from None

    def alter_table(self, db_name, table_name, new_table, env_context):
        self.calls.append(("alter_table", db_name, table_name, env_context))
        self.get_table(db_name, table_name)
        self.tables[(db_name, table_name)] = new_table
        if env_context is not None and env_context.properties.get(CASCADE) == TRUE:
            store = self._store(db_name, table_name)
            for values, partition in list(store.items()):
                store[values] = replace(partition, sd=partition.sd.with_cols(new_table.sd.cols))

    def add_partitions(self, partitions, if_not_exists, need_result):
        self.add_calls.append(list(partitions))
        if self.fail_add_call is not None and len(self.add_calls) == self.fail_add_call:
            raise ConnectionError("metastore unavailable")
        added = []
        for p in partitions:
            store = self._store(p.db_name, p.table_name)
            if p.values in store:
                if not if_not_exists:
                    raise AlreadyExistsException(f"Partition {p.values} already exists")
                continue
            store[p.values] = p
            added.append(p)
        return added if need_result else None

    def alter_partitions(self, db_name, table_name, partitions, env_context):
        self.calls.append(("alter_partitions", db_name, table_name, len(partitions)))
        store = self._store(db_name, table_name)
        for p in partitions:
            if p.values not in store:
                raise NoSuchObjectException(f"Partition {p.values} not found")
        for p in partitions:
            store[p.values] = p

    def drop_partition(self, db_name, table_name, values, delete_data):
        self.calls.append(("drop_partition", db_name, table_name, tuple(values), delete_data))
        store = self._store(db_name, table_name)
        if tuple(values) not in store:
            raise NoSuchObjectException(f"Partition {list(values)} not found")
        del store[tuple(values)]
        return True

    def close(self):
        self.closed += 1


@pytest.fixture
def catalog() -> FakeCatalogClient:
    return FakeCatalogClient()


@pytest.fixture
def sync_config() -> SyncConfig:
    return SyncConfig(
        database_name="sales",
        base_path="s3://bucket/warehouse/orders",
        partition_fields=("dt",),
        owner="etl",
    )


@pytest.fixture
def clean_env(monkeypatch):
    for name in list(SyncConfig.__dataclass_fields__):
        monkeypatch.delenv(f"METASYNC_{name.upper()}", raising=False)
