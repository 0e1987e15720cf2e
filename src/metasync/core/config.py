"""
Configuration for metadata synchronization.

Defines SyncConfig, a frozen dataclass carrying the read-only settings a sync
executor is constructed with: target database, table base path, partition
fields and extractor, add-partition batch size, table mode flags and the
default filesystem used to qualify `hdfs://` partition locations.

Loaders apply precedence: environment > TOML > defaults.

Recognized environment variables (prefix METASYNC_):
    DATABASE_NAME, BASE_PATH, PARTITION_FIELDS (comma separated),
    PARTITION_EXTRACTOR, BATCH_SYNC_PARTITION_NUM, CREATE_EXTERNAL_TABLE,
    SUPPORT_TIMESTAMP, DEFAULT_FS, OWNER

TOML search order when no explicit path is given:
    1) ./metasync.toml (either a [sync] table or top-level keys)
    2) ./pyproject.toml under [tool.metasync]
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from metasync.core.errors import SyncConfigError

ENV_PREFIX = "METASYNC_"
DEFAULT_BATCH_SYNC_PARTITION_NUM = 1000
DEFAULT_PARTITION_EXTRACTOR = "multi_part_keys"

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise SyncConfigError(f"Invalid boolean for {key}: {value!r}")


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise SyncConfigError(f"Invalid integer for {key}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise SyncConfigError(f"Invalid integer for {key}: {value!r}") from exc


def _to_fields(key: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = [str(v) for v in value]
    else:
        raise SyncConfigError(f"Invalid field list for {key}: {value!r}")
    return tuple(p.strip() for p in parts if p.strip())


def _to_optional_str(key: str, value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SyncConfigError(f"Invalid string for {key}: {value!r}")
    return value.strip() or None


@dataclass(frozen=True)
class SyncConfig:
    """
    Runtime settings for a metastore sync executor.

    Attributes:
        database_name: Metastore database the table lives in.
        base_path: Table base path; partition locations are resolved against it.
        partition_fields: Ordered partition key names of the table.
        partition_extractor: Registered name of the partition value extractor.
        batch_sync_partition_num: Max partitions per add call (<= 0 means one call).
        create_external_table: Register tables as EXTERNAL instead of MANAGED.
        support_timestamp: Map storage timestamps to `timestamp` rather than `bigint`.
        default_fs: Default filesystem URI (e.g. hdfs://namenode:8020) used to
            qualify hdfs partition locations when the base path has no namenode.
        owner: Table owner; defaults to the current OS user when unset.
    """

    database_name: str = "default"
    base_path: str = ""
    partition_fields: tuple[str, ...] = ()
    partition_extractor: str = DEFAULT_PARTITION_EXTRACTOR
    batch_sync_partition_num: int = DEFAULT_BATCH_SYNC_PARTITION_NUM
    create_external_table: bool = True
    support_timestamp: bool = False
    default_fs: str | None = None
    owner: str | None = None

    @property
    def is_partitioned(self) -> bool:
        return len(self.partition_fields) > 0

    def as_dict(self) -> dict[str, Any]:
        """Return the settings as a plain mapping (for display)."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def _apply_mapping(cls, base: SyncConfig, cfg: dict[str, Any] | None) -> SyncConfig:
        """Apply a loose config mapping onto SyncConfig, returning a new instance."""
        if not cfg:
            return base

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(cfg) - known)
        if unknown:
            raise SyncConfigError(f"Unknown config key(s): {', '.join(unknown)}")

        updates: dict[str, Any] = {}
        for key, value in cfg.items():
            if key in ("database_name", "base_path", "partition_extractor"):
                if not isinstance(value, str) or not value.strip():
                    raise SyncConfigError(f"Invalid string for {key}: {value!r}")
                updates[key] = value.strip()
            elif key == "partition_fields":
                updates[key] = _to_fields(key, value)
            elif key == "batch_sync_partition_num":
                updates[key] = _to_int(key, value)
            elif key in ("create_external_table", "support_timestamp"):
                updates[key] = _to_bool(key, value)
            else:
                updates[key] = _to_optional_str(key, value)
        return replace(base, **updates)

    @classmethod
    def from_env(cls, base: SyncConfig | None = None, prefix: str = ENV_PREFIX) -> SyncConfig:
        """Build SyncConfig from environment variables on top of `base` (or defaults)."""
        mapping: dict[str, Any] = {}
        for f in fields(cls):
            raw = os.getenv(prefix + f.name.upper())
            if raw is not None and raw != "":
                mapping[f.name] = raw
        return cls._apply_mapping(base or cls(), mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> SyncConfig:
        """
        Build SyncConfig from a TOML file.

        An explicit `path` that does not exist is an error; the default search
        locations are optional and fall back to defaults.
        """
        candidates: list[Path]
        if path is not None:
            explicit = Path(path)
            if not explicit.exists():
                raise SyncConfigError(f"Config file not found: {explicit}")
            candidates = [explicit]
        else:
            candidates = [Path.cwd() / "metasync.toml", Path.cwd() / "pyproject.toml"]

        for candidate in candidates:
            if not candidate.exists():
                continue
            try:
                with candidate.open("rb") as fh:
                    data = tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise SyncConfigError(f"Cannot read config file {candidate}: {exc}") from exc

            if candidate.name == "pyproject.toml":
                cfg = data.get("tool", {}).get("metasync")
            else:
                sync = data.get("sync")
                cfg = sync if isinstance(sync, dict) else data
            if cfg:
                return cls._apply_mapping(cls(), cfg)

        return cls()

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> SyncConfig:
        """Load SyncConfig applying precedence: environment > TOML > defaults."""
        return cls.from_env(base=cls.from_toml(path))
