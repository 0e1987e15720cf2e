"""Partition value extractor abstractions and implementations.

A PartitionValueExtractor maps a partition's relative path (for example
``region=eu/dt=2024-01-01``) to the ordered list of partition key values the
catalog stores for it. The order must match the table's partition keys.

Extractors are selected by name from a registry. The built-in variants are
registered at import time; third-party packages can add their own through the
``metasync.partition_extractors`` entry point group or by calling
`register_extractor` directly.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from importlib.metadata import entry_points
from typing import Callable

from metasync.core.errors import PartitionValuesError, SyncConfigError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "metasync.partition_extractors"


class PartitionValueExtractor(ABC):
    """
    Abstract base class for all partition value extractors.

    Implementations must be pure: the same path always yields the same values.
    """

    @abstractmethod
    def extract_partition_values(self, partition_path: str) -> list[str]:
        """
        Extract the ordered partition key values from a relative partition path.

        Args:
            partition_path: Partition path relative to the table base path.

        Returns:
            Partition values, positionally aligned with the table's partition keys.

        Raises:
            PartitionValuesError: If the path is not in the expected form.
        """
        ...


class MultiPartKeysValueExtractor(PartitionValueExtractor):
    """
    Extractor for paths with one segment per partition key.

    Segments may be hive-style (``key=value``) or bare values; both can be mixed.
    """

    def extract_partition_values(self, partition_path: str) -> list[str]:
        if not partition_path:
            return []
        values: list[str] = []
        for segment in partition_path.strip("/").split("/"):
            if "=" in segment:
                parts = segment.split("=")
                if len(parts) != 2 or not parts[1]:
                    raise PartitionValuesError(
                        f"Partition field ({segment}) not in expected format key=value"
                    )
                values.append(parts[1])
            else:
                values.append(segment)
        return values


class HiveStylePartitionValueExtractor(PartitionValueExtractor):
    """Extractor for a single hive-style ``key=value`` partition segment."""

    def extract_partition_values(self, partition_path: str) -> list[str]:
        parts = partition_path.strip("/").split("=")
        if len(parts) != 2 or not parts[1]:
            raise PartitionValuesError(
                f"Partition path {partition_path} is not in the form key=value"
            )
        return [parts[1]]


class SinglePartPartitionValueExtractor(PartitionValueExtractor):
    """Extractor that uses the whole relative path as the only partition value."""

    def extract_partition_values(self, partition_path: str) -> list[str]:
        return [partition_path]


class SlashEncodedDayPartitionValueExtractor(PartitionValueExtractor):
    """Extractor for ``yyyy/mm/dd`` paths, yielding one ``yyyy-mm-dd`` value."""

    _parts = 3
    _form = "yyyy/mm/dd"

    def extract_partition_values(self, partition_path: str) -> list[str]:
        segments = partition_path.strip("/").split("/")
        if len(segments) != self._parts:
            raise PartitionValuesError(
                f"Partition path {partition_path} is not in the form {self._form}"
            )
        try:
            numbers = [int(s) for s in segments]
        except ValueError as exc:
            raise PartitionValuesError(
                f"Partition path {partition_path} is not in the form {self._form}"
            ) from exc
        year, rest = numbers[0], numbers[1:]
        return ["-".join([f"{year:04d}", *(f"{n:02d}" for n in rest)])]


class SlashEncodedHourPartitionValueExtractor(SlashEncodedDayPartitionValueExtractor):
    """Extractor for ``yyyy/mm/dd/hh`` paths, yielding one ``yyyy-mm-dd-hh`` value."""

    _parts = 4
    _form = "yyyy/mm/dd/hh"


class NonPartitionedExtractor(PartitionValueExtractor):
    """Extractor for non-partitioned tables; always yields no values."""

    def extract_partition_values(self, partition_path: str) -> list[str]:
        return []


ExtractorFactory = Callable[[], PartitionValueExtractor]

_REGISTRY: dict[str, ExtractorFactory] = {}
_entry_points_loaded = False


def register_extractor(name: str, factory: ExtractorFactory, *, replace: bool = False) -> None:
    """
    Register an extractor factory under `name`.

    Raises:
        ValueError: If `name` is already registered and `replace` is False.
    """
    if name in _REGISTRY and not replace:
        raise ValueError(f"Partition value extractor already registered: {name}")
    _REGISTRY[name] = factory


def _load_entry_points() -> None:
    global _entry_points_loaded
    if _entry_points_loaded:
        return
    _entry_points_loaded = True
    for ep in entry_points(group=ENTRY_POINT_GROUP):
        if ep.name in _REGISTRY:
            continue
        try:
            factory = ep.load()
        except Exception as exc:
            raise SyncConfigError(
                f"Failed to load partition value extractor plugin {ep.name} ({ep.value})"
            ) from exc
        logger.debug("Registered partition value extractor plugin %s", ep.name)
        _REGISTRY[ep.name] = factory


def available_extractors() -> list[str]:
    """Return the sorted names of all registered extractors, plugins included."""
    _load_entry_points()
    return sorted(_REGISTRY)


def create_extractor(name: str) -> PartitionValueExtractor:
    """
    Instantiate the extractor registered under `name`.

    Raises:
        SyncConfigError: If no extractor is registered under `name` or it
            cannot be instantiated.
    """
    if name not in _REGISTRY:
        _load_entry_points()
    factory = _REGISTRY.get(name)
    if factory is None:
        raise SyncConfigError(f"Unknown partition value extractor: {name}")
    try:
        extractor = factory()
    except Exception as exc:
        raise SyncConfigError(
            f"Failed to initialize partition value extractor {name}"
        ) from exc
    if not isinstance(extractor, PartitionValueExtractor):
        raise SyncConfigError(
            f"Partition value extractor {name} does not implement PartitionValueExtractor"
        )
    return extractor


for _name, _cls in (
    ("multi_part_keys", MultiPartKeysValueExtractor),
    ("hive_style", HiveStylePartitionValueExtractor),
    ("single_part", SinglePartPartitionValueExtractor),
    ("slash_encoded_day", SlashEncodedDayPartitionValueExtractor),
    ("slash_encoded_hour", SlashEncodedHourPartitionValueExtractor),
    ("non_partitioned", NonPartitionedExtractor),
):
    register_extractor(_name, _cls)
    register_extractor(_cls.__name__, _cls)
