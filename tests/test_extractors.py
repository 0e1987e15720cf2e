from types import SimpleNamespace

import pytest

from metasync.core import extractors
from metasync.core.errors import PartitionValuesError, SyncConfigError
from metasync.core.extractors import (
    HiveStylePartitionValueExtractor,
    MultiPartKeysValueExtractor,
    NonPartitionedExtractor,
    PartitionValueExtractor,
    SinglePartPartitionValueExtractor,
    SlashEncodedDayPartitionValueExtractor,
    SlashEncodedHourPartitionValueExtractor,
    available_extractors,
    create_extractor,
    register_extractor,
)


class _UpperExtractor(PartitionValueExtractor):
    def extract_partition_values(self, partition_path: str) -> list[str]:
        return [partition_path.upper()]


@pytest.fixture
def registry(monkeypatch):
    monkeypatch.setattr(extractors, "_REGISTRY", dict(extractors._REGISTRY))
    monkeypatch.setattr(extractors, "_entry_points_loaded", False)
    monkeypatch.setattr(extractors, "entry_points", lambda group: [])
    return extractors._REGISTRY


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("region=eu/dt=2024-01-01", ["eu", "2024-01-01"]),
        ("eu/2024-01-01", ["eu", "2024-01-01"]),
        ("region=eu/2024-01-01", ["eu", "2024-01-01"]),
        ("", []),
    ],
)
def test_multi_part_keys(path: str, expected: list[str]):
    assert MultiPartKeysValueExtractor().extract_partition_values(path) == expected


def test_multi_part_keys_rejects_malformed_segment():
    with pytest.raises(PartitionValuesError, match="a=b=c"):
        MultiPartKeysValueExtractor().extract_partition_values("a=b=c")


@pytest.mark.parametrize("path", ["dt=", "region=eu/dt="])
def test_multi_part_keys_rejects_empty_value(path: str):
    with pytest.raises(PartitionValuesError, match="dt="):
        MultiPartKeysValueExtractor().extract_partition_values(path)


def test_hive_style():
    extractor = HiveStylePartitionValueExtractor()

    assert extractor.extract_partition_values("dt=2024-01-01") == ["2024-01-01"]
    with pytest.raises(PartitionValuesError):
        extractor.extract_partition_values("2024-01-01")
    with pytest.raises(PartitionValuesError):
        extractor.extract_partition_values("dt=")


def test_single_part_uses_whole_path():
    assert SinglePartPartitionValueExtractor().extract_partition_values("2024/01/01") == [
        "2024/01/01"
    ]


def test_slash_encoded_day_and_hour():
    assert SlashEncodedDayPartitionValueExtractor().extract_partition_values("2024/1/5") == [
        "2024-01-05"
    ]
    assert SlashEncodedHourPartitionValueExtractor().extract_partition_values(
        "2024/01/05/7"
    ) == ["2024-01-05-07"]


@pytest.mark.parametrize("path", ["2024/01", "2024/01/xx", "2024/01/05/07"])
def test_slash_encoded_day_rejects_other_forms(path: str):
    with pytest.raises(PartitionValuesError, match="yyyy/mm/dd"):
        SlashEncodedDayPartitionValueExtractor().extract_partition_values(path)


def test_non_partitioned_yields_nothing():
    assert NonPartitionedExtractor().extract_partition_values("anything") == []


def test_builtins_are_registered_by_name_and_class_name():
    names = available_extractors()

    assert "multi_part_keys" in names
    assert "MultiPartKeysValueExtractor" in names
    assert isinstance(create_extractor("slash_encoded_day"), SlashEncodedDayPartitionValueExtractor)
    assert isinstance(create_extractor("NonPartitionedExtractor"), NonPartitionedExtractor)


def test_unknown_extractor(registry):
    with pytest.raises(SyncConfigError, match="Unknown partition value extractor"):
        create_extractor("nope")


def test_register_custom_extractor(registry):
    register_extractor("upper", _UpperExtractor)

    assert create_extractor("upper").extract_partition_values("eu") == ["EU"]
    with pytest.raises(ValueError, match="already registered"):
        register_extractor("upper", _UpperExtractor)


def test_failing_factory_is_a_config_error(registry):
    def _broken():
        raise RuntimeError("boom")

    register_extractor("broken", _broken)

    with pytest.raises(SyncConfigError, match="Failed to initialize") as exc_info:
        create_extractor("broken")
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_factory_must_return_an_extractor(registry):
    register_extractor("not_an_extractor", object)

    with pytest.raises(SyncConfigError, match="does not implement"):
        create_extractor("not_an_extractor")


def test_entry_point_plugins_are_loaded_on_demand(registry, monkeypatch):
    plugin = SimpleNamespace(name="plugin_upper", value="pkg:Upper", load=lambda: _UpperExtractor)
    monkeypatch.setattr(extractors, "entry_points", lambda group: [plugin])

    assert create_extractor("plugin_upper").extract_partition_values("x") == ["X"]
    assert "plugin_upper" in available_extractors()
