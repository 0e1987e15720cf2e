import pytest

from metasync.core.errors import PartitionValuesError
from metasync.core.extractors import MultiPartKeysValueExtractor, SlashEncodedDayPartitionValueExtractor
from metasync.core.partitions import PartitionSpec, build_partition_spec, drop_partition, extract_values
from metasync.core.paths import FileSystem


def test_build_partition_spec():
    spec = build_partition_spec(
        "region=eu/dt=2024-01-01",
        MultiPartKeysValueExtractor(),
        "hdfs:///warehouse/orders",
        FileSystem.from_uri("hdfs://nn:8020"),
        ["region", "dt"],
    )

    assert spec == PartitionSpec(
        relative_path="region=eu/dt=2024-01-01",
        values=("eu", "2024-01-01"),
        location="hdfs://nn:8020/warehouse/orders/region=eu/dt=2024-01-01",
    )


def test_extract_values_without_keys_skips_validation():
    assert extract_values(MultiPartKeysValueExtractor(), "a/b/c") == ("a", "b", "c")


@pytest.mark.parametrize("keys", [[], ["region", "dt", "hour"]])
def test_extract_values_rejects_misaligned_keys(keys: list[str]):
    with pytest.raises(PartitionValuesError):
        extract_values(MultiPartKeysValueExtractor(), "region=eu/dt=2024-01-01", keys)


def test_drop_partition_keeps_data():
    class _Client:
        def __init__(self):
            self.calls: list[tuple] = []

        def drop_partition(self, db_name, table_name, values, delete_data):
            self.calls.append((db_name, table_name, values, delete_data))
            return True

    client = _Client()
    drop_partition(
        client, "sales", "orders", "2024/01/05", SlashEncodedDayPartitionValueExtractor(), ["dt"]
    )

    assert client.calls == [("sales", "orders", ["2024-01-05"], False)]


def test_drop_partition_validates_before_calling_client():
    class _Client:
        def drop_partition(self, db_name, table_name, values, delete_data):
            raise AssertionError("must not be called")

    with pytest.raises(PartitionValuesError):
        drop_partition(_Client(), "sales", "orders", "eu/2024", MultiPartKeysValueExtractor(), ["dt"])
