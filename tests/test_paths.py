import pytest

from metasync.core.errors import SyncConfigError
from metasync.core.paths import (
    FileSystem,
    StorageScheme,
    get_partition_path,
    resolve_partition_location,
)

NAMENODE = FileSystem.from_uri("hdfs://nn:8020")


@pytest.mark.parametrize(
    ("base", "partition", "expected"),
    [
        ("s3://bucket/t", "dt=1", "s3://bucket/t/dt=1"),
        ("s3://bucket/t/", "/dt=1", "s3://bucket/t/dt=1"),
        ("/data/t", "a=1/b=2", "/data/t/a=1/b=2"),
        ("s3://bucket/t", "", "s3://bucket/t"),
        ("s3://bucket", "dt=1", "s3://bucket/dt=1"),
    ],
)
def test_get_partition_path(base: str, partition: str, expected: str):
    assert get_partition_path(base, partition) == expected


@pytest.mark.parametrize(
    "base",
    ["s3://bucket/t", "s3a://bucket/t", "gs://bucket/t", "file:///data/t", "/data/t", "foo://x/t"],
)
def test_non_hdfs_locations_are_plain_joins(base: str):
    assert resolve_partition_location(base, "dt=1", NAMENODE) == f"{base}/dt=1"


def test_hdfs_location_without_namenode_takes_the_filesystem_host():
    location = resolve_partition_location("hdfs:///warehouse/t", "dt=1", NAMENODE)

    assert location == "hdfs://nn:8020/warehouse/t/dt=1"


@pytest.mark.parametrize("filesystem", [None, NAMENODE, FileSystem.from_uri("file:///")])
def test_hdfs_location_keeps_its_own_namenode(filesystem):
    location = resolve_partition_location("hdfs://nn1:9000/warehouse/t", "dt=1", filesystem)

    assert location == "hdfs://nn1:9000/warehouse/t/dt=1"


def test_hdfs_without_namenode_needs_an_hdfs_filesystem():
    with pytest.raises(SyncConfigError, match="default_fs"):
        resolve_partition_location("hdfs:///warehouse/t", "dt=1", FileSystem.from_uri("file:///"))


def test_hdfs_without_filesystem_is_a_config_error():
    with pytest.raises(SyncConfigError, match="default_fs"):
        resolve_partition_location("hdfs:///warehouse/t", "dt=1")


def test_resolution_is_deterministic():
    first = resolve_partition_location("hdfs:///warehouse/t", "dt=1", NAMENODE)
    second = resolve_partition_location("hdfs:///warehouse/t", "dt=1", NAMENODE)

    assert first == second


def test_filesystem_from_uri_drops_path():
    fs = FileSystem.from_uri("hdfs://nn:8020/user/hive")

    assert fs.uri == "hdfs://nn:8020"
    assert fs.scheme == "hdfs"
    assert fs.port == 8020


@pytest.mark.parametrize("uri", ["namenode", "nn:8020", ""])
def test_filesystem_from_uri_requires_a_scheme(uri: str):
    with pytest.raises(SyncConfigError):
        FileSystem.from_uri(uri)


def test_only_hdfs_requires_qualification():
    assert StorageScheme.requires_qualification("hdfs") is True
    assert StorageScheme.requires_qualification("HDFS") is True
    assert StorageScheme.requires_qualification("s3") is False
    assert StorageScheme.requires_qualification(None) is False


def test_filesystem_from_uri_accepts_local_default_fs():
    fs = FileSystem.from_uri("file:///")

    assert fs.uri == "file://"
    assert fs.host == ""
