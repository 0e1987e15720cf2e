"""Partition location resolution.

The catalog stores a partition location as an opaque string, so the same
physical directory must always resolve to the same string. Distributed
filesystem paths (``hdfs://``) always carry a namenode: the base path's own,
or the active filesystem's host/port when the base path has none. Object
store and local paths are used as joined.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from metasync.core.errors import SyncConfigError


class StorageScheme(str, Enum):
    """Known storage schemes."""

    HDFS = "hdfs"
    FILE = "file"
    S3 = "s3"
    S3A = "s3a"
    GS = "gs"
    ABFS = "abfs"
    ABFSS = "abfss"
    OSS = "oss"

    @classmethod
    def requires_qualification(cls, scheme: str | None) -> bool:
        """Return True if locations under `scheme` must carry the filesystem host/port."""
        return (scheme or "").lower() == cls.HDFS.value


@dataclass(frozen=True)
class FileSystem:
    """The active filesystem, identified by its canonical ``scheme://authority`` URI."""

    uri: str

    @classmethod
    def from_uri(cls, uri: str) -> FileSystem:
        """
        Build a FileSystem from `scheme://[host[:port]]`, dropping any path part.

        Host-less URIs such as ``file:///`` are accepted; they just cannot
        qualify hdfs locations.
        """
        parts = urlsplit(uri.strip())
        if not parts.scheme or "://" not in uri:
            raise SyncConfigError(
                f"Default filesystem must be of the form scheme://[host[:port]], got {uri!r}"
            )
        return cls(uri=f"{parts.scheme}://{parts.netloc}")

    @property
    def scheme(self) -> str:
        return urlsplit(self.uri).scheme

    @property
    def host(self) -> str:
        return urlsplit(self.uri).hostname or ""

    @property
    def port(self) -> int | None:
        return urlsplit(self.uri).port

    def qualify(self, raw_path: str) -> str:
        """Return `raw_path` prefixed with this filesystem's scheme and authority."""
        if not raw_path.startswith("/"):
            raw_path = f"/{raw_path}"
        return f"{self.uri}{raw_path}"


def get_partition_path(base_path: str, partition: str) -> str:
    """Join a relative partition path onto the table base path."""
    partition = partition.strip("/")
    if not partition:
        return base_path
    if base_path.endswith("://"):
        return f"{base_path}{partition}"
    return f"{base_path.rstrip('/')}/{partition}"


def resolve_partition_location(
    base_path: str,
    partition: str,
    filesystem: FileSystem | None = None,
) -> str:
    """
    Return the fully-qualified location of a partition.

    An ``hdfs`` path keeps the namenode of the base path. Only an authority-less
    ``hdfs:///`` path is qualified with the host/port of `filesystem`, which must
    then be an hdfs filesystem with a host. Every other scheme, known or not,
    gets the plain join.

    Raises:
        SyncConfigError: If an authority-less hdfs path has no usable filesystem.
    """
    path = get_partition_path(base_path, partition)
    parts = urlsplit(path)
    if not StorageScheme.requires_qualification(parts.scheme):
        return path
    if parts.netloc:
        return FileSystem(f"{parts.scheme}://{parts.netloc}").qualify(parts.path)
    if (
        filesystem is None
        or not filesystem.host
        or not StorageScheme.requires_qualification(filesystem.scheme)
    ):
        raise SyncConfigError(
            f"Cannot qualify {path!r}: the base path has no namenode and no hdfs "
            "default filesystem is configured (default_fs)"
        )
    return filesystem.qualify(parts.path)
