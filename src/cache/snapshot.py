"""Checksummed binary snapshot of the raw API description.

Layout, all integers little-endian::

    magic     4 bytes   b"GDOC"
    version   u32       SNAPSHOT_VERSION
    checksum  u32       CRC32 of the payload
    payload   ...       raw bytes

Only one version is ever accepted. A snapshot written by any other version is
rejected outright and the caller regenerates it from the next source.
"""

from __future__ import annotations

import struct
import zlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

SNAPSHOT_MAGIC = b"GDOC"
SNAPSHOT_VERSION = 1

_HEADER = struct.Struct("<4sII")
HEADER_SIZE = _HEADER.size


class SnapshotError(Exception):
    """Base class for snapshots that must not be served."""


class InvalidCacheMagic(SnapshotError):
    """Raised when the snapshot does not start with the expected magic."""


class InvalidCacheVersion(SnapshotError):
    """Raised when the snapshot was written by another format version."""


class ChecksumError(SnapshotError):
    """Raised when the payload does not match the stored CRC32."""


def _crc32(data: bytes) -> int:
    return zlib.crc32(data) & 0xFFFFFFFF


def encode_snapshot(data: bytes) -> bytes:
    """Return ``data`` prefixed with a snapshot header."""
    return _HEADER.pack(SNAPSHOT_MAGIC, SNAPSHOT_VERSION, _crc32(data)) + data


def decode_snapshot(blob: bytes) -> bytes:
    """Validate a snapshot and return its payload.

    Checks run in order magic, version, checksum; the first failure wins.

    Raises:
        InvalidCacheMagic: If the header is truncated or the magic differs.
        InvalidCacheVersion: If the version is not ``SNAPSHOT_VERSION``.
        ChecksumError: If CRC32 of the payload differs from the header.
    """
    if len(blob) < HEADER_SIZE:
        msg = f"Snapshot header truncated ({len(blob)} of {HEADER_SIZE} bytes)"
        raise InvalidCacheMagic(msg)

    magic, version, checksum = _HEADER.unpack_from(blob)
    if magic != SNAPSHOT_MAGIC:
        msg = f"Bad snapshot magic {magic!r}"
        raise InvalidCacheMagic(msg)
    if version != SNAPSHOT_VERSION:
        msg = (
            f"Unsupported snapshot version {version} "
            f"(expected {SNAPSHOT_VERSION})"
        )
        raise InvalidCacheVersion(msg)

    payload = blob[HEADER_SIZE:]
    actual = _crc32(payload)
    if actual != checksum:
        msg = (
            f"Snapshot checksum mismatch: stored {checksum:#010x}, "
            f"got {actual:#010x}"
        )
        raise ChecksumError(msg)
    return payload


def write_snapshot(path: Path, data: bytes) -> None:
    path.write_bytes(encode_snapshot(data))


def read_snapshot(path: Path) -> bytes:
    """Read and validate the snapshot at ``path``.

    Raises:
        FileNotFoundError: If there is no snapshot file.
        SnapshotError: If the snapshot is corrupt or stale.
    """
    return decode_snapshot(path.read_bytes())


__all__ = [
    "HEADER_SIZE",
    "SNAPSHOT_MAGIC",
    "SNAPSHOT_VERSION",
    "ChecksumError",
    "InvalidCacheMagic",
    "InvalidCacheVersion",
    "SnapshotError",
    "decode_snapshot",
    "encode_snapshot",
    "read_snapshot",
    "write_snapshot",
]
