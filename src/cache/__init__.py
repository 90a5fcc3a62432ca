"""Persistent documentation cache: Markdown tree and binary snapshot."""

from cache.paths import clear_cache, get_cache_dir, resolve_symbol_path
from cache.snapshot import (
    ChecksumError,
    InvalidCacheMagic,
    InvalidCacheVersion,
    SnapshotError,
    read_snapshot,
    write_snapshot,
)
from cache.tree import (
    cache_is_populated,
    generate_markdown_cache,
    read_symbol_markdown,
    write_symbol_markdown,
)

__all__ = [
    "ChecksumError",
    "InvalidCacheMagic",
    "InvalidCacheVersion",
    "SnapshotError",
    "cache_is_populated",
    "clear_cache",
    "generate_markdown_cache",
    "get_cache_dir",
    "read_snapshot",
    "read_symbol_markdown",
    "resolve_symbol_path",
    "write_snapshot",
    "write_symbol_markdown",
]
