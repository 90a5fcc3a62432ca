"""Cache directory layout contract.

This module defines the stable file names and constants shared by the cache
writer, the cache reader and the cache validator.
"""

from __future__ import annotations

from dataclasses import dataclass

# Schema version for records in the symbol index (symbols.jsonl).
INDEX_SCHEMA_VERSION = 1

# Fixed subdirectory appended to the platform cache directory.
CACHE_DIR_NAME = "gdoc"

# Cache file name constants (stable contract identifiers).
EXTENSION_API_JSON = "extension_api.json"
EXTENSION_API_SNAPSHOT = "extension_api.snapshot"
SYMBOLS_JSONL = "symbols.jsonl"
SYMBOL_INDEX_MD = "index.md"
MARKDOWN_SUFFIX = ".md"

# Separator between owner and member in a fully-qualified symbol key.
MEMBER_SEPARATOR = "."

# Top-level symbol whose rendered file marks a completed generation.
DEFAULT_STABLE_SYMBOL = "Node"


@dataclass(frozen=True)
class CacheFileSpec:
    """A file stored at the root of the cache directory."""

    filename: str
    format: str
    required: bool


CACHE_FILE_SPECS: dict[str, CacheFileSpec] = {
    "api_json": CacheFileSpec(
        filename=EXTENSION_API_JSON,
        format="json",
        required=True,
    ),
    "snapshot": CacheFileSpec(
        filename=EXTENSION_API_SNAPSHOT,
        format="snapshot",
        required=False,
    ),
    "symbols": CacheFileSpec(
        filename=SYMBOLS_JSONL,
        format="jsonl",
        required=True,
    ),
}
