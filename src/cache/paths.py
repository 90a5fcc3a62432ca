"""Cache directory location and symbol path resolution."""

from __future__ import annotations

import shutil
from pathlib import Path

import platformdirs

from contract.layout import (
    CACHE_DIR_NAME,
    EXTENSION_API_JSON,
    EXTENSION_API_SNAPSHOT,
    MARKDOWN_SUFFIX,
    MEMBER_SEPARATOR,
    SYMBOL_INDEX_MD,
    SYMBOLS_JSONL,
)


def get_cache_dir() -> Path:
    """Return the absolute gdoc cache directory for this platform."""
    return Path(platformdirs.user_cache_dir()).resolve() / CACHE_DIR_NAME


def get_json_cache_path(cache_dir: Path) -> Path:
    return cache_dir / EXTENSION_API_JSON


def get_snapshot_path(cache_dir: Path) -> Path:
    return cache_dir / EXTENSION_API_SNAPSHOT


def get_symbols_index_path(cache_dir: Path) -> Path:
    return cache_dir / SYMBOLS_JSONL


def resolve_symbol_path(cache_dir: Path, symbol: str) -> Path:
    """Map a fully-qualified symbol key to its Markdown file.

    Members live next to their owner's index file, so every top-level symbol
    gets a directory of its own.

    Examples:
        >>> resolve_symbol_path(Path("/c"), "Node2D.position").as_posix()
        '/c/Node2D/position.md'
        >>> resolve_symbol_path(Path("/c"), "Node2D").as_posix()
        '/c/Node2D/index.md'
    """
    owner, separator, member = symbol.partition(MEMBER_SEPARATOR)
    if separator:
        return cache_dir / owner / f"{member}{MARKDOWN_SUFFIX}"
    return cache_dir / symbol / SYMBOL_INDEX_MD


def ensure_directory_exists(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def clear_cache(cache_dir: Path) -> None:
    """Delete the whole cache tree; a missing directory is not an error."""
    try:
        shutil.rmtree(cache_dir)
    except FileNotFoundError:
        return
