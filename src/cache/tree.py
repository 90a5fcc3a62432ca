"""Directory tree of rendered Markdown, one file per symbol."""

from __future__ import annotations

import shutil
from typing import TYPE_CHECKING, TextIO

import structlog

from cache.paths import (
    ensure_directory_exists,
    get_json_cache_path,
    get_symbols_index_path,
    resolve_symbol_path,
)
from cache.utils import _load_jsonl, _write_jsonl
from contract.layout import DEFAULT_STABLE_SYMBOL
from database.errors import SymbolNotFound
from database.markdown import generate_markdown_for_symbol
from database.models import SymbolIndexRecord

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from database.db import DocDatabase

logger = structlog.get_logger(__name__)


def write_symbol_markdown(db: DocDatabase, symbol: str, cache_dir: Path) -> Path:
    """Render ``symbol`` and write it to its cache file, replacing any old one."""
    output_path = resolve_symbol_path(cache_dir, symbol)
    ensure_directory_exists(output_path.parent)
    markdown = generate_markdown_for_symbol(db, symbol)
    output_path.write_text(markdown, encoding="utf-8")
    return output_path


def _index_records(db: DocDatabase) -> Iterator[SymbolIndexRecord]:
    for entry in db:
        parent = db.parent_of(entry)
        yield SymbolIndexRecord(
            key=entry.key,
            name=entry.name,
            kind=entry.kind,
            parent=parent.key if parent is not None else None,
        )


def generate_markdown_cache(db: DocDatabase, cache_dir: Path) -> int:
    """Write every symbol of ``db`` plus the symbol index into ``cache_dir``.

    Returns:
        Number of Markdown files written.
    """
    ensure_directory_exists(cache_dir)

    count = 0
    for entry in db:
        write_symbol_markdown(db, entry.key, cache_dir)
        count += 1

    _write_jsonl(get_symbols_index_path(cache_dir), _index_records(db))
    logger.info("markdown_cache_generated", cache_dir=str(cache_dir), symbols=count)
    return count


def read_symbol_markdown(symbol: str, cache_dir: Path, out: TextIO) -> None:
    """Copy the cached Markdown for ``symbol`` to ``out`` unmodified.

    Raises:
        SymbolNotFound: If the symbol has no cache file or its key resolves
            outside ``cache_dir``.
    """
    symbol_path = resolve_symbol_path(cache_dir, symbol)
    if not symbol_path.resolve().is_relative_to(cache_dir.resolve()):
        raise SymbolNotFound(symbol)
    try:
        handle = symbol_path.open(encoding="utf-8", newline="")
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise SymbolNotFound(symbol) from exc

    with handle:
        shutil.copyfileobj(handle, out)


def cache_is_populated(
    cache_dir: Path, stable_symbol: str = DEFAULT_STABLE_SYMBOL
) -> bool:
    """Return True when a previous generation ran to completion.

    The raw API file alone is not enough: it is written before the Markdown
    tree, so a stable top-level symbol's file must exist too.
    """
    if not get_json_cache_path(cache_dir).is_file():
        return False
    return resolve_symbol_path(cache_dir, stable_symbol).is_file()


def load_symbol_index(cache_dir: Path) -> list[SymbolIndexRecord]:
    """Load the symbol index written by ``generate_markdown_cache``.

    Raises:
        FileNotFoundError: If the cache has no symbol index.
    """
    return [
        SymbolIndexRecord.model_validate(record)
        for record in _load_jsonl(get_symbols_index_path(cache_dir))
    ]


__all__ = [
    "cache_is_populated",
    "generate_markdown_cache",
    "load_symbol_index",
    "read_symbol_markdown",
    "write_symbol_markdown",
]
