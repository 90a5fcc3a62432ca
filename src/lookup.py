"""Symbol lookup: from the cache when possible, building it when needed."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import structlog

from cache.tree import (
    cache_is_populated,
    generate_markdown_cache,
    read_symbol_markdown,
)
from contract.layout import DEFAULT_STABLE_SYMBOL
from database.markdown import render_symbol
from database.parser import load_from_json
from markup.bbcode import BBCodeConverter
from render.terminal import render_markdown
from source.loader import (
    ApiFileNotFound,
    load_database,
    load_database_from_file,
    read_api_file,
    store_api_source,
)

if TYPE_CHECKING:
    from pathlib import Path
    from typing import TextIO

    from database.db import DocDatabase
    from markup.bbcode import MarkupConverter
    from settings.config import OutputFormat

logger = structlog.get_logger(__name__)


def build_cache(
    cache_dir: Path,
    *,
    godot_path: str = "godot",
    api_json_path: Path | None = None,
    converter: MarkupConverter | None = None,
) -> DocDatabase:
    """Regenerate the Markdown cache and return the database it came from.

    With ``api_json_path`` the given file is parsed and becomes the cached raw
    source; otherwise the tiered source loader picks the source.
    """
    if converter is None:
        converter = BBCodeConverter()

    if api_json_path is not None:
        data = read_api_file(api_json_path)
        db = load_from_json(data, converter)
        store_api_source(cache_dir, data)
    else:
        db = load_database(cache_dir, godot_path=godot_path, converter=converter)

    generate_markdown_cache(db, cache_dir)
    return db


def markdown_for_symbol(
    symbol: str,
    out: TextIO,
    *,
    cache_dir: Path,
    api_json_path: Path | None = None,
    godot_path: str = "godot",
    stable_symbol: str = DEFAULT_STABLE_SYMBOL,
) -> None:
    """Write the Markdown documentation of ``symbol`` to ``out``.

    An explicit ``api_json_path`` bypasses the cache entirely.

    Raises:
        ApiFileNotFound: If ``api_json_path`` does not exist.
        InvalidApiJson: If ``api_json_path`` is not valid JSON.
        SymbolNotFound: If the symbol is unknown.
    """
    if api_json_path is not None:
        db = load_database_from_file(api_json_path)
        out.write(render_symbol(db, db.lookup_symbol_exact(symbol)))
        return

    if not cache_is_populated(cache_dir, stable_symbol):
        logger.info("cache_not_populated", cache_dir=str(cache_dir))
        build_cache(cache_dir, godot_path=godot_path)

    read_symbol_markdown(symbol, cache_dir, out)


def format_and_display(
    symbol: str,
    out: TextIO,
    *,
    cache_dir: Path,
    output_format: OutputFormat = "detect",
    api_json_path: Path | None = None,
    godot_path: str = "godot",
    stable_symbol: str = DEFAULT_STABLE_SYMBOL,
) -> None:
    """Look up ``symbol`` and write it as Markdown or styled terminal text."""
    if output_format == "detect":
        output_format = "terminal" if out.isatty() else "markdown"

    if output_format == "markdown":
        markdown_for_symbol(
            symbol,
            out,
            cache_dir=cache_dir,
            api_json_path=api_json_path,
            godot_path=godot_path,
            stable_symbol=stable_symbol,
        )
        return

    buffer = io.StringIO()
    markdown_for_symbol(
        symbol,
        buffer,
        cache_dir=cache_dir,
        api_json_path=api_json_path,
        godot_path=godot_path,
        stable_symbol=stable_symbol,
    )
    render_markdown(buffer.getvalue(), out)


__all__ = [
    "ApiFileNotFound",
    "build_cache",
    "format_and_display",
    "markdown_for_symbol",
]
