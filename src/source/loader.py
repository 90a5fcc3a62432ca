"""Tiered loading of the API description into a database.

Sources are tried cheapest first: the checksummed snapshot, the raw JSON kept
in the cache directory, then a fresh godot dump. A corrupt snapshot or a JSON
file that does not parse is never served; the next tier replaces it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cache.paths import (
    ensure_directory_exists,
    get_json_cache_path,
    get_snapshot_path,
)
from cache.snapshot import SnapshotError, read_snapshot, write_snapshot
from database.errors import InvalidApiJson
from database.parser import load_from_json
from markup.bbcode import BBCodeConverter
from source.godot import generate_api_json

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from database.db import DocDatabase
    from markup.bbcode import MarkupConverter

logger = structlog.get_logger(__name__)


class NoApiSource(Exception):
    """Raised when no tier produced a usable API description."""


class ApiFileNotFound(Exception):
    """Raised when an explicitly given API file does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"API file not found: {path}")
        self.path = path


def read_api_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise ApiFileNotFound(path) from exc


def load_database_from_file(
    path: Path, converter: MarkupConverter | None = None
) -> DocDatabase:
    """Parse an explicitly given API file without touching any cache.

    Raises:
        ApiFileNotFound: If ``path`` does not exist.
        InvalidApiJson: If the file is not valid JSON.
    """
    if converter is None:
        converter = BBCodeConverter()
    return load_from_json(read_api_file(path), converter)


def _read_snapshot_tier(cache_dir: Path, godot_path: str) -> bytes:
    return read_snapshot(get_snapshot_path(cache_dir))


def _read_json_tier(cache_dir: Path, godot_path: str) -> bytes:
    return get_json_cache_path(cache_dir).read_bytes()


def _run_godot_tier(cache_dir: Path, godot_path: str) -> bytes:
    generate_api_json(godot_path, cache_dir)
    return get_json_cache_path(cache_dir).read_bytes()


SOURCE_TIERS: tuple[tuple[str, Callable[[Path, str], bytes]], ...] = (
    ("snapshot", _read_snapshot_tier),
    ("api_json", _read_json_tier),
    ("godot", _run_godot_tier),
)


def store_api_source(cache_dir: Path, data: bytes) -> None:
    """Persist raw API bytes as both the JSON cache file and the snapshot."""
    ensure_directory_exists(cache_dir)
    get_json_cache_path(cache_dir).write_bytes(data)
    write_snapshot(get_snapshot_path(cache_dir), data)


def load_database(
    cache_dir: Path,
    *,
    godot_path: str = "godot",
    converter: MarkupConverter | None = None,
) -> DocDatabase:
    """Load the database from the first usable source tier.

    Raises:
        GodotExecutionFailed: If the godot tier is reached and godot fails.
        NoApiSource: If every tier was missing or unusable.
    """
    if converter is None:
        converter = BBCodeConverter()

    ensure_directory_exists(cache_dir)
    rejected: list[str] = []

    for tier, fetch in SOURCE_TIERS:
        try:
            data = fetch(cache_dir, godot_path)
        except FileNotFoundError:
            logger.debug("api_source_missing", tier=tier, cache_dir=str(cache_dir))
            rejected.append(f"{tier}: missing")
            continue
        except SnapshotError as exc:
            logger.warning("api_source_rejected", tier=tier, error=str(exc))
            rejected.append(f"{tier}: {exc}")
            continue

        try:
            db = load_from_json(data, converter)
        except InvalidApiJson as exc:
            logger.warning("api_source_rejected", tier=tier, error=str(exc))
            rejected.append(f"{tier}: {exc}")
            continue

        store_api_source(cache_dir, data)
        logger.info("api_source_loaded", tier=tier, symbols=len(db))
        return db

    msg = "No usable API description (" + "; ".join(rejected) + ")"
    raise NoApiSource(msg)


__all__ = [
    "SOURCE_TIERS",
    "ApiFileNotFound",
    "NoApiSource",
    "load_database",
    "load_database_from_file",
    "read_api_file",
    "store_api_source",
]
