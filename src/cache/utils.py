"""JSON Lines helpers for cache index files."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


def _to_dict(obj: object) -> object:
    """Convert a model to a plain dict for JSON serialization."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    return obj


def _write_jsonl(path: Path, records: Iterable[object]) -> None:
    with path.open("wb") as f:
        for rec in records:
            f.write(orjson.dumps(_to_dict(rec), option=orjson.OPT_SORT_KEYS))
            f.write(b"\n")


def _load_jsonl(path: Path) -> list[dict[str, Any]]:
    """Load object records from a JSONL file, skipping blank lines."""
    records: list[dict[str, Any]] = []
    with path.open("rb") as handle:
        for line in handle:
            line = line.strip()
            if line:
                record = orjson.loads(line)
                if isinstance(record, dict):
                    records.append(record)
    return records
