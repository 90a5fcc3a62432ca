from __future__ import annotations

import io
from pathlib import Path

import orjson
import pytest

from cache.paths import clear_cache, get_cache_dir, resolve_symbol_path
from cache.tree import (
    cache_is_populated,
    generate_markdown_cache,
    load_symbol_index,
    read_symbol_markdown,
    write_symbol_markdown,
)
from contract.layout import EXTENSION_API_JSON, INDEX_SCHEMA_VERSION, SYMBOLS_JSONL
from database.db import DocDatabase
from database.errors import SymbolNotFound
from database.markdown import generate_markdown_for_symbol
from database.models import EntryKind
from database.parser import load_from_json_file
from markup.bbcode import BBCodeConverter

_FIXTURE = Path(__file__).parent / "fixtures" / "extension_api_min.json"


def _load_fixture() -> DocDatabase:
    return load_from_json_file(_FIXTURE, BBCodeConverter())


def test_resolve_symbol_path(tmp_path: Path) -> None:
    assert resolve_symbol_path(tmp_path, "Node") == tmp_path / "Node" / "index.md"
    assert (
        resolve_symbol_path(tmp_path, "Node2D.position")
        == tmp_path / "Node2D" / "position.md"
    )


def test_resolve_symbol_path_splits_on_first_separator(tmp_path: Path) -> None:
    assert resolve_symbol_path(tmp_path, "A.b.c") == tmp_path / "A" / "b.c.md"


def test_default_cache_dir_is_absolute() -> None:
    cache_dir = get_cache_dir()

    assert cache_dir.is_absolute()
    assert cache_dir.name == "gdoc"


def test_generate_writes_every_symbol(tmp_path: Path) -> None:
    db = _load_fixture()

    count = generate_markdown_cache(db, tmp_path)

    assert count == len(db)
    for entry in db:
        path = resolve_symbol_path(tmp_path, entry.key)
        assert path.read_text(encoding="utf-8") == generate_markdown_for_symbol(
            db, entry.key
        )


def test_generate_writes_symbol_index(tmp_path: Path) -> None:
    db = _load_fixture()

    generate_markdown_cache(db, tmp_path)

    lines = (tmp_path / SYMBOLS_JSONL).read_bytes().splitlines()
    records = [orjson.loads(line) for line in lines]
    assert [record["key"] for record in records] == db.keys()
    assert records[3] == {
        "key": "Node.add_child",
        "kind": "method",
        "name": "add_child",
        "parent": "Node",
        "schema_version": INDEX_SCHEMA_VERSION,
    }


def test_load_symbol_index(tmp_path: Path) -> None:
    generate_markdown_cache(_load_fixture(), tmp_path)

    records = load_symbol_index(tmp_path)

    assert records[0].key == "sin"
    assert records[0].kind is EntryKind.GLOBAL_FUNCTION
    assert records[0].parent is None


def test_load_symbol_index_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_symbol_index(tmp_path)


def test_write_replaces_existing_file(tmp_path: Path) -> None:
    db = _load_fixture()
    path = resolve_symbol_path(tmp_path, "Node")
    path.parent.mkdir(parents=True)
    path.write_text("stale", encoding="utf-8")

    assert write_symbol_markdown(db, "Node", tmp_path) == path
    assert path.read_text(encoding="utf-8").startswith("# Node\n")


def test_read_copies_file_unmodified(tmp_path: Path) -> None:
    path = resolve_symbol_path(tmp_path, "Custom")
    path.parent.mkdir(parents=True)
    path.write_bytes("# Custom\r\n\nnon-ascii: é\n".encode())

    out = io.StringIO()
    read_symbol_markdown("Custom", tmp_path, out)

    assert out.getvalue() == "# Custom\r\n\nnon-ascii: é\n"


def test_read_unknown_symbol_raises(tmp_path: Path) -> None:
    with pytest.raises(SymbolNotFound):
        read_symbol_markdown("Missing", tmp_path, io.StringIO())


def test_read_member_of_unknown_owner_raises(tmp_path: Path) -> None:
    (tmp_path / "Node").write_text("not a directory", encoding="utf-8")

    with pytest.raises(SymbolNotFound):
        read_symbol_markdown("Node.name", tmp_path, io.StringIO())


def test_read_rejects_key_outside_cache_dir(tmp_path: Path) -> None:
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    (tmp_path / "x.md").write_text("outside\n", encoding="utf-8")

    out = io.StringIO()
    with pytest.raises(SymbolNotFound):
        read_symbol_markdown("../../x", cache_dir, out)

    assert out.getvalue() == ""


def test_cache_is_populated_needs_json_and_stable_symbol(tmp_path: Path) -> None:
    assert not cache_is_populated(tmp_path)

    (tmp_path / EXTENSION_API_JSON).write_bytes(_FIXTURE.read_bytes())
    assert not cache_is_populated(tmp_path)

    generate_markdown_cache(_load_fixture(), tmp_path)
    assert cache_is_populated(tmp_path)
    assert cache_is_populated(tmp_path, "Node2D")
    assert not cache_is_populated(tmp_path, "Node3D")


def test_clear_cache_removes_tree(tmp_path: Path) -> None:
    cache_dir = tmp_path / "gdoc"
    generate_markdown_cache(_load_fixture(), cache_dir)

    clear_cache(cache_dir)

    assert not cache_dir.exists()


def test_clear_cache_missing_dir_is_noop(tmp_path: Path) -> None:
    clear_cache(tmp_path / "missing")
