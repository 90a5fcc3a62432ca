from __future__ import annotations

import pytest

from database.db import DocDatabase
from database.errors import SymbolNotFound
from database.models import Entry, EntryKind


def _class(name: str) -> Entry:
    return Entry(key=name, name=name, kind=EntryKind.CLASS)


def test_put_appends_and_returns_index() -> None:
    db = DocDatabase()

    assert db.put(_class("A")) == 0
    assert db.put(_class("B")) == 1
    assert len(db) == 2
    assert db.keys() == ["A", "B"]
    assert db.get_index("B") == 1


def test_put_existing_key_replaces_in_place() -> None:
    db = DocDatabase()
    db.put(_class("A"))
    db.put(_class("B"))

    replacement = Entry(key="A", name="A", kind=EntryKind.BUILTIN_CLASS)
    assert db.put(replacement) == 0

    assert len(db) == 2
    assert db.at(0).kind is EntryKind.BUILTIN_CLASS
    assert db.keys() == ["A", "B"]


def test_membership_and_get() -> None:
    db = DocDatabase()
    db.put(_class("A"))

    assert "A" in db
    assert "B" not in db
    assert db.get("B") is None
    assert db.get_index("B") is None


def test_lookup_symbol_exact_is_case_sensitive() -> None:
    db = DocDatabase()
    db.put(_class("Node"))

    stored = db.get("Node")
    assert db.lookup_symbol_exact("Node") is stored
    with pytest.raises(SymbolNotFound) as excinfo:
        db.lookup_symbol_exact("node")

    assert excinfo.value.symbol == "node"
    assert str(excinfo.value) == "Symbol 'node' not found"


def test_parent_and_members_navigation() -> None:
    db = DocDatabase()
    class_index = db.put(_class("A"))
    member_index = db.put(
        Entry(
            key="A.f",
            name="f",
            kind=EntryKind.METHOD,
            parent_index=class_index,
        )
    )
    db.set_members(class_index, [member_index])

    owner = db.lookup_symbol_exact("A")
    member = db.lookup_symbol_exact("A.f")
    assert db.members_of(owner) == [member]
    assert db.parent_of(member) == owner
    assert db.parent_of(owner) is None
    assert db.members_of(member) == []


def test_set_members_rejects_dangling_index() -> None:
    db = DocDatabase()
    db.put(_class("A"))

    with pytest.raises(IndexError):
        db.set_members(0, [5])

    assert db.at(0).members is None


def test_values_is_a_snapshot() -> None:
    db = DocDatabase()
    db.put(_class("A"))

    values = db.values()
    db.put(_class("B"))

    assert [entry.key for entry in values] == ["A"]


def test_equality_compares_entries() -> None:
    first = DocDatabase()
    second = DocDatabase()
    first.put(_class("A"))
    second.put(_class("A"))

    assert first == second

    second.put(_class("B"))
    assert first != second
