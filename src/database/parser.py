"""Streaming builder for the documentation database.

The API description is walked token by token at three nesting levels (root,
class, member). Each level dispatches recognized keys through a handler table
and skips every other key together with its whole value, so fields added to
the source schema later never break the parse.

Class members are nested inside the class object, but a member can only point
at its class once the class has an index. Members are therefore buffered while
the class body is scanned, the class is committed first, then its members are
committed with the class index attached, and finally the member indices are
patched onto the class record.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, TypeVar

import ijson

from contract.layout import MEMBER_SEPARATOR
from database.db import DocDatabase
from database.errors import InvalidApiJson
from database.models import Entry, EntryKind
from database.scanner import (
    ARRAY_BEGIN,
    ARRAY_END,
    END_OF_DOCUMENT,
    OBJECT_BEGIN,
    OBJECT_END,
    STRING,
    JsonScanner,
    ScannerError,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path
    from typing import BinaryIO

    from markup.bbcode import MarkupConverter

# Class-level member arrays, in the order their records are committed.
MEMBER_SECTIONS: tuple[tuple[str, EntryKind], ...] = (
    ("methods", EntryKind.METHOD),
    ("properties", EntryKind.PROPERTY),
    ("signals", EntryKind.SIGNAL),
    ("constants", EntryKind.CONSTANT),
    ("enums", EntryKind.ENUM_VALUE),
)

_MEMBER_KEYS = frozenset({"name"})
_PROPERTY_KEYS = frozenset({"name", "type"})

T = TypeVar("T")


@dataclass
class _ClassDraft:
    kind: EntryKind
    name: str | None = None
    description: str | None = None
    brief_description: str | None = None
    members: dict[str, list[Entry]] = field(default_factory=dict)


def _walk_object(
    scanner: JsonScanner, handlers: Mapping[str, Callable[[], None]]
) -> None:
    """Dispatch each key of the current object; skip keys without a handler."""
    while True:
        event, key = scanner.next()
        if event == OBJECT_END:
            return
        if event == END_OF_DOCUMENT:
            msg = "Unexpected end of input inside an object"
            raise ijson.IncompleteJSONError(msg)

        handler = handlers.get(key)
        if handler is None:
            scanner.skip_value()
        else:
            handler()


def _parse_object_array(
    scanner: JsonScanner, parse_object: Callable[[], T]
) -> list[T]:
    """Parse an array of objects; non-object elements are ignored."""
    scanner.expect(ARRAY_BEGIN)
    items: list[T] = []
    while True:
        event, _ = scanner.next()
        if event == ARRAY_END:
            return items
        if event == OBJECT_BEGIN:
            items.append(parse_object())
        elif event == ARRAY_BEGIN:
            scanner.skip_container()
        elif event == END_OF_DOCUMENT:
            msg = "Unexpected end of input inside an array"
            raise ijson.IncompleteJSONError(msg)


def _read_string(scanner: JsonScanner, key: str) -> str:
    event, value = scanner.next()
    if event == END_OF_DOCUMENT:
        msg = f"Unexpected end of input reading '{key}'"
        raise ijson.IncompleteJSONError(msg)
    if event != STRING:
        msg = f"Expected a string for '{key}', got {event}"
        raise AssertionError(msg)
    return value


def _require_name(name: str | None, kind: EntryKind) -> str:
    if name is None:
        msg = f"{kind.value} object has no 'name'"
        raise AssertionError(msg)
    return name


def _parse_member(scanner: JsonScanner, kind: EntryKind) -> Entry:
    values: dict[str, str] = {}

    def read(key: str) -> None:
        values[key] = _read_string(scanner, key)

    recognized = _PROPERTY_KEYS if kind is EntryKind.PROPERTY else _MEMBER_KEYS
    _walk_object(scanner, {key: partial(read, key) for key in recognized})

    name = _require_name(values.get("name"), kind)
    signature = f": {values['type']}" if "type" in values else None
    return Entry(key=name, name=name, kind=kind, signature=signature)


def _parse_class(
    scanner: JsonScanner,
    kind: EntryKind,
    converter: MarkupConverter,
    db: DocDatabase,
) -> None:
    draft = _ClassDraft(kind=kind)

    def read_name() -> None:
        draft.name = _read_string(scanner, "name")

    def read_description() -> None:
        draft.description = converter.convert(_read_string(scanner, "description"))

    def read_brief_description() -> None:
        draft.brief_description = converter.convert(
            _read_string(scanner, "brief_description")
        )

    def read_members(section: str, member_kind: EntryKind) -> None:
        draft.members[section] = _parse_object_array(
            scanner, partial(_parse_member, scanner, member_kind)
        )

    handlers: dict[str, Callable[[], None]] = {
        "name": read_name,
        "description": read_description,
        "brief_description": read_brief_description,
    }
    for section, member_kind in MEMBER_SECTIONS:
        handlers[section] = partial(read_members, section, member_kind)

    _walk_object(scanner, handlers)
    _commit_class(db, draft)


def _commit_class(db: DocDatabase, draft: _ClassDraft) -> None:
    name = _require_name(draft.name, draft.kind)
    class_index = db.put(
        Entry(
            key=name,
            name=name,
            kind=draft.kind,
            description=draft.description,
            brief_description=draft.brief_description,
        )
    )

    member_indices: list[int] = []
    for section, _ in MEMBER_SECTIONS:
        for member in draft.members.get(section, ()):
            member.parent_index = class_index
            member.key = f"{name}{MEMBER_SEPARATOR}{member.name}"
            index = db.put(member)
            if index not in member_indices:
                member_indices.append(index)

    if member_indices:
        db.set_members(class_index, member_indices)


def _parse_classes(
    kind: EntryKind,
    scanner: JsonScanner,
    db: DocDatabase,
    converter: MarkupConverter,
) -> None:
    _parse_object_array(scanner, partial(_parse_class, scanner, kind, converter, db))


def _parse_utility_functions(
    scanner: JsonScanner,
    db: DocDatabase,
    converter: MarkupConverter,
) -> None:
    functions = _parse_object_array(
        scanner, partial(_parse_member, scanner, EntryKind.GLOBAL_FUNCTION)
    )
    for function in functions:
        db.put(function)


RootHandler = Callable[[JsonScanner, DocDatabase, "MarkupConverter"], None]

ROOT_HANDLERS: dict[str, RootHandler] = {
    "builtin_classes": partial(_parse_classes, EntryKind.BUILTIN_CLASS),
    "classes": partial(_parse_classes, EntryKind.CLASS),
    "utility_functions": _parse_utility_functions,
}


def parse_database(scanner: JsonScanner, converter: MarkupConverter) -> DocDatabase:
    """Build a database from the tokens of an API description.

    Scanner errors propagate as raised; use ``load_from_json`` to get them as
    ``InvalidApiJson``.
    """
    db = DocDatabase()
    scanner.expect(OBJECT_BEGIN)
    _walk_object(
        scanner,
        {
            key: partial(handler, scanner, db, converter)
            for key, handler in ROOT_HANDLERS.items()
        },
    )
    event, _ = scanner.next()
    if event != END_OF_DOCUMENT:
        msg = "Trailing data after the root object"
        raise ijson.JSONError(msg)
    return db


def load_from_json(
    source: bytes | BinaryIO, converter: MarkupConverter
) -> DocDatabase:
    """Build a database from a complete JSON API description.

    Raises:
        InvalidApiJson: If the document is malformed or truncated.
    """
    try:
        return parse_database(JsonScanner(source), converter)
    except ScannerError as exc:
        msg = f"Invalid API JSON: {exc}"
        raise InvalidApiJson(msg) from exc


def load_from_json_file(path: Path, converter: MarkupConverter) -> DocDatabase:
    """Read ``path`` fully into memory and build a database from it."""
    return load_from_json(path.read_bytes(), converter)


__all__ = [
    "MEMBER_SECTIONS",
    "ROOT_HANDLERS",
    "load_from_json",
    "load_from_json_file",
    "parse_database",
]
