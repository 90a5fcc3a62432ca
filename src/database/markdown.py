"""Canonical Markdown rendering of database records.

The rendered text is what the Markdown cache stores, so the layout here is a
cache compatibility contract: member sections always appear in the order of
``MEMBER_SECTION_TITLES`` whatever order the members were stored in.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from database.models import EntryKind

if TYPE_CHECKING:
    from database.db import DocDatabase
    from database.models import Entry

MEMBER_SECTION_TITLES: tuple[tuple[EntryKind, str], ...] = (
    (EntryKind.PROPERTY, "Properties"),
    (EntryKind.METHOD, "Methods"),
    (EntryKind.SIGNAL, "Signals"),
    (EntryKind.CONSTANT, "Constants"),
    (EntryKind.ENUM_VALUE, "Enums"),
)


def _format_member_line(member: Entry) -> str:
    line = f"- **{member.name}{member.signature or ''}**"
    if member.brief_description is not None:
        line += f" - {member.brief_description}"
    return line + "\n"


def _render_member_sections(db: DocDatabase, entry: Entry) -> str:
    buckets: dict[EntryKind, list[Entry]] = {
        kind: [] for kind, _ in MEMBER_SECTION_TITLES
    }
    for member in db.members_of(entry):
        bucket = buckets.get(member.kind)
        if bucket is not None:
            bucket.append(member)

    parts: list[str] = []
    for kind, title in MEMBER_SECTION_TITLES:
        members = buckets[kind]
        if not members:
            continue
        parts.append(f"\n## {title}\n\n")
        parts.extend(_format_member_line(member) for member in members)
    return "".join(parts)


def render_symbol(db: DocDatabase, entry: Entry) -> str:
    """Render one record as a standalone Markdown document."""
    parts = [f"# {entry.key}{entry.signature or ''}\n"]

    parent = db.parent_of(entry)
    if parent is not None:
        parts.append(f"\n**Parent**: {parent.name}\n")

    if entry.brief_description is not None:
        parts.append(f"\n{entry.brief_description}\n")

    if entry.description is not None:
        parts.append(f"\n## Description\n\n{entry.description}\n")

    if entry.members is not None:
        parts.append(_render_member_sections(db, entry))

    return "".join(parts)


def generate_markdown_for_symbol(db: DocDatabase, key: str) -> str:
    """Render the record stored under ``key``.

    Raises:
        SymbolNotFound: If ``key`` is not in the database.
    """
    return render_symbol(db, db.lookup_symbol_exact(key))


__all__ = ["MEMBER_SECTION_TITLES", "generate_markdown_for_symbol", "render_symbol"]
