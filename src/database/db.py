"""Append-only symbol table with index-based cross references."""

from __future__ import annotations

from typing import TYPE_CHECKING

from database.errors import SymbolNotFound

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from database.models import Entry


class DocDatabase:
    """Ordered mapping from fully-qualified symbol key to its record.

    Records are addressable by key and by insertion index. An index is stable
    for the lifetime of the database: records are never removed or reordered,
    and re-inserting an existing key replaces the record in place.
    """

    def __init__(self) -> None:
        self._entries: list[Entry] = []
        self._index: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DocDatabase):
            return NotImplemented
        return self._entries == other._entries

    def put(self, entry: Entry) -> int:
        """Insert or replace ``entry`` under its key and return its index."""
        index = self._index.get(entry.key)
        if index is not None:
            self._entries[index] = entry
            return index

        index = len(self._entries)
        self._entries.append(entry)
        self._index[entry.key] = index
        return index

    def get(self, key: str) -> Entry | None:
        index = self._index.get(key)
        if index is None:
            return None
        return self._entries[index]

    def get_index(self, key: str) -> int | None:
        return self._index.get(key)

    def at(self, index: int) -> Entry:
        """Return the record stored at ``index``."""
        return self._entries[index]

    def keys(self) -> list[str]:
        return [entry.key for entry in self._entries]

    def values(self) -> Sequence[Entry]:
        return tuple(self._entries)

    def parent_of(self, entry: Entry) -> Entry | None:
        if entry.parent_index is None:
            return None
        return self._entries[entry.parent_index]

    def members_of(self, entry: Entry) -> list[Entry]:
        if not entry.members:
            return []
        return [self._entries[index] for index in entry.members]

    def set_members(self, index: int, members: list[int]) -> None:
        """Attach member indices to the record at ``index``.

        This is the single forward patch applied to a class once all of its
        members have been committed.
        """
        for member_index in members:
            if not 0 <= member_index < len(self._entries):
                msg = f"Member index {member_index} is out of range"
                raise IndexError(msg)
        self._entries[index].members = list(members)

    def lookup_symbol_exact(self, key: str) -> Entry:
        """Return the record stored under ``key``.

        Raises:
            SymbolNotFound: If no record has this exact key.
        """
        entry = self.get(key)
        if entry is None:
            raise SymbolNotFound(key)
        return entry


__all__ = ["DocDatabase"]
