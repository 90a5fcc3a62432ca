"""Symbol record models for the documentation database.

This module contains the record stored for every documented symbol (classes,
builtin classes, global functions and class members) and the flattened form
written to the symbol index in the cache directory.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from contract.layout import INDEX_SCHEMA_VERSION


class EntryKind(str, Enum):
    """Kind of a documented symbol."""

    BUILTIN_CLASS = "builtin_class"
    CLASS = "class"
    METHOD = "method"
    PROPERTY = "property"
    CONSTANT = "constant"
    ENUM_VALUE = "enum_value"
    GLOBAL_FUNCTION = "global_function"
    OPERATOR = "operator"
    SIGNAL = "signal"


class Entry(BaseModel):
    """A symbol in the documentation database."""

    key: str
    name: str
    kind: EntryKind
    parent_index: int | None = Field(
        default=None,
        description="Index of the owning top-level symbol (members only)",
    )
    description: str | None = Field(
        default=None, description="Full description, rendered Markdown"
    )
    brief_description: str | None = Field(
        default=None, description="One-line description, rendered Markdown"
    )
    signature: str | None = Field(
        default=None, description="Display fragment appended to the name"
    )
    members: list[int] | None = Field(
        default=None,
        description="Indices of owned members, in declaration bucket order",
    )


class SymbolIndexRecord(BaseModel):
    """A line of the symbols.jsonl index written next to the Markdown tree."""

    schema_version: int = Field(default=INDEX_SCHEMA_VERSION)
    key: str
    name: str
    kind: EntryKind
    parent: str | None = Field(
        default=None, description="Key of the owning symbol (members only)"
    )


__all__ = ["Entry", "EntryKind", "SymbolIndexRecord"]
