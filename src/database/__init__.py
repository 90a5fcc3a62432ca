"""Documentation symbol database: models, streaming builder and rendering."""

from database.db import DocDatabase
from database.errors import InvalidApiJson, SymbolNotFound
from database.markdown import generate_markdown_for_symbol, render_symbol
from database.models import Entry, EntryKind, SymbolIndexRecord
from database.parser import load_from_json, load_from_json_file

__all__ = [
    "DocDatabase",
    "Entry",
    "EntryKind",
    "InvalidApiJson",
    "SymbolIndexRecord",
    "SymbolNotFound",
    "generate_markdown_for_symbol",
    "load_from_json",
    "load_from_json_file",
    "render_symbol",
]
