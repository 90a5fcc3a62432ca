"""Errors raised by the documentation database."""

from __future__ import annotations


class SymbolNotFound(Exception):
    """Raised when a symbol key is not present in the database or cache."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Symbol '{symbol}' not found")
        self.symbol = symbol


class InvalidApiJson(Exception):
    """Raised when the API description is not well-formed JSON."""
