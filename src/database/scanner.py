"""Token scanner over a JSON document.

Wraps ``ijson`` basic events so the parser can walk the document one token at
a time without materializing a parse tree.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, Any

import ijson

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import BinaryIO

OBJECT_BEGIN = "start_map"
OBJECT_END = "end_map"
ARRAY_BEGIN = "start_array"
ARRAY_END = "end_array"
OBJECT_KEY = "map_key"
STRING = "string"
END_OF_DOCUMENT = "end_of_document"

_OPENERS = frozenset({OBJECT_BEGIN, ARRAY_BEGIN})
_CLOSERS = frozenset({OBJECT_END, ARRAY_END})

Token = tuple[str, Any]

# Errors reported by the token stream for malformed or truncated input.
ScannerError = ijson.JSONError


class JsonScanner:
    """Pull-style tokenizer over a complete JSON input."""

    def __init__(self, source: bytes | BinaryIO) -> None:
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        self._events: Iterator[Token] = ijson.basic_parse(source, use_float=True)

    def next(self) -> Token:
        """Return the next ``(event, value)`` token.

        Once the input is exhausted every call returns ``END_OF_DOCUMENT``.
        """
        return next(self._events, (END_OF_DOCUMENT, None))

    def expect(self, event: str) -> Any:
        """Consume one token that must be ``event`` and return its value."""
        token_event, value = self.next()
        if token_event == END_OF_DOCUMENT:
            msg = f"Unexpected end of input, expected {event}"
            raise ijson.IncompleteJSONError(msg)
        if token_event != event:
            msg = f"Expected {event}, got {token_event}"
            raise ijson.JSONError(msg)
        return value

    def skip_value(self) -> None:
        """Consume and discard one complete value, however deeply nested."""
        event, _ = self.next()
        if event == END_OF_DOCUMENT:
            msg = "Unexpected end of input while skipping a value"
            raise ijson.IncompleteJSONError(msg)
        if event in _OPENERS:
            self.skip_container()

    def skip_container(self) -> None:
        """Consume the rest of an object or array whose opening was read."""
        depth = 1
        while depth:
            event, _ = self.next()
            if event == END_OF_DOCUMENT:
                msg = "Unexpected end of input while skipping a value"
                raise ijson.IncompleteJSONError(msg)
            if event in _OPENERS:
                depth += 1
            elif event in _CLOSERS:
                depth -= 1


__all__ = [
    "ARRAY_BEGIN",
    "ARRAY_END",
    "END_OF_DOCUMENT",
    "OBJECT_BEGIN",
    "OBJECT_END",
    "OBJECT_KEY",
    "STRING",
    "JsonScanner",
    "ScannerError",
    "Token",
]
