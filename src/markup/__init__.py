"""Documentation markup conversion."""

from markup.bbcode import (
    BBCodeConverter,
    MarkupConverter,
    MarkupSyntaxError,
    bbcode_to_markdown,
)

__all__ = [
    "BBCodeConverter",
    "MarkupConverter",
    "MarkupSyntaxError",
    "bbcode_to_markdown",
]
