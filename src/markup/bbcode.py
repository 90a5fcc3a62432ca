"""BBCode to Markdown conversion for Godot class reference text."""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass
from typing import Protocol

_TAG = re.compile(r"\[(/?)([^\[\]\n]*)\]")

# Tags whose content is kept verbatim up to the matching closing tag.
_LITERAL_INLINE = frozenset({"code", "kbd"})
_LITERAL_BLOCK: dict[str, str] = {
    "codeblock": "",
    "gdscript": "gdscript",
    "csharp": "csharp",
}

# Paired formatting tags: tag -> (opening markdown, closing markdown).
_PAIRED: dict[str, tuple[str, str]] = {
    "b": ("**", "**"),
    "i": ("*", "*"),
    "s": ("~~", "~~"),
    "u": ("", ""),
    "center": ("", ""),
    "color": ("", ""),
    "font": ("", ""),
    "codeblocks": ("", ""),
}

_SINGLE: dict[str, str] = {
    "br": "\n",
    "lb": "[",
    "rb": "]",
}

_REFERENCE_TAGS = frozenset(
    {
        "annotation",
        "constant",
        "constructor",
        "enum",
        "member",
        "method",
        "operator",
        "param",
        "signal",
        "theme_item",
    }
)

_CLASS_REFERENCE = re.compile(r"^(?:[A-Z@][A-Za-z0-9_.@]*|bool|int|float)$")


class MarkupSyntaxError(ValueError):
    """Raised when BBCode input has unbalanced or mismatched tags."""


class MarkupConverter(Protocol):
    """Converts raw documentation markup into Markdown."""

    def convert(self, raw: str) -> str: ...


@dataclass(frozen=True)
class _OpenTag:
    name: str
    closing: str


def _split_tag(body: str) -> tuple[str, str | None]:
    """Split a tag body into its name and optional argument."""
    equals = body.find("=")
    space = body.find(" ")
    if equals != -1 and (space == -1 or equals < space):
        return body[:equals], body[equals + 1 :]
    if space != -1:
        return body[:space], body[space + 1 :].strip()
    return body, None


def _find_closing(raw: str, name: str, start: int) -> tuple[int, int]:
    closing = f"[/{name}]"
    end = raw.find(closing, start)
    if end == -1:
        msg = f"Unclosed tag [{name}]"
        raise MarkupSyntaxError(msg)
    return end, end + len(closing)


def bbcode_to_markdown(raw: str) -> str:
    """Convert Godot BBCode to Markdown.

    Raises:
        MarkupSyntaxError: If a closing tag does not match the innermost open
            tag, or a tag is still open at the end of the input.
    """
    out: list[str] = []
    stack: list[_OpenTag] = []
    pos = 0

    while True:
        match = _TAG.search(raw, pos)
        if match is None:
            out.append(raw[pos:])
            break

        out.append(raw[pos : match.start()])
        pos = match.end()
        is_closing = match.group(1) == "/"
        name, arg = _split_tag(match.group(2))

        if is_closing:
            if name not in _PAIRED and name != "url":
                out.append(match.group(0))
                continue
            if not stack or stack[-1].name != name:
                msg = f"Unexpected closing tag [/{name}]"
                raise MarkupSyntaxError(msg)
            out.append(stack.pop().closing)
            continue

        if name in _LITERAL_INLINE:
            end, pos = _find_closing(raw, name, pos)
            out.append(f"`{raw[match.end() : end]}`")
        elif name in _LITERAL_BLOCK:
            end, pos = _find_closing(raw, name, pos)
            body = textwrap.dedent(raw[match.end() : end]).strip("\n")
            out.append(f"\n```{_LITERAL_BLOCK[name]}\n{body}\n```\n")
        elif name == "url":
            if arg is None:
                end, pos = _find_closing(raw, name, pos)
                out.append(f"<{raw[match.end() : end]}>")
            else:
                out.append("[")
                stack.append(_OpenTag(name, f"]({arg})"))
        elif name in _PAIRED:
            opening, closing = _PAIRED[name]
            out.append(opening)
            stack.append(_OpenTag(name, closing))
        elif name in _SINGLE and arg is None:
            out.append(_SINGLE[name])
        elif name in _REFERENCE_TAGS and arg:
            out.append(f"`{arg}`")
        elif arg is None and _CLASS_REFERENCE.match(name):
            out.append(f"`{name}`")
        else:
            out.append(match.group(0))

    if stack:
        msg = f"Unclosed tag [{stack[-1].name}]"
        raise MarkupSyntaxError(msg)

    return "".join(out).strip()


class BBCodeConverter:
    """Markup converter for the BBCode dialect used by Godot's class reference."""

    def convert(self, raw: str) -> str:
        return bbcode_to_markdown(raw)


__all__ = [
    "BBCodeConverter",
    "MarkupConverter",
    "MarkupSyntaxError",
    "bbcode_to_markdown",
]
