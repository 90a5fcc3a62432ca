"""Terminal presentation of documentation."""

from render.terminal import render_markdown

__all__ = ["render_markdown"]
