"""Styled terminal output for rendered Markdown."""

from __future__ import annotations

import io
import shutil
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.markdown import Markdown

if TYPE_CHECKING:
    from typing import TextIO

logger = structlog.get_logger(__name__)


def render_markdown(markdown: str, out: TextIO) -> None:
    """Render ``markdown`` as styled terminal text to ``out``.

    Rendering happens into a buffer first so a failure never leaves partial
    output behind; on failure the raw Markdown is written instead.
    """
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        force_terminal=True,
        highlight=False,
        width=shutil.get_terminal_size().columns,
    )
    try:
        console.print(Markdown(markdown))
    except Exception as exc:  # noqa: BLE001
        logger.warning("terminal_render_failed", error=str(exc))
        out.write(markdown)
        return
    out.write(buffer.getvalue())
