"""Invocation of the godot executable to dump the documented API."""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

logger = structlog.get_logger(__name__)

DUMP_API_ARGS = ("--dump-extension-api-with-docs",)


class GodotExecutionFailed(Exception):
    """Raised when godot cannot be started or exits with a non-zero status."""


def generate_api_json(godot_path: str, destination_dir: Path) -> None:
    """Run godot in ``destination_dir`` so it writes ``extension_api.json`` there.

    Raises:
        GodotExecutionFailed: If the executable is missing or exits non-zero.
    """
    argv = [godot_path, *DUMP_API_ARGS]
    logger.info("godot_dump_started", argv=argv, cwd=str(destination_dir))
    try:
        result = subprocess.run(
            argv,
            cwd=destination_dir,
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        msg = f"Failed to run {godot_path}: {exc}"
        raise GodotExecutionFailed(msg) from exc

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        msg = f"{godot_path} exited with status {result.returncode}"
        if stderr:
            msg = f"{msg}: {stderr}"
        raise GodotExecutionFailed(msg)
