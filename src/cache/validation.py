"""Validation helpers for a generated cache directory."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from cache.paths import resolve_symbol_path
from cache.snapshot import SnapshotError, read_snapshot
from contract.layout import CACHE_FILE_SPECS
from database.models import SymbolIndexRecord

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str
    line: int | None = None

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "path": str(self.path),
            "line": self.line,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_cache(cache_dir: Path) -> ValidationResult:
    """Check that ``cache_dir`` holds a complete, readable generation."""
    result = ValidationResult()

    if not cache_dir.exists():
        result.errors.append(
            ValidationMessage(
                artifact="cache_dir",
                path=cache_dir,
                message="Cache directory does not exist.",
            )
        )
        return result

    if not cache_dir.is_dir():
        result.errors.append(
            ValidationMessage(
                artifact="cache_dir",
                path=cache_dir,
                message="Cache path is not a directory.",
            )
        )
        return result

    for name, spec in CACHE_FILE_SPECS.items():
        path = cache_dir / spec.filename
        if not path.exists():
            if spec.required:
                result.errors.append(
                    ValidationMessage(
                        artifact=name,
                        path=path,
                        message="Required cache file is missing.",
                    )
                )
            continue

        if spec.format == "jsonl":
            _validate_symbol_index(name, path, cache_dir, result)
        elif spec.format == "snapshot":
            _validate_snapshot(name, path, result)

    return result


def _validate_symbol_index(
    artifact_name: str,
    path: Path,
    cache_dir: Path,
    result: ValidationResult,
) -> None:
    try:
        handle = path.open("rb")
    except OSError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Failed to read file: {exc}.",
            )
        )
        return

    with handle:
        for line_number, raw_line in enumerate(handle, 1):
            line = raw_line.strip()
            if not line:
                continue
            try:
                data = orjson.loads(line)
            except orjson.JSONDecodeError as exc:
                result.errors.append(
                    ValidationMessage(
                        artifact=artifact_name,
                        path=path,
                        line=line_number,
                        message=f"Invalid JSON: {exc}.",
                    )
                )
                continue

            try:
                record = SymbolIndexRecord.model_validate(data)
            except ValidationError as exc:
                result.errors.append(
                    ValidationMessage(
                        artifact=artifact_name,
                        path=path,
                        line=line_number,
                        message=f"Schema validation failed: {exc}.",
                    )
                )
                continue

            markdown_path = resolve_symbol_path(cache_dir, record.key)
            if not markdown_path.is_file():
                result.errors.append(
                    ValidationMessage(
                        artifact="markdown",
                        path=markdown_path,
                        line=line_number,
                        message=f"Markdown for symbol '{record.key}' is missing.",
                    )
                )


def _validate_snapshot(
    artifact_name: str, path: Path, result: ValidationResult
) -> None:
    try:
        read_snapshot(path)
    except SnapshotError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Snapshot is not usable: {exc}.",
            )
        )


__all__ = ["ValidationMessage", "ValidationResult", "validate_cache"]
