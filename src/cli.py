"""Command-line interface for gdoc."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from cache.paths import clear_cache
from cache.tree import load_symbol_index
from cache.validation import validate_cache
from database.errors import InvalidApiJson, SymbolNotFound
from database.models import EntryKind
from lookup import build_cache, format_and_display
from markup.bbcode import MarkupSyntaxError
from settings.config import (
    ConfigError,
    GdocConfig,
    load_config,
    resolve_cache_dir,
)
from settings.logging import configure_logging
from source.godot import GodotExecutionFailed
from source.loader import ApiFileNotFound, NoApiSource


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to gdoc.toml (default: platform config dir)",
    )
    parser.add_argument(
        "--cache-dir",
        default=None,
        help="Cache directory (default: config cache_dir or platform cache dir)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: config log_level)",
    )


def _add_api_file(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument(
        "--api-file",
        "--godot-extension-api",
        dest="api_file",
        default=None,
        help=help_text,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gdoc", description="Godot documentation CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup_parser = subparsers.add_parser("lookup", help="Look up a symbol")
    _add_common_options(lookup_parser)
    lookup_parser.add_argument(
        "symbol",
        help="Symbol to look up (e.g. Node2D, Node2D.position)",
    )
    _add_api_file(
        lookup_parser, "Path to an extension_api.json file (bypasses the cache)"
    )
    lookup_parser.add_argument(
        "--format",
        dest="output_format",
        choices=("markdown", "terminal", "detect"),
        default=None,
        help="Output format (default: config output_format)",
    )

    generate_parser = subparsers.add_parser(
        "generate", help="Rebuild the documentation cache"
    )
    _add_common_options(generate_parser)
    _add_api_file(
        generate_parser,
        "Path to an extension_api.json file (default: cache or godot)",
    )

    clear_parser = subparsers.add_parser("clear-cache", help="Clear the cache")
    _add_common_options(clear_parser)

    list_parser = subparsers.add_parser("list", help="List cached symbols")
    _add_common_options(list_parser)
    list_parser.add_argument(
        "--kind",
        choices=[kind.value for kind in EntryKind],
        default=None,
        help="Only list symbols of this kind",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate the cache")
    _add_common_options(validate_parser)

    return parser


def _resolve_api_file(api_file: str | None) -> Path | None:
    if api_file is None:
        return None
    return Path(api_file).expanduser().resolve()


def _handle_lookup(
    config: GdocConfig, cache_dir: Path, args: argparse.Namespace
) -> int:
    api_json_path = _resolve_api_file(args.api_file)
    try:
        format_and_display(
            args.symbol,
            sys.stdout,
            cache_dir=cache_dir,
            output_format=args.output_format or config.output_format,
            api_json_path=api_json_path,
            godot_path=config.godot_path,
            stable_symbol=config.stable_symbol,
        )
    except SymbolNotFound:
        sys.stderr.write(f"Symbol '{args.symbol}' not found.\n")
        return 1
    except InvalidApiJson:
        sys.stderr.write(f"error: invalid JSON in API file: {api_json_path}\n")
        return 2
    return 0


def _handle_generate(
    config: GdocConfig, cache_dir: Path, args: argparse.Namespace
) -> int:
    api_json_path = _resolve_api_file(args.api_file)
    try:
        db = build_cache(
            cache_dir, godot_path=config.godot_path, api_json_path=api_json_path
        )
    except InvalidApiJson:
        sys.stderr.write(f"error: invalid JSON in API file: {api_json_path}\n")
        return 2
    sys.stdout.write(f"Generated {len(db)} symbols in {cache_dir}\n")
    return 0


def _handle_clear_cache(cache_dir: Path) -> int:
    clear_cache(cache_dir)
    sys.stdout.write("Cache cleared.\n")
    return 0


def _handle_list(cache_dir: Path, kind: str | None) -> int:
    try:
        records = load_symbol_index(cache_dir)
    except FileNotFoundError:
        sys.stderr.write(f"cache-dir: {cache_dir}\n")
        sys.stderr.write("error: cache is empty, run 'gdoc generate' first\n")
        return 1
    for record in records:
        if kind is None or record.kind.value == kind:
            sys.stdout.write(f"{record.key}\n")
    return 0


def _handle_validate(cache_dir: Path) -> int:
    result = validate_cache(cache_dir)
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _dispatch(args: argparse.Namespace) -> int:
    config_path = Path(args.config).expanduser() if args.config else None
    config = load_config(config_path)
    configure_logging(args.log_level or config.log_level, config.log_format)
    cache_dir = resolve_cache_dir(config, args.cache_dir)

    if args.command == "lookup":
        return _handle_lookup(config, cache_dir, args)

    if args.command == "generate":
        return _handle_generate(config, cache_dir, args)

    if args.command == "clear-cache":
        return _handle_clear_cache(cache_dir)

    if args.command == "list":
        return _handle_list(cache_dir, args.kind)

    if args.command == "validate":
        return _handle_validate(cache_dir)

    raise AssertionError


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        return _dispatch(args)
    except ConfigError as exc:
        sys.stderr.write(f"config error: {exc}\n")
        return 2
    except ApiFileNotFound as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    except (GodotExecutionFailed, NoApiSource, MarkupSyntaxError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
