from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, field_validator

from cache.paths import get_cache_dir
from contract.layout import DEFAULT_STABLE_SYMBOL

CONFIG_FILENAME = "gdoc.toml"
APP_NAME = "gdoc"

OutputFormat = Literal["markdown", "terminal", "detect"]
LogFormat = Literal["console", "json"]

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class GdocConfig(BaseModel):
    """Configuration for documentation lookup and cache generation."""

    model_config = ConfigDict(extra="forbid")

    cache_dir: str | None = Field(
        default=None,
        description="Cache directory (default: platform cache dir + gdoc)",
    )
    godot_path: str = Field(
        default="godot",
        description="Godot executable used to dump the API description",
    )
    output_format: OutputFormat = Field(
        default="detect",
        description="Lookup output: raw markdown, styled terminal, or detect",
    )
    stable_symbol: str = Field(
        default=DEFAULT_STABLE_SYMBOL,
        description="Top-level symbol whose cache file marks a complete cache",
    )
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: LogFormat = Field(
        default="console", description="Log rendering: console or json"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: object) -> object:
        if not isinstance(v, str):
            msg = "log_level must be a string"
            raise ValueError(msg)
        level = v.upper()
        if level not in _LOG_LEVELS:
            msg = (
                f"Invalid log_level '{v}'. "
                f"Valid levels: {', '.join(sorted(_LOG_LEVELS))}"
            )
            raise ValueError(msg)
        return level

    @field_validator("stable_symbol")
    @classmethod
    def validate_stable_symbol(cls, v: str) -> str:
        if not v or "." in v:
            msg = "stable_symbol must name a top-level symbol"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def default_config_path() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME)) / CONFIG_FILENAME


def resolve_cache_dir(config: GdocConfig, override: str | None = None) -> Path:
    """Return the absolute cache directory, preferring an explicit override."""
    configured = override if override is not None else config.cache_dir
    if configured is None:
        return get_cache_dir()
    if not configured:
        msg = "cache_dir must be a non-empty path"
        raise ConfigError(msg)
    return Path(configured).expanduser().resolve()


def load_config(config_path: Path | None = None) -> GdocConfig:
    """Load configuration from gdoc.toml if it exists."""
    if config_path is None:
        config_path = default_config_path()

    if not config_path.is_file():
        return GdocConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return GdocConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
