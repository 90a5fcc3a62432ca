"""Configuration and logging setup."""

from settings.config import (
    ConfigError,
    GdocConfig,
    default_config_path,
    load_config,
    resolve_cache_dir,
)
from settings.logging import configure_logging

__all__ = [
    "ConfigError",
    "GdocConfig",
    "configure_logging",
    "default_config_path",
    "load_config",
    "resolve_cache_dir",
]
