"""Stable cache contract surface for gdoc.

Treat these exports as the authoritative boundary between the cache writer
and anything that reads a cache directory.
"""

from contract.layout import (
    CACHE_DIR_NAME,
    CACHE_FILE_SPECS,
    DEFAULT_STABLE_SYMBOL,
    EXTENSION_API_JSON,
    EXTENSION_API_SNAPSHOT,
    INDEX_SCHEMA_VERSION,
    SYMBOLS_JSONL,
    CacheFileSpec,
)


def __getattr__(name: str) -> object:
    if name == "SymbolIndexRecord":
        from database.models import SymbolIndexRecord

        return SymbolIndexRecord

    if name in {"ValidationMessage", "ValidationResult", "validate_cache"}:
        from cache.validation import (
            ValidationMessage,
            ValidationResult,
            validate_cache,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_cache": validate_cache,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "CACHE_DIR_NAME",
    "CACHE_FILE_SPECS",
    "DEFAULT_STABLE_SYMBOL",
    "EXTENSION_API_JSON",
    "EXTENSION_API_SNAPSHOT",
    "INDEX_SCHEMA_VERSION",
    "SYMBOLS_JSONL",
    "CacheFileSpec",
    "SymbolIndexRecord",
    "ValidationMessage",
    "ValidationResult",
    "validate_cache",
]
