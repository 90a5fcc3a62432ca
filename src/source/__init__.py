"""Sources of the Godot API description."""

from source.godot import GodotExecutionFailed, generate_api_json
from source.loader import (
    ApiFileNotFound,
    NoApiSource,
    load_database,
    load_database_from_file,
    store_api_source,
)

__all__ = [
    "ApiFileNotFound",
    "GodotExecutionFailed",
    "NoApiSource",
    "generate_api_json",
    "load_database",
    "load_database_from_file",
    "store_api_source",
]
