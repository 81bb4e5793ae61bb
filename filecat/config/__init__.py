"""Application settings and analysis configuration."""

from filecat.config.settings import (
    DEFAULT_SCHEMA_CONFIG,
    MERGE_FIRST,
    MERGE_UNION,
    SchemaConfig,
    Settings,
    get_settings,
)

__all__ = [
    "DEFAULT_SCHEMA_CONFIG",
    "MERGE_FIRST",
    "MERGE_UNION",
    "SchemaConfig",
    "Settings",
    "get_settings",
]
