"""JSON schema inference and storage-strategy classification for uploaded files."""

from filecat.config.settings import SchemaConfig
from filecat.ingest import (
    AnalysisResult,
    ParseError,
    SchemaNode,
    StorageType,
    analyze,
    analyze_value,
    classify,
    infer,
    infer_schema,
    project,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "ParseError",
    "SchemaConfig",
    "SchemaNode",
    "StorageType",
    "analyze",
    "analyze_value",
    "classify",
    "infer",
    "infer_schema",
    "project",
]
