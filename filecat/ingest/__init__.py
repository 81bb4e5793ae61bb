"""
Ingest module for JSON analysis.

Provides parsing, schema inference, the relational/document storage
decision and table projection for uploaded JSON documents.
"""

from filecat.ingest.parser import ParseError, parse_json
from filecat.ingest.schema_node import SchemaKind, SchemaNode
from filecat.ingest.schema_analyzer import (
    SchemaInferencer,
    detect_kind,
    infer,
    merge_schemas,
)
from filecat.ingest.schema_decider import (
    SchemaDecider,
    StorageDecision,
    StorageType,
    classify,
    get_max_depth,
)
from filecat.ingest.ddl_generator import (
    Column,
    DDLGenerator,
    RelationalProjection,
    generate_columns,
    infer_table_name,
    project,
)
from filecat.ingest.json_processor import (
    AnalysisResult,
    JsonAnalyzer,
    analyze,
    analyze_value,
    infer_schema,
)

__all__ = [  # ruff: noqa: RUF022
    # Parsing
    "ParseError",
    "parse_json",
    # Schema Inference
    "SchemaKind",
    "SchemaNode",
    "SchemaInferencer",
    "detect_kind",
    "infer",
    "merge_schemas",
    # Storage Decision
    "SchemaDecider",
    "StorageDecision",
    "StorageType",
    "classify",
    "get_max_depth",
    # Projection / DDL
    "Column",
    "DDLGenerator",
    "RelationalProjection",
    "generate_columns",
    "infer_table_name",
    "project",
    # Pipeline
    "AnalysisResult",
    "JsonAnalyzer",
    "analyze",
    "analyze_value",
    "infer_schema",
]
