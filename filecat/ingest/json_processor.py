"""
JSON analysis pipeline.

Runs uploaded JSON text through parsing, schema inference, storage
classification and (for relational data) table projection. Each stage
produces a new value; nothing is stored between calls.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from filecat.common.logging_config import PerformanceTracker
from filecat.config.settings import DEFAULT_SCHEMA_CONFIG, SchemaConfig
from filecat.ingest.ddl_generator import Column, DDLGenerator, RelationalProjection, project
from filecat.ingest.parser import ParseError, parse_json
from filecat.ingest.schema_analyzer import SchemaInferencer
from filecat.ingest.schema_decider import SchemaDecider, StorageDecision, StorageType
from filecat.ingest.schema_node import SchemaNode

logger = logging.getLogger(__name__)

JsonText = Union[str, bytes, bytearray]


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of analyzing one JSON document."""
    schema: SchemaNode
    storage_type: StorageType
    reason: str
    table_name: Optional[str] = None
    columns: Optional[List[Column]] = None
    decision: Optional[StorageDecision] = None

    @property
    def is_relational(self) -> bool:
        return self.storage_type == StorageType.RELATIONAL

    @property
    def projection(self) -> Optional[RelationalProjection]:
        if not self.is_relational:
            return None
        return RelationalProjection(table_name=self.table_name, columns=list(self.columns or []))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "schema": self.schema.to_dict(),
            "storageType": self.storage_type.value,
        }
        if self.is_relational:
            result["tableName"] = self.table_name
            result["columns"] = [column.to_dict() for column in self.columns or []]
        return result


class JsonAnalyzer:
    """
    Analyzes JSON documents and recommends a storage strategy.

    Stateless apart from its configuration, so one instance can be
    shared across requests.
    """

    def __init__(self, config: Optional[SchemaConfig] = None):
        self.config = config or DEFAULT_SCHEMA_CONFIG
        self.inferencer = SchemaInferencer(self.config)
        self.decider = SchemaDecider(self.config)
        self.ddl_generator = DDLGenerator()

    def infer_schema(self, text: JsonText) -> SchemaNode:
        """
        Parse JSON text and infer its schema.

        Raises:
            ParseError: If the text is not valid JSON
        """
        return self.inferencer.infer(parse_json(text))

    def analyze(self, text: JsonText) -> AnalysisResult:
        """
        Parse JSON text and run the full analysis.

        Raises:
            ParseError: If the text is not valid JSON
        """
        try:
            value = parse_json(text)
        except ParseError as e:
            logger.warning(
                "JSON parse failed",
                extra={"extra_fields": {"error": e.message, "line": e.line}},
            )
            raise

        with PerformanceTracker(
            "analyze_json", logger, log_level=logging.DEBUG, size_bytes=len(text)
        ) as tracker:
            result = self.analyze_value(value)

        logger.info(
            "JSON analyzed",
            extra={"extra_fields": {
                "storage_type": result.storage_type.value,
                "table_name": result.table_name,
                "columns": len(result.columns or []),
                "duration_ms": tracker.duration_ms,
            }},
        )
        return result

    def analyze_value(self, value: Any) -> AnalysisResult:
        """Run the analysis on an already-parsed value."""
        schema = self.inferencer.infer(value)
        decision = self.decider.decide(value, schema)

        if decision.storage_type != StorageType.RELATIONAL:
            return AnalysisResult(
                schema=schema,
                storage_type=decision.storage_type,
                reason=decision.reason,
                decision=decision,
            )

        projection = project(value, schema)
        return AnalysisResult(
            schema=schema,
            storage_type=decision.storage_type,
            reason=decision.reason,
            decision=decision,
            table_name=projection.table_name,
            columns=projection.columns,
        )

    def generate_ddl(self, result: AnalysisResult, collection_name: Optional[str] = None) -> str:
        """
        Render the CREATE TABLE statement matching an analysis result.

        Document results get a JSONB collection table named
        ``collection_name`` (default ``documents``).
        """
        if result.is_relational:
            return self.ddl_generator.generate_table_ddl(result.projection, table_name=collection_name)
        return self.ddl_generator.generate_jsonb_collection_ddl(collection_name or "documents")

    def explain(self, result: AnalysisResult) -> str:
        """Readable report of the storage decision behind a result."""
        if result.decision is None:
            return result.reason
        return self.decider.explain_decision(result.decision)


def infer_schema(text: JsonText, config: Optional[SchemaConfig] = None) -> SchemaNode:
    """Parse JSON text and infer its schema; raises ParseError on bad input."""
    return JsonAnalyzer(config).infer_schema(text)


def analyze(text: JsonText, config: Optional[SchemaConfig] = None) -> AnalysisResult:
    """Parse JSON text and analyze it; raises ParseError on bad input."""
    return JsonAnalyzer(config).analyze(text)


def analyze_value(value: Any, config: Optional[SchemaConfig] = None) -> AnalysisResult:
    return JsonAnalyzer(config).analyze_value(value)
