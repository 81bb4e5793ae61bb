"""
Relational projection and DDL generation.

Turns an inferred object schema into a candidate table (name plus
columns with SQL types, nullability and primary-key guesses), and
renders CREATE TABLE statements for either storage strategy.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from filecat.ingest.schema_node import SchemaKind, SchemaNode

DEFAULT_TABLE_NAME = "data_records"

# Fields checked, in order, for a string to name the table after
NAME_FIELDS = ("name", "title", "id", "key")

PRIMARY_KEY_NAMES = frozenset({"id", "_id"})

# Generated columns; data columns with these names get a suffix
SURROGATE_KEY = "row_id"
AUDIT_COLUMNS = ("created_at", "updated_at")

SQL_TYPES = {
    SchemaKind.STRING: "TEXT",
    SchemaKind.NUMBER: "NUMERIC",
    SchemaKind.INTEGER: "INTEGER",
    SchemaKind.BOOLEAN: "BOOLEAN",
    SchemaKind.ARRAY: "JSONB",  # Store arrays as JSONB
    SchemaKind.OBJECT: "JSONB",  # Store nested objects as JSONB
}

RESERVED_WORDS = frozenset({
    "user", "group", "order", "table", "index", "key", "value", "default",
    "select", "from", "where", "limit",
})

_NON_LETTER = re.compile(r"[^a-zA-Z]")


@dataclass(frozen=True)
class Column:
    """A candidate SQL column derived from one schema property."""
    name: str
    sql_type: str
    nullable: bool
    is_primary_key: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.sql_type,
            "nullable": self.nullable,
            "isPrimaryKey": self.is_primary_key,
        }


@dataclass(frozen=True)
class RelationalProjection:
    """Candidate table for relational storage."""
    table_name: str
    columns: List[Column] = field(default_factory=list)

    @property
    def primary_keys(self) -> List[str]:
        return [column.name for column in self.columns if column.is_primary_key]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tableName": self.table_name,
            "columns": [column.to_dict() for column in self.columns],
        }


def pluralize(word: str) -> str:
    """Simple English pluralization."""
    if word.endswith("y"):
        return word[:-1] + "ies"
    elif word.endswith(("s", "sh", "ch", "x", "z")):
        return word + "es"
    else:
        return word + "s"


def infer_table_name(value: Any) -> str:
    """
    Infer a table name from the first record of an array.

    The first of name/title/id/key holding a string is lowercased, has
    every non-letter replaced with an underscore and is pluralized.
    Anything else gets the default name.
    """
    if isinstance(value, list) and value and isinstance(value[0], dict):
        first = value[0]
        for field_name in NAME_FIELDS:
            candidate = first.get(field_name)
            if isinstance(candidate, str):
                return pluralize(_NON_LETTER.sub("_", candidate.lower()))

    return DEFAULT_TABLE_NAME


def map_kind_to_sql(kind: SchemaKind) -> str:
    """Map a schema kind to its SQL column type (TEXT for anything unmapped)."""
    return SQL_TYPES.get(kind, "TEXT")


def generate_columns(schema: SchemaNode) -> List[Column]:
    """
    Derive columns from an object schema, in property order.

    Non-object schemas yield no columns.
    """
    if schema.kind != SchemaKind.OBJECT or not schema.properties:
        return []

    required = set(schema.required) if schema.required is not None else set()
    return [
        Column(
            name=key,
            sql_type=map_kind_to_sql(prop.kind),
            nullable=key not in required,
            is_primary_key=key in PRIMARY_KEY_NAMES,
        )
        for key, prop in schema.properties.items()
    ]


def project(value: Any, schema: SchemaNode) -> RelationalProjection:
    """
    Build the relational projection of a value classified as Relational.

    For arrays the columns come from the item schema, otherwise from the
    schema itself.
    """
    if schema.kind == SchemaKind.ARRAY:
        column_source = schema.items or SchemaNode.leaf(SchemaKind.UNKNOWN)
    else:
        column_source = schema

    return RelationalProjection(
        table_name=infer_table_name(value),
        columns=generate_columns(column_source),
    )


class DDLGenerator:
    """
    Generates SQL DDL (Data Definition Language) statements.

    Renders relational projections as CREATE TABLE statements, and
    document-store collections as a single JSONB column table.
    """

    def __init__(self, include_audit_columns: bool = True):
        """
        Initialize DDL generator.

        Args:
            include_audit_columns: Add created_at/updated_at columns
        """
        self.include_audit_columns = include_audit_columns

    def _sanitize_identifier(self, name: str) -> str:
        """
        Sanitize a table or column name for SQL.

        Args:
            name: Original name

        Returns:
            SQL-safe identifier
        """
        name = name.lower()

        # Replace any non-alphanumeric with underscore
        name = "".join(c if c.isascii() and (c.isalnum() or c == "_") else "_" for c in name)

        if not name:
            name = "col"

        # Ensure it doesn't start with a number
        if name[0].isdigit():
            name = f"col_{name}"

        if name in RESERVED_WORDS:
            name = f"{name}_col"

        return name

    def _reserved_names(self, projection: RelationalProjection) -> List[str]:
        """Names of the generated columns that data columns must not reuse."""
        reserved = []
        if not projection.primary_keys:
            reserved.append(SURROGATE_KEY)
        if self.include_audit_columns:
            reserved.extend(AUDIT_COLUMNS)
        return reserved

    def _column_names(self, projection: RelationalProjection) -> List[str]:
        """Sanitized column names, suffixed where they would collide."""
        names: List[str] = []
        taken = set(self._reserved_names(projection))
        for column in projection.columns:
            base = self._sanitize_identifier(column.name)
            col_name = base
            suffix = 0
            while col_name in taken:
                suffix += 1
                col_name = f"{base}_{suffix}"
            taken.add(col_name)
            names.append(col_name)
        return names

    def _audit_columns(self) -> List[str]:
        if not self.include_audit_columns:
            return []
        return [
            f"    {name} TIMESTAMP WITHOUT TIME ZONE DEFAULT NOW()" for name in AUDIT_COLUMNS
        ]

    def generate_table_ddl(
        self,
        projection: RelationalProjection,
        table_name: Optional[str] = None,
    ) -> str:
        """
        Generate a CREATE TABLE statement for a relational projection.

        Args:
            projection: Table name and columns to render
            table_name: Optional override for the projected table name

        Returns:
            CREATE TABLE statement followed by GIN indexes for JSONB columns
        """
        table = self._sanitize_identifier(table_name or projection.table_name)
        columns: List[str] = []
        indexes: List[str] = []
        primary_keys: List[str] = []

        col_names = self._column_names(projection)
        for column, col_name in zip(projection.columns, col_names):
            nullable_clause = " NOT NULL" if not column.nullable or column.is_primary_key else ""
            columns.append(f"    {col_name} {column.sql_type}{nullable_clause}")

            if column.is_primary_key:
                primary_keys.append(col_name)
            if column.sql_type == "JSONB":
                indexes.append(
                    f"CREATE INDEX IF NOT EXISTS idx_{table}_{col_name}_gin ON {table} USING GIN ({col_name});")

        # Surrogate key when nothing looks like an id
        if not primary_keys:
            columns.insert(0, f"    {SURROGATE_KEY} BIGSERIAL")
            primary_keys.append(SURROGATE_KEY)

        columns.extend(self._audit_columns())
        columns.append(f"    PRIMARY KEY ({', '.join(primary_keys)})")

        lines = [f"CREATE TABLE IF NOT EXISTS {table} (", ",\n".join(columns), ");"]

        if indexes:
            lines.append("")
            lines.append(f"-- Indexes for {table}")
            lines.extend(indexes)

        return "\n".join(lines)

    def generate_jsonb_collection_ddl(self, collection_name: str) -> str:
        """
        Generate DDL for a JSONB document collection table.

        Args:
            collection_name: Name for the collection table

        Returns:
            CREATE TABLE statement with a GIN index on the document column
        """
        table = self._sanitize_identifier(collection_name)
        columns = [
            "    id UUID PRIMARY KEY DEFAULT gen_random_uuid()",
            "    doc JSONB NOT NULL",
        ]
        columns.extend(self._audit_columns())

        lines = [
            f"CREATE TABLE IF NOT EXISTS {table} (",
            ",\n".join(columns),
            ");",
            "",
            "-- GIN index for JSONB queries",
            f"CREATE INDEX IF NOT EXISTS idx_{table}_doc ON {table} USING GIN (doc);",
        ]
        return "\n".join(lines)
