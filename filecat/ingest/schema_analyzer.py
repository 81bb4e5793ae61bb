"""
JSON Schema Analyzer.

Infers a structural schema from a parsed JSON value: the kind of every
node, the properties of objects and a representative item shape for
arrays. Recursion is bounded by a maximum depth and arrays are sampled,
so inference always terminates and stays cheap on large uploads.
"""

from typing import Any, Dict, List, Optional

from filecat.config.settings import (
    DEFAULT_SCHEMA_CONFIG,
    MERGE_FIRST,
    MERGE_UNION,
    SchemaConfig,
)
from filecat.ingest.schema_node import SchemaKind, SchemaNode


def detect_kind(value: Any) -> SchemaKind:
    """
    Detect the schema kind of a parsed JSON value.

    Args:
        value: The value to check

    Returns:
        SchemaKind enum value
    """
    if value is None:
        return SchemaKind.NULL
    elif isinstance(value, bool):
        return SchemaKind.BOOLEAN
    elif isinstance(value, (int, float)):
        return SchemaKind.NUMBER
    elif isinstance(value, str):
        return SchemaKind.STRING
    elif isinstance(value, (list, tuple)):
        return SchemaKind.ARRAY
    elif isinstance(value, dict):
        return SchemaKind.OBJECT
    else:
        return SchemaKind.UNKNOWN


def merge_first(schemas: List[SchemaNode]) -> SchemaNode:
    """
    First-wins merge: the first sampled schema represents the array.

    Shapes of the remaining samples are discarded.
    """
    if not schemas:
        return SchemaNode.leaf(SchemaKind.UNKNOWN)
    return schemas[0]


def _merge_pair(left: SchemaNode, right: SchemaNode) -> SchemaNode:
    if left.kind == SchemaKind.NULL:
        return right
    if right.kind == SchemaKind.NULL:
        return left
    if left.kind != right.kind:
        return SchemaNode.leaf(SchemaKind.UNKNOWN)

    if left.kind == SchemaKind.OBJECT:
        if left.properties is None or right.properties is None:
            return SchemaNode.leaf(SchemaKind.OBJECT)

        properties: Dict[str, SchemaNode] = dict(left.properties)
        for key, child in right.properties.items():
            if key in properties:
                properties[key] = _merge_pair(properties[key], child)
            else:
                properties[key] = child

        right_required = set(right.required or ())
        required = [key for key in (left.required or ()) if key in right_required]
        return SchemaNode.object_of(properties, required)

    if left.kind == SchemaKind.ARRAY:
        if left.items is None or right.items is None:
            return SchemaNode.leaf(SchemaKind.ARRAY)
        # An empty array says nothing about item shape
        if left.max_items is None:
            return right
        if right.max_items is None:
            return left
        return SchemaNode.array_of(
            _merge_pair(left.items, right.items),
            max_items=max(left.max_items, right.max_items),
        )

    return left


def merge_union(schemas: List[SchemaNode]) -> SchemaNode:
    """
    Union merge across all sampled schemas.

    Objects merge their property sets (first-seen order) and keep as
    required only the keys every sample had. Arrays merge their item
    shapes. Nulls defer to the other side; any other kind conflict
    yields UNKNOWN.
    """
    if not schemas:
        return SchemaNode.leaf(SchemaKind.UNKNOWN)

    merged = schemas[0]
    for schema in schemas[1:]:
        merged = _merge_pair(merged, schema)
    return merged


MERGE_STRATEGIES = {
    MERGE_FIRST: merge_first,
    MERGE_UNION: merge_union,
}


def merge_schemas(schemas: List[SchemaNode], strategy: str = MERGE_FIRST) -> SchemaNode:
    """Merge sampled item schemas into one representative schema."""
    try:
        merge = MERGE_STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f"Unknown merge strategy: {strategy!r}") from None
    return merge(schemas)


class SchemaInferencer:
    """
    Recursive schema inference over parsed JSON values.

    Below ``config.max_depth`` a node keeps only its kind. Arrays are
    described by merging the schemas of their first
    ``config.sample_size`` elements.
    """

    def __init__(self, config: Optional[SchemaConfig] = None):
        self.config = config or DEFAULT_SCHEMA_CONFIG

    def infer(self, value: Any, max_depth: Optional[int] = None) -> SchemaNode:
        """
        Infer the schema of a value.

        Args:
            value: Parsed JSON value
            max_depth: Override for ``config.max_depth``

        Returns:
            Root SchemaNode
        """
        if max_depth is None:
            max_depth = self.config.max_depth
        return self._infer(value, max_depth, 0)

    def _infer(self, value: Any, max_depth: int, current_depth: int) -> SchemaNode:
        kind = detect_kind(value)

        if current_depth >= max_depth:
            return SchemaNode.leaf(kind)

        if kind == SchemaKind.ARRAY:
            if not value:
                return SchemaNode.array_of(SchemaNode.leaf(SchemaKind.UNKNOWN))

            item_schemas = [
                self._infer(item, max_depth, current_depth + 1)
                for item in value[:self.config.sample_size]
            ]
            items = merge_schemas(item_schemas, self.config.merge_strategy)
            return SchemaNode.array_of(items, max_items=len(value))

        if kind == SchemaKind.OBJECT:
            properties = {
                key: self._infer(child, max_depth, current_depth + 1)
                for key, child in value.items()
            }
            # Every key of this instance; no cross-instance check
            return SchemaNode.object_of(properties, required=list(value.keys()))

        return SchemaNode.leaf(kind)


def infer(
    value: Any,
    max_depth: Optional[int] = None,
    config: Optional[SchemaConfig] = None,
) -> SchemaNode:
    """
    Infer the structural schema of a parsed JSON value.

    Args:
        value: Parsed JSON value
        max_depth: Maximum recursion depth (defaults to config, 3)
        config: Optional SchemaConfig with sampling and merge settings

    Returns:
        Root SchemaNode
    """
    return SchemaInferencer(config).infer(value, max_depth)
