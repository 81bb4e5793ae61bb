"""Structural schema nodes produced by the schema analyzer."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class SchemaKind(str, Enum):
    """Kinds a schema node can describe."""
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    INTEGER = "integer"  # reserved, never inferred
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SchemaNode:
    """
    Inferred shape of a JSON value (or of a family of values).

    Only array nodes carry ``items`` and item bounds; only object nodes
    carry ``properties`` and ``required``. A node cut off by the depth
    limit has its kind but none of these. Nodes are immutable once built.
    """
    kind: SchemaKind
    items: Optional["SchemaNode"] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    properties: Optional[Mapping[str, "SchemaNode"]] = None
    required: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if self.properties is not None and not isinstance(self.properties, MappingProxyType):
            object.__setattr__(
                self, "properties", MappingProxyType(dict(self.properties)))
        if self.required is not None and not isinstance(self.required, tuple):
            object.__setattr__(self, "required", tuple(self.required))

    @classmethod
    def leaf(cls, kind: SchemaKind) -> "SchemaNode":
        return cls(kind=kind)

    @classmethod
    def array_of(
        cls,
        items: "SchemaNode",
        max_items: Optional[int] = None,
    ) -> "SchemaNode":
        """Build an array node; bounds are omitted when max_items is None."""
        if max_items is None:
            return cls(kind=SchemaKind.ARRAY, items=items)
        return cls(kind=SchemaKind.ARRAY, items=items, min_items=0, max_items=max_items)

    @classmethod
    def object_of(
        cls,
        properties: Mapping[str, "SchemaNode"],
        required=(),
    ) -> "SchemaNode":
        return cls(kind=SchemaKind.OBJECT, properties=properties, required=tuple(required))

    @property
    def is_structural(self) -> bool:
        """True if the node describes nested shape, not just a kind."""
        return self.items is not None or self.properties is not None

    def _properties_key(self):
        if self.properties is None:
            return None
        return tuple(self.properties.items())

    def __eq__(self, other):
        if not isinstance(other, SchemaNode):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.items == other.items
            and self.min_items == other.min_items
            and self.max_items == other.max_items
            and self._properties_key() == other._properties_key()
            and self.required == other.required
        )

    def __hash__(self):
        return hash((self.kind, self.items, self.min_items, self.max_items,
                     self._properties_key(), self.required))

    def to_dict(self) -> Dict[str, Any]:
        """Render as a JSON-Schema-like dictionary."""
        result: Dict[str, Any] = {"type": self.kind.value}
        if self.items is not None:
            result["items"] = self.items.to_dict()
        if self.max_items is not None:
            result["minItems"] = self.min_items
            result["maxItems"] = self.max_items
        if self.properties is not None:
            result["properties"] = {
                key: child.to_dict() for key, child in self.properties.items()
            }
        if self.required is not None:
            result["required"] = list(self.required)
        return result
