"""Storage strategy decision: relational rows vs document blobs."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from filecat.config.settings import DEFAULT_SCHEMA_CONFIG, SchemaConfig
from filecat.ingest.schema_node import SchemaNode


class StorageType(str, Enum):
    RELATIONAL = "Relational"
    DOCUMENT = "Document"


@dataclass
class StorageDecision:
    """Result of the storage strategy decision."""
    storage_type: StorageType
    reason: str  # Human-readable explanation

    # Measurements the decision was based on
    max_depth: int
    top_level_keys: int
    consistent_structure: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "storage_type": self.storage_type.value,
            "reason": self.reason,
            "metadata": {
                "max_depth": self.max_depth,
                "top_level_keys": self.top_level_keys,
                "consistent_structure": self.consistent_structure,
            },
        }


def get_max_depth(value: Any, current_depth: int = 0, depth_cap: int = 10) -> int:
    """
    Measure the nesting depth of a value.

    Scalars sit at the current depth, each list or dict level adds one,
    and an empty list counts as one level. Recursion stops once
    ``depth_cap`` is reached.
    """
    if current_depth >= depth_cap:
        return current_depth

    if isinstance(value, list):
        if not value:
            return current_depth + 1
        return max(get_max_depth(item, current_depth + 1, depth_cap) for item in value)

    if isinstance(value, dict):
        max_depth = current_depth
        for child in value.values():
            max_depth = max(max_depth, get_max_depth(child, current_depth + 1, depth_cap))
        return max_depth

    return current_depth


def is_record(value: Any) -> bool:
    """A record is a non-empty JSON object."""
    return isinstance(value, dict) and len(value) > 0


def has_consistent_structure(values: list) -> bool:
    """True if every element (not just a sample) is a non-empty object."""
    return all(is_record(item) for item in values)


class SchemaDecider:
    """
    Decides whether parsed JSON is better stored as table rows or as a document.

    Shallow, uniformly shaped collections of records resemble SQL
    tables; deep or irregular structures are stored opaquely.
    """

    def __init__(self, config: Optional[SchemaConfig] = None):
        self.config = config or DEFAULT_SCHEMA_CONFIG

    def _depth(self, value: Any) -> int:
        return get_max_depth(value, depth_cap=self.config.depth_cap)

    def decide(self, value: Any, schema: Optional[SchemaNode] = None) -> StorageDecision:
        """
        Decide the storage strategy for a parsed value.

        The decision inspects the raw value, since homogeneity checks need
        every element rather than the sampled schema.

        Args:
            value: Parsed JSON value
            schema: Inferred schema of ``value`` (accepted for callers
                that already have it; the rules read the raw value)

        Returns:
            StorageDecision
        """
        cfg = self.config

        # Rule 1: array of records
        if isinstance(value, list) and value and isinstance(value[0], dict):
            consistent = has_consistent_structure(value)
            first_keys = len(value[0])
            if consistent:
                depth = self._depth(value[0])
                if depth <= cfg.array_record_max_depth:
                    return StorageDecision(
                        storage_type=StorageType.RELATIONAL,
                        reason=(
                            f"✓ Array of {len(value)} records with consistent structure; "
                            f"✓ Shallow records (depth {depth} ≤ {cfg.array_record_max_depth})"
                        ),
                        max_depth=depth,
                        top_level_keys=first_keys,
                        consistent_structure=True,
                    )
                array_reason = (
                    f"✗ Records nested too deeply (depth {depth} > {cfg.array_record_max_depth})")
            else:
                depth = self._depth(value)
                array_reason = "✗ Array elements are not all non-empty objects"

            return StorageDecision(
                storage_type=StorageType.DOCUMENT,
                reason=array_reason,
                max_depth=depth,
                top_level_keys=first_keys,
                consistent_structure=consistent,
            )

        # Rule 2: single object
        if isinstance(value, dict):
            depth = self._depth(value)
            num_keys = len(value)
            reasons = []
            if depth <= cfg.object_max_depth:
                reasons.append(f"✓ Shallow nesting depth ({depth} ≤ {cfg.object_max_depth})")
            else:
                reasons.append(f"✗ Deep nesting detected ({depth} > {cfg.object_max_depth})")
            if num_keys <= cfg.max_top_level_keys:
                reasons.append(
                    f"✓ Manageable number of top-level keys ({num_keys} ≤ {cfg.max_top_level_keys})")
            else:
                reasons.append(
                    f"✗ Too many top-level keys ({num_keys} > {cfg.max_top_level_keys})")

            relational = depth <= cfg.object_max_depth and num_keys <= cfg.max_top_level_keys
            return StorageDecision(
                storage_type=StorageType.RELATIONAL if relational else StorageType.DOCUMENT,
                reason="; ".join(reasons),
                max_depth=depth,
                top_level_keys=num_keys,
                consistent_structure=True,
            )

        # Rule 3: everything else (scalars, empty arrays, arrays of non-objects)
        return StorageDecision(
            storage_type=StorageType.DOCUMENT,
            reason="✗ Not an object or an array of objects",
            max_depth=self._depth(value),
            top_level_keys=0,
            consistent_structure=False,
        )

    def classify(self, value: Any, schema: Optional[SchemaNode] = None) -> StorageType:
        """Return only the storage type of :meth:`decide`."""
        return self.decide(value, schema).storage_type

    def explain_decision(self, decision: StorageDecision) -> str:
        """Generate a readable report of the decision."""
        lines = [
            "=" * 60,
            "STORAGE DECISION",
            "=" * 60,
            f"Storage Type: {decision.storage_type.value.upper()}",
            "",
            "Measurements:",
            f"  • Maximum Depth: {decision.max_depth}",
            f"  • Top-Level Keys: {decision.top_level_keys}",
            f"  • Consistent Structure: {decision.consistent_structure}",
            "",
            "Decision Rationale:",
            decision.reason,
            "=" * 60,
        ]
        return "\n".join(lines)


def classify(
    value: Any,
    schema: Optional[SchemaNode] = None,
    config: Optional[SchemaConfig] = None,
) -> StorageType:
    """Classify a parsed value as Relational or Document storage."""
    return SchemaDecider(config).classify(value, schema)
