"""
Unit tests for JSON schema inference.
"""

import pytest

from filecat.config.settings import SchemaConfig
from filecat.ingest.schema_analyzer import (
    SchemaInferencer,
    detect_kind,
    infer,
    merge_schemas,
)
from filecat.ingest.schema_node import SchemaKind, SchemaNode


class TestKindDetection:
    """Tests for schema kind detection."""

    def test_detect_null(self):
        assert detect_kind(None) == SchemaKind.NULL

    def test_detect_boolean_before_number(self):
        assert detect_kind(True) == SchemaKind.BOOLEAN
        assert detect_kind(False) == SchemaKind.BOOLEAN

    def test_detect_number(self):
        assert detect_kind(42) == SchemaKind.NUMBER
        assert detect_kind(-0.5) == SchemaKind.NUMBER

    def test_detect_string(self):
        assert detect_kind("") == SchemaKind.STRING

    def test_detect_containers(self):
        assert detect_kind([]) == SchemaKind.ARRAY
        assert detect_kind({}) == SchemaKind.OBJECT

    def test_detect_unknown(self):
        assert detect_kind(object()) == SchemaKind.UNKNOWN


class TestPrimitiveInference:
    """Primitives produce a bare kind."""

    def test_primitives(self):
        assert infer("x").to_dict() == {"type": "string"}
        assert infer(3.14).to_dict() == {"type": "number"}
        assert infer(False).to_dict() == {"type": "boolean"}
        assert infer(None).to_dict() == {"type": "null"}


class TestObjectInference:
    """Tests for object schemas."""

    def test_properties_in_key_order(self):
        schema = infer({"name": "Alice", "age": 30, "active": True})

        assert schema.kind == SchemaKind.OBJECT
        assert list(schema.properties) == ["name", "age", "active"]
        assert schema.properties["age"].kind == SchemaKind.NUMBER

    def test_required_lists_every_key(self):
        schema = infer({"b": 1, "a": None})

        assert schema.required == ("b", "a")

    def test_empty_object(self):
        assert infer({}).to_dict() == {"type": "object", "properties": {}, "required": []}

    def test_nested_to_dict(self):
        schema = infer({"user": {"tags": ["a", "b"]}})

        assert schema.to_dict() == {
            "type": "object",
            "properties": {
                "user": {
                    "type": "object",
                    "properties": {
                        "tags": {
                            "type": "array",
                            "items": {"type": "string"},
                            "minItems": 0,
                            "maxItems": 2,
                        }
                    },
                    "required": ["tags"],
                }
            },
            "required": ["user"],
        }

    def test_schema_is_immutable(self):
        schema = infer({"a": 1})

        with pytest.raises(TypeError):
            schema.properties["b"] = SchemaNode.leaf(SchemaKind.STRING)
        with pytest.raises(AttributeError):
            schema.kind = SchemaKind.ARRAY


class TestArrayInference:
    """Tests for array schemas and sampling."""

    def test_empty_array(self):
        assert infer([]).to_dict() == {"type": "array", "items": {"type": "unknown"}}

    def test_bounds(self):
        schema = infer([1, 2, 3, 4, 5, 6, 7])

        assert schema.min_items == 0
        assert schema.max_items == 7
        assert schema.items.kind == SchemaKind.NUMBER

    def test_first_wins_merge(self):
        data = [{"a": 1}] + [{"b": 2}] * 9
        schema = infer(data)

        assert schema.items == infer({"a": 1})
        assert "b" not in schema.items.properties
        assert schema.max_items == 10

    def test_first_wins_mixed_kinds(self):
        assert infer([1, "x", None]).items.kind == SchemaKind.NUMBER

    def test_only_first_five_elements_sampled(self):
        data = [{"a": 1}] * 5 + [{"z": 1}]
        config = SchemaConfig(merge_strategy="union")

        schema = infer(data, config=config)

        assert list(schema.items.properties) == ["a"]

    def test_custom_sample_size(self):
        data = [{"a": 1}, {"b": 2}, {"c": 3}]
        config = SchemaConfig(merge_strategy="union", sample_size=2)

        schema = infer(data, config=config)

        assert list(schema.items.properties) == ["a", "b"]


class TestUnionMerge:
    """Tests for the opt-in union merge."""

    def test_union_merges_key_sets(self):
        config = SchemaConfig(merge_strategy="union")
        schema = infer([{"a": 1, "b": "x"}, {"a": 2, "c": True}], config=config)

        assert list(schema.items.properties) == ["a", "b", "c"]
        assert schema.items.required == ("a",)

    def test_union_null_defers_to_other_kind(self):
        config = SchemaConfig(merge_strategy="union")

        assert infer([None, "x"], config=config).items.kind == SchemaKind.STRING
        assert infer([{"v": None}, {"v": 1}], config=config).items.properties["v"].kind == SchemaKind.NUMBER

    def test_union_conflicting_kinds(self):
        config = SchemaConfig(merge_strategy="union")

        assert infer([1, "x"], config=config).items.kind == SchemaKind.UNKNOWN

    def test_union_nested_arrays(self):
        config = SchemaConfig(merge_strategy="union")
        schema = infer([[1, 2], [], [3, 4, 5]], config=config)

        assert schema.items.kind == SchemaKind.ARRAY
        assert schema.items.max_items == 3
        assert schema.items.items.kind == SchemaKind.NUMBER

    def test_merge_schemas_rejects_unknown_strategy(self):
        with pytest.raises(ValueError):
            merge_schemas([SchemaNode.leaf(SchemaKind.STRING)], "majority")

    def test_merge_empty(self):
        assert merge_schemas([]).kind == SchemaKind.UNKNOWN
        assert merge_schemas([], "union").kind == SchemaKind.UNKNOWN


class TestDepthLimit:
    """Tests for the recursion depth bound."""

    def test_five_levels_collapse_below_depth_three(self):
        data = {"l1": {"l2": {"l3": {"l4": {"l5": 1}}}}}
        schema = infer(data)

        l2 = schema.properties["l1"].properties["l2"]
        l3 = l2.properties["l3"]

        assert l2.is_structural
        assert l3.kind == SchemaKind.OBJECT
        assert not l3.is_structural
        assert l3.to_dict() == {"type": "object"}

    def test_collapsed_array_has_no_items(self):
        schema = infer({"a": {"b": {"c": [1, 2]}}})

        c = schema.properties["a"].properties["b"].properties["c"]
        assert c.to_dict() == {"type": "array"}

    def test_max_depth_zero(self):
        assert infer({"a": 1}, max_depth=0).to_dict() == {"type": "object"}

    def test_inferencer_uses_config_depth(self):
        inferencer = SchemaInferencer(SchemaConfig(max_depth=1))
        schema = inferencer.infer({"a": {"b": 1}})

        assert schema.properties["a"].to_dict() == {"type": "object"}

    def test_deep_input_terminates(self):
        data = current = {}
        for _ in range(500):
            current["next"] = {}
            current = current["next"]

        schema = infer(data)

        assert schema.kind == SchemaKind.OBJECT
