"""
Unit tests for the storage strategy decision.
"""

from filecat.config.settings import SchemaConfig
from filecat.ingest.schema_analyzer import infer
from filecat.ingest.schema_decider import (
    SchemaDecider,
    StorageDecision,
    StorageType,
    classify,
    get_max_depth,
    has_consistent_structure,
)


def nested(levels, leaf=1):
    """Build {"l1": {"l2": ... leaf}} with the given number of levels."""
    value = leaf
    for i in range(levels, 0, -1):
        value = {f"l{i}": value}
    return value


class TestMaxDepth:
    """Tests for nesting depth measurement."""

    def test_scalar_depth(self):
        assert get_max_depth(1) == 0
        assert get_max_depth(None) == 0

    def test_empty_containers(self):
        assert get_max_depth({}) == 0
        assert get_max_depth([]) == 1
        assert get_max_depth([[]]) == 2

    def test_nested_objects(self):
        assert get_max_depth({"a": 1}) == 1
        assert get_max_depth(nested(4)) == 4

    def test_takes_maximum_branch(self):
        value = {"shallow": 1, "deep": {"x": {"y": 2}}, "list": [1]}
        assert get_max_depth(value) == 3

    def test_depth_cap(self):
        value = 1
        for _ in range(15):
            value = [value]

        assert get_max_depth(value) == 10
        assert get_max_depth(value, depth_cap=4) == 4


class TestArrayOfRecords:
    """Rule 1: arrays of records."""

    def test_flat_records_are_relational(self, people_records):
        assert classify(people_records) == StorageType.RELATIONAL

    def test_records_at_depth_two_are_relational(self):
        data = [{"id": 1, "address": {"city": "NYC"}}]
        assert classify(data) == StorageType.RELATIONAL

    def test_records_nested_four_levels_are_document(self):
        data = [nested(4) for _ in range(10)]
        assert classify(data) == StorageType.DOCUMENT

    def test_records_at_depth_three_are_document(self):
        assert classify([nested(3)]) == StorageType.DOCUMENT

    def test_only_first_record_depth_is_measured(self):
        data = [{"id": 1}, nested(6)]
        assert classify(data) == StorageType.RELATIONAL

    def test_inconsistent_elements_are_document(self):
        assert classify([{"id": 1}, {}]) == StorageType.DOCUMENT
        assert classify([{"id": 1}, None]) == StorageType.DOCUMENT
        assert classify([{"id": 1}, [1, 2]]) == StorageType.DOCUMENT
        assert classify([{"id": 1}, "row"]) == StorageType.DOCUMENT

    def test_every_element_checked_beyond_sample(self):
        data = [{"id": i} for i in range(50)] + [42]
        assert classify(data) == StorageType.DOCUMENT

    def test_has_consistent_structure(self):
        assert has_consistent_structure([{"a": 1}, {"b": 2}])
        assert not has_consistent_structure([{"a": 1}, {}])


class TestSingleObject:
    """Rule 2: single objects."""

    def test_twenty_keys_depth_two_is_relational(self):
        data = {f"field{i}": {"value": i} for i in range(20)}
        assert classify(data) == StorageType.RELATIONAL

    def test_twenty_one_keys_is_document(self):
        data = {f"field{i}": i for i in range(21)}
        assert classify(data) == StorageType.DOCUMENT

    def test_depth_three_is_relational(self):
        assert classify(nested(3)) == StorageType.RELATIONAL

    def test_depth_four_is_document(self):
        assert classify(nested(4)) == StorageType.DOCUMENT

    def test_empty_object_is_relational(self):
        assert classify({}) == StorageType.RELATIONAL


class TestFallback:
    """Rule 3: everything else is a document."""

    def test_scalars(self):
        assert classify(42) == StorageType.DOCUMENT
        assert classify("text") == StorageType.DOCUMENT
        assert classify(None) == StorageType.DOCUMENT

    def test_empty_array(self):
        assert classify([]) == StorageType.DOCUMENT

    def test_array_of_scalars(self):
        assert classify([1, 2, 3]) == StorageType.DOCUMENT

    def test_array_whose_first_element_is_array(self):
        assert classify([[{"id": 1}]]) == StorageType.DOCUMENT


class TestSchemaDecider:
    """Tests for SchemaDecider configuration and reporting."""

    def test_custom_key_limit(self):
        decider = SchemaDecider(SchemaConfig(max_top_level_keys=5))
        data = {f"k{i}": i for i in range(6)}

        decision = decider.decide(data)

        assert decision.storage_type == StorageType.DOCUMENT
        assert decision.top_level_keys == 6
        assert "Too many top-level keys" in decision.reason

    def test_custom_record_depth(self):
        decider = SchemaDecider(SchemaConfig(array_record_max_depth=3))

        assert decider.classify([nested(3)]) == StorageType.RELATIONAL

    def test_decision_metadata(self, people_records):
        decision = SchemaDecider().decide(people_records, infer(people_records))

        assert isinstance(decision, StorageDecision)
        assert decision.max_depth == 1
        assert decision.top_level_keys == 2
        assert decision.consistent_structure is True

    def test_to_dict(self):
        decision = SchemaDecider().decide({"a": 1})
        data = decision.to_dict()

        assert data["storage_type"] == "Relational"
        assert data["metadata"]["max_depth"] == 1

    def test_explain_decision(self):
        decider = SchemaDecider()
        decision = decider.decide(nested(5))

        report = decider.explain_decision(decision)

        assert "DOCUMENT" in report
        assert "Deep nesting detected" in report

    def test_schema_argument_does_not_change_result(self):
        data = [{"id": 1}]
        assert classify(data, infer(data)) == classify(data)
