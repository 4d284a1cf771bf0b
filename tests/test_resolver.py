from swagger_report.parser.base import Schema
from swagger_report.resolver import (
    definition_fields,
    expand_composite,
    named_fields,
    resolve_definition,
    resolve_name,
)


def _defs(data: dict) -> dict[str, Schema]:
    return {name: Schema.model_validate(schema) for name, schema in data.items()}


class TestResolveName:
    def test_last_segment(self):
        assert resolve_name("#/definitions/User") == "User"
        assert resolve_name("#/components/schemas/Pet") == "Pet"

    def test_bare_name(self):
        assert resolve_name("User") == "User"
        assert resolve_name("") == ""


class TestResolveDefinition:
    def test_found(self):
        defs = _defs({"User": {"properties": {"id": {"type": "integer"}}}})
        assert resolve_definition("#/definitions/User", defs) is defs["User"]

    def test_missing_is_none(self):
        assert resolve_definition("#/definitions/Ghost", {}) is None


class TestExpandComposite:
    def test_merges_reference_and_inline(self):
        defs = _defs({
            "A": {"allOf": [{"$ref": "#/definitions/B"}, {"properties": {"y": {"type": "string"}}}]},
            "B": {"required": ["x"], "properties": {"x": {"type": "integer"}}},
        })
        fields = expand_composite(defs["A"].all_of, defs)
        assert list(fields.fields) == ["x", "y"]
        assert fields.is_required("x")
        assert not fields.is_required("y")

    def test_nested_composites(self):
        defs = _defs({
            "C": {"allOf": [{"$ref": "#/definitions/B"}], "properties": {"z": {"type": "string"}}},
            "B": {"allOf": [{"$ref": "#/definitions/Base"}], "properties": {"x": {"type": "integer"}}},
            "Base": {"properties": {"id": {"type": "integer"}}},
        })
        assert list(named_fields("C", defs).fields) == ["id", "x", "z"]

    def test_cycle_terminates(self):
        defs = _defs({
            "A": {"allOf": [{"$ref": "#/definitions/B"}], "properties": {"y": {"type": "string"}}},
            "B": {"allOf": [{"$ref": "#/definitions/A"}], "properties": {"x": {"type": "integer"}}},
        })
        fields = named_fields("A", defs)
        assert sorted(fields.fields) == ["x", "y"]

    def test_self_inclusion(self):
        defs = _defs({"A": {"allOf": [{"$ref": "#/definitions/A"}], "properties": {"a": {"type": "string"}}}})
        assert list(named_fields("A", defs).fields) == ["a"]

    def test_visited_names_are_skipped(self):
        defs = _defs({"B": {"properties": {"x": {"type": "integer"}}}})
        items = [Schema(ref="#/definitions/B")]
        assert expand_composite(items, defs, {"B"}).fields == {}

    def test_unresolved_part_is_skipped(self):
        defs = _defs({"B": {"properties": {"x": {"type": "integer"}}}})
        items = [Schema(ref="#/definitions/Ghost"), Schema(ref="#/definitions/B")]
        assert list(expand_composite(items, defs).fields) == ["x"]

    def test_diamond_includes_base_once(self):
        defs = _defs({
            "Left": {"allOf": [{"$ref": "#/definitions/Base"}], "properties": {"l": {"type": "string"}}},
            "Right": {"allOf": [{"$ref": "#/definitions/Base"}], "properties": {"r": {"type": "string"}}},
            "Base": {"properties": {"id": {"type": "integer"}}},
        })
        items = [Schema(ref="#/definitions/Left"), Schema(ref="#/definitions/Right")]
        assert list(expand_composite(items, defs).fields) == ["id", "l", "r"]


class TestDefinitionFields:
    def test_own_properties_after_parts(self):
        defs = _defs({"Base": {"properties": {"id": {"type": "integer"}}}})
        definition = Schema.model_validate({
            "allOf": [{"$ref": "#/definitions/Base"}],
            "required": ["name"],
            "properties": {"name": {"type": "string"}},
        })
        fields = definition_fields(definition, defs)
        assert list(fields.fields) == ["id", "name"]
        assert fields.is_required("name")

    def test_named_fields_missing(self):
        assert named_fields("Ghost", {}).fields == {}
