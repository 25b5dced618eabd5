"""Tests for JSON Schema generation."""

from __future__ import annotations

import json

from schemata import s, to_json_schema
from schemata.validation import JSON_SCHEMA_DIALECT, JSONSchemaGenerator


class TestJSONSchema:
    """Tests for to_json_schema()."""

    def test_dialect(self) -> None:
        assert to_json_schema(s.string())["$schema"] == JSON_SCHEMA_DIALECT

    def test_string_constraints(self) -> None:
        result = to_json_schema(s.string().min(1).max(5).email())
        assert result["type"] == "string"
        assert (result["minLength"], result["maxLength"]) == (1, 5)
        assert result["format"] == "email"

    def test_regex_and_substrings(self) -> None:
        result = to_json_schema(s.string().regex(r"^\d+$").starts_with("1"))
        assert result["pattern"] == r"^\d+$"
        assert result["allOf"] == [{"pattern": "^1"}]

    def test_number_bounds(self) -> None:
        result = to_json_schema(s.number().int().gt(0).lte(10).multiple_of(2))
        assert result["type"] == "integer"
        assert result["exclusiveMinimum"] == 0
        assert result["maximum"] == 10
        assert result["multipleOf"] == 2

    def test_object(self) -> None:
        schema = s.object({
            "name": s.string().describe("Display name"),
            "age": s.number().optional(),
            "role": s.enum(["admin", "member"]).default("member"),
        }).strict()
        result = to_json_schema(schema)
        assert result["type"] == "object"
        assert result["required"] == ["name"]
        assert result["additionalProperties"] is False
        assert result["properties"]["name"]["description"] == "Display name"
        assert result["properties"]["role"] == {"enum": ["admin", "member"], "default": "member"}

    def test_array(self) -> None:
        result = to_json_schema(s.array(s.boolean()).min(1))
        assert result["items"] == {"type": "boolean"}
        assert result["minItems"] == 1

    def test_record(self) -> None:
        result = to_json_schema(s.record(s.number()))
        assert result == {"$schema": JSON_SCHEMA_DIALECT, "type": "object", "additionalProperties": {"type": "number"}}

    def test_nullable_and_union(self) -> None:
        assert to_json_schema(s.string().nullable())["anyOf"] == [{"type": "string"}, {"type": "null"}]
        assert to_json_schema(s.literal("a") | s.literal(1))["anyOf"] == [{"const": "a"}, {"const": 1}]

    def test_refine_and_transform_export_input_shape(self) -> None:
        result = to_json_schema(s.string().refine(bool).transform(len))
        assert result["type"] == "string"

    def test_lazy_is_unconstrained(self) -> None:
        node = s.object({"next": s.lazy(lambda: node).optional()})
        assert to_json_schema(node)["properties"]["next"] == {}

    def test_generator_renders_json(self) -> None:
        rendered = JSONSchemaGenerator(indent=None).generate(s.number())
        assert json.loads(rendered)["type"] == "number"

    def test_readonly_marks_read_only(self) -> None:
        result = to_json_schema(s.object({"tags": s.array(s.string()).readonly().optional()}))
        assert result["properties"]["tags"] == {"type": "array", "items": {"type": "string"}, "readOnly": True}
        assert "required" not in result
