"""Schema Generators

Generate JSON Schema (draft 2020-12) from schema definitions. Generation
reads only `get_schema()` output, never the validation nodes, so anything
that can produce a definition tree can be exported.

Runtime-only behavior has no JSON Schema counterpart and is dropped:
refinements, transforms, custom predicates and lazy recursion export as
their input shape (or `{}`).
"""
from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Any

from .formats import FORMATS
from .schema import Schema

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"

# Named formats JSON Schema understands natively
_NATIVE_FORMATS: dict[str, str] = {
    "email": "email",
    "url": "uri",
    "uuid": "uuid",
    "datetime": "date-time",
    "date": "date",
    "time": "time",
    "ipv4": "ipv4",
    "ipv6": "ipv6",
}

_OPTIONAL_TYPES = frozenset({"optional", "default", "catch", "undefined", "any", "unknown"})
_PASS_THROUGH_TYPES = frozenset({"refinement", "async_refinement", "transform", "non_nullable"})


class SchemaGenerator(ABC):
    """Base class for schema generators."""

    @abstractmethod
    def generate(self, schema: Schema) -> str:
        """Generate schema representation."""

    def generate_all(self, *schemas: Schema, separator: str = "\n\n") -> str:
        return separator.join(self.generate(s) for s in schemas)


class JSONSchemaGenerator(SchemaGenerator):
    """Generate JSON Schema (draft 2020-12)."""

    def __init__(self, indent: int | None = 2): self.indent = indent

    def generate(self, schema: Schema) -> str:
        return json.dumps(self.convert(schema.get_schema(), root=True), indent=self.indent, default=str)

    def convert(self, definition: dict[str, Any], root: bool = False) -> dict[str, Any]:
        """Translate one definition node (recursively)."""
        kind = definition["type"]
        if kind in _PASS_THROUGH_TYPES: kind = "inner"
        handler = getattr(self, f"_convert_{kind}", None)
        result = handler(definition) if handler is not None else {}
        if "description" in definition:
            result = {**result, "description": definition["description"]}
        if root:
            result = {"$schema": JSON_SCHEMA_DIALECT, **result}
        return result

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def _convert_string(self, definition: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "string"}
        patterns: list[str] = []
        for check in definition.get("checks", ()):
            match check["check"]:
                case "min_length": result["minLength"] = check["value"]
                case "max_length": result["maxLength"] = check["value"]
                case "length": result["minLength"] = result["maxLength"] = check["value"]
                case "regex": patterns.append(check["pattern"])
                case "starts_with": patterns.append(f"^{re.escape(check['value'])}")
                case "ends_with": patterns.append(f"{re.escape(check['value'])}$")
                case "includes": patterns.append(re.escape(check["value"]))
                case "format":
                    name = check["format"]
                    if name in _NATIVE_FORMATS: result["format"] = _NATIVE_FORMATS[name]
                    elif name == "ip": result["anyOf"] = [{"format": "ipv4"}, {"format": "ipv6"}]
                    elif name in FORMATS: patterns.append(f"^(?:{FORMATS[name].pattern})$")
        if patterns:
            result["pattern"] = patterns[0]
            if len(patterns) > 1: result["allOf"] = [{"pattern": p} for p in patterns[1:]]
        return result

    def _convert_number(self, definition: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "number"}
        for check in definition.get("checks", ()):
            match check["check"]:
                case "int": result["type"] = "integer"
                case "min": result["minimum" if check["inclusive"] else "exclusiveMinimum"] = check["value"]
                case "max": result["maximum" if check["inclusive"] else "exclusiveMaximum"] = check["value"]
                case "multiple_of": result["multipleOf"] = check["value"]
        return result

    def _convert_boolean(self, definition: dict[str, Any]) -> dict[str, Any]: return {"type": "boolean"}

    def _convert_null(self, definition: dict[str, Any]) -> dict[str, Any]: return {"type": "null"}

    def _convert_never(self, definition: dict[str, Any]) -> dict[str, Any]: return {"not": {}}

    def _convert_undefined(self, definition: dict[str, Any]) -> dict[str, Any]: return {"not": {}}

    def _convert_literal(self, definition: dict[str, Any]) -> dict[str, Any]: return {"const": definition["value"]}

    def _convert_enum(self, definition: dict[str, Any]) -> dict[str, Any]: return {"enum": list(definition["values"])}

    # ------------------------------------------------------------------
    # Composites
    # ------------------------------------------------------------------

    def _convert_object(self, definition: dict[str, Any]) -> dict[str, Any]:
        shape = definition["shape"]
        result: dict[str, Any] = {
            "type": "object",
            "properties": {key: self.convert(child) for key, child in shape.items()},
        }
        if required := [key for key, child in shape.items() if not _accepts_absence(child)]:
            result["required"] = required
        if definition.get("unknown_keys") == "strict":
            result["additionalProperties"] = False
        return result

    def _convert_array(self, definition: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "array", "items": self.convert(definition["element"])}
        for check in definition.get("checks", ()):
            match check["check"]:
                case "min_length": result["minItems"] = check["value"]
                case "max_length": result["maxItems"] = check["value"]
                case "length": result["minItems"] = result["maxItems"] = check["value"]
        return result

    def _convert_record(self, definition: dict[str, Any]) -> dict[str, Any]:
        result = {"type": "object", "additionalProperties": self.convert(definition["values"])}
        if "keys" in definition:
            result["propertyNames"] = self.convert(definition["keys"])
        return result

    def _convert_union(self, definition: dict[str, Any]) -> dict[str, Any]:
        return {"anyOf": [self.convert(option) for option in definition["options"]]}

    def _convert_discriminated_union(self, definition: dict[str, Any]) -> dict[str, Any]:
        return {"oneOf": [self.convert(option) for option in definition["options"]]}

    def _convert_intersection(self, definition: dict[str, Any]) -> dict[str, Any]:
        return {"allOf": [self.convert(part) for part in definition["schemas"]]}

    def _convert_conditional(self, definition: dict[str, Any]) -> dict[str, Any]:
        return {"anyOf": [self.convert(definition["then"]), self.convert(definition["otherwise"])]}

    # ------------------------------------------------------------------
    # Wrappers
    # ------------------------------------------------------------------

    def _convert_optional(self, definition: dict[str, Any]) -> dict[str, Any]:
        return self.convert(definition["inner"])

    def _convert_nullable(self, definition: dict[str, Any]) -> dict[str, Any]:
        return {"anyOf": [self.convert(definition["inner"]), {"type": "null"}]}

    def _convert_default(self, definition: dict[str, Any]) -> dict[str, Any]:
        result = self.convert(definition["inner"])
        if "default" in definition: result["default"] = definition["default"]
        return result

    def _convert_readonly(self, definition: dict[str, Any]) -> dict[str, Any]:
        return {**self.convert(definition["inner"]), "readOnly": True}

    def _convert_catch(self, definition: dict[str, Any]) -> dict[str, Any]:
        return self.convert(definition["inner"])

    def _convert_pipe(self, definition: dict[str, Any]) -> dict[str, Any]:
        # Input side of the pipeline
        return self.convert(definition["schemas"][0])

    def _convert_inner(self, definition: dict[str, Any]) -> dict[str, Any]:
        return self.convert(definition["inner"])


def _accepts_absence(definition: dict[str, Any]) -> bool:
    kind = definition["type"]
    if kind in _OPTIONAL_TYPES: return True
    if kind in _PASS_THROUGH_TYPES or kind in ("nullable", "readonly"): return _accepts_absence(definition["inner"])
    if kind == "pipe": return _accepts_absence(definition["schemas"][0])
    if kind == "union": return any(_accepts_absence(option) for option in definition["options"])
    return False


def to_json_schema(schema: Schema) -> dict[str, Any]:
    """JSON Schema dict for `schema`, with the draft 2020-12 `$schema` key."""
    return JSONSchemaGenerator().convert(schema.get_schema(), root=True)
