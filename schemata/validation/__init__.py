"""Declarative Validation Engine

Schemas are composed once and reused; every call validates one value and
returns the validated (possibly transformed) output or a complete,
path-qualified list of issues.

Key Features:
- Fluent constraints on primitives, fail-fast
- Composite traversal (object, array, record) with path-prefixed aggregation
- Wrapper combinators (optional, nullable, default, refine, transform, pipe, catch, readonly)
- Async refinements resolved by parse_async()
- Explicit opt-in coercion
- JSON Schema generation from schema definitions

Usage:
    from schemata.validation import ObjectSchema, StringSchema, NumberSchema

    user = ObjectSchema({"name": StringSchema().min(1), "age": NumberSchema().int()})
    result = user.safe_parse(payload)
"""

from .kinds import (
    UNDEFINED,
    is_boolean,
    is_finite_number,
    is_integer,
    is_null,
    is_number,
    is_plain_object,
    is_sequence,
    is_string,
    is_undefined,
    kind_of,
)

from .schema import (
    DeferredRefinement,
    NodeKind,
    ParseContext,
    Schema,
    evaluate,
)

from .primitives import (
    AnySchema,
    BooleanSchema,
    CustomSchema,
    EnumSchema,
    InstanceOfSchema,
    LiteralSchema,
    NeverSchema,
    NullSchema,
    NumberSchema,
    StringSchema,
    UndefinedSchema,
    UnknownSchema,
)

from .composites import (
    ArraySchema,
    ConditionalSchema,
    DiscriminatedUnionSchema,
    IntersectionSchema,
    LazySchema,
    ObjectSchema,
    RecordSchema,
    UnionSchema,
    deep_partial,
)

from .coercion import (
    CoercionRule,
    ToBoolean,
    ToInteger,
    ToNumber,
    ToString,
)

from .formats import FORMATS, get_format

from .generators import (
    JSON_SCHEMA_DIALECT,
    JSONSchemaGenerator,
    SchemaGenerator,
    to_json_schema,
)

__all__ = [
    # Kinds
    "UNDEFINED",
    "is_boolean",
    "is_finite_number",
    "is_integer",
    "is_null",
    "is_number",
    "is_plain_object",
    "is_sequence",
    "is_string",
    "is_undefined",
    "kind_of",
    # Node contract
    "DeferredRefinement",
    "NodeKind",
    "ParseContext",
    "Schema",
    "evaluate",
    # Primitives
    "AnySchema",
    "BooleanSchema",
    "CustomSchema",
    "EnumSchema",
    "InstanceOfSchema",
    "LiteralSchema",
    "NeverSchema",
    "NullSchema",
    "NumberSchema",
    "StringSchema",
    "UndefinedSchema",
    "UnknownSchema",
    # Composites
    "ArraySchema",
    "ConditionalSchema",
    "DiscriminatedUnionSchema",
    "IntersectionSchema",
    "LazySchema",
    "ObjectSchema",
    "RecordSchema",
    "UnionSchema",
    "deep_partial",
    # Coercion
    "CoercionRule",
    "ToBoolean",
    "ToInteger",
    "ToNumber",
    "ToString",
    # Formats
    "FORMATS",
    "get_format",
    # Generators
    "JSON_SCHEMA_DIALECT",
    "JSONSchemaGenerator",
    "SchemaGenerator",
    "to_json_schema",
]
