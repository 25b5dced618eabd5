"""Schema Factory Namespace

`s` is the single entry point for building schemas:

    from schemata import s

    user = s.object({
        "email": s.string().email(),
        "age": s.coerce.integer().min(0).optional(),
    })
"""
from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from schemata.validation.coercion import ToBoolean, ToInteger, ToNumber, ToString
from schemata.validation.composites import (
    ArraySchema,
    ConditionalSchema,
    DiscriminatedUnionSchema,
    IntersectionSchema,
    LazySchema,
    ObjectSchema,
    RecordSchema,
    UnionSchema,
    UnknownKeys,
    deep_partial,
)
from schemata.validation.primitives import (
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
from schemata.validation.schema import Schema


class CoerceFactory:
    """Schemas that convert input with an explicit rule before the kind check."""

    @staticmethod
    def string() -> StringSchema: return StringSchema(coerce=ToString())

    @staticmethod
    def number() -> NumberSchema: return NumberSchema(coerce=ToNumber())

    @staticmethod
    def integer() -> NumberSchema: return NumberSchema(coerce=ToInteger()).int()

    @staticmethod
    def boolean() -> BooleanSchema: return BooleanSchema(coerce=ToBoolean())


class SchemaFactory:
    """Factories for every schema kind."""

    coerce = CoerceFactory()

    # Primitives

    @staticmethod
    def string() -> StringSchema: return StringSchema()

    @staticmethod
    def number() -> NumberSchema: return NumberSchema()

    @staticmethod
    def boolean() -> BooleanSchema: return BooleanSchema()

    @staticmethod
    def null() -> NullSchema: return NullSchema()

    @staticmethod
    def undefined() -> UndefinedSchema: return UndefinedSchema()

    @staticmethod
    def any() -> AnySchema: return AnySchema()

    @staticmethod
    def unknown() -> UnknownSchema: return UnknownSchema()

    @staticmethod
    def never() -> NeverSchema: return NeverSchema()

    @staticmethod
    def literal(value: Any) -> LiteralSchema: return LiteralSchema(value)

    @staticmethod
    def enum(values: Sequence[Any]) -> EnumSchema: return EnumSchema(values)

    @staticmethod
    def custom(predicate: Callable[[Any], bool], message: str = "Invalid input") -> CustomSchema:
        return CustomSchema(predicate, message)

    @staticmethod
    def instance_of(cls: type) -> InstanceOfSchema: return InstanceOfSchema(cls)

    # Composites

    @staticmethod
    def object(shape: Mapping[str, Schema], unknown_keys: UnknownKeys = "strip") -> ObjectSchema:
        return ObjectSchema(shape, unknown_keys)

    @staticmethod
    def array(element: Schema) -> ArraySchema: return ArraySchema(element)

    @staticmethod
    def record(key_or_value: Schema, value: Schema | None = None) -> RecordSchema:
        """record(value_schema) or record(key_schema, value_schema)."""
        if value is None:
            return RecordSchema(key_or_value)
        return RecordSchema(value, key_schema=key_or_value)

    @staticmethod
    def union(options: Sequence[Schema]) -> UnionSchema: return UnionSchema(options)

    @staticmethod
    def discriminated_union(discriminator: str, options: Sequence[ObjectSchema]) -> DiscriminatedUnionSchema:
        return DiscriminatedUnionSchema(discriminator, options)

    @staticmethod
    def intersection(left: Schema, right: Schema) -> IntersectionSchema: return IntersectionSchema(left, right)

    @staticmethod
    def lazy(getter: Callable[[], Schema]) -> LazySchema: return LazySchema(getter)

    @staticmethod
    def conditional(predicate: Callable[[Any], bool], then: Schema, otherwise: Schema) -> ConditionalSchema:
        return ConditionalSchema(predicate, then, otherwise)

    # Helpers mirroring the combinator methods

    @staticmethod
    def optional(schema: Schema) -> Schema: return schema.optional()

    @staticmethod
    def nullable(schema: Schema) -> Schema: return schema.nullable()

    @staticmethod
    def non_nullable(schema: Schema) -> Schema: return schema.non_nullable()

    @staticmethod
    def readonly(schema: Schema) -> Schema: return schema.readonly()

    @staticmethod
    def deep_partial(schema: Schema) -> Schema: return deep_partial(schema)

    @staticmethod
    def keyof(schema: ObjectSchema) -> EnumSchema: return schema.keyof()


s = SchemaFactory()
