"""Composite Validators

Schemas that delegate to children. Composites never fail fast: every field,
element or entry is validated, and each child's issues are re-emitted with
the composite's key or index prepended to their paths.

Usage:
    user = s.object({
        "name": s.string().min(1),
        "tags": s.array(s.string()).max(10),
        "role": s.enum(["admin", "member"]).default("member"),
    }).strict()
"""
from __future__ import annotations

from dataclasses import replace
from functools import cached_property
from typing import Any, Callable, Literal, Mapping, Sequence

from schemata.errors import ValidationError, ValidationIssue, builders

from .checks import ExactLength, MaxLength, MinLength
from .kinds import UNDEFINED, is_plain_object, is_sequence, kind_of
from .primitives import ConstrainedSchema, EnumSchema, LiteralSchema, values_match
from .schema import NodeKind, ParseContext, Schema

UnknownKeys = Literal["strip", "strict", "passthrough"]


# ============================================================================
# Object
# ============================================================================

class ObjectSchema(Schema[dict]):
    """Mapping input validated against a shape.

    Unknown keys: "strip" (default) drops them, "strict" reports one
    unrecognized_key issue per key, "passthrough" copies them unchanged.
    """
    type_name = "object"

    def __init__(self, shape: Mapping[str, Schema], unknown_keys: UnknownKeys = "strip"):
        super().__init__()
        if unknown_keys not in ("strip", "strict", "passthrough"):
            raise ValueError(f"Unknown key policy must be strip, strict or passthrough, got {unknown_keys!r}")
        self._shape = dict(shape)
        self._unknown_keys = unknown_keys

    @property
    def shape(self) -> dict[str, Schema]: return dict(self._shape)

    @property
    def unknown_keys(self) -> UnknownKeys: return self._unknown_keys

    def _check(self, value: Any, ctx: ParseContext) -> dict:
        if not is_plain_object(value):
            raise ValidationError([builders.invalid_type("object", kind_of(value))])

        output: dict[str, Any] = {}
        issues: list[ValidationIssue] = []
        for key, child in self._shape.items():
            field_value = value.get(key, UNDEFINED)
            if field_value is UNDEFINED and not child._accepts_undefined():
                issues.append(builders.required(key))
                continue
            try:
                result = ctx.evaluate_at(key, child, field_value)
            except ValidationError as exc:
                issues.extend(exc.prefixed(key).issues)
                continue
            if result is not UNDEFINED:
                output[key] = result

        extra = [key for key in value if key not in self._shape]
        if self._unknown_keys == "strict":
            issues.extend(builders.unrecognized_key(key) for key in extra)
        elif self._unknown_keys == "passthrough":
            output.update((key, value[key]) for key in extra)

        if issues:
            raise ValidationError(issues)
        return output

    def _definition(self) -> dict[str, Any]:
        return {
            "type": "object",
            "shape": {key: child.get_schema() for key, child in self._shape.items()},
            "unknown_keys": self._unknown_keys,
        }

    # ------------------------------------------------------------------
    # Derived schemas (always new nodes)
    # ------------------------------------------------------------------

    def _derive(self, shape: Mapping[str, Schema], unknown_keys: UnknownKeys | None = None) -> ObjectSchema:
        return ObjectSchema(shape, unknown_keys or self._unknown_keys)

    def pick(self, *keys: str) -> ObjectSchema:
        return self._derive({key: child for key, child in self._shape.items() if key in keys})

    def omit(self, *keys: str) -> ObjectSchema:
        return self._derive({key: child for key, child in self._shape.items() if key not in keys})

    def partial(self, *keys: str) -> ObjectSchema:
        """Make `keys` (all fields when none given) optional."""
        return self._derive({
            key: child.optional() if not keys or key in keys else child
            for key, child in self._shape.items()
        })

    def required(self, *keys: str) -> ObjectSchema:
        """Strip optional wrappers from `keys` (all fields when none given)."""
        return self._derive({
            key: _unwrap_optional(child) if not keys or key in keys else child
            for key, child in self._shape.items()
        })

    def deep_partial(self) -> ObjectSchema:
        return self._derive({key: deep_partial(child).optional() for key, child in self._shape.items()})

    def extend(self, shape: Mapping[str, Schema]) -> ObjectSchema:
        return self._derive({**self._shape, **shape})

    def merge(self, other: ObjectSchema) -> ObjectSchema:
        """Combine shapes; `other` wins on shared keys and sets the key policy."""
        return ObjectSchema({**self._shape, **other._shape}, other._unknown_keys)

    def keyof(self) -> EnumSchema:
        return EnumSchema(list(self._shape))

    def strict(self) -> ObjectSchema: return self._derive(self._shape, "strict")

    def passthrough(self) -> ObjectSchema: return self._derive(self._shape, "passthrough")

    def strip(self) -> ObjectSchema: return self._derive(self._shape, "strip")


def _unwrap_optional(schema: Schema) -> Schema:
    while schema.kind is NodeKind.OPTIONAL:
        schema = schema._inner
    return schema


def deep_partial(schema: Schema) -> Schema:
    """Recursively make every object field optional, through arrays and wrappers."""
    if isinstance(schema, ObjectSchema):
        return schema.deep_partial()
    if isinstance(schema, ArraySchema):
        derived = ArraySchema(deep_partial(schema.element))
        derived._checks = list(schema._checks)
        return derived
    if schema.kind in (NodeKind.OPTIONAL, NodeKind.NULLABLE, NodeKind.DESCRIBE):
        return Schema(schema.kind, deep_partial(schema._inner), **schema._params)
    return schema


# ============================================================================
# Array
# ============================================================================

class ArraySchema(ConstrainedSchema):
    """list or tuple input; output is always a new list.

    Length constraints run once before the elements, fail-fast.
    """
    type_name = "array"

    def __init__(self, element: Schema):
        super().__init__()
        self._element = element

    @property
    def element(self) -> Schema: return self._element

    def _check(self, value: Any, ctx: ParseContext) -> list:
        if not is_sequence(value):
            raise ValidationError([builders.invalid_type("array", kind_of(value))])
        self._run(value)

        output: list[Any] = []
        issues: list[ValidationIssue] = []
        for index, item in enumerate(value):
            try:
                output.append(ctx.evaluate_at(index, self._element, item))
            except ValidationError as exc:
                issues.extend(exc.prefixed(index).issues)
        if issues:
            raise ValidationError(issues)
        return output

    def _definition(self) -> dict[str, Any]:
        return {**super()._definition(), "element": self._element.get_schema()}

    def min(self, limit: int, message: str | None = None) -> ArraySchema:
        return self._add(MinLength(limit, "Array", "element(s)", message))

    def max(self, limit: int, message: str | None = None) -> ArraySchema:
        return self._add(MaxLength(limit, "Array", "element(s)", message))

    def length(self, limit: int, message: str | None = None) -> ArraySchema:
        return self._add(ExactLength(limit, "Array", "element(s)", message))

    def nonempty(self, message: str | None = None) -> ArraySchema:
        return self.min(1, message)


# ============================================================================
# Record
# ============================================================================

class RecordSchema(Schema[dict]):
    """Mapping whose every value (and optionally key) matches one schema."""
    type_name = "record"

    def __init__(self, value_schema: Schema, key_schema: Schema | None = None):
        super().__init__()
        self._value_schema = value_schema
        self._key_schema = key_schema

    @property
    def value_schema(self) -> Schema: return self._value_schema

    @property
    def key_schema(self) -> Schema | None: return self._key_schema

    def _check(self, value: Any, ctx: ParseContext) -> dict:
        if not is_plain_object(value):
            raise ValidationError([builders.invalid_type("object", kind_of(value))])

        output: dict[Any, Any] = {}
        issues: list[ValidationIssue] = []
        for key, item in value.items():
            try:
                new_key = ctx.evaluate_at(key, self._key_schema, key) if self._key_schema is not None else key
                result = ctx.evaluate_at(key, self._value_schema, item)
                if result is not UNDEFINED:
                    output[new_key] = result
            except ValidationError as exc:
                issues.extend(exc.prefixed(key).issues)
        if issues:
            raise ValidationError(issues)
        return output

    def _definition(self) -> dict[str, Any]:
        definition = {"type": "record", "values": self._value_schema.get_schema()}
        if self._key_schema is not None: definition["keys"] = self._key_schema.get_schema()
        return definition


# ============================================================================
# Unions and Intersections
# ============================================================================

class UnionSchema(Schema):
    """Options tried in order; the first success wins.

    When every option fails the result is one invalid_union issue whose
    `union_issues` param holds each option's issues in order.
    """
    type_name = "union"

    def __init__(self, options: Sequence[Schema]):
        super().__init__()
        if not options:
            raise ValueError("union() requires at least one option")
        self._options = tuple(options)

    @property
    def options(self) -> list[Schema]: return list(self._options)

    def _check(self, value: Any, ctx: ParseContext) -> Any:
        failures: list[list[ValidationIssue]] = []
        for option in self._options:
            checkpoint = ctx.checkpoint()
            try:
                return ctx.evaluate(option, value)
            except ValidationError as exc:
                ctx.rollback(checkpoint)
                failures.append(exc.issues)
        raise ValidationError([builders.invalid_union(failures)])

    def _accepts_undefined(self) -> bool:
        return any(option._accepts_undefined() for option in self._options)

    def _definition(self) -> dict[str, Any]:
        return {"type": "union", "options": [option.get_schema() for option in self._options]}

    def __or__(self, other: Schema) -> UnionSchema:
        return UnionSchema([*self._options, other])


class DiscriminatedUnionSchema(Schema[dict]):
    """Object options dispatched on the literal value of one key."""
    type_name = "discriminated_union"

    def __init__(self, discriminator: str, options: Sequence[ObjectSchema]):
        super().__init__()
        self._discriminator = discriminator
        self._options = tuple(options)
        self._dispatch: list[tuple[Any, ObjectSchema]] = []
        for option in self._options:
            for tag in _discriminator_values(option, discriminator):
                if any(values_match(known, tag) for known, _ in self._dispatch):
                    raise ValueError(f"Duplicate discriminator value {tag!r} for key '{discriminator}'")
                self._dispatch.append((tag, option))

    @property
    def discriminator(self) -> str: return self._discriminator

    @property
    def options(self) -> list[ObjectSchema]: return list(self._options)

    def _check(self, value: Any, ctx: ParseContext) -> dict:
        if not is_plain_object(value):
            raise ValidationError([builders.invalid_type("object", kind_of(value))])
        tag = value.get(self._discriminator, UNDEFINED)
        for known, option in self._dispatch:
            if values_match(known, tag):
                return ctx.evaluate(option, value)
        raise ValidationError([builders.invalid_union_discriminator(
            self._discriminator, [known for known, _ in self._dispatch])])

    def _definition(self) -> dict[str, Any]:
        return {
            "type": "discriminated_union",
            "discriminator": self._discriminator,
            "options": [option.get_schema() for option in self._options],
        }


def _discriminator_values(option: Schema, key: str) -> list[Any]:
    if not isinstance(option, ObjectSchema):
        raise TypeError(f"discriminated_union() options must be object schemas, got {option!r}")
    field = option.shape.get(key)
    if isinstance(field, LiteralSchema): return [field.value]
    if isinstance(field, EnumSchema): return field.options
    raise TypeError(f"Option {option!r} needs a literal or enum field '{key}' to discriminate on")


class IntersectionSchema(Schema):
    """Value must satisfy both schemas; mapping outputs are merged."""
    type_name = "intersection"

    def __init__(self, left: Schema, right: Schema):
        super().__init__()
        self.left = left
        self.right = right

    def _check(self, value: Any, ctx: ParseContext) -> Any:
        outputs: list[Any] = []
        issues: list[ValidationIssue] = []
        for side in (self.left, self.right):
            try:
                outputs.append(ctx.evaluate(side, value))
            except ValidationError as exc:
                issues.extend(exc.issues)
        if issues:
            raise ValidationError(issues)

        left, right = outputs
        if is_plain_object(left) and is_plain_object(right): return {**left, **right}
        if values_match(left, right): return left
        raise ValidationError([builders.invalid_intersection()])

    def _definition(self) -> dict[str, Any]:
        return {"type": "intersection", "schemas": [self.left.get_schema(), self.right.get_schema()]}


# ============================================================================
# Deferred and Conditional
# ============================================================================

class LazySchema(Schema):
    """Resolves its schema on first use, for recursive structures."""
    type_name = "lazy"

    def __init__(self, getter: Callable[[], Schema]):
        super().__init__()
        self._getter = getter

    @cached_property
    def schema(self) -> Schema: return self._getter()

    def _check(self, value: Any, ctx: ParseContext) -> Any:
        return ctx.evaluate(self.schema, value)

    def _accepts_undefined(self) -> bool: return self.schema._accepts_undefined()


class ConditionalSchema(Schema):
    """Validate with `then` when predicate(value) holds, else with `otherwise`."""
    type_name = "conditional"

    def __init__(self, predicate: Callable[[Any], bool], then: Schema, otherwise: Schema):
        super().__init__()
        self._predicate = predicate
        self.then = then
        self.otherwise = otherwise

    def _check(self, value: Any, ctx: ParseContext) -> Any:
        try:
            branch = self.then if self._predicate(value) else self.otherwise
        except Exception as exc:
            raise ValidationError([builders.unknown_error(exc)]) from exc
        try:
            return ctx.evaluate(branch, value)
        except ValidationError as exc:
            raise ValidationError(
                replace(found, message=f"Conditional validation failed: {found.message}") for found in exc.issues
            ) from None

    def _definition(self) -> dict[str, Any]:
        return {"type": "conditional", "then": self.then.get_schema(), "otherwise": self.otherwise.get_schema()}
