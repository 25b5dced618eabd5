"""Primitive Validators

Leaf schemas for scalar kinds. Each one checks the runtime kind first, then
runs its accumulated constraints fail-fast: the first failing constraint is
the sole issue.

Usage:
    s.string().min(3).max(20).regex(r"^[a-z_]+$")
    s.number().int().positive()
    s.coerce.number().gte(0)
"""
from __future__ import annotations

import re
from typing import Any, Callable, Literal, Sequence

from schemata.errors import ValidationError, builders

from .checks import (
    Check,
    ExactLength,
    FiniteCheck,
    IntegerCheck,
    IPCheck,
    LowerBound,
    MaxLength,
    MinLength,
    MultipleOf,
    PatternCheck,
    SubstringCheck,
    UpperBound,
    replace_or_append,
    run_checks,
)
from .coercion import CoercionRule
from .formats import DATE, DATETIME, EMAIL, TIME, URL, UUID, get_format
from .kinds import UNDEFINED, is_boolean, is_number, is_string, kind_of
from .schema import ParseContext, Schema

_STRING_TRANSFORMS: dict[str, Callable[[str], str]] = {
    "trim": str.strip,
    "to_lower": str.lower,
    "to_upper": str.upper,
}


def values_match(expected: Any, value: Any) -> bool:
    """Literal equality: kinds must agree, so True never equals 1."""
    return kind_of(expected) == kind_of(value) and expected == value


class ConstrainedSchema(Schema):
    """Shared builder plumbing for schemas with fluent checks."""

    def __init__(self, *, coerce: CoercionRule | None = None):
        super().__init__()
        self._checks: list[Check] = []
        self._coerce = coerce

    def _add(self, check: Check):
        replace_or_append(self._checks, check)
        return self

    def _run(self, value: Any) -> None:
        if (found := run_checks(self._checks, value)) is not None:
            raise ValidationError([found])

    def _definition(self) -> dict[str, Any]:
        definition: dict[str, Any] = {"type": self.type_name, "checks": [check.describe() for check in self._checks]}
        if self._coerce is not None: definition["coerce"] = True
        return definition


# ============================================================================
# String
# ============================================================================

class StringSchema(ConstrainedSchema):
    type_name = "string"

    def __init__(self, *, coerce: CoercionRule | None = None):
        super().__init__(coerce=coerce)
        self._transforms: list[str] = []

    def _check(self, value: Any, ctx: ParseContext) -> str:
        if self._coerce is not None: value = self._coerce(value)
        if not is_string(value):
            raise ValidationError([builders.invalid_type("string", kind_of(value))])
        self._run(value)
        for name in self._transforms:
            value = _STRING_TRANSFORMS[name](value)
        return value

    def _definition(self) -> dict[str, Any]:
        definition = super()._definition()
        if self._transforms: definition["transforms"] = list(self._transforms)
        return definition

    # Length

    def min(self, limit: int, message: str | None = None) -> StringSchema:
        return self._add(MinLength(limit, message=message))

    def max(self, limit: int, message: str | None = None) -> StringSchema:
        return self._add(MaxLength(limit, message=message))

    def length(self, limit: int, message: str | None = None) -> StringSchema:
        return self._add(ExactLength(limit, message=message))

    def nonempty(self, message: str | None = None) -> StringSchema:
        return self._add(MinLength(1, message=message or "String must not be empty"))

    # Formats

    def regex(self, pattern: str | re.Pattern, message: str | None = None) -> StringSchema:
        return self._add(PatternCheck(re.compile(pattern), message=message))

    def email(self, message: str | None = None) -> StringSchema:
        return self._add(PatternCheck(EMAIL, "email", full_match=True, message=message))

    def url(self, message: str | None = None) -> StringSchema:
        return self._add(PatternCheck(URL, "url", full_match=True, message=message))

    def uuid(self, message: str | None = None) -> StringSchema:
        return self._add(PatternCheck(UUID, "uuid", full_match=True, message=message))

    def ip(self, version: Literal[4, 6] | None = None, message: str | None = None) -> StringSchema:
        if version not in (None, 4, 6):
            raise ValueError(f"IP version must be 4 or 6, got {version!r}")
        return self._add(IPCheck(version, message=message))

    def datetime(self, message: str | None = None) -> StringSchema:
        return self._add(PatternCheck(DATETIME, "datetime", full_match=True, message=message))

    def date(self, message: str | None = None) -> StringSchema:
        return self._add(PatternCheck(DATE, "date", full_match=True, message=message))

    def time(self, message: str | None = None) -> StringSchema:
        return self._add(PatternCheck(TIME, "time", full_match=True, message=message))

    def format(self, name: str, message: str | None = None) -> StringSchema:
        """Named format from the extended registry (cuid, ulid, jwt, slug, ...)."""
        return self._add(PatternCheck(get_format(name), name, full_match=True, message=message))

    # Substrings

    def starts_with(self, prefix: str, message: str | None = None) -> StringSchema:
        return self._add(SubstringCheck("starts_with", prefix, message))

    def ends_with(self, suffix: str, message: str | None = None) -> StringSchema:
        return self._add(SubstringCheck("ends_with", suffix, message))

    def includes(self, text: str, message: str | None = None) -> StringSchema:
        return self._add(SubstringCheck("includes", text, message))

    # Post-validation transforms, applied in order after every check passes

    def trim(self) -> StringSchema:
        self._transforms.append("trim")
        return self

    def to_lower(self) -> StringSchema:
        self._transforms.append("to_lower")
        return self

    def to_upper(self) -> StringSchema:
        self._transforms.append("to_upper")
        return self


# ============================================================================
# Number
# ============================================================================

class NumberSchema(ConstrainedSchema):
    """int or float input; bool and NaN are rejected by the kind check."""
    type_name = "number"

    def _check(self, value: Any, ctx: ParseContext) -> int | float:
        if self._coerce is not None: value = self._coerce(value)
        if not is_number(value):
            raise ValidationError([builders.invalid_type("number", kind_of(value))])
        self._run(value)
        return value

    def min(self, bound: int | float, message: str | None = None) -> NumberSchema:
        return self._add(LowerBound(bound, message=message))

    def gte(self, bound: int | float, message: str | None = None) -> NumberSchema:
        return self.min(bound, message)

    def gt(self, bound: int | float, message: str | None = None) -> NumberSchema:
        return self._add(LowerBound(bound, inclusive=False, message=message))

    def max(self, bound: int | float, message: str | None = None) -> NumberSchema:
        return self._add(UpperBound(bound, message=message))

    def lte(self, bound: int | float, message: str | None = None) -> NumberSchema:
        return self.max(bound, message)

    def lt(self, bound: int | float, message: str | None = None) -> NumberSchema:
        return self._add(UpperBound(bound, inclusive=False, message=message))

    def int(self, message: str | None = None) -> NumberSchema:
        return self._add(IntegerCheck(message))

    def finite(self, message: str | None = None) -> NumberSchema:
        return self._add(FiniteCheck(message))

    def positive(self, message: str | None = None) -> NumberSchema:
        return self.gt(0, message)

    def negative(self, message: str | None = None) -> NumberSchema:
        return self.lt(0, message)

    def nonnegative(self, message: str | None = None) -> NumberSchema:
        return self.min(0, message)

    def nonpositive(self, message: str | None = None) -> NumberSchema:
        return self.max(0, message)

    def multiple_of(self, factor: int | float, message: str | None = None) -> NumberSchema:
        if isinstance(factor, bool) or not is_number(factor) or factor <= 0:
            raise ValueError(f"multiple_of factor must be a positive number, got {factor!r}")
        return self._add(MultipleOf(factor, message))

    def step(self, factor: int | float, message: str | None = None) -> NumberSchema:
        return self.multiple_of(factor, message)


# ============================================================================
# Boolean
# ============================================================================

class BooleanSchema(Schema[bool]):
    type_name = "boolean"

    def __init__(self, *, coerce: CoercionRule | None = None):
        super().__init__()
        self._coerce = coerce

    def _check(self, value: Any, ctx: ParseContext) -> bool:
        if self._coerce is not None: value = self._coerce(value)
        if not is_boolean(value):
            raise ValidationError([builders.invalid_type("boolean", kind_of(value))])
        return value

    def _definition(self) -> dict[str, Any]:
        return {"type": "boolean", "coerce": True} if self._coerce is not None else {"type": "boolean"}

    def is_true(self, message: str | None = None) -> Schema[bool]:
        return self.refine(lambda value: value is True, message or "Expected true")

    def is_false(self, message: str | None = None) -> Schema[bool]:
        return self.refine(lambda value: value is False, message or "Expected false")


# ============================================================================
# Singleton Kinds
# ============================================================================

class NullSchema(Schema[None]):
    type_name = "null"

    def _check(self, value: Any, ctx: ParseContext) -> None:
        if value is not None:
            raise ValidationError([builders.invalid_type("null", kind_of(value))])
        return None


class UndefinedSchema(Schema):
    type_name = "undefined"

    def _check(self, value: Any, ctx: ParseContext) -> Any:
        if value is not UNDEFINED:
            raise ValidationError([builders.invalid_type("undefined", kind_of(value))])
        return UNDEFINED

    def _accepts_undefined(self) -> bool: return True


class AnySchema(Schema[Any]):
    """Accepts every value, absence included."""
    type_name = "any"

    def _check(self, value: Any, ctx: ParseContext) -> Any: return value

    def _accepts_undefined(self) -> bool: return True


class UnknownSchema(AnySchema):
    type_name = "unknown"


class NeverSchema(Schema):
    type_name = "never"

    def _check(self, value: Any, ctx: ParseContext) -> Any:
        raise ValidationError([builders.invalid_type("never", kind_of(value))])


# ============================================================================
# Value Matching
# ============================================================================

class LiteralSchema(Schema):
    type_name = "literal"

    def __init__(self, value: Any):
        super().__init__()
        self.value = value

    def _check(self, value: Any, ctx: ParseContext) -> Any:
        if not values_match(self.value, value):
            raise ValidationError([builders.invalid_literal(self.value, kind_of(value))])
        return value

    def _definition(self) -> dict[str, Any]: return {"type": "literal", "value": self.value}


class EnumSchema(Schema):
    """One of a fixed set of literal values."""
    type_name = "enum"

    def __init__(self, values: Sequence[Any]):
        super().__init__()
        if isinstance(values, str) or not values:
            raise ValueError("enum() requires a non-empty sequence of values")
        self._options = tuple(values)

    @property
    def options(self) -> list[Any]: return list(self._options)

    def _check(self, value: Any, ctx: ParseContext) -> Any:
        if not any(values_match(option, value) for option in self._options):
            raise ValidationError([builders.invalid_enum_value(self._options, kind_of(value))])
        return value

    def _definition(self) -> dict[str, Any]: return {"type": "enum", "values": list(self._options)}

    def extract(self, *values: Any) -> EnumSchema:
        return EnumSchema([option for option in self._options if option in values])

    def exclude(self, *values: Any) -> EnumSchema:
        return EnumSchema([option for option in self._options if option not in values])


class CustomSchema(Schema):
    """Leaf backed by a user predicate."""
    type_name = "custom"

    def __init__(self, predicate: Callable[[Any], bool], message: str = "Invalid input"):
        super().__init__()
        self._predicate = predicate
        self._message = message

    def _check(self, value: Any, ctx: ParseContext) -> Any:
        try:
            passed = self._predicate(value)
        except Exception as exc:
            raise ValidationError([builders.unknown_error(exc)]) from exc
        if not passed:
            raise ValidationError([builders.custom(self._message)])
        return value

    def _definition(self) -> dict[str, Any]: return {"type": "custom", "message": self._message}


class InstanceOfSchema(Schema):
    type_name = "instance_of"

    def __init__(self, cls: type):
        super().__init__()
        self._cls = cls

    def _check(self, value: Any, ctx: ParseContext) -> Any:
        if not isinstance(value, self._cls):
            name = self._cls.__name__
            raise ValidationError([builders.invalid_type(name, kind_of(value), f"Expected instance of {name}")])
        return value

    def _definition(self) -> dict[str, Any]: return {"type": "instance_of", "class": self._cls.__name__}
