"""Constraint Checks

Immutable constraint objects accumulated by the fluent builders of string,
number and array schemas. A check inspects a value that already passed the
kind check and returns the single issue it produces, or None.

Features:
- Frozen dataclass checks for immutability
- One replacement key per constraint kind (re-declaring min() replaces it)
- Exclusive/inclusive bounds tracked explicitly, no epsilon nudging
- describe() feeds get_schema() introspection
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Literal

from schemata.errors import ValidationIssue
from schemata.errors import builders

from .formats import IPV4, IPV6
from .kinds import is_finite_number, is_integer, kind_of


class Check(ABC):
    """Base class for constraint checks."""

    @property
    @abstractmethod
    def key(self) -> str:
        """Replacement key: a later check with the same key replaces this one."""

    @abstractmethod
    def validate(self, value: Any) -> ValidationIssue | None:
        """Return the issue for `value`, or None when the constraint holds."""

    @abstractmethod
    def describe(self) -> dict[str, Any]:
        """Serializable description for schema definitions."""


# ============================================================================
# Length Checks (strings and sequences)
# ============================================================================

@dataclass(frozen=True, slots=True)
class MinLength(Check):
    """Minimum length for strings (characters) or arrays (items)."""
    limit: int
    subject: str = "String"
    unit: str = "character(s)"
    message: str | None = None

    @property
    def key(self) -> str: return "min"

    def validate(self, value: Any) -> ValidationIssue | None:
        if len(value) >= self.limit: return None
        return builders.too_small(self.message or f"{self.subject} must contain at least {self.limit} {self.unit}",
            minimum=self.limit)

    def describe(self) -> dict[str, Any]: return {"check": "min_length", "value": self.limit}


@dataclass(frozen=True, slots=True)
class MaxLength(Check):
    """Maximum length for strings (characters) or arrays (items)."""
    limit: int
    subject: str = "String"
    unit: str = "character(s)"
    message: str | None = None

    @property
    def key(self) -> str: return "max"

    def validate(self, value: Any) -> ValidationIssue | None:
        if len(value) <= self.limit: return None
        return builders.too_big(self.message or f"{self.subject} must contain at most {self.limit} {self.unit}",
            maximum=self.limit)

    def describe(self) -> dict[str, Any]: return {"check": "max_length", "value": self.limit}


@dataclass(frozen=True, slots=True)
class ExactLength(Check):
    """Exact length for strings or arrays."""
    limit: int
    subject: str = "String"
    unit: str = "character(s)"
    message: str | None = None

    @property
    def key(self) -> str: return "length"

    def validate(self, value: Any) -> ValidationIssue | None:
        length = len(value)
        if length == self.limit: return None
        message = self.message or f"{self.subject} must contain exactly {self.limit} {self.unit}"
        if length < self.limit: return builders.too_small(message, minimum=self.limit)
        return builders.too_big(message, maximum=self.limit)

    def describe(self) -> dict[str, Any]: return {"check": "length", "value": self.limit}


# ============================================================================
# String Checks
# ============================================================================

@dataclass(frozen=True, slots=True)
class PatternCheck(Check):
    """Match a string against a pattern.

    Named formats (email, uuid, ...) must match the whole string; a
    user-supplied regex only needs to match somewhere, like re.search.
    """
    pattern: re.Pattern
    validation: str = "regex"
    full_match: bool = False
    message: str | None = None

    @property
    def key(self) -> str: return f"format:{self.validation}"

    def validate(self, value: Any) -> ValidationIssue | None:
        matcher = self.pattern.fullmatch if self.full_match else self.pattern.search
        if matcher(value): return None
        default = "String does not match required pattern" if self.validation == "regex" else f"Invalid {self.validation}"
        return builders.invalid_string(self.message or default, validation=self.validation)

    def describe(self) -> dict[str, Any]:
        if self.validation == "regex": return {"check": "regex", "pattern": self.pattern.pattern}
        return {"check": "format", "format": self.validation}


@dataclass(frozen=True, slots=True)
class IPCheck(Check):
    """IPv4, IPv6, or either when version is None."""
    version: Literal[4, 6] | None = None
    message: str | None = None

    @property
    def key(self) -> str: return "format:ip"

    def validate(self, value: Any) -> ValidationIssue | None:
        patterns = {4: (IPV4,), 6: (IPV6,)}.get(self.version, (IPV4, IPV6))
        if any(p.fullmatch(value) for p in patterns): return None
        label = f"ipv{self.version}" if self.version else "ip"
        return builders.invalid_string(self.message or f"Invalid {label}", validation=label)

    def describe(self) -> dict[str, Any]:
        return {"check": "format", "format": f"ipv{self.version}" if self.version else "ip"}


@dataclass(frozen=True, slots=True)
class SubstringCheck(Check):
    """starts_with / ends_with / includes."""
    mode: Literal["starts_with", "ends_with", "includes"]
    text: str
    message: str | None = None

    @property
    def key(self) -> str: return self.mode

    def validate(self, value: Any) -> ValidationIssue | None:
        match self.mode:
            case "starts_with": ok, phrase = value.startswith(self.text), "start with"
            case "ends_with": ok, phrase = value.endswith(self.text), "end with"
            case _: ok, phrase = self.text in value, "include"
        if ok: return None
        return builders.invalid_string(self.message or f'String must {phrase} "{self.text}"', validation=self.mode)

    def describe(self) -> dict[str, Any]: return {"check": self.mode, "value": self.text}


# ============================================================================
# Numeric Checks
# ============================================================================

@dataclass(frozen=True, slots=True)
class LowerBound(Check):
    """value >= bound (inclusive) or value > bound (exclusive)."""
    bound: int | float
    inclusive: bool = True
    message: str | None = None

    @property
    def key(self) -> str: return "min"

    def validate(self, value: Any) -> ValidationIssue | None:
        if value > self.bound or (self.inclusive and value == self.bound): return None
        phrase = "greater than or equal to" if self.inclusive else "greater than"
        return builders.too_small(self.message or f"Number must be {phrase} {self.bound}",
            minimum=self.bound, inclusive=self.inclusive)

    def describe(self) -> dict[str, Any]: return {"check": "min", "value": self.bound, "inclusive": self.inclusive}


@dataclass(frozen=True, slots=True)
class UpperBound(Check):
    """value <= bound (inclusive) or value < bound (exclusive)."""
    bound: int | float
    inclusive: bool = True
    message: str | None = None

    @property
    def key(self) -> str: return "max"

    def validate(self, value: Any) -> ValidationIssue | None:
        if value < self.bound or (self.inclusive and value == self.bound): return None
        phrase = "less than or equal to" if self.inclusive else "less than"
        return builders.too_big(self.message or f"Number must be {phrase} {self.bound}",
            maximum=self.bound, inclusive=self.inclusive)

    def describe(self) -> dict[str, Any]: return {"check": "max", "value": self.bound, "inclusive": self.inclusive}


@dataclass(frozen=True, slots=True)
class IntegerCheck(Check):
    message: str | None = None

    @property
    def key(self) -> str: return "int"

    def validate(self, value: Any) -> ValidationIssue | None:
        if is_integer(value): return None
        received = "float" if is_finite_number(value) else kind_of(value)
        return builders.invalid_type("integer", received, self.message or "Expected integer, received float")

    def describe(self) -> dict[str, Any]: return {"check": "int"}


@dataclass(frozen=True, slots=True)
class FiniteCheck(Check):
    message: str | None = None

    @property
    def key(self) -> str: return "finite"

    def validate(self, value: Any) -> ValidationIssue | None:
        if is_finite_number(value): return None
        return builders.invalid_type("finite number", "infinity", self.message or "Expected finite number")

    def describe(self) -> dict[str, Any]: return {"check": "finite"}


@dataclass(frozen=True, slots=True)
class MultipleOf(Check):
    factor: int | float
    message: str | None = None

    @property
    def key(self) -> str: return "multiple_of"

    def validate(self, value: Any) -> ValidationIssue | None:
        if is_finite_number(value) and self._divides(value): return None
        return builders.not_multiple_of(self.factor, self.message)

    def _divides(self, value: int | float) -> bool:
        if isinstance(value, int) and isinstance(self.factor, int):
            return value % self.factor == 0
        # Exact rationals; ints beyond float range never overflow.
        quotient = Fraction(value) / Fraction(self.factor)
        return abs(quotient - round(quotient)) < 1e-9

    def describe(self) -> dict[str, Any]: return {"check": "multiple_of", "value": self.factor}


def replace_or_append(checks: list[Check], check: Check) -> None:
    """Replace the check sharing `check.key` in place, else append it."""
    for index, existing in enumerate(checks):
        if existing.key == check.key:
            checks[index] = check
            return
    checks.append(check)


def run_checks(checks: list[Check], value: Any) -> ValidationIssue | None:
    """Evaluate checks in declaration order; the first failure wins."""
    for check in checks:
        if (found := check.validate(value)) is not None: return found
    return None
