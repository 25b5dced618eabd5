"""Explicit Opt-in Coercion

Coercion is explicit and opt-in, NEVER implicit: only schemas built via
s.coerce.* convert input, and only with the rules below. A value a rule
cannot convert passes through unchanged, so the schema's kind check
reports it as invalid_type.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any
from uuid import UUID


class CoercionRule(ABC):
    """Base class for coercion rules.

    Each rule defines:
    - Whether a value can be converted
    - The conversion itself
    """

    @abstractmethod
    def can_coerce(self, value: Any) -> bool:
        """Check if value can be coerced to the target kind."""

    @abstractmethod
    def coerce(self, value: Any) -> Any:
        """Convert a value for which can_coerce() returned True."""

    def __call__(self, value: Any) -> Any:
        return self.coerce(value) if self.can_coerce(value) else value


@dataclass(frozen=True, slots=True)
class ToString(CoercionRule):
    """Render scalars as strings; booleans as "true"/"false"."""

    def can_coerce(self, value: Any) -> bool:
        return isinstance(value, (bool, int, float, Decimal, UUID, datetime, date, time))

    def coerce(self, value: Any) -> str:
        if isinstance(value, bool): return "true" if value else "false"
        if isinstance(value, (datetime, date, time)): return value.isoformat()
        return str(value)


@dataclass(frozen=True, slots=True)
class ToNumber(CoercionRule):
    """Parse numeric strings; integral strings become int."""

    def can_coerce(self, value: Any) -> bool:
        if isinstance(value, Decimal): return value.is_finite()
        if not isinstance(value, str) or not value.strip(): return False
        try:
            float(value.strip())
            return True
        except ValueError:
            return False

    def coerce(self, value: Any) -> int | float:
        if isinstance(value, Decimal): return int(value) if value == value.to_integral_value() else float(value)
        stripped = value.strip()
        try:
            return int(stripped)
        except ValueError:
            return float(stripped)


@dataclass(frozen=True, slots=True)
class ToInteger(CoercionRule):
    """Parse integer strings and integral floats."""

    def can_coerce(self, value: Any) -> bool:
        if isinstance(value, float): return value.is_integer()
        if not isinstance(value, str): return False
        try:
            int(value.strip())
            return True
        except ValueError:
            return False

    def coerce(self, value: Any) -> int:
        return int(value) if isinstance(value, float) else int(value.strip())


@dataclass(frozen=True, slots=True)
class ToBoolean(CoercionRule):
    """Coerce strings and 0/1 to boolean.

    Truthy: "true", "1", "yes", "on", "y"
    Falsy: "false", "0", "no", "off", "n"
    """
    true_values: frozenset[str] = frozenset({"true", "1", "yes", "on", "y"})
    false_values: frozenset[str] = frozenset({"false", "0", "no", "off", "n"})

    def can_coerce(self, value: Any) -> bool:
        if isinstance(value, int) and not isinstance(value, bool): return value in (0, 1)
        if not isinstance(value, str): return False
        lower = value.strip().lower()
        return lower in self.true_values or lower in self.false_values

    def coerce(self, value: Any) -> bool:
        if isinstance(value, int): return bool(value)
        return value.strip().lower() in self.true_values
