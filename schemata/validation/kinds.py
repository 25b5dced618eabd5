"""Runtime Kind Inspection

The closed set of discriminants every validator uses to inspect input,
plus the UNDEFINED sentinel for "value absent" (None is null).
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Final


class _Undefined:
    """Singleton marking an absent value."""
    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str: return "UNDEFINED"

    def __bool__(self) -> bool: return False

    def __copy__(self) -> _Undefined: return self

    def __deepcopy__(self, memo: dict) -> _Undefined: return self

    def __reduce__(self) -> str: return "UNDEFINED"


UNDEFINED: Final = _Undefined()


def is_undefined(value: Any) -> bool: return value is UNDEFINED


def is_null(value: Any) -> bool: return value is None


def is_string(value: Any) -> bool: return isinstance(value, str)


def is_boolean(value: Any) -> bool: return isinstance(value, bool)


def is_number(value: Any) -> bool:
    """int or float, excluding bool and NaN."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def is_finite_number(value: Any) -> bool:
    return is_number(value) and (isinstance(value, int) or math.isfinite(value))


def is_integer(value: Any) -> bool:
    if not is_finite_number(value):
        return False
    return isinstance(value, int) or value.is_integer()


def is_plain_object(value: Any) -> bool:
    """Mapping input; sequences and None are not objects."""
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    """list or tuple; strings and bytes are never sequences here."""
    return isinstance(value, (list, tuple))


def kind_of(value: Any) -> str:
    """Name the runtime kind of `value` for `received` fields."""
    if value is UNDEFINED: return "undefined"
    if value is None: return "null"
    if isinstance(value, bool): return "boolean"
    if isinstance(value, float) and math.isnan(value): return "nan"
    if isinstance(value, (int, float)): return "number"
    if isinstance(value, str): return "string"
    if is_sequence(value): return "array"
    if is_plain_object(value): return "object"
    return type(value).__name__
