"""Safe-Parse Result Types

Result monad for safe_parse(): Ok carries the validated data, Err carries
the ValidationError. Both expose a `success` flag so callers can branch
without pattern matching:

    result = schema.safe_parse(payload)
    if result.success:
        use(result.data)
    else:
        report(result.error.flatten())

    match schema.safe_parse(payload):
        case Ok(data):
            ...
        case Err(error):
            ...
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, NoReturn, TypeVar, Union, final

from .types import ValidationError

T = TypeVar("T")
U = TypeVar("U")


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant: wraps the validated (possibly transformed) data."""
    data: T

    @property
    def success(self) -> bool: return True

    @property
    def error(self) -> None: return None

    def is_ok(self) -> bool: return True

    def is_err(self) -> bool: return False

    def unwrap(self) -> T: return self.data

    def unwrap_or(self, default: T) -> T: return self.data

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Called unwrap_err on Ok: {self.data!r}")

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Transform the success value."""
        return Ok(f(self.data))

    def match(self, ok: Callable[[T], U], err: Callable[[ValidationError], U]) -> U:
        """Pattern match on Result. Forces exhaustive handling."""
        return ok(self.data)


@final
@dataclass(frozen=True, slots=True)
class Err:
    """Failure variant: wraps the ValidationError of one failed call."""
    error: ValidationError

    @property
    def success(self) -> bool: return False

    @property
    def data(self) -> None: return None

    def is_ok(self) -> bool: return False

    def is_err(self) -> bool: return True

    def unwrap(self) -> NoReturn:
        """Re-raises the wrapped ValidationError."""
        raise self.error

    def unwrap_or(self, default: T) -> T: return default

    def unwrap_err(self) -> ValidationError: return self.error

    def map(self, f: Callable[[T], U]) -> Err:
        """No-op for Err variant."""
        return self

    def match(self, ok: Callable[[T], U], err: Callable[[ValidationError], U]) -> U:
        """Pattern match on Result. Forces exhaustive handling."""
        return err(self.error)


SafeParseResult = Union[Ok[T], Err]
