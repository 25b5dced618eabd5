"""Issue Builders

Ergonomic constructors for ValidationIssue, one per taxonomy entry.
Default messages live here so every validator words failures the same way.
"""
from typing import Any, Sequence

from .types import IssueCode, PathSegment, ValidationIssue


def issue(
    code: IssueCode,
    message: str,
    *,
    path: Sequence[PathSegment] = (),
    received: str | None = None,
    expected: str | None = None,
    **params: Any,
) -> ValidationIssue:
    """Create a validation issue."""
    return ValidationIssue(
        code=code,
        path=tuple(path),
        message=message,
        received=received,
        expected=expected,
        params={k: v for k, v in params.items() if v is not None} or None,
    )


# =============================================================================
# Type Issues
# =============================================================================

def invalid_type(expected: str, received: str, message: str | None = None) -> ValidationIssue:
    return issue(
        IssueCode.INVALID_TYPE,
        message or f"Expected {expected}, received {received}",
        received=received,
        expected=expected,
    )


def required(field: PathSegment, message: str | None = None) -> ValidationIssue:
    return issue(IssueCode.REQUIRED, message or "Required", path=(field,), expected="present", received="undefined")


def unrecognized_key(key: PathSegment) -> ValidationIssue:
    return issue(IssueCode.UNRECOGNIZED_KEY, f"Unrecognized key: '{key}'", path=(key,))


def invalid_literal(expected: Any, received: str) -> ValidationIssue:
    return issue(
        IssueCode.INVALID_LITERAL,
        f"Expected literal value: {expected!r}",
        received=received,
        expected=repr(expected),
    )


def invalid_enum_value(options: Sequence[Any], received: str) -> ValidationIssue:
    return issue(
        IssueCode.INVALID_ENUM_VALUE,
        f"Expected one of: {', '.join(str(o) for o in options)}",
        received=received,
        expected=" | ".join(str(o) for o in options),
    )


# =============================================================================
# Constraint Issues
# =============================================================================

def too_small(message: str, *, minimum: Any, inclusive: bool = True) -> ValidationIssue:
    return issue(IssueCode.TOO_SMALL, message, minimum=minimum, inclusive=inclusive)


def too_big(message: str, *, maximum: Any, inclusive: bool = True) -> ValidationIssue:
    return issue(IssueCode.TOO_BIG, message, maximum=maximum, inclusive=inclusive)


def invalid_string(message: str, *, validation: str) -> ValidationIssue:
    return issue(IssueCode.INVALID_STRING, message, expected=validation, received="string")


def not_multiple_of(factor: Any, message: str | None = None) -> ValidationIssue:
    return issue(IssueCode.NOT_MULTIPLE_OF, message or f"Number must be a multiple of {factor}", multiple_of=factor)


# =============================================================================
# Combinator Issues
# =============================================================================

def invalid_union(option_issues: Sequence[Sequence[ValidationIssue]]) -> ValidationIssue:
    """One issue for a failed union; `union_issues` keeps each option's issues."""
    return issue(IssueCode.INVALID_UNION, "Invalid input: value did not match any union option",
        union_issues=[tuple(found) for found in option_issues])


def invalid_union_discriminator(key: str, options: Sequence[Any]) -> ValidationIssue:
    return issue(
        IssueCode.INVALID_UNION_DISCRIMINATOR,
        f"Invalid discriminator value. Expected {' | '.join(repr(o) for o in options)}",
        path=(key,),
        expected=" | ".join(repr(o) for o in options),
    )


def invalid_intersection() -> ValidationIssue:
    return issue(IssueCode.INVALID_INTERSECTION, "Values do not match for intersection type")


# =============================================================================
# Custom / Internal Issues
# =============================================================================

def custom(message: str, path: Sequence[PathSegment] = ()) -> ValidationIssue:
    return issue(IssueCode.CUSTOM, message, path=path)


def unknown_error(exc: BaseException, path: Sequence[PathSegment] = ()) -> ValidationIssue:
    """Normalize an unexpected exception raised by user code."""
    return issue(IssueCode.UNKNOWN_ERROR, str(exc) or type(exc).__name__, path=path, exception=type(exc).__name__)


def async_required() -> ValidationIssue:
    return issue(
        IssueCode.ASYNC_REQUIRED,
        "Schema contains an asynchronous refinement; use parse_async() instead",
    )
