"""Validation Error Types

Structured issues with tuple paths, a closed code taxonomy, and the
reporting projections callers consume.

Error Format (ValidationError.to_dict):
{
    "error": {
        "type": "validation_error",
        "message": "user.email: Invalid email",
        "issue_count": 1,
        "issues": [
            {
                "code": "invalid_string",
                "path": ["user", "email"],
                "message": "Invalid email",
                "received": "string",
                "expected": "email"
            }
        ]
    }
}
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Sequence

from schemata.config import get_settings

PathSegment = str | int
Path = tuple[PathSegment, ...]


class IssueCode(str, Enum):
    """Closed taxonomy of validation failure codes."""
    INVALID_TYPE = "invalid_type"
    TOO_SMALL = "too_small"
    TOO_BIG = "too_big"
    INVALID_STRING = "invalid_string"
    REQUIRED = "required"
    UNRECOGNIZED_KEY = "unrecognized_key"
    CUSTOM = "custom"
    UNKNOWN_ERROR = "unknown_error"
    INVALID_LITERAL = "invalid_literal"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    INVALID_UNION = "invalid_union"
    INVALID_UNION_DISCRIMINATOR = "invalid_union_discriminator"
    INVALID_INTERSECTION = "invalid_intersection"
    NOT_MULTIPLE_OF = "not_multiple_of"
    ASYNC_REQUIRED = "async_required"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One recorded validation failure.

    - code: taxonomy entry
    - path: key/index segments locating the value, outer to inner
    - message: human-readable message
    - received / expected: runtime kinds (or values) for type-style failures
    - params: structured extras (bounds, per-option union issues, ...)
    """
    code: IssueCode
    path: Path = ()
    message: str = ""
    received: str | None = None
    expected: str | None = None
    params: dict[str, Any] | None = None

    def with_prefix(self, *segments: PathSegment) -> ValidationIssue:
        """Prepend composite key/index segments to this issue's path."""
        return replace(self, path=(*segments, *self.path))

    @property
    def dotted_path(self) -> str:
        return get_settings().path_separator.join(str(segment) for segment in self.path)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        result: dict[str, Any] = {"code": self.code.value, "path": list(self.path), "message": self.message}
        if self.received is not None: result["received"] = self.received
        if self.expected is not None: result["expected"] = self.expected
        if self.params:
            result["params"] = {k: _serialize_param(v) for k, v in self.params.items()}
        return result


def _serialize_param(value: Any) -> Any:
    if isinstance(value, ValidationIssue): return value.to_dict()
    if isinstance(value, (list, tuple)): return [_serialize_param(v) for v in value]
    return value


class ValidationError(Exception):
    """Ordered, non-empty collection of issues produced by one failed call.

    The string form joins every issue as "path: message" with "; ".
    """

    def __init__(self, issues: Iterable[ValidationIssue]):
        self.issues: list[ValidationIssue] = list(issues)
        if not self.issues:
            raise ValueError("ValidationError requires at least one issue")
        super().__init__(self._render_message())

    def _render_message(self) -> str:
        return "; ".join(
            f"{issue.dotted_path}: {issue.message}" if issue.path else issue.message
            for issue in self.issues
        )

    def __reduce__(self):
        return (type(self), (self.issues,))

    def __repr__(self) -> str:
        return f"ValidationError({len(self.issues)} issue{'s' if len(self.issues) != 1 else ''}: {self})"

    @property
    def first_issue(self) -> ValidationIssue: return self.issues[0]

    def issues_at(self, path: Sequence[PathSegment]) -> list[ValidationIssue]:
        """Issues recorded exactly at `path`."""
        target = tuple(path)
        return [issue for issue in self.issues if issue.path == target]

    def prefixed(self, *segments: PathSegment) -> ValidationError:
        """New error with `segments` prepended to every issue path."""
        return ValidationError(issue.with_prefix(*segments) for issue in self.issues)

    def format(self) -> dict[str, Any]:
        """Project issues into a mapping keyed by dotted path.

        Each path maps to its last message; issues without a path are
        collected in a list under the configured root key ("_errors").
        """
        root_key = get_settings().format_root_key
        formatted: dict[str, Any] = {}
        for issue in self.issues:
            if issue.path:
                formatted[issue.dotted_path] = issue.message
            else:
                formatted.setdefault(root_key, []).append(issue.message)
        return formatted

    def flatten(self) -> dict[str, Any]:
        """Project issues for flat, form-style consumption.

        Returns {"field_errors": {path: [messages]}, "form_errors": [messages]}.
        """
        field_errors: dict[str, list[str]] = {}
        form_errors: list[str] = []
        for issue in self.issues:
            if issue.path: field_errors.setdefault(issue.dotted_path, []).append(issue.message)
            else: form_errors.append(issue.message)
        return {"field_errors": field_errors, "form_errors": form_errors}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        return {"error": {"type": "validation_error", "message": str(self),
            "issue_count": len(self.issues), "issues": [issue.to_dict() for issue in self.issues]}}
