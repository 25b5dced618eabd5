"""Validation Error Model

- IssueCode: closed failure taxonomy
- ValidationIssue: one failure (code, path, message, received, expected)
- ValidationError: ordered issues of one failed call, with format()/flatten()
- Ok / Err: safe_parse() result variants
- Builder functions: one constructor per issue code
"""
from .types import (
    IssueCode,
    Path,
    PathSegment,
    ValidationError,
    ValidationIssue,
)

from .result import Err, Ok, SafeParseResult

from . import builders

__all__ = [
    "IssueCode",
    "Path",
    "PathSegment",
    "ValidationError",
    "ValidationIssue",
    "Ok",
    "Err",
    "SafeParseResult",
    "builders",
]
