"""schemata: declarative, composable runtime validation.

Usage:
    from schemata import s, ValidationError

    signup = s.object({
        "email": s.string().email(),
        "password": s.string().min(8),
        "tags": s.array(s.string()).max(5).default(factory=list),
    })

    result = signup.safe_parse(payload)
    if not result.success:
        return result.error.flatten()
    data = result.data
"""
from schemata.api import s
from schemata.config import Settings, get_settings
from schemata.errors import Err, IssueCode, Ok, SafeParseResult, ValidationError, ValidationIssue
from schemata.logging import configure_logging, get_logger
from schemata.validation import UNDEFINED, Schema, to_json_schema

__version__ = "0.1.0"

__all__ = [
    "s",
    "Schema",
    "UNDEFINED",
    "IssueCode",
    "ValidationError",
    "ValidationIssue",
    "Ok",
    "Err",
    "SafeParseResult",
    "to_json_schema",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
]
