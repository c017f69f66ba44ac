"""
jsonsmith Errors and Resource Limits.

This module provides the exception hierarchy and parse limit validation.
"""

from .exceptions import (
    ErrorCode,
    ErrorContext,
    ErrorSuggestionEngine,
    JsonSmithError,
    MergePatchError,
    ParseError,
    PatchError,
    PathError,
    PointerError,
    SecurityError,
    StringifyError,
    TypeMismatchError,
)
from .limits import LimitValidator

__all__ = [
    "ErrorCode",
    "ErrorContext",
    "ErrorSuggestionEngine",
    "JsonSmithError",
    "LimitValidator",
    "MergePatchError",
    "ParseError",
    "PatchError",
    "PathError",
    "PointerError",
    "SecurityError",
    "StringifyError",
    "TypeMismatchError",
]
