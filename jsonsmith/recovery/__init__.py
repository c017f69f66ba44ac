"""
jsonsmith Error Recovery.

This module provides tolerant parsing that skips malformed elements.
"""

from .strategies import (
    ParseStatus,
    PartialParser,
    PartialParseResult,
    RecoveryLevel,
    parse_partial,
)

__all__ = [
    "ParseStatus",
    "PartialParser",
    "PartialParseResult",
    "RecoveryLevel",
    "parse_partial",
]
