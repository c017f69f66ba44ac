"""jsonsmith configuration helpers."""

from .config import (
    DuplicateKeyPolicy,
    ErrorReporting,
    ParseConfig,
    ParseLimits,
    ParsingBehavior,
    SizeLimits,
    StructureLimits,
)

__all__ = [
    "DuplicateKeyPolicy",
    "ErrorReporting",
    "ParseConfig",
    "ParseLimits",
    "ParsingBehavior",
    "SizeLimits",
    "StructureLimits",
]
