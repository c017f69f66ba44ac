"""
Configuration and limits for jsonsmith parsing.

This module defines resource limits and behavior switches for parsing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class DuplicateKeyPolicy(Enum):
    """What to do when an object repeats a key."""

    LAST_WINS = "last_wins"  # Later value replaces earlier, first position kept
    FIRST_WINS = "first_wins"  # Later occurrences are ignored
    REJECT = "reject"  # Fail with DUPLICATE_KEY


@dataclass
class SizeLimits:
    """Input and content size limits."""

    max_input_size: int = 10 * 1024 * 1024
    max_string_length: int = 1024 * 1024


@dataclass
class StructureLimits:
    """JSON structure complexity limits."""

    max_nesting_depth: int = 100
    max_array_items: int = 1_000_000
    max_object_keys: int = 100_000


@dataclass
class ParseLimits:
    """Resource limits applied while parsing."""

    size_limits: Optional[SizeLimits] = None
    structure_limits: Optional[StructureLimits] = None

    def __init__(
        self,
        *,
        size_limits: Optional[SizeLimits] = None,
        structure_limits: Optional[StructureLimits] = None,
        **flat_limits: Any,
    ):
        size_fields = {
            name: flat_limits.pop(name)
            for name in ("max_input_size", "max_string_length")
            if name in flat_limits
        }
        structure_fields = {
            name: flat_limits.pop(name)
            for name in ("max_nesting_depth", "max_array_items", "max_object_keys")
            if name in flat_limits
        }
        if flat_limits:
            raise TypeError(f"Unknown limit(s): {', '.join(sorted(flat_limits))}")

        self.size_limits = size_limits or SizeLimits(**size_fields)
        self.structure_limits = structure_limits or StructureLimits(**structure_fields)

        for name in (
            "max_input_size",
            "max_string_length",
            "max_nesting_depth",
            "max_array_items",
            "max_object_keys",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

    @property
    def max_input_size(self) -> int:
        """Maximum input size in characters."""
        assert self.size_limits is not None
        return self.size_limits.max_input_size

    @property
    def max_string_length(self) -> int:
        """Maximum length for individual strings."""
        assert self.size_limits is not None
        return self.size_limits.max_string_length

    @property
    def max_nesting_depth(self) -> int:
        """Maximum nesting depth for arrays and objects."""
        assert self.structure_limits is not None
        return self.structure_limits.max_nesting_depth

    @property
    def max_array_items(self) -> int:
        """Maximum number of items in one array."""
        assert self.structure_limits is not None
        return self.structure_limits.max_array_items

    @property
    def max_object_keys(self) -> int:
        """Maximum number of keys in one object."""
        assert self.structure_limits is not None
        return self.structure_limits.max_object_keys


@dataclass
class ParsingBehavior:
    """Core parsing behavior settings."""

    duplicate_keys: DuplicateKeyPolicy = DuplicateKeyPolicy.LAST_WINS
    allow_comments: bool = False
    allow_trailing_commas: bool = False


@dataclass
class ErrorReporting:
    """Error reporting and context settings."""

    include_context: bool = True
    max_error_context: int = 40


@dataclass
class ParseConfig:
    """Configuration options for jsonsmith parsing."""

    limits: Optional[ParseLimits] = None
    behavior: Optional[ParsingBehavior] = None
    error_reporting: Optional[ErrorReporting] = None

    def __post_init__(self) -> None:
        if self.limits is None:
            self.limits = ParseLimits()
        if self.behavior is None:
            self.behavior = ParsingBehavior()
        if self.error_reporting is None:
            self.error_reporting = ErrorReporting()

    @classmethod
    def strict(cls) -> "ParseConfig":
        """RFC 8259 input only."""
        return cls()

    @classmethod
    def lenient(cls) -> "ParseConfig":
        """Accept comments and trailing commas."""
        return cls(
            behavior=ParsingBehavior(allow_comments=True, allow_trailing_commas=True)
        )

    @property
    def duplicate_keys(self) -> DuplicateKeyPolicy:
        assert self.behavior is not None
        return self.behavior.duplicate_keys

    @property
    def allow_comments(self) -> bool:
        assert self.behavior is not None
        return self.behavior.allow_comments

    @property
    def allow_trailing_commas(self) -> bool:
        assert self.behavior is not None
        return self.behavior.allow_trailing_commas

    @property
    def include_context(self) -> bool:
        assert self.error_reporting is not None
        return self.error_reporting.include_context

    @property
    def max_error_context(self) -> int:
        assert self.error_reporting is not None
        return self.error_reporting.max_error_context
