"""
Resource limits for jsonsmith.

This module guards the parser against inputs that would exhaust memory or the
call stack. Violations raise SecurityError without position information; the
parser attaches the location before the error leaves the parse call.
"""

from ..utils.config import ParseLimits
from .exceptions import ErrorCode, SecurityError


class LimitValidator:
    """Validates parsing limits to prevent resource exhaustion."""

    def __init__(self, limits: ParseLimits):
        self.limits = limits
        self.nesting_depth = 0

    def validate_input_size(self, text: str) -> None:
        """Validate that input text size is within limits."""
        if len(text) > self.limits.max_input_size:
            raise SecurityError(
                f"Input size {len(text)} exceeds limit {self.limits.max_input_size}",
                code=ErrorCode.MAX_INPUT_SIZE_EXCEEDED,
            )

    def validate_string_length(self, length: int) -> None:
        """Validate that string length is within limits."""
        if length > self.limits.max_string_length:
            raise SecurityError(
                f"String length {length} exceeds limit {self.limits.max_string_length}",
                code=ErrorCode.MAX_STRING_LENGTH_EXCEEDED,
            )

    def enter_structure(self) -> None:
        """Track entering a nested structure and validate depth."""
        self.nesting_depth += 1
        if self.nesting_depth > self.limits.max_nesting_depth:
            raise SecurityError(
                f"Nesting depth {self.nesting_depth} exceeds limit "
                f"{self.limits.max_nesting_depth}",
                code=ErrorCode.MAX_DEPTH_EXCEEDED,
            )

    def exit_structure(self) -> None:
        """Track exiting a nested structure."""
        if self.nesting_depth > 0:
            self.nesting_depth -= 1

    def validate_object_keys(self, key_count: int) -> None:
        """Validate that object key count is within limits."""
        if key_count > self.limits.max_object_keys:
            raise SecurityError(
                f"Object key count {key_count} exceeds limit "
                f"{self.limits.max_object_keys}",
                code=ErrorCode.MAX_OBJECT_KEYS_EXCEEDED,
            )

    def validate_array_items(self, item_count: int) -> None:
        """Validate that array item count is within limits."""
        if item_count > self.limits.max_array_items:
            raise SecurityError(
                f"Array item count {item_count} exceeds limit "
                f"{self.limits.max_array_items}",
                code=ErrorCode.MAX_ARRAY_ITEMS_EXCEEDED,
            )

    def reset(self) -> None:
        """Reset validator state for reuse."""
        self.nesting_depth = 0
