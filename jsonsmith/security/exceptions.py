"""
Exception hierarchy and error codes for jsonsmith.

Every failure the engine reports is an explicit exception carrying an
``ErrorCode``. Parse failures additionally carry the line, column, byte offset
and structural path of the point where parsing stopped.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.tokenizer import Position


class ErrorCode(Enum):
    """Enumerated failure kinds reported by the engine."""

    # Syntax errors, local to one parse call
    EXPECT_VALUE = "expect_value"
    INVALID_VALUE = "invalid_value"
    ROOT_NOT_SINGULAR = "root_not_singular"
    NUMBER_TOO_BIG = "number_too_big"
    MISS_QUOTATION_MARK = "miss_quotation_mark"
    INVALID_STRING_ESCAPE = "invalid_string_escape"
    INVALID_STRING_CHAR = "invalid_string_char"
    INVALID_UNICODE_HEX = "invalid_unicode_hex"
    INVALID_UNICODE_SURROGATE = "invalid_unicode_surrogate"
    MISS_COMMA_OR_SQUARE_BRACKET = "miss_comma_or_square_bracket"
    MISS_KEY = "miss_key"
    MISS_COLON = "miss_colon"
    MISS_COMMA_OR_CURLY_BRACKET = "miss_comma_or_curly_bracket"
    DUPLICATE_KEY = "duplicate_key"
    INVALID_ENCODING = "invalid_encoding"

    # Resource limits
    MAX_DEPTH_EXCEEDED = "max_depth_exceeded"
    MAX_INPUT_SIZE_EXCEEDED = "max_input_size_exceeded"
    MAX_STRING_LENGTH_EXCEEDED = "max_string_length_exceeded"
    MAX_ARRAY_ITEMS_EXCEEDED = "max_array_items_exceeded"
    MAX_OBJECT_KEYS_EXCEEDED = "max_object_keys_exceeded"

    # Serialization
    NON_FINITE_NUMBER = "non_finite_number"

    # Structural errors
    INVALID_POINTER = "invalid_pointer"
    POINTER_NOT_FOUND = "pointer_not_found"
    PATCH_TEST_FAILED = "patch_test_failed"
    INVALID_PATCH_OPERATION = "invalid_patch_operation"
    NULL_NOT_REPRESENTABLE = "null_not_representable"
    ORDER_NOT_REPRESENTABLE = "order_not_representable"
    INVALID_PATH = "invalid_path"

    # Value model
    TYPE_MISMATCH = "type_mismatch"


@dataclass
class ErrorContext:
    """Source excerpt shown alongside a parse error."""

    text: str
    position: Position
    context_before: str
    context_after: str
    error_char: str
    line_text: str
    column_indicator: str


class JsonSmithError(Exception):
    """Base exception for all jsonsmith errors."""

    default_code = ErrorCode.INVALID_VALUE

    def __init__(
        self,
        message: str,
        position: Optional[Position] = None,
        context: Optional[ErrorContext] = None,
        suggestions: Optional[list[str]] = None,
        code: Optional[ErrorCode] = None,
    ):
        self.message = message
        self.position = position
        self.context = context
        self.suggestions = suggestions or []
        self.code = code or self.default_code
        super().__init__(self._format_message())

    def _location_suffix(self) -> str:
        if self.position is None:
            return ""
        return f" at line {self.position.line}, column {self.position.column}"

    def _format_message(self) -> str:
        parts = [self.message + self._location_suffix()]

        if self.context:
            parts.append("Context:")
            parts.append(f"  {self.context.line_text}")
            parts.append(f"  {self.context.column_indicator}")

        if self.suggestions:
            parts.append("Suggestions:")
            parts.extend(f"  - {suggestion}" for suggestion in self.suggestions)

        return "\n".join(parts)


class ParseError(JsonSmithError):
    """Raised when text is not a valid JSON document."""

    def __init__(
        self,
        message: str,
        position: Optional[Position] = None,
        context: Optional[ErrorContext] = None,
        suggestions: Optional[list[str]] = None,
        code: Optional[ErrorCode] = None,
        *,
        offset: int = 0,
        path: str = "",
    ):
        self.offset = offset
        self.path = path
        super().__init__(message, position, context, suggestions, code)

    @property
    def line(self) -> int:
        """1-based line of the failure, 0 when unknown."""
        return self.position.line if self.position else 0

    @property
    def column(self) -> int:
        """1-based column of the failure, 0 when unknown."""
        return self.position.column if self.position else 0

    def _location_suffix(self) -> str:
        suffix = super()._location_suffix()
        if self.path:
            suffix += f" (path: {self.path})"
        return suffix


class SecurityError(ParseError):
    """Raised when input exceeds a configured resource limit."""

    default_code = ErrorCode.MAX_DEPTH_EXCEEDED


class StringifyError(JsonSmithError):
    """Raised when a value cannot be rendered as JSON text."""

    default_code = ErrorCode.NON_FINITE_NUMBER

    def __init__(self, message: str, code: Optional[ErrorCode] = None, path: str = ""):
        self.path = path
        super().__init__(message, code=code)

    def _location_suffix(self) -> str:
        return f" at '{self.path}'" if self.path else ""


class PointerError(JsonSmithError):
    """Raised when a JSON Pointer is malformed or does not resolve."""

    default_code = ErrorCode.POINTER_NOT_FOUND

    def __init__(self, message: str, code: Optional[ErrorCode] = None, pointer: str = ""):
        self.pointer = pointer
        super().__init__(message, code=code)

    def _location_suffix(self) -> str:
        return f" (pointer: '{self.pointer}')"


class PatchError(JsonSmithError):
    """Raised when a JSON Patch cannot be read or applied."""

    default_code = ErrorCode.INVALID_PATCH_OPERATION

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        operation: Optional[str] = None,
        index: Optional[int] = None,
    ):
        self.operation = operation
        self.index = index
        super().__init__(message, code=code)

    def _location_suffix(self) -> str:
        if self.index is None:
            return ""
        op_name = f" '{self.operation}'" if self.operation else ""
        return f" (operation {self.index}{op_name})"


class MergePatchError(JsonSmithError):
    """Raised when a merge patch cannot express the requested change."""

    default_code = ErrorCode.NULL_NOT_REPRESENTABLE

    def __init__(self, message: str, code: Optional[ErrorCode] = None, path: str = ""):
        self.path = path
        super().__init__(message, code=code)

    def _location_suffix(self) -> str:
        return f" at '{self.path}'" if self.path else ""


class PathError(JsonSmithError):
    """Raised when a JSONPath expression is malformed."""

    default_code = ErrorCode.INVALID_PATH

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        expression: str = "",
        index: Optional[int] = None,
    ):
        self.expression = expression
        self.index = index
        super().__init__(message, code=code)

    def _location_suffix(self) -> str:
        if self.index is None:
            return f" in '{self.expression}'"
        return f" at index {self.index} of '{self.expression}'"


class TypeMismatchError(JsonSmithError, TypeError):
    """Raised when a typed accessor is used on the wrong kind of value."""

    default_code = ErrorCode.TYPE_MISMATCH

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} value, got {actual}")


class ErrorSuggestionEngine:
    """Generates helpful suggestions for common JSON errors."""

    _CODE_SUGGESTIONS = {
        ErrorCode.EXPECT_VALUE: [
            "The document ends where a value was expected",
            "Check for a dangling comma or colon",
        ],
        ErrorCode.ROOT_NOT_SINGULAR: [
            "A JSON document holds exactly one top-level value",
            "Wrap multiple values in an array",
        ],
        ErrorCode.NUMBER_TOO_BIG: [
            "The number does not fit in a double precision float",
            "Encode very large numbers as strings",
        ],
        ErrorCode.MISS_QUOTATION_MARK: [
            "Close the string with a double quote",
        ],
        ErrorCode.INVALID_STRING_ESCAPE: [
            'Valid escapes are \\" \\\\ \\/ \\b \\f \\n \\r \\t and \\uXXXX',
            "Escape a literal backslash as \\\\",
        ],
        ErrorCode.INVALID_STRING_CHAR: [
            "Control characters must be escaped inside strings",
            "Use \\n for newlines and \\t for tabs",
        ],
        ErrorCode.INVALID_UNICODE_HEX: [
            "\\u must be followed by exactly four hexadecimal digits",
        ],
        ErrorCode.INVALID_UNICODE_SURROGATE: [
            "A high surrogate (\\uD800-\\uDBFF) must be followed by a low surrogate",
            "Low surrogates (\\uDC00-\\uDFFF) cannot appear on their own",
        ],
        ErrorCode.MISS_KEY: [
            "Object keys must be double-quoted strings",
        ],
        ErrorCode.MISS_COLON: [
            "Object keys must be followed by a colon",
        ],
        ErrorCode.DUPLICATE_KEY: [
            "Remove the repeated key or choose a different duplicate key policy",
        ],
        ErrorCode.MAX_DEPTH_EXCEEDED: [
            "Reduce nesting or raise StructureLimits.max_nesting_depth",
        ],
    }

    @staticmethod
    def suggest_for_code(code: ErrorCode) -> list[str]:
        """Return canned suggestions for an error code."""
        return list(ErrorSuggestionEngine._CODE_SUGGESTIONS.get(code, []))

    @staticmethod
    def suggest_for_unexpected_token(token: str) -> list[str]:
        """Generate suggestions for an unexpected character."""
        suggestions = []

        if token in ("'", "`"):
            suggestions.append("Strings must use double quotes")
        elif token in ("]", "}"):
            suggestions.append("Check for a trailing comma before the closing bracket")
        elif token == "+":
            suggestions.append("Numbers cannot start with '+'")
        elif token == ".":
            suggestions.append("Numbers need a digit before the decimal point")
        elif token.isalpha():
            suggestions.append("Only true, false and null are valid bare words")
            suggestions.append("Wrap text values in double quotes")

        return suggestions

    @staticmethod
    def suggest_for_unclosed_structure(structure_type: str) -> list[str]:
        """Generate suggestions for an array or object missing its separator."""
        if structure_type == "object":
            return [
                "Separate object members with ','",
                "Close the object with '}'",
            ]
        if structure_type == "array":
            return [
                "Separate array elements with ','",
                "Close the array with ']'",
            ]
        return []

    @staticmethod
    def suggest_for_invalid_value(value: str) -> list[str]:
        """Generate suggestions for a malformed literal or number."""
        suggestions = []

        lowered = value.lower()
        if lowered in ("true", "false", "null") and value != lowered:
            suggestions.append(f"Literals are lowercase: use '{lowered}'")
        elif lowered in ("none", "undefined", "nil"):
            suggestions.append("Use 'null' for missing values")
        elif lowered in ("nan", "infinity", "-infinity", "inf", "-inf"):
            suggestions.append("NaN and Infinity are not valid JSON numbers")
        elif value[:1].isdigit() or value[:1] == "-":
            suggestions.append("Numbers cannot have leading zeros or a bare '.' or 'e'")

        return suggestions
