"""
Serializer for jsonsmith - renders Value trees as JSON text.
"""

import math
from typing import Optional, Union

from ..security.exceptions import ErrorCode, StringifyError
from .constants import ESCAPE_PATTERN, JSON_SHORT_ESCAPES
from .value import Value, ValueType


def _escape_char(match) -> str:
    char = match.group()
    escaped = JSON_SHORT_ESCAPES.get(char)
    if escaped is None:
        escaped = f"\\u{ord(char):04x}"
    return escaped


def escape_string(text: str) -> str:
    """Quote ``text`` as a JSON string literal."""
    return '"' + ESCAPE_PATTERN.sub(_escape_char, text) + '"'


def format_number(number: float) -> str:
    """Shortest round-trip form of a finite double."""
    text = repr(number)
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _pointer(tokens: list[str]) -> str:
    return "".join(
        "/" + token.replace("~", "~0").replace("/", "~1") for token in tokens
    )


class Serializer:
    """Depth-first renderer, compact unless an indent is given."""

    def __init__(self, indent: Union[int, str, None] = None):
        if isinstance(indent, int):
            indent = " " * indent
        self.indent = indent
        self.parts: list[str] = []
        self.path: list[str] = []

    def serialize(self, value: Value) -> str:
        self.parts = []
        self.path = []
        self._write(value, 0)
        return "".join(self.parts)

    def _write(self, value: Value, depth: int) -> None:
        value_type = value.type
        if value_type is ValueType.NULL:
            self.parts.append("null")
        elif value_type is ValueType.BOOL:
            self.parts.append("true" if value.as_bool() else "false")
        elif value_type is ValueType.NUMBER:
            number = value.as_number()
            if not math.isfinite(number):
                pointer = _pointer(self.path)
                raise StringifyError(
                    f"Cannot serialize non-finite number {number!r}",
                    code=ErrorCode.NON_FINITE_NUMBER,
                    path=pointer,
                )
            self.parts.append(format_number(number))
        elif value_type is ValueType.STRING:
            self.parts.append(escape_string(value.as_string()))
        elif value_type is ValueType.ARRAY:
            self._write_array(value.as_array(), depth)
        else:
            self._write_object(value.as_object(), depth)

    def _newline(self, depth: int) -> None:
        if self.indent is not None:
            self.parts.append("\n" + self.indent * depth)

    def _write_array(self, items: list[Value], depth: int) -> None:
        if not items:
            self.parts.append("[]")
            return

        self.parts.append("[")
        for index, item in enumerate(items):
            if index:
                self.parts.append(",")
            self._newline(depth + 1)
            self.path.append(str(index))
            self._write(item, depth + 1)
            self.path.pop()
        self._newline(depth)
        self.parts.append("]")

    def _write_object(self, members: dict[str, Value], depth: int) -> None:
        if not members:
            self.parts.append("{}")
            return

        separator = ":" if self.indent is None else ": "
        self.parts.append("{")
        for index, (key, member) in enumerate(members.items()):
            if index:
                self.parts.append(",")
            self._newline(depth + 1)
            self.parts.append(escape_string(key))
            self.parts.append(separator)
            self.path.append(key)
            self._write(member, depth + 1)
            self.path.pop()
        self._newline(depth)
        self.parts.append("}")


def stringify(value: Value, indent: Optional[Union[int, str]] = None) -> str:
    """
    Serialize a Value tree to JSON text.

    Args:
        value: Root of the tree to render
        indent: Spaces (or a literal indent string) per nesting level for
            pretty printing; None renders compact output

    Returns:
        JSON text

    Raises:
        StringifyError: If the tree contains NaN or an infinity
    """
    return Serializer(indent).serialize(value)
