"""
Lexer for jsonsmith - character cursor with line/column tracking.

The lexer is the per-call parse context: it owns the input text, the cursor,
the current line and column, and the path stack used to describe where in the
document a failure happened.
"""

from dataclasses import dataclass
from typing import Any, NamedTuple, Optional, Union

from .constants import WHITESPACE_PATTERN

TextInput = Union[str, bytes, bytearray]


@dataclass
class Position:
    """Position in source text (line and column)."""

    line: int
    column: int


class Mark(NamedTuple):
    """Snapshot of the cursor that can be restored with Lexer.reset."""

    pos: int
    line: int
    column: int


class PathEntry(NamedTuple):
    """One step of the diagnostic path: an object key or an array index."""

    key: Optional[str] = None
    index: Optional[int] = None


def format_path(entries: list[PathEntry]) -> str:
    """Render path entries as ``obj.array[2]``."""
    parts: list[str] = []
    for entry in entries:
        if entry.index is not None:
            parts.append(f"[{entry.index}]")
        elif parts:
            parts.append(f".{entry.key}")
        else:
            parts.append(str(entry.key))
    return "".join(parts)


class Lexer:
    """Character-level cursor over JSON input."""

    def __init__(self, text: str, allow_comments: bool = False) -> None:
        self.text = text
        self.length = len(text)
        self.pos = 0
        self.line = 1
        self.column = 1
        self.allow_comments = allow_comments
        self.path: list[PathEntry] = []

    def current_position(self) -> Position:
        """Get current position in the text."""
        return Position(self.line, self.column)

    def at_end(self) -> bool:
        return self.pos >= self.length

    def peek(self, offset: int = 0) -> str:
        """Peek at character at given offset without consuming it."""
        pos = self.pos + offset
        if pos >= self.length:
            return ""
        return self.text[pos]

    def advance(self) -> str:
        """Advance position and return the current character."""
        if self.pos >= self.length:
            return ""

        char = self.text[self.pos]
        self.pos += 1

        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return char

    def consume(self, chunk: str) -> None:
        """Advance over ``chunk``, which must be the text at the cursor."""
        size = len(chunk)
        if not size:
            return
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = size - chunk.rfind("\n")
        else:
            self.column += size
        self.pos += size

    def match(self, pattern: Any) -> Any:
        """Match a compiled pattern anchored at the cursor without consuming."""
        return pattern.match(self.text, self.pos)

    def startswith(self, literal: str) -> bool:
        return self.text.startswith(literal, self.pos)

    def mark(self) -> Mark:
        """Snapshot the cursor."""
        return Mark(self.pos, self.line, self.column)

    def reset(self, mark: Mark) -> None:
        """Restore a snapshot taken with mark()."""
        self.pos, self.line, self.column = mark

    def position_of(self, mark: Mark) -> Position:
        return Position(mark.line, mark.column)

    def byte_offset(self, pos: Optional[int] = None) -> int:
        """Byte offset of a character index in the UTF-8 encoding of the input."""
        if pos is None:
            pos = self.pos
        prefix = self.text[:pos]
        if prefix.isascii():
            return len(prefix)
        return len(prefix.encode("utf-8", "surrogatepass"))

    # Whitespace and comments

    def skip_whitespace(self) -> None:
        """Skip JSON whitespace, and comments when they are enabled."""
        while True:
            whitespace = WHITESPACE_PATTERN.match(self.text, self.pos)
            if whitespace is not None:
                self.consume(whitespace.group())
            if not (self.allow_comments and self.peek() == "/"):
                return
            if not self._skip_comment():
                return

    def _skip_comment(self) -> bool:
        """Skip one comment at the cursor; unterminated comments stay put."""
        following = self.peek(1)
        if following == "/":
            end = self.text.find("\n", self.pos)
            if end == -1:
                end = self.length
            self.consume(self.text[self.pos : end])
            return True
        if following == "*":
            end = self.text.find("*/", self.pos + 2)
            if end == -1:
                return False
            self.consume(self.text[self.pos : end + 2])
            return True
        return False

    # Diagnostic path stack

    def push_key(self, key: str) -> None:
        self.path.append(PathEntry(key=key))

    def push_index(self, index: int) -> None:
        self.path.append(PathEntry(index=index))

    def pop_path(self) -> None:
        if self.path:
            self.path.pop()

    def path_string(self) -> str:
        """Current path rendered for diagnostics, e.g. ``obj.array[2]``."""
        return format_path(self.path)

    # Recovery support

    def skip_to_recovery_point(self) -> None:
        """Skip to the next ',', ']' or '}' that is not nested or quoted.

        The cursor must not be inside a string when this is called. The
        stopping character is left unconsumed.
        """
        depth = 0
        in_string = False
        while self.pos < self.length:
            char = self.text[self.pos]
            if in_string:
                if char == "\\":
                    self.advance()
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char in "[{":
                depth += 1
            elif char in "]}":
                if depth == 0:
                    return
                depth -= 1
            elif char == "," and depth == 0:
                return
            self.advance()
