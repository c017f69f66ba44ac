"""
JSONPath queries for jsonsmith.

Supported syntax:
    $                   the document root, required at the start
    .name  ['name']     object member; quoted names may hold any character
    [n]                 array item; negative indexes count from the end
    .*  [*]             every array item or object member value
    [start:end:step]    array slice, with Python slice semantics
    ..name  ..[...]     the selector applied to a node and all its descendants

A query returns the matching nodes themselves, in document order, like
``JSONPointer.resolve``. Selectors that do not apply to a node (an index on an
object, a missing member) match nothing instead of failing; only malformed
expressions raise PathError.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import regex

from ..core.value import Value
from ..security.exceptions import PathError
from .pointer import JSONPointer

NAME_PATTERN = regex.compile(r"[\p{L}_$][\p{L}\p{N}_$]*")
INDEX_PATTERN = regex.compile(r"-?[0-9]+")
SLICE_PATTERN = regex.compile(
    r"(?P<start>-?[0-9]+)?:(?P<end>-?[0-9]+)?(?::(?P<step>-?[0-9]+)?)?"
)
SPACE_PATTERN = regex.compile(r"[ \t]*")

Tokens = tuple[str, ...]
Match = tuple[Value, Tokens]


class StepKind(Enum):
    NAME = "name"
    INDEX = "index"
    WILDCARD = "wildcard"
    SLICE = "slice"


@dataclass(frozen=True)
class PathStep:
    """One selector, applied to the children of a node or to its descendants."""

    kind: StepKind
    name: str = ""
    index: int = 0
    start: Optional[int] = None
    end: Optional[int] = None
    step: Optional[int] = None
    descendant: bool = False

    def select(self, node: Value, tokens: Tokens) -> Iterator[Match]:
        if self.kind is StepKind.WILDCARD:
            yield from _children(node, tokens)
        elif self.kind is StepKind.NAME:
            if node.is_object():
                member = node.get(self.name)
                if member is not None:
                    yield member, tokens + (self.name,)
        elif node.is_array():
            items = node.as_array()
            if self.kind is StepKind.INDEX:
                index = self.index + len(items) if self.index < 0 else self.index
                if 0 <= index < len(items):
                    yield items[index], tokens + (str(index),)
            else:
                for index in range(*slice(self.start, self.end, self.step).indices(len(items))):
                    yield items[index], tokens + (str(index),)


def _children(node: Value, tokens: Tokens) -> Iterator[Match]:
    if node.is_object():
        for key, member in node.as_object().items():
            yield member, tokens + (key,)
    elif node.is_array():
        for index, item in enumerate(node.as_array()):
            yield item, tokens + (str(index),)


def _descendants(node: Value, tokens: Tokens) -> Iterator[Match]:
    """Yield ``node`` and everything below it in document order."""
    stack = [(node, tokens)]
    while stack:
        current, current_tokens = stack.pop()
        yield current, current_tokens
        stack.extend(reversed(list(_children(current, current_tokens))))


class _PathReader:
    """Reads a JSONPath expression into steps."""

    def __init__(self, expression: str):
        self.expression = expression
        self.pos = 0

    def error(self, message: str, index: Optional[int] = None) -> PathError:
        return PathError(
            message,
            expression=self.expression,
            index=self.pos if index is None else index,
        )

    def read_steps(self) -> tuple[PathStep, ...]:
        text = self.expression
        if not text:
            raise self.error("JSONPath expression is empty")
        if not text.startswith("$"):
            raise self.error("JSONPath must start with '$'")

        self.pos = 1
        steps = []
        while self.pos < len(text):
            if text.startswith("..", self.pos):
                self.pos += 2
                if text.startswith("[", self.pos):
                    steps.append(self.read_bracket(descendant=True))
                else:
                    steps.append(self.read_dotted(descendant=True))
            elif text[self.pos] == ".":
                self.pos += 1
                steps.append(self.read_dotted(descendant=False))
            elif text[self.pos] == "[":
                steps.append(self.read_bracket(descendant=False))
            else:
                raise self.error(f"Unexpected character {text[self.pos]!r}")
        return tuple(steps)

    def read_dotted(self, descendant: bool) -> PathStep:
        if self.expression.startswith("*", self.pos):
            self.pos += 1
            return PathStep(StepKind.WILDCARD, descendant=descendant)
        match = NAME_PATTERN.match(self.expression, self.pos)
        if not match:
            raise self.error("Expected a member name or '*'")
        self.pos = match.end()
        return PathStep(StepKind.NAME, name=match.group(), descendant=descendant)

    def read_bracket(self, descendant: bool) -> PathStep:
        text = self.expression
        self.pos += 1
        self.skip_spaces()

        if text.startswith("*", self.pos):
            self.pos += 1
            step = PathStep(StepKind.WILDCARD, descendant=descendant)
        elif self.pos < len(text) and text[self.pos] in "'\"":
            step = PathStep(StepKind.NAME, name=self.read_quoted(), descendant=descendant)
        else:
            step = self.read_index_or_slice(descendant)

        self.skip_spaces()
        if not text.startswith("]", self.pos):
            raise self.error("Expected ']'")
        self.pos += 1
        return step

    def read_quoted(self) -> str:
        text = self.expression
        opening = self.pos
        quote = text[opening]
        self.pos += 1

        chars = []
        while self.pos < len(text):
            char = text[self.pos]
            if char == quote:
                self.pos += 1
                return "".join(chars)
            # backslash takes the next character literally
            if char == "\\" and self.pos + 1 < len(text):
                self.pos += 1
                char = text[self.pos]
            chars.append(char)
            self.pos += 1
        raise self.error("Unterminated quoted name", opening)

    def read_index_or_slice(self, descendant: bool) -> PathStep:
        match = SLICE_PATTERN.match(self.expression, self.pos)
        if match:
            start, end, step = (
                None if group is None else int(group)
                for group in match.group("start", "end", "step")
            )
            if step == 0:
                raise self.error("Slice step cannot be zero")
            self.pos = match.end()
            return PathStep(
                StepKind.SLICE, start=start, end=end, step=step, descendant=descendant
            )

        match = INDEX_PATTERN.match(self.expression, self.pos)
        if match:
            self.pos = match.end()
            return PathStep(StepKind.INDEX, index=int(match.group()), descendant=descendant)
        raise self.error("Expected an index, a slice, a quoted name or '*'")

    def skip_spaces(self) -> None:
        self.pos = SPACE_PATTERN.match(self.expression, self.pos).end()


class JSONPath:
    """Parsed JSONPath expression."""

    __slots__ = ("_expression", "_steps")

    def __init__(self, expression: str, steps: tuple[PathStep, ...]):
        self._expression = expression
        self._steps = steps

    @classmethod
    def parse(cls, expression: str) -> "JSONPath":
        """Parse ``expression``; raises PathError(INVALID_PATH)."""
        return cls(expression, _PathReader(expression).read_steps())

    @property
    def steps(self) -> tuple[PathStep, ...]:
        return self._steps

    def _matches(self, document: Value) -> list[Match]:
        matches: list[Match] = [(document, ())]
        for step in self._steps:
            found: list[Match] = []
            for node, tokens in matches:
                if step.descendant:
                    for source, source_tokens in _descendants(node, tokens):
                        found.extend(step.select(source, source_tokens))
                else:
                    found.extend(step.select(node, tokens))
            matches = found
        return matches

    def query(self, document: Value) -> list[Value]:
        """Return every matching node; mutating one mutates the document."""
        return [node for node, _ in self._matches(document)]

    def query_one(self, document: Value) -> Optional[Value]:
        """Return the first matching node, or None when nothing matches."""
        matches = self._matches(document)
        return matches[0][0] if matches else None

    def query_pointers(self, document: Value) -> list[JSONPointer]:
        """Return the location of every match as a JSON Pointer."""
        return [JSONPointer(tokens) for _, tokens in self._matches(document)]

    def __str__(self) -> str:
        return self._expression

    def __repr__(self) -> str:
        return f"JSONPath({self._expression!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JSONPath):
            return NotImplemented
        return self._steps == other._steps

    def __hash__(self) -> int:
        return hash(self._steps)


PathLike = Union[str, JSONPath]


def as_path(path: PathLike) -> JSONPath:
    if isinstance(path, JSONPath):
        return path
    return JSONPath.parse(path)


def query_path(document: Value, path: PathLike) -> list[Value]:
    """
    Run a JSONPath query against a document.

    Args:
        document: Root of the document
        path: Expression such as ``$.store.book[*].author`` or a parsed JSONPath

    Returns:
        The matching nodes in document order; empty when nothing matches

    Raises:
        PathError: INVALID_PATH for a malformed expression
    """
    return as_path(path).query(document)
