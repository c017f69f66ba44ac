"""
JSON Pointer (RFC 6901) for jsonsmith.

A pointer is a sequence of reference tokens. ``/a~1b/0`` addresses member
``a/b`` of the root object and then the first item of that member. The empty
pointer addresses the whole document.
"""

from typing import Optional, Union

import regex

from ..core.constants import ARRAY_INDEX_PATTERN
from ..core.value import Value
from ..security.exceptions import ErrorCode, PointerError

# "~" must be followed by 0 or 1
INVALID_ESCAPE_PATTERN = regex.compile(r"~(?![01])")

END_OF_ARRAY = "-"


def unescape_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def escape_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


class JSONPointer:
    """Parsed JSON Pointer."""

    __slots__ = ("_tokens",)

    def __init__(self, tokens: tuple[str, ...] = ()):
        self._tokens = tuple(tokens)

    @classmethod
    def parse(cls, text: str) -> "JSONPointer":
        """Parse pointer syntax; raises PointerError(INVALID_POINTER)."""
        if text == "":
            return cls()
        if not text.startswith("/"):
            raise PointerError(
                "Pointer must be empty or start with '/'",
                code=ErrorCode.INVALID_POINTER,
                pointer=text,
            )
        if INVALID_ESCAPE_PATTERN.search(text):
            raise PointerError(
                "'~' must be followed by '0' or '1'",
                code=ErrorCode.INVALID_POINTER,
                pointer=text,
            )
        return cls(tuple(unescape_token(token) for token in text[1:].split("/")))

    @classmethod
    def from_tokens(cls, tokens: list[str]) -> "JSONPointer":
        return cls(tuple(tokens))

    @property
    def tokens(self) -> tuple[str, ...]:
        return self._tokens

    def is_root(self) -> bool:
        return not self._tokens

    @property
    def parent(self) -> "JSONPointer":
        """Pointer to the containing node; the root is its own parent."""
        return JSONPointer(self._tokens[:-1])

    @property
    def last(self) -> Optional[str]:
        return self._tokens[-1] if self._tokens else None

    def child(self, token: Union[str, int]) -> "JSONPointer":
        return JSONPointer(self._tokens + (str(token),))

    def is_prefix_of(self, other: "JSONPointer") -> bool:
        """True when ``other`` is this pointer or lies below it."""
        return other._tokens[: len(self._tokens)] == self._tokens

    def __str__(self) -> str:
        return "".join("/" + escape_token(token) for token in self._tokens)

    def __repr__(self) -> str:
        return f"JSONPointer({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JSONPointer):
            return NotImplemented
        return self._tokens == other._tokens

    def __hash__(self) -> int:
        return hash(self._tokens)

    # Evaluation

    def _not_found(self, message: str) -> PointerError:
        return PointerError(message, code=ErrorCode.POINTER_NOT_FOUND, pointer=str(self))

    def _array_index(self, token: str, length: int, allow_end: bool) -> int:
        if token == END_OF_ARRAY and allow_end:
            return length
        if not ARRAY_INDEX_PATTERN.fullmatch(token):
            raise self._not_found(f"Invalid array index {token!r}")
        index = int(token)
        limit = length if allow_end else length - 1
        if index > limit:
            raise self._not_found(f"Array index {index} out of range")
        return index

    def _step(self, node: Value, token: str) -> Value:
        if node.is_object():
            member = node.get(token)
            if member is None:
                raise self._not_found(f"Member {token!r} not found")
            return member
        if node.is_array():
            return node[self._array_index(token, len(node), allow_end=False)]
        raise self._not_found(
            f"Cannot resolve {token!r} inside a {node.type.value} value"
        )

    def resolve(self, document: Value) -> Value:
        """Return the referenced node of ``document`` (not a copy)."""
        node = document
        for token in self._tokens:
            node = self._step(node, token)
        return node

    def exists(self, document: Value) -> bool:
        try:
            self.resolve(document)
        except PointerError:
            return False
        return True

    # Mutation

    def add(self, document: Value, value: Value) -> None:
        """Insert ``value`` at this location, taking ownership of it."""
        if self.is_root():
            document.assign(value)
            return

        container = self.parent.resolve(document)
        token = self._tokens[-1]
        if container.is_object():
            existing = container.get(token)
            if existing is not None:
                existing.release()
            container.set(token, value)
        elif container.is_array():
            index = self._array_index(token, len(container), allow_end=True)
            container.insert(index, value)
        else:
            raise self._not_found(
                f"Cannot add {token!r} to a {container.type.value} value"
            )

    def remove(self, document: Value) -> Value:
        """Detach and return the node at this location."""
        if self.is_root():
            raise PointerError(
                "Cannot remove the document root",
                code=ErrorCode.INVALID_POINTER,
                pointer=str(self),
            )

        container = self.parent.resolve(document)
        token = self._tokens[-1]
        if container.is_object():
            if token not in container:
                raise self._not_found(f"Member {token!r} not found")
            return container.remove(token)
        if container.is_array():
            index = self._array_index(token, len(container), allow_end=False)
            return container.as_array().pop(index)
        raise self._not_found(
            f"Cannot remove {token!r} from a {container.type.value} value"
        )

    def replace(self, document: Value, value: Value) -> None:
        """Overwrite the existing node at this location with ``value``."""
        self.resolve(document).assign(value)


PointerLike = Union[str, JSONPointer]


def as_pointer(pointer: PointerLike) -> JSONPointer:
    if isinstance(pointer, JSONPointer):
        return pointer
    return JSONPointer.parse(pointer)


def evaluate_pointer(document: Value, pointer: PointerLike) -> Value:
    """
    Resolve a JSON Pointer against a document.

    Args:
        document: Root of the document
        pointer: Pointer text such as ``/a/0`` or a parsed JSONPointer

    Returns:
        The referenced node itself; mutating it mutates the document

    Raises:
        PointerError: INVALID_POINTER for malformed syntax, POINTER_NOT_FOUND
            when a token cannot be resolved
    """
    return as_pointer(pointer).resolve(document)
