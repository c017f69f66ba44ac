"""
Value model for jsonsmith documents.

A ``Value`` is a tagged node: null, boolean, number, string, array or object.
Arrays and objects exclusively own their children, so a tree never contains
cycles or shared nodes. Callers that want the same content in two places copy
it explicitly with ``Value.copy()``.
"""

import math
from collections.abc import Iterator
from enum import Enum
from typing import Any, Optional, Union

from ..security.exceptions import TypeMismatchError


class ValueType(Enum):
    """Discriminant of a Value."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


Payload = Union[None, bool, float, str, list["Value"], dict[str, "Value"]]


class Value:
    """A JSON document node."""

    __slots__ = ("_type", "_payload")

    def __init__(self, value_type: ValueType = ValueType.NULL, payload: Payload = None):
        self._type = value_type
        self._payload = payload

    # Construction

    @classmethod
    def null(cls) -> "Value":
        return cls()

    @classmethod
    def boolean(cls, flag: bool) -> "Value":
        return cls(ValueType.BOOL, bool(flag))

    @classmethod
    def number(cls, number: Union[int, float]) -> "Value":
        """Create a number; ints too large for a double raise OverflowError."""
        return cls(ValueType.NUMBER, float(number))

    @classmethod
    def string(cls, text: str) -> "Value":
        return cls(ValueType.STRING, text)

    @classmethod
    def array(cls, items: Optional[list["Value"]] = None) -> "Value":
        """Create an array that takes ownership of ``items``."""
        return cls(ValueType.ARRAY, items if items is not None else [])

    @classmethod
    def object(cls, members: Optional[dict[str, "Value"]] = None) -> "Value":
        """Create an object that takes ownership of ``members``."""
        return cls(ValueType.OBJECT, members if members is not None else {})

    @classmethod
    def from_python(cls, data: Any) -> "Value":
        """Build a tree from plain Python data (None, bool, int, float, str, list, dict)."""
        if data is None:
            return cls.null()
        if isinstance(data, bool):
            return cls.boolean(data)
        if isinstance(data, (int, float)):
            return cls.number(data)
        if isinstance(data, str):
            return cls.string(data)
        if isinstance(data, (list, tuple)):
            return cls.array([cls.from_python(item) for item in data])
        if isinstance(data, dict):
            members: dict[str, Value] = {}
            for key, item in data.items():
                if not isinstance(key, str):
                    raise TypeError(f"Object keys must be str, got {type(key).__name__}")
                members[key] = cls.from_python(item)
            return cls.object(members)
        if isinstance(data, Value):
            return data.copy()
        raise TypeError(f"Cannot convert {type(data).__name__} to a JSON value")

    def to_python(self) -> Any:
        """Convert the tree to plain Python data; numbers become floats."""
        if self._type is ValueType.ARRAY:
            return [item.to_python() for item in self._payload]  # type: ignore[union-attr]
        if self._type is ValueType.OBJECT:
            return {
                key: item.to_python()
                for key, item in self._payload.items()  # type: ignore[union-attr]
            }
        return self._payload

    # Type queries

    @property
    def type(self) -> ValueType:
        return self._type

    def is_null(self) -> bool:
        return self._type is ValueType.NULL

    def is_bool(self) -> bool:
        return self._type is ValueType.BOOL

    def is_number(self) -> bool:
        return self._type is ValueType.NUMBER

    def is_string(self) -> bool:
        return self._type is ValueType.STRING

    def is_array(self) -> bool:
        return self._type is ValueType.ARRAY

    def is_object(self) -> bool:
        return self._type is ValueType.OBJECT

    def is_container(self) -> bool:
        return self._type in (ValueType.ARRAY, ValueType.OBJECT)

    # Typed accessors

    def _expect(self, expected: ValueType) -> None:
        if self._type is not expected:
            raise TypeMismatchError(expected.value, self._type.value)

    def as_bool(self) -> bool:
        self._expect(ValueType.BOOL)
        return self._payload  # type: ignore[return-value]

    def as_number(self) -> float:
        self._expect(ValueType.NUMBER)
        return self._payload  # type: ignore[return-value]

    def as_string(self) -> str:
        self._expect(ValueType.STRING)
        return self._payload  # type: ignore[return-value]

    def as_array(self) -> list["Value"]:
        """The owned item list; mutating it mutates this array."""
        self._expect(ValueType.ARRAY)
        return self._payload  # type: ignore[return-value]

    def as_object(self) -> dict[str, "Value"]:
        """The owned member mapping, in insertion order."""
        self._expect(ValueType.OBJECT)
        return self._payload  # type: ignore[return-value]

    # Container helpers

    def __len__(self) -> int:
        if self._type is ValueType.ARRAY or self._type is ValueType.OBJECT:
            return len(self._payload)  # type: ignore[arg-type]
        raise TypeMismatchError("array or object", self._type.value)

    def __iter__(self) -> Iterator[Any]:
        """Iterate array items or object keys."""
        if self._type is ValueType.ARRAY or self._type is ValueType.OBJECT:
            return iter(self._payload)  # type: ignore[arg-type]
        raise TypeMismatchError("array or object", self._type.value)

    def __contains__(self, key: object) -> bool:
        return key in self.as_object()

    def __getitem__(self, key: Union[int, str]) -> "Value":
        if isinstance(key, int):
            return self.as_array()[key]
        return self.as_object()[key]

    def append(self, item: "Value") -> None:
        self.as_array().append(item)

    def insert(self, index: int, item: "Value") -> None:
        self.as_array().insert(index, item)

    def get(self, key: str, default: Optional["Value"] = None) -> Optional["Value"]:
        return self.as_object().get(key, default)

    def set(self, key: str, item: "Value") -> None:
        """Insert or overwrite a member; an existing key keeps its position."""
        self.as_object()[key] = item

    def remove(self, key: str) -> "Value":
        """Detach and return a member. Raises KeyError when absent."""
        return self.as_object().pop(key)

    # Ownership

    def copy(self) -> "Value":
        """Deep copy: every owned child is duplicated."""
        if self._type is ValueType.ARRAY:
            return Value(
                ValueType.ARRAY,
                [item.copy() for item in self._payload],  # type: ignore[union-attr]
            )
        if self._type is ValueType.OBJECT:
            return Value(
                ValueType.OBJECT,
                {
                    key: item.copy()
                    for key, item in self._payload.items()  # type: ignore[union-attr]
                },
            )
        return Value(self._type, self._payload)

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, Any]) -> "Value":
        return self.copy()

    def take(self) -> "Value":
        """Move the content out into a new Value, leaving this one null."""
        moved = Value(self._type, self._payload)
        self._type = ValueType.NULL
        self._payload = None
        return moved

    def assign(self, other: "Value") -> None:
        """Replace this node's content by moving ``other`` into it."""
        if other is self:
            return
        moved = other.take()
        self.release()
        self._type = moved._type
        self._payload = moved._payload

    def release(self) -> None:
        """Release all owned children, then reset this node to null."""
        pending = [self]
        while pending:
            node = pending.pop()
            if node._type is ValueType.ARRAY:
                pending.extend(node._payload)  # type: ignore[arg-type]
                node._payload.clear()  # type: ignore[union-attr]
            elif node._type is ValueType.OBJECT:
                pending.extend(node._payload.values())  # type: ignore[union-attr]
                node._payload.clear()  # type: ignore[union-attr]
            node._type = ValueType.NULL
            node._payload = None

    # Comparison and display

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self._type is not other._type:
            return False
        if self._type is ValueType.ARRAY:
            mine: list[Value] = self._payload  # type: ignore[assignment]
            theirs: list[Value] = other._payload  # type: ignore[assignment]
            return len(mine) == len(theirs) and all(
                left == right for left, right in zip(mine, theirs)
            )
        if self._type is ValueType.OBJECT:
            members: dict[str, Value] = self._payload  # type: ignore[assignment]
            other_members: dict[str, Value] = other._payload  # type: ignore[assignment]
            if len(members) != len(other_members):
                return False
            # insertion order is part of equality
            return all(
                left_key == right_key and left == right
                for (left_key, left), (right_key, right) in zip(
                    members.items(), other_members.items()
                )
            )
        return self._payload == other._payload

    __hash__ = None  # type: ignore[assignment]

    def is_finite(self) -> bool:
        """False when this node holds NaN or an infinity."""
        return not (self._type is ValueType.NUMBER and not math.isfinite(self._payload))  # type: ignore[arg-type]

    def __repr__(self) -> str:
        if self._type is ValueType.NULL:
            return "Value.null()"
        return f"Value({self._type.value}, {self._payload!r})"

    def __str__(self) -> str:
        # pylint: disable=import-outside-toplevel
        from .serializer import stringify

        return stringify(self)
