"""
JSON Patch (RFC 6902) for jsonsmith.

A patch is an ordered list of operations applied as one unit. Operations run
against a deep copy of the document, so a failing operation (including a
failing ``test``) leaves the caller's document untouched.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..core.engine import parse
from ..core.tokenizer import TextInput
from ..core.value import Value
from ..security.exceptions import ErrorCode, PatchError, PointerError
from .pointer import JSONPointer, PointerLike, as_pointer

logger = logging.getLogger(__name__)


class PatchOp(Enum):
    """Operation kinds defined by RFC 6902."""

    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    COPY = "copy"
    TEST = "test"


OPS_WITH_FROM = (PatchOp.MOVE, PatchOp.COPY)
OPS_WITH_VALUE = (PatchOp.ADD, PatchOp.REPLACE, PatchOp.TEST)


@dataclass
class PatchOperation:
    """A single patch operation."""

    op: PatchOp
    path: JSONPointer
    from_path: Optional[JSONPointer] = None
    value: Optional[Value] = None

    def __post_init__(self) -> None:
        if not isinstance(self.op, PatchOp):
            try:
                self.op = PatchOp(self.op)
            except ValueError:
                raise PatchError(f"Unknown patch operation {self.op!r}") from None
        self.path = as_pointer(self.path)
        if self.from_path is not None:
            self.from_path = as_pointer(self.from_path)

        if self.op in OPS_WITH_FROM and self.from_path is None:
            raise PatchError(
                f"'{self.op.value}' operation requires 'from'", operation=self.op.value
            )
        if self.op in OPS_WITH_VALUE and self.value is None:
            raise PatchError(
                f"'{self.op.value}' operation requires 'value'", operation=self.op.value
            )
        if self.op is PatchOp.REMOVE and self.path.is_root():
            raise PatchError("Cannot remove the document root", operation="remove")

    @classmethod
    def from_value(cls, entry: Value) -> "PatchOperation":
        """Read one operation object such as ``{"op": "add", "path": "/a", "value": 1}``."""
        if not entry.is_object():
            raise PatchError(f"Patch operation must be an object, got {entry.type.value}")

        op_name = _string_member(entry, "op")
        try:
            op = PatchOp(op_name)
        except ValueError:
            raise PatchError(f"Unknown patch operation {op_name!r}") from None

        from_text = _string_member(entry, "from") if op in OPS_WITH_FROM else None
        value = entry.get("value")
        return cls(
            op,
            JSONPointer.parse(_string_member(entry, "path")),
            JSONPointer.parse(from_text) if from_text is not None else None,
            value.copy() if value is not None and op in OPS_WITH_VALUE else None,
        )

    def to_value(self) -> Value:
        members = {
            "op": Value.string(self.op.value),
            "path": Value.string(str(self.path)),
        }
        if self.from_path is not None:
            members["from"] = Value.string(str(self.from_path))
        if self.value is not None:
            members["value"] = self.value.copy()
        return Value.object(members)

    def apply(self, document: Value) -> None:
        """Apply this operation to ``document`` in place."""
        if self.op is PatchOp.ADD:
            self.path.add(document, self.value.copy())
        elif self.op is PatchOp.REMOVE:
            self.path.remove(document).release()
        elif self.op is PatchOp.REPLACE:
            self.path.replace(document, self.value.copy())
        elif self.op is PatchOp.MOVE:
            self._move(document)
        elif self.op is PatchOp.COPY:
            self.path.add(document, self.from_path.resolve(document).copy())
        else:
            self._test(document)

    def _move(self, document: Value) -> None:
        if self.from_path == self.path:
            # Still has to exist
            self.path.resolve(document)
            return
        if self.from_path.is_prefix_of(self.path):
            raise PatchError(
                f"Cannot move '{self.from_path}' into its own child '{self.path}'"
            )
        moved = self.from_path.remove(document)
        self.path.add(document, moved)

    def _test(self, document: Value) -> None:
        actual = self.path.resolve(document)
        if actual != self.value:
            raise PatchError(
                f"Test failed: value at '{self.path}' does not match",
                code=ErrorCode.PATCH_TEST_FAILED,
            )


def _string_member(entry: Value, key: str) -> str:
    member = entry.get(key)
    if member is None:
        raise PatchError(f"Patch operation is missing '{key}'")
    if not member.is_string():
        raise PatchError(f"Patch operation member '{key}' must be a string")
    return member.as_string()


class JSONPatch:
    """Ordered sequence of patch operations."""

    def __init__(self, operations: Optional[list[PatchOperation]] = None):
        self.operations = list(operations or [])

    @classmethod
    def from_value(cls, patch: Value) -> "JSONPatch":
        """Read a patch document (an array of operation objects)."""
        if not patch.is_array():
            raise PatchError(f"Patch document must be an array, got {patch.type.value}")

        operations = []
        for index, entry in enumerate(patch):
            try:
                operations.append(PatchOperation.from_value(entry))
            except PatchError as exc:
                raise PatchError(exc.message, exc.code, exc.operation, index) from None
            except PointerError as exc:
                raise PatchError(
                    f"{exc.message} (pointer: '{exc.pointer}')", exc.code, index=index
                ) from None
        return cls(operations)

    @classmethod
    def from_text(cls, text: TextInput) -> "JSONPatch":
        patch = parse(text)
        try:
            return cls.from_value(patch)
        finally:
            patch.release()

    def to_value(self) -> Value:
        return Value.array([operation.to_value() for operation in self.operations])

    def apply(self, document: Value) -> Value:
        """
        Apply every operation to a copy of ``document``.

        Returns:
            The patched copy; ``document`` itself is never modified

        Raises:
            PatchError: If any operation fails; the code is POINTER_NOT_FOUND,
                INVALID_POINTER, INVALID_PATCH_OPERATION or PATCH_TEST_FAILED
        """
        result = document.copy()
        for index, operation in enumerate(self.operations):
            logger.debug(f"Applying patch operation {index}: {operation.op.value} {operation.path}")
            try:
                operation.apply(result)
            except PatchError as exc:
                result.release()
                raise PatchError(exc.message, exc.code, operation.op.value, index) from None
            except PointerError as exc:
                result.release()
                raise PatchError(
                    f"{exc.message} (pointer: '{exc.pointer}')",
                    exc.code,
                    operation.op.value,
                    index,
                ) from None
        return result

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self) -> Iterator[PatchOperation]:
        return iter(self.operations)

    def __str__(self) -> str:
        return str(self.to_value())


PatchLike = Union[JSONPatch, Value, list[PatchOperation]]


def apply_patch(document: Value, patch: PatchLike) -> Value:
    """
    Apply a JSON Patch and return the patched document.

    Args:
        document: Document to patch; it is left unchanged
        patch: A JSONPatch, a patch document Value, or a list of operations

    Raises:
        PatchError: If the patch is malformed or any operation fails
    """
    if isinstance(patch, Value):
        patch = JSONPatch.from_value(patch)
    elif not isinstance(patch, JSONPatch):
        patch = JSONPatch(patch)
    return patch.apply(document)


# Patch generation


def create_patch(source: Value, target: Value) -> JSONPatch:
    """Build a patch that turns ``source`` into ``target``."""
    operations: list[PatchOperation] = []
    _diff(source, target, JSONPointer(), operations)
    logger.debug(f"Generated patch with {len(operations)} operations")
    return JSONPatch(operations)


def _diff(
    source: Value, target: Value, pointer: JSONPointer, operations: list[PatchOperation]
) -> None:
    if source == target:
        return

    if source.is_object() and target.is_object() and keeps_member_order(source, target):
        for key in source:
            if key not in target:
                operations.append(PatchOperation(PatchOp.REMOVE, pointer.child(key)))
        for key, member in target.as_object().items():
            existing = source.get(key)
            if existing is None:
                operations.append(
                    PatchOperation(PatchOp.ADD, pointer.child(key), value=member.copy())
                )
            else:
                _diff(existing, member, pointer.child(key), operations)
        return

    if source.is_array() and target.is_array():
        common = min(len(source), len(target))
        for index in range(common):
            _diff(source[index], target[index], pointer.child(index), operations)
        for index in range(len(source) - 1, common - 1, -1):
            operations.append(PatchOperation(PatchOp.REMOVE, pointer.child(index)))
        for index in range(common, len(target)):
            operations.append(
                PatchOperation(PatchOp.ADD, pointer.child(index), value=target[index].copy())
            )
        return

    operations.append(PatchOperation(PatchOp.REPLACE, pointer, value=target.copy()))


def keeps_member_order(source: Value, target: Value) -> bool:
    """True when removals and appended additions reproduce the target's key order."""
    kept = [key for key in source if key in target]
    target_keys = list(target)
    return target_keys[: len(kept)] == kept
