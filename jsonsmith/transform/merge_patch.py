"""
JSON Merge Patch (RFC 7396) for jsonsmith.

A merge patch mirrors the shape of the document it changes: object members
overwrite or recurse, ``null`` deletes. Because ``null`` is reserved for
deletion, a merge patch cannot set a member to a literal ``null``. It also
cannot move members: overwritten members keep their place and new members are
appended. ``generate_merge_patch`` raises MergePatchError when asked for
either.
"""

import logging
from typing import Optional

from ..core.engine import parse
from ..core.tokenizer import TextInput
from ..core.value import Value
from ..security.exceptions import ErrorCode, MergePatchError
from .patch import keeps_member_order
from .pointer import JSONPointer

logger = logging.getLogger(__name__)


def apply_merge_patch(target: Value, patch: Value) -> None:
    """Merge ``patch`` into ``target`` in place; ``patch`` is not modified."""
    if not patch.is_object():
        target.assign(patch.copy())
        return

    if not target.is_object():
        target.assign(Value.object())

    for key, member in patch.as_object().items():
        existing = target.get(key)
        if member.is_null():
            if existing is not None:
                target.remove(key).release()
        elif member.is_object() and existing is not None and existing.is_object():
            apply_merge_patch(existing, member)
        else:
            if existing is not None:
                existing.release()
            target.set(key, member.copy())


def generate_merge_patch(source: Value, target: Value) -> Value:
    """
    Build the minimal merge patch that turns ``source`` into ``target``.

    When nothing changes the result is ``{}`` for two objects and a copy of
    ``target`` otherwise, both of which apply as a no-op.

    Raises:
        MergePatchError: NULL_NOT_REPRESENTABLE if ``target`` sets a member
            to null, which a merge patch can only express as a deletion;
            ORDER_NOT_REPRESENTABLE if an object in ``target`` orders its
            members in a way applying the patch cannot reproduce
    """
    if source.is_object() and target.is_object():
        patch = _diff_objects(source, target, JSONPointer())
        return patch if patch is not None else Value.object()

    if target.is_object():
        # Applied to a non-object, the patch starts from an empty object, so
        # every member is read as a merge instruction
        for key, member in target.as_object().items():
            _check_member(member, JSONPointer().child(key))
    return target.copy()


def _diff_objects(source: Value, target: Value, pointer: JSONPointer) -> Optional[Value]:
    """Merge patch members for two objects, or None when they are equal."""
    if not keeps_member_order(source, target):
        raise MergePatchError(
            "Merge patch cannot reorder members; kept members must stay in "
            "their original order and new members must come last",
            code=ErrorCode.ORDER_NOT_REPRESENTABLE,
            path=str(pointer),
        )

    members: dict[str, Value] = {}

    for key in source:
        if key not in target:
            members[key] = Value.null()

    for key, wanted in target.as_object().items():
        child = pointer.child(key)
        current = source.get(key)
        if current is not None and current.is_object() and wanted.is_object():
            nested = _diff_objects(current, wanted, child)
            if nested is not None:
                members[key] = nested
        elif current is None or current != wanted:
            _check_member(wanted, child)
            members[key] = wanted.copy()

    if not members:
        return None
    return Value.object(members)


def _check_member(member: Value, pointer: JSONPointer) -> None:
    if member.is_null():
        raise MergePatchError(
            "Merge patch cannot set a member to null; null deletes the member",
            code=ErrorCode.NULL_NOT_REPRESENTABLE,
            path=str(pointer),
        )


class JSONMergePatch:
    """A merge patch document."""

    def __init__(self, document: Value):
        self.document = document

    @classmethod
    def from_text(cls, text: TextInput) -> "JSONMergePatch":
        return cls(parse(text))

    @classmethod
    def create(cls, source: Value, target: Value) -> "JSONMergePatch":
        return cls(generate_merge_patch(source, target))

    def apply(self, target: Value) -> Value:
        """Return a merged copy of ``target``, leaving ``target`` unchanged."""
        result = target.copy()
        apply_merge_patch(result, self.document)
        logger.debug(f"Applied merge patch with {_member_count(self.document)} top-level members")
        return result

    def to_value(self) -> Value:
        return self.document.copy()

    def __str__(self) -> str:
        return str(self.document)


def _member_count(document: Value) -> int:
    return len(document) if document.is_object() else 0
