"""
jsonsmith Document Transformation.

This module provides JSON Pointer, JSONPath, JSON Patch and JSON Merge Patch.
"""

from .merge_patch import JSONMergePatch, apply_merge_patch, generate_merge_patch
from .patch import JSONPatch, PatchOp, PatchOperation, apply_patch, create_patch
from .path import JSONPath, query_path
from .pointer import JSONPointer, evaluate_pointer

__all__ = [
    "JSONMergePatch", "apply_merge_patch", "generate_merge_patch",
    "JSONPatch", "PatchOp", "PatchOperation", "apply_patch", "create_patch",
    "JSONPath", "query_path",
    "JSONPointer", "evaluate_pointer",
]
