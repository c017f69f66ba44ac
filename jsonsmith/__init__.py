"""
jsonsmith - JSON document engine with precise diagnostics.

jsonsmith parses JSON text into an owned tree of Value nodes, serializes it
back, and transforms it with the three standard structural formats.

Key Features:
- Strict RFC 8259 parsing with error code, line, column, byte offset and path
- Source excerpt and caret in every parse error message
- Configurable duplicate key policy, comments and trailing commas
- Security limits on nesting depth, input size, strings, arrays and objects
- Tolerant parsing that skips malformed elements and reports each skip
- JSON Pointer (RFC 6901), JSONPath queries, JSON Patch (RFC 6902), JSON Merge Patch (RFC 7396)

Quick Start:
    import jsonsmith
    doc = jsonsmith.parse('{"items": [1, 2, 3]}')
    jsonsmith.evaluate_pointer(doc, "/items/1").as_number()  # 2.0
    [v.as_number() for v in jsonsmith.query_path(doc, "$.items[1:]")]  # [2.0, 3.0]
    jsonsmith.stringify(doc)  # '{"items":[1,2,3]}'

    # Partial error recovery
    from jsonsmith import parse_partial
    result = parse_partial('[1, tru, 3]')
    result.status  # ParseStatus.PARTIAL
"""

# core must be imported before security, whose exceptions depend on core.tokenizer
from .core.value import Value, ValueType
from .core.engine import parse, Parser
from .core.serializer import stringify
from .utils.config import (
    DuplicateKeyPolicy,
    ErrorReporting,
    ParseConfig,
    ParseLimits,
    ParsingBehavior,
    SizeLimits,
    StructureLimits,
)
from .security.exceptions import (
    ErrorCode,
    JsonSmithError,
    MergePatchError,
    ParseError,
    PatchError,
    PathError,
    PointerError,
    SecurityError,
    StringifyError,
    TypeMismatchError,
)
from .recovery.strategies import (
    ParseStatus,
    PartialParseResult,
    RecoveryLevel,
    parse_partial,
)
from .transform.pointer import JSONPointer, evaluate_pointer
from .transform.path import JSONPath, query_path
from .transform.patch import JSONPatch, PatchOp, PatchOperation, apply_patch, create_patch
from .transform.merge_patch import JSONMergePatch, apply_merge_patch, generate_merge_patch

__version__ = "0.1.0"
__author__ = "jsonsmith contributors"

__all__ = [
    # Value model
    "Value", "ValueType",
    # Parsing and serialization
    "parse", "Parser", "stringify", "parse_partial",
    "ParseStatus", "PartialParseResult", "RecoveryLevel",
    # Configuration classes
    "ParseConfig", "ParseLimits", "SizeLimits", "StructureLimits",
    "ParsingBehavior", "ErrorReporting", "DuplicateKeyPolicy",
    # Transformations
    "JSONPointer", "evaluate_pointer", "JSONPath", "query_path",
    "JSONPatch", "PatchOp", "PatchOperation", "apply_patch", "create_patch",
    "JSONMergePatch", "apply_merge_patch", "generate_merge_patch",
    # Exception classes
    "ErrorCode", "JsonSmithError", "ParseError", "SecurityError",
    "StringifyError", "PointerError", "PatchError", "PathError", "MergePatchError",
    "TypeMismatchError",
]
