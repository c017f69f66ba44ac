"""
Partial parsing for jsonsmith - keep the valid parts of a malformed document.

Tolerant parsing is only used when explicitly requested. Malformed array
elements and object members are skipped up to the next separator and every
skip is recorded, so a partial result is never mistaken for a strict success.
Resource limit violations are never recovered.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..core.engine import Parser, decode_input
from ..core.tokenizer import Mark, TextInput
from ..core.value import Value
from ..security.exceptions import ParseError, SecurityError
from ..utils.config import ParseConfig

logger = logging.getLogger(__name__)


class RecoveryLevel(Enum):
    """Levels of error recovery during parsing."""

    STRICT = "strict"  # Fail on first error
    SKIP_ELEMENTS = "skip_elements"  # Skip malformed elements and members


class ParseStatus(Enum):
    """Outcome of a partial parse."""

    OK = "ok"  # No errors, identical to a strict parse
    PARTIAL = "partial"  # Some elements were skipped
    FAILED = "failed"  # Nothing usable was produced


@dataclass
class PartialParseResult:
    """Result of partial parsing with error recovery."""

    value: Optional[Value] = None
    errors: list[ParseError] = field(default_factory=list)
    status: ParseStatus = ParseStatus.OK

    @property
    def ok(self) -> bool:
        return self.status is ParseStatus.OK

    @property
    def skipped_count(self) -> int:
        """Number of elements or members dropped during recovery."""
        if self.status is ParseStatus.FAILED:
            return max(len(self.errors) - 1, 0)
        return len(self.errors)


class PartialParser(Parser):
    """Parser that records and skips malformed container entries."""

    def __init__(
        self,
        text: str,
        config: Optional[ParseConfig] = None,
        recovery_level: RecoveryLevel = RecoveryLevel.SKIP_ELEMENTS,
    ):
        super().__init__(text, config)
        self.recovery_level = recovery_level
        self.errors: list[ParseError] = []

    def _can_recover(self, error: ParseError) -> bool:
        return self.recovery_level is not RecoveryLevel.STRICT and not isinstance(
            error, SecurityError
        )

    def _recover_element(self, error: ParseError, start: Mark) -> None:
        if not self._can_recover(error):
            raise error

        self.errors.append(error)
        path = error.path or "<root>"
        logger.warning(
            f"Skipping malformed entry at {path} "
            f"(line {error.line}, column {error.column}): {error.code.value}"
        )

        self.lexer.reset(start)
        self.lexer.skip_to_recovery_point()
        logger.debug(f"Resumed parsing at line {self.lexer.line}, column {self.lexer.column}")

    def _recover_separator(self, error: ParseError, closer: str) -> bool:
        if not self._can_recover(error) or self.lexer.at_end():
            raise error

        self.errors.append(error)
        if self.lexer.peek() in "]}":
            # Mismatched closer: close the current container here
            logger.debug(f"Closing container at mismatched {self.lexer.peek()!r}, expected {closer!r}")
            self.lexer.advance()
            return False

        logger.debug(f"Assuming missing ',' before {self.lexer.peek()!r}")
        return True


def parse_partial(
    text: TextInput,
    config: Optional[ParseConfig] = None,
    recovery_level: RecoveryLevel = RecoveryLevel.SKIP_ELEMENTS,
) -> PartialParseResult:
    """
    Parse JSON text, skipping malformed elements instead of failing.

    Args:
        text: JSON document as str or UTF-8 bytes
        config: Optional parse configuration
        recovery_level: SKIP_ELEMENTS to recover, STRICT to stop at the first error

    Returns:
        PartialParseResult with the recovered value, every recorded error and
        a status of OK, PARTIAL or FAILED
    """
    try:
        parser = PartialParser(decode_input(text), config, recovery_level)
    except ParseError as exc:
        return PartialParseResult(None, [exc], ParseStatus.FAILED)

    try:
        value = parser.parse()
    except ParseError as exc:
        logger.debug(f"Partial parse failed with {exc.code.value}")
        return PartialParseResult(None, parser.errors + [exc], ParseStatus.FAILED)

    if parser.errors:
        logger.warning(f"Partial parse skipped {len(parser.errors)} malformed entries")
        return PartialParseResult(value, parser.errors, ParseStatus.PARTIAL)
    return PartialParseResult(value, [], ParseStatus.OK)
