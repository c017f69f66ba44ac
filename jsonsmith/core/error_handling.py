"""
Error context building and reporting for parse failures.

Context is built only when an error is raised, so successful parses pay
nothing for diagnostics.
"""

from typing import Optional

from ..security.exceptions import (
    ErrorCode,
    ErrorContext,
    ErrorSuggestionEngine,
    ParseError,
    SecurityError,
)
from .tokenizer import Position


class ErrorContextBuilder:
    """Builds error context information from source text and a position."""

    @staticmethod
    def build_context(
        text: str, position: Position, context_length: int = 40
    ) -> ErrorContext:
        """Build the source line excerpt and caret for ``position``."""
        lines = text.split("\n")
        line_index = min(max(position.line - 1, 0), len(lines) - 1)
        line_text = lines[line_index].rstrip("\r")
        column_index = min(max(position.column - 1, 0), len(line_text))

        half = max(context_length // 2, 1)
        start = max(0, column_index - half)
        end = min(len(line_text), column_index + half)

        excerpt = line_text[start:end]
        prefix = "..." if start > 0 else ""
        suffix = "..." if end < len(line_text) else ""

        return ErrorContext(
            text=text,
            position=position,
            context_before=line_text[start:column_index],
            context_after=line_text[column_index:end],
            error_char=line_text[column_index : column_index + 1],
            line_text=f"{prefix}{excerpt}{suffix}",
            column_indicator=" " * (len(prefix) + column_index - start) + "^",
        )


class ErrorReporter:
    """Creates positioned parse errors for one input text."""

    def __init__(
        self, text: str, include_context: bool = True, max_error_context: int = 40
    ):
        self.text = text
        self.lines = text.split("\n")
        self.include_context = include_context
        self.max_error_context = max_error_context

    def create_context(self, position: Position) -> Optional[ErrorContext]:
        if not self.include_context or not self.text:
            return None
        return ErrorContextBuilder.build_context(
            self.text, position, self.max_error_context
        )

    def create_parse_error(
        self,
        message: str,
        position: Position,
        suggestions: Optional[list[str]] = None,
        code: ErrorCode = ErrorCode.INVALID_VALUE,
        offset: int = 0,
        path: str = "",
    ) -> ParseError:
        """Create a ParseError with context and default suggestions."""
        if suggestions is None:
            suggestions = ErrorSuggestionEngine.suggest_for_code(code)
        return ParseError(
            message,
            position,
            self.create_context(position),
            suggestions,
            code,
            offset=offset,
            path=path,
        )

    def create_security_error(
        self,
        message: str,
        position: Optional[Position] = None,
        code: ErrorCode = ErrorCode.MAX_DEPTH_EXCEEDED,
        offset: int = 0,
        path: str = "",
    ) -> SecurityError:
        """Create a SecurityError, positioned when a position is known."""
        context = self.create_context(position) if position else None
        return SecurityError(
            message,
            position,
            context,
            ErrorSuggestionEngine.suggest_for_code(code),
            code,
            offset=offset,
            path=path,
        )
