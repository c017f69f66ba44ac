"""
Test cases for error context building and reporting.

Tests focus on the source excerpt, caret placement and the errors the reporter creates.
"""

import unittest

import jsonsmith
from jsonsmith import ErrorCode, ParseConfig, ParseError, SecurityError
from jsonsmith.core.error_handling import ErrorContextBuilder, ErrorReporter
from jsonsmith.core.tokenizer import Position
from jsonsmith.utils.config import ErrorReporting


class TestErrorContextBuilder(unittest.TestCase):
    """Test ErrorContextBuilder.build_context."""

    def test_short_line(self):
        """Test a line that fits entirely in the excerpt."""
        context = ErrorContextBuilder.build_context("[1 2]", Position(1, 4))

        self.assertEqual(context.line_text, "[1 2]")
        self.assertEqual(context.column_indicator, "   ^")
        self.assertEqual(context.error_char, "2")
        self.assertEqual(context.context_before, "[1 ")
        self.assertEqual(context.context_after, "2]")

    def test_long_line_is_truncated(self):
        """Test long lines are cut around the error with ellipses."""
        text = "x" * 100
        context = ErrorContextBuilder.build_context(text, Position(1, 60), 40)

        self.assertEqual(context.line_text, "..." + "x" * 40 + "...")
        self.assertEqual(context.column_indicator, " " * 23 + "^")

    def test_selects_error_line(self):
        """Test the excerpt comes from the error's line."""
        context = ErrorContextBuilder.build_context("a\nbc\nd", Position(2, 2))
        self.assertEqual(context.line_text, "bc")
        self.assertEqual(context.column_indicator, " ^")
        self.assertEqual(context.error_char, "c")

    def test_end_of_input(self):
        """Test a position one past the last character."""
        context = ErrorContextBuilder.build_context("[1", Position(1, 3))
        self.assertEqual(context.error_char, "")
        self.assertEqual(context.column_indicator, "  ^")


class TestErrorReporter(unittest.TestCase):
    """Test ErrorReporter error creation."""

    def test_create_parse_error(self):
        """Test parse errors carry context and default suggestions."""
        reporter = ErrorReporter('{"a" 1}')
        error = reporter.create_parse_error(
            "Expected ':'", Position(1, 6), code=ErrorCode.MISS_COLON, offset=5, path="a"
        )

        self.assertIsInstance(error, ParseError)
        self.assertEqual(error.code, ErrorCode.MISS_COLON)
        self.assertEqual(error.offset, 5)
        self.assertEqual(error.path, "a")
        self.assertIsNotNone(error.context)
        self.assertTrue(error.suggestions)

    def test_context_disabled(self):
        """Test include_context=False skips the excerpt."""
        reporter = ErrorReporter("[1 2]", include_context=False)
        error = reporter.create_parse_error("msg", Position(1, 4))
        self.assertIsNone(error.context)
        self.assertNotIn("Context:", str(error))

    def test_security_error_without_position(self):
        """Test security errors may omit the location."""
        reporter = ErrorReporter("[]")
        error = reporter.create_security_error(
            "too big", code=ErrorCode.MAX_INPUT_SIZE_EXCEEDED
        )
        self.assertIsInstance(error, SecurityError)
        self.assertIsNone(error.context)
        self.assertEqual(error.line, 0)


class TestParseErrorMessages(unittest.TestCase):
    """Test the message produced by a real parse failure."""

    def test_message_layout(self):
        """Test location, context and suggestions in str(error)."""
        with self.assertRaises(ParseError) as ctx:
            jsonsmith.parse("[1 2]")
        lines = str(ctx.exception).split("\n")

        self.assertTrue(lines[0].endswith("at line 1, column 4"))
        self.assertEqual(lines[1], "Context:")
        self.assertEqual(lines[2], "  [1 2]")
        self.assertEqual(lines[3], "     ^")
        self.assertEqual(lines[4], "Suggestions:")

    def test_config_disables_context(self):
        """Test ErrorReporting settings reach the parser."""
        config = ParseConfig(error_reporting=ErrorReporting(include_context=False))
        with self.assertRaises(ParseError) as ctx:
            jsonsmith.parse("[1 2]", config)
        self.assertIsNone(ctx.exception.context)


if __name__ == "__main__":
    unittest.main()
