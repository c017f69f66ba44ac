"""
Test cases for parse configuration.
"""

import unittest

from jsonsmith.utils.config import (
    DuplicateKeyPolicy,
    ErrorReporting,
    ParseConfig,
    ParseLimits,
    ParsingBehavior,
    SizeLimits,
    StructureLimits,
)


class TestParseLimits(unittest.TestCase):
    """Test ParseLimits construction."""

    def test_defaults(self):
        """Test the default limits."""
        limits = ParseLimits()
        self.assertEqual(limits.max_input_size, 10 * 1024 * 1024)
        self.assertEqual(limits.max_string_length, 1024 * 1024)
        self.assertEqual(limits.max_nesting_depth, 100)
        self.assertEqual(limits.max_array_items, 1_000_000)
        self.assertEqual(limits.max_object_keys, 100_000)

    def test_flat_keywords(self):
        """Test flat limit keywords fill the nested groups."""
        limits = ParseLimits(max_nesting_depth=5, max_string_length=7)
        self.assertEqual(limits.structure_limits.max_nesting_depth, 5)
        self.assertEqual(limits.size_limits.max_string_length, 7)

    def test_nested_groups(self):
        """Test passing the nested dataclasses directly."""
        limits = ParseLimits(
            size_limits=SizeLimits(max_input_size=50),
            structure_limits=StructureLimits(max_array_items=2),
        )
        self.assertEqual(limits.max_input_size, 50)
        self.assertEqual(limits.max_array_items, 2)

    def test_unknown_limit(self):
        """Test misspelled limits are rejected."""
        with self.assertRaises(TypeError):
            ParseLimits(max_depth=3)

    def test_non_positive_limit(self):
        """Test limits must be positive."""
        with self.assertRaises(ValueError):
            ParseLimits(max_nesting_depth=0)


class TestParseConfig(unittest.TestCase):
    """Test ParseConfig defaults and presets."""

    def test_defaults(self):
        """Test an empty config is strict RFC 8259."""
        config = ParseConfig()
        self.assertIsInstance(config.limits, ParseLimits)
        self.assertEqual(config.duplicate_keys, DuplicateKeyPolicy.LAST_WINS)
        self.assertFalse(config.allow_comments)
        self.assertFalse(config.allow_trailing_commas)
        self.assertTrue(config.include_context)
        self.assertEqual(config.max_error_context, 40)

    def test_strict_preset(self):
        """Test the strict preset matches the defaults."""
        self.assertEqual(ParseConfig.strict(), ParseConfig())

    def test_lenient_preset(self):
        """Test the lenient preset enables extensions."""
        config = ParseConfig.lenient()
        self.assertTrue(config.allow_comments)
        self.assertTrue(config.allow_trailing_commas)

    def test_custom_groups(self):
        """Test custom behavior and error reporting groups."""
        config = ParseConfig(
            behavior=ParsingBehavior(duplicate_keys=DuplicateKeyPolicy.REJECT),
            error_reporting=ErrorReporting(include_context=False, max_error_context=10),
        )
        self.assertEqual(config.duplicate_keys, DuplicateKeyPolicy.REJECT)
        self.assertFalse(config.include_context)
        self.assertEqual(config.max_error_context, 10)


if __name__ == "__main__":
    unittest.main()
