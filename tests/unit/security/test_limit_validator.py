"""
Test cases for the LimitValidator.
"""

import unittest

from jsonsmith.security.exceptions import ErrorCode, SecurityError
from jsonsmith.security.limits import LimitValidator
from jsonsmith.utils.config import ParseLimits


class TestLimitValidator(unittest.TestCase):
    """Test each limit check."""

    def setUp(self):
        """Set up a validator with small limits."""
        self.validator = LimitValidator(
            ParseLimits(
                max_input_size=10,
                max_string_length=5,
                max_nesting_depth=2,
                max_array_items=3,
                max_object_keys=3,
            )
        )

    def assertLimit(self, code, check, *args):
        with self.assertRaises(SecurityError) as ctx:
            check(*args)
        self.assertEqual(ctx.exception.code, code)
        self.assertIsNone(ctx.exception.position)

    def test_input_size(self):
        """Test the input size boundary."""
        self.validator.validate_input_size("x" * 10)
        self.assertLimit(ErrorCode.MAX_INPUT_SIZE_EXCEEDED, self.validator.validate_input_size, "x" * 11)

    def test_string_length(self):
        """Test the string length boundary."""
        self.validator.validate_string_length(5)
        self.assertLimit(ErrorCode.MAX_STRING_LENGTH_EXCEEDED, self.validator.validate_string_length, 6)

    def test_string_length_message(self):
        """Test the message names the length and the limit only."""
        with self.assertRaises(SecurityError) as ctx:
            self.validator.validate_string_length(9)
        self.assertEqual(ctx.exception.message, "String length 9 exceeds limit 5")
        with self.assertRaises(TypeError):
            self.validator.validate_string_length(9, "line 1")

    def test_nesting_depth(self):
        """Test entering and exiting structures."""
        self.validator.enter_structure()
        self.validator.enter_structure()
        self.assertLimit(ErrorCode.MAX_DEPTH_EXCEEDED, self.validator.enter_structure)

        self.validator.reset()
        self.assertEqual(self.validator.nesting_depth, 0)
        self.validator.enter_structure()
        self.validator.exit_structure()
        self.validator.exit_structure()
        self.assertEqual(self.validator.nesting_depth, 0)

    def test_array_items(self):
        """Test the array item boundary."""
        self.validator.validate_array_items(3)
        self.assertLimit(ErrorCode.MAX_ARRAY_ITEMS_EXCEEDED, self.validator.validate_array_items, 4)

    def test_object_keys(self):
        """Test the object key boundary."""
        self.validator.validate_object_keys(3)
        self.assertLimit(ErrorCode.MAX_OBJECT_KEYS_EXCEEDED, self.validator.validate_object_keys, 4)


if __name__ == "__main__":
    unittest.main()
