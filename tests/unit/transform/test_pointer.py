"""
Test cases for JSON Pointer evaluation and mutation.
"""

import unittest

import jsonsmith
from jsonsmith import ErrorCode, JSONPointer, PointerError, Value, evaluate_pointer

RFC_DOCUMENT = """
{
    "foo": ["bar", "baz"],
    "": 0,
    "a/b": 1,
    "c%d": 2,
    "e^f": 3,
    "g|h": 4,
    "i\\\\j": 5,
    "k\\"l": 6,
    " ": 7,
    "m~n": 8
}
"""


class TestPointerSyntax(unittest.TestCase):
    """Test parsing and rendering pointers."""

    def test_parse_tokens(self):
        """Test tokens are split and unescaped."""
        self.assertEqual(JSONPointer.parse("").tokens, ())
        self.assertEqual(JSONPointer.parse("/").tokens, ("",))
        self.assertEqual(JSONPointer.parse("/a~1b/~0c/0").tokens, ("a/b", "~c", "0"))
        self.assertEqual(JSONPointer.parse("/~01").tokens, ("~1",))

    def test_invalid_syntax(self):
        """Test pointers must start with '/' and use valid escapes."""
        for text in ("a", "a/b", "/~2", "/a~"):
            with self.subTest(text=text):
                with self.assertRaises(PointerError) as ctx:
                    JSONPointer.parse(text)
                self.assertEqual(ctx.exception.code, ErrorCode.INVALID_POINTER)

    def test_str_round_trip(self):
        """Test str() re-escapes tokens."""
        for text in ("", "/", "/a~1b/~0c/0", "/~01"):
            with self.subTest(text=text):
                self.assertEqual(str(JSONPointer.parse(text)), text)
        self.assertEqual(str(JSONPointer.from_tokens(["a/b", "~"])), "/a~1b/~0")

    def test_relationships(self):
        """Test parent, child and prefix checks."""
        pointer = JSONPointer.parse("/a/b")
        self.assertEqual(pointer.parent, JSONPointer.parse("/a"))
        self.assertEqual(pointer.last, "b")
        self.assertEqual(JSONPointer.parse("/a").child(0), JSONPointer.parse("/a/0"))
        self.assertTrue(JSONPointer.parse("/a").is_prefix_of(pointer))
        self.assertTrue(pointer.is_prefix_of(pointer))
        self.assertFalse(pointer.is_prefix_of(JSONPointer.parse("/a")))
        self.assertFalse(JSONPointer.parse("/a").is_prefix_of(JSONPointer.parse("/ab")))
        self.assertTrue(JSONPointer().is_root())
        self.assertEqual(len({JSONPointer.parse("/x"), JSONPointer.parse("/x")}), 1)


class TestEvaluation(unittest.TestCase):
    """Test resolving pointers against documents."""

    def setUp(self):
        """Parse the RFC 6901 example document."""
        self.document = jsonsmith.parse(RFC_DOCUMENT)

    def test_rfc_examples(self):
        """Test the examples from RFC 6901 section 5."""
        self.assertIs(evaluate_pointer(self.document, ""), self.document)
        self.assertEqual(evaluate_pointer(self.document, "/foo").to_python(), ["bar", "baz"])
        self.assertEqual(evaluate_pointer(self.document, "/foo/0").as_string(), "bar")
        cases = {
            "/": 0,
            "/a~1b": 1,
            "/c%d": 2,
            "/e^f": 3,
            "/g|h": 4,
            "/i\\j": 5,
            '/k"l': 6,
            "/ ": 7,
            "/m~0n": 8,
        }
        for pointer, expected in cases.items():
            with self.subTest(pointer=pointer):
                self.assertEqual(evaluate_pointer(self.document, pointer).as_number(), expected)

    def test_nested_lookup(self):
        """Test a simple nested member."""
        document = jsonsmith.parse('{"a":{"b":1}}')
        self.assertEqual(evaluate_pointer(document, "/a/b").as_number(), 1.0)

    def test_returns_reference(self):
        """Test the result aliases the document node."""
        document = jsonsmith.parse('{"a": [1]}')
        evaluate_pointer(document, "/a").append(Value.number(2))
        self.assertEqual(len(document["a"]), 2)

    def test_not_found(self):
        """Test unresolvable pointers."""
        for pointer in ("/missing", "/foo/2", "/foo/-", "/foo/01", "/foo/-1", "/foo/a", "/foo/0/x", "/ /x"):
            with self.subTest(pointer=pointer):
                with self.assertRaises(PointerError) as ctx:
                    evaluate_pointer(self.document, pointer)
                self.assertEqual(ctx.exception.code, ErrorCode.POINTER_NOT_FOUND)
                self.assertEqual(ctx.exception.pointer, pointer)

    def test_exists(self):
        """Test the non-raising existence check."""
        self.assertTrue(JSONPointer.parse("/foo/1").exists(self.document))
        self.assertFalse(JSONPointer.parse("/foo/9").exists(self.document))


class TestMutation(unittest.TestCase):
    """Test add, remove and replace."""

    def test_add_to_object(self):
        """Test adding and overwriting members."""
        document = Value.from_python({"a": 1})
        JSONPointer.parse("/b").add(document, Value.number(2))
        JSONPointer.parse("/a").add(document, Value.number(3))
        self.assertEqual(document.to_python(), {"a": 3.0, "b": 2.0})

    def test_add_to_array(self):
        """Test inserting by index and appending with '-'."""
        document = Value.from_python([1, 3])
        JSONPointer.parse("/1").add(document, Value.number(2))
        JSONPointer.parse("/-").add(document, Value.number(4))
        JSONPointer.parse("/4").add(document, Value.number(5))
        self.assertEqual(document.to_python(), [1.0, 2.0, 3.0, 4.0, 5.0])

        with self.assertRaises(PointerError):
            JSONPointer.parse("/9").add(document, Value.null())

    def test_add_root(self):
        """Test adding at the root replaces the document."""
        document = Value.from_python({"a": 1})
        JSONPointer().add(document, Value.string("x"))
        self.assertEqual(document.as_string(), "x")

    def test_add_into_scalar(self):
        """Test adding below a scalar fails."""
        with self.assertRaises(PointerError):
            JSONPointer.parse("/a/b").add(Value.from_python({"a": 1}), Value.null())

    def test_remove(self):
        """Test removing members and items returns them."""
        document = Value.from_python({"a": [1, 2, 3]})
        removed = JSONPointer.parse("/a/1").remove(document)
        self.assertEqual(removed.as_number(), 2.0)
        self.assertEqual(document.to_python(), {"a": [1.0, 3.0]})

        for pointer in ("/a/-", "/a/5", "/b"):
            with self.subTest(pointer=pointer):
                with self.assertRaises(PointerError):
                    JSONPointer.parse(pointer).remove(document)

    def test_remove_root(self):
        """Test the root cannot be removed."""
        with self.assertRaises(PointerError) as ctx:
            JSONPointer().remove(Value.null())
        self.assertEqual(ctx.exception.code, ErrorCode.INVALID_POINTER)

    def test_replace(self):
        """Test replacing requires an existing target."""
        document = Value.from_python({"a": [1]})
        JSONPointer.parse("/a/0").replace(document, Value.boolean(True))
        self.assertEqual(document.to_python(), {"a": [True]})

        with self.assertRaises(PointerError):
            JSONPointer.parse("/b").replace(document, Value.null())


if __name__ == "__main__":
    unittest.main()
