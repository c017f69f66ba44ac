"""
Test cases for the Value document model.

Tests focus on construction, typed access, ownership moves and equality.
"""

import copy
import unittest

from jsonsmith import TypeMismatchError, Value, ValueType


class TestValueConstruction(unittest.TestCase):
    """Test Value constructors and type queries."""

    def test_scalar_constructors(self):
        """Test each scalar constructor sets the matching type."""
        self.assertTrue(Value.null().is_null())
        self.assertTrue(Value.boolean(True).is_bool())
        self.assertTrue(Value.number(1.5).is_number())
        self.assertTrue(Value.string("x").is_string())
        self.assertEqual(Value().type, ValueType.NULL)

    def test_container_constructors(self):
        """Test empty and populated containers."""
        self.assertEqual(len(Value.array()), 0)
        self.assertEqual(len(Value.object()), 0)

        array = Value.array([Value.number(1), Value.number(2)])
        self.assertTrue(array.is_array())
        self.assertTrue(array.is_container())
        self.assertEqual(len(array), 2)

    def test_int_is_stored_as_double(self):
        """Test numbers are always doubles."""
        self.assertEqual(Value.number(3).as_number(), 3.0)
        self.assertIsInstance(Value.number(3).as_number(), float)

    def test_huge_int_overflows(self):
        """Test ints beyond the double range raise OverflowError."""
        with self.assertRaises(OverflowError):
            Value.number(10**400)

    def test_from_python(self):
        """Test building a tree from plain Python data."""
        value = Value.from_python({"a": [1, True, None, "s"], "b": {}})

        self.assertTrue(value.is_object())
        self.assertEqual(list(value), ["a", "b"])
        items = value["a"]
        self.assertEqual(items[0].as_number(), 1.0)
        self.assertTrue(items[1].as_bool())
        self.assertTrue(items[2].is_null())
        self.assertEqual(items[3].as_string(), "s")

    def test_from_python_rejects_unknown_types(self):
        """Test unsupported Python types and non-string keys."""
        with self.assertRaises(TypeError):
            Value.from_python(object())
        with self.assertRaises(TypeError):
            Value.from_python({1: "x"})

    def test_to_python(self):
        """Test conversion back to plain Python data."""
        data = {"a": [1.0, False, None], "b": {"c": "d"}}
        self.assertEqual(Value.from_python(data).to_python(), data)


class TestTypedAccessors(unittest.TestCase):
    """Test typed accessors reject the wrong variant."""

    def test_wrong_variant_raises(self):
        """Test each accessor raises TypeMismatchError on mismatch."""
        value = Value.string("text")
        for accessor in (value.as_bool, value.as_number, value.as_array, value.as_object):
            with self.subTest(accessor=accessor.__name__):
                with self.assertRaises(TypeMismatchError):
                    accessor()

    def test_type_mismatch_is_type_error(self):
        """Test TypeMismatchError can be caught as TypeError."""
        with self.assertRaises(TypeError) as ctx:
            Value.null().as_number()
        self.assertEqual(ctx.exception.expected, "number")
        self.assertEqual(ctx.exception.actual, "null")

    def test_len_of_scalar(self):
        """Test len() is only defined for containers."""
        with self.assertRaises(TypeMismatchError):
            len(Value.number(1))


class TestContainerHelpers(unittest.TestCase):
    """Test array and object helper methods."""

    def test_array_append_and_insert(self):
        """Test appending and inserting items."""
        array = Value.array()
        array.append(Value.number(1))
        array.append(Value.number(3))
        array.insert(1, Value.number(2))

        self.assertEqual([item.as_number() for item in array], [1.0, 2.0, 3.0])

    def test_object_set_keeps_position(self):
        """Test overwriting a member keeps its original position."""
        obj = Value.object()
        obj.set("a", Value.number(1))
        obj.set("b", Value.number(2))
        obj.set("a", Value.number(3))

        self.assertEqual(list(obj), ["a", "b"])
        self.assertEqual(obj["a"].as_number(), 3.0)

    def test_object_get_and_remove(self):
        """Test lookup, membership and removal."""
        obj = Value.from_python({"a": 1})

        self.assertIn("a", obj)
        self.assertIsNone(obj.get("missing"))
        removed = obj.remove("a")
        self.assertEqual(removed.as_number(), 1.0)
        self.assertNotIn("a", obj)
        with self.assertRaises(KeyError):
            obj.remove("a")


class TestOwnership(unittest.TestCase):
    """Test copy, move and release semantics."""

    def test_copy_is_deep(self):
        """Test a copy shares no nodes with the original."""
        original = Value.from_python({"list": [1, {"x": 2}]})
        duplicate = original.copy()

        self.assertEqual(duplicate, original)
        duplicate["list"][1].set("x", Value.number(99))
        self.assertEqual(original["list"][1]["x"].as_number(), 2.0)

    def test_copy_module_support(self):
        """Test copy.copy and copy.deepcopy both deep copy."""
        original = Value.from_python([[1]])
        for duplicate in (copy.copy(original), copy.deepcopy(original)):
            self.assertEqual(duplicate, original)
            self.assertIsNot(duplicate[0], original[0])

    def test_take_leaves_null(self):
        """Test take() moves content and leaves the source null."""
        source = Value.from_python([1, 2])
        moved = source.take()

        self.assertTrue(source.is_null())
        self.assertEqual(moved, Value.from_python([1, 2]))

    def test_assign_moves_other(self):
        """Test assign() moves another value's content in."""
        target = Value.from_python({"old": True})
        other = Value.string("new")
        target.assign(other)

        self.assertEqual(target.as_string(), "new")
        self.assertTrue(other.is_null())

    def test_assign_self_is_noop(self):
        """Test assigning a value to itself keeps its content."""
        value = Value.from_python([1])
        value.assign(value)
        self.assertEqual(value, Value.from_python([1]))

    def test_release_resets_whole_tree(self):
        """Test release() empties every nested container."""
        inner = Value.from_python([1, 2])
        outer = Value.object({"inner": inner})
        outer.release()

        self.assertTrue(outer.is_null())
        self.assertTrue(inner.is_null())

    def test_release_deep_tree(self):
        """Test release() handles trees deeper than the recursion limit."""
        root = Value.array()
        node = root
        for _ in range(5000):
            child = Value.array()
            node.append(child)
            node = child

        root.release()
        self.assertTrue(root.is_null())


class TestEquality(unittest.TestCase):
    """Test deep, order-sensitive equality."""

    def test_deep_equality(self):
        """Test structurally identical trees compare equal."""
        self.assertEqual(
            Value.from_python({"a": [1, "x", None]}),
            Value.from_python({"a": [1, "x", None]}),
        )

    def test_object_member_order_matters(self):
        """Test objects compare members in insertion order."""
        self.assertNotEqual(
            Value.from_python({"a": 1, "b": 2}),
            Value.from_python({"b": 2, "a": 1}),
        )

    def test_different_types_are_unequal(self):
        """Test values of different types never compare equal."""
        self.assertNotEqual(Value.number(0), Value.boolean(False))
        self.assertNotEqual(Value.null(), Value.string(""))
        self.assertNotEqual(Value.number(1), 1)

    def test_values_are_unhashable(self):
        """Test mutable values cannot be hashed."""
        with self.assertRaises(TypeError):
            hash(Value.null())

    def test_is_finite(self):
        """Test non-finite number detection."""
        self.assertTrue(Value.number(1.0).is_finite())
        self.assertFalse(Value.number(float("nan")).is_finite())
        self.assertTrue(Value.string("inf").is_finite())

    def test_str_is_compact_json(self):
        """Test str() renders compact JSON."""
        self.assertEqual(str(Value.from_python({"a": [1, None]})), '{"a":[1,null]}')


if __name__ == "__main__":
    unittest.main()
