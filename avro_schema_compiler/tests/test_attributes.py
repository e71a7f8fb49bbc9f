"""
Unit tests for attribute slots and the name index.
"""

import unittest

from avro_schema_compiler.exceptions import SchemaError
from avro_schema_compiler.schema.attributes import MultiAttribute, NameIndex, NoAttribute, SingleAttribute


class TestNoAttribute(unittest.TestCase):
    def test_has_no_attribute(self):
        slot = NoAttribute()
        self.assertFalse(slot.has_attribute)
        self.assertEqual(slot.size(), 0)
        self.assertEqual(list(slot), [])

    def test_add_and_get_fail(self):
        slot = NoAttribute()
        with self.assertRaises(SchemaError):
            slot.add("x")
        with self.assertRaises(SchemaError):
            slot.get()


class TestSingleAttribute(unittest.TestCase):
    def test_empty_then_set(self):
        slot = SingleAttribute()
        self.assertTrue(slot.has_attribute)
        self.assertEqual(slot.size(), 0)
        slot.add("Person")
        self.assertEqual(slot.size(), 1)
        self.assertEqual(slot.get(), "Person")

    def test_initial_value(self):
        slot = SingleAttribute(16)
        self.assertEqual(slot.size(), 1)
        self.assertEqual(slot.get(0), 16)

    def test_empty_string_counts_as_set(self):
        slot = SingleAttribute("")
        self.assertEqual(slot.size(), 1)
        self.assertEqual(slot.get(), "")

    def test_second_add_fails(self):
        slot = SingleAttribute("a")
        with self.assertRaises(SchemaError):
            slot.add("b")
        self.assertEqual(slot.get(), "a")

    def test_get_unset_fails(self):
        with self.assertRaises(SchemaError):
            SingleAttribute().get()

    def test_get_index_other_than_zero_fails(self):
        with self.assertRaises(SchemaError):
            SingleAttribute("a").get(1)


class TestMultiAttribute(unittest.TestCase):
    def test_preserves_order(self):
        slot = MultiAttribute()
        for value in ["c", "a", "b"]:
            slot.add(value)
        self.assertEqual(list(slot), ["c", "a", "b"])
        self.assertEqual(len(slot), 3)

    def test_out_of_range(self):
        slot = MultiAttribute(["a"])
        with self.assertRaises(SchemaError):
            slot.get(1)
        with self.assertRaises(SchemaError):
            slot.get(-1)

    def test_set_and_swap(self):
        slot = MultiAttribute(["a", "b"])
        slot.set(0, "z")
        slot.swap(0, 1)
        self.assertEqual(list(slot), ["b", "z"])

    def test_swap_out_of_range(self):
        slot = MultiAttribute(["a", "b"])
        with self.assertRaises(SchemaError):
            slot.swap(0, 2)
        with self.assertRaises(SchemaError):
            slot.swap(-1, 1)
        self.assertEqual(list(slot), ["a", "b"])

    def test_initial_values_are_copied(self):
        values = ["a"]
        slot = MultiAttribute(values)
        slot.add("b")
        self.assertEqual(values, ["a"])


class TestNameIndex(unittest.TestCase):
    def test_add_and_lookup(self):
        index = NameIndex()
        self.assertTrue(index.add("name", 0))
        self.assertTrue(index.add("age", 1))
        self.assertEqual(index.lookup("name"), 0)
        self.assertEqual(index.lookup("age"), 1)
        self.assertIsNone(index.lookup("missing"))
        self.assertIn("age", index)
        self.assertEqual(len(index), 2)

    def test_duplicate_is_rejected(self):
        index = NameIndex()
        self.assertTrue(index.add("name", 0))
        self.assertFalse(index.add("name", 1))
        self.assertEqual(index.lookup("name"), 0)

    def test_case_sensitive(self):
        index = NameIndex()
        self.assertTrue(index.add("Name", 0))
        self.assertTrue(index.add("name", 1))


if __name__ == "__main__":
    unittest.main()
