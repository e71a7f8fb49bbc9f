"""
Tests for schema validation and symbol linking.
"""

import unittest

from avro_schema_compiler.exceptions import SchemaError
from avro_schema_compiler.schema import (
    ArrayNode,
    EnumNode,
    NodeKind,
    PrimitiveNode,
    RecordNode,
    SchemaResolution,
    SymbolicNode,
    resolve_symbol,
)
from avro_schema_compiler.valid_schema import ValidSchema


def person(namespace=None):
    return RecordNode(
        "Person",
        [PrimitiveNode(NodeKind.STRING), PrimitiveNode(NodeKind.INT)],
        ["name", "age"],
        namespace,
    )


class TestValidation(unittest.TestCase):
    def test_valid_tree(self):
        schema = ValidSchema(person("com.example"))
        self.assertEqual(schema.root.full_name, "com.example.Person")
        self.assertTrue(schema.root.locked)
        self.assertTrue(schema.root.child_at(0).locked)

    def test_nodes_are_locked(self):
        root = RecordNode("Empty", [], [])
        ValidSchema(root)
        with self.assertRaises(SchemaError):
            root.add_child(PrimitiveNode(NodeKind.INT))

    def test_no_root(self):
        with self.assertRaises(SchemaError):
            ValidSchema(None)

    def test_symbolic_root(self):
        with self.assertRaises(SchemaError):
            ValidSchema(SymbolicNode("Person"))

    def test_invalid_node(self):
        root = RecordNode("Holder", [EnumNode("Empty", [])], ["e"])
        with self.assertRaises(SchemaError) as cm:
            ValidSchema(root)
        self.assertIn("bad node of type enum", str(cm.exception))

    def test_redefinition(self):
        root = RecordNode("Pair", [person(), person()], ["first", "second"])
        with self.assertRaises(SchemaError) as cm:
            ValidSchema(root)
        self.assertIn("Cannot redefine named type Person", str(cm.exception))

    def test_same_name_different_namespace(self):
        root = RecordNode("Pair", [person("a"), person("b")], ["first", "second"])
        schema = ValidSchema(root)
        self.assertEqual(list(schema.named_types()), ["Pair", "a.Person", "b.Person"])


class TestLinking(unittest.TestCase):
    def test_undefined_symbol(self):
        root = RecordNode("Holder", [SymbolicNode("Missing")], ["m"])
        with self.assertRaises(SchemaError) as cm:
            ValidSchema(root)
        self.assertIn("Symbol not defined: Missing", str(cm.exception))

    def test_reference_is_linked(self):
        inner = person()
        root = RecordNode("Holder", [inner, ArrayNode(SymbolicNode("Person"))], ["owner", "others"])
        schema = ValidSchema(root)
        items = schema.root.child_at(1).child_at(0)
        self.assertTrue(items.is_set())
        self.assertIs(resolve_symbol(items), inner)

    def test_forward_reference_is_linked(self):
        later = EnumNode("Suit", ["CLUBS"])
        root = RecordNode("Hand", [SymbolicNode("Suit"), later], ["trump", "lead"])
        schema = ValidSchema(root)
        self.assertIs(resolve_symbol(schema.root.child_at(0)), later)

    def test_repeated_definition_becomes_symbol(self):
        shared = person()
        root = RecordNode("Pair", [shared, shared], ["first", "second"])
        schema = ValidSchema(root)
        self.assertIs(schema.root.child_at(0), shared)
        second = schema.root.child_at(1)
        self.assertEqual(second.kind, NodeKind.SYMBOLIC)
        self.assertIs(resolve_symbol(second), shared)

    def test_self_reference(self):
        root = RecordNode("Node", [PrimitiveNode(NodeKind.INT), SymbolicNode("Node")], ["value", "next"])
        schema = ValidSchema(root)
        self.assertIs(resolve_symbol(root.child_at(1)), schema.root)

    def test_already_linked_symbol_is_kept(self):
        root = RecordNode("Node", [PrimitiveNode(NodeKind.INT), SymbolicNode("Node")], ["value", "next"])
        root.replace_child_with_symbolic_reference(1, root)
        symbol = root.child_at(1)
        ValidSchema(root)
        self.assertIs(root.child_at(1), symbol)


class TestAccessors(unittest.TestCase):
    def setUp(self):
        self.suit = EnumNode("Suit", ["CLUBS", "HEARTS"], "cards")
        self.root = RecordNode("Card", [self.suit, PrimitiveNode(NodeKind.INT)], ["suit", "rank"], "cards")
        self.schema = ValidSchema(self.root)

    def test_lookup(self):
        self.assertIs(self.schema.lookup("cards.Suit"), self.suit)
        self.assertIs(self.schema.lookup("cards.Card"), self.root)
        self.assertIsNone(self.schema.lookup("Suit"))

    def test_named_types_in_definition_order(self):
        self.assertEqual(list(self.schema.named_types()), ["cards.Card", "cards.Suit"])

    def test_resolve_against_schema_and_node(self):
        reader = ValidSchema(
            RecordNode(
                "Card",
                [EnumNode("Suit", ["CLUBS", "HEARTS", "SPADES"], "cards"), PrimitiveNode(NodeKind.LONG)],
                ["suit", "rank"],
                "cards",
            )
        )
        self.assertEqual(self.schema.resolve(reader), SchemaResolution.PROMOTABLE)
        self.assertEqual(self.schema.resolve(reader.root), SchemaResolution.PROMOTABLE)
        self.assertEqual(self.schema.resolve(self.schema), SchemaResolution.MATCH)

    def test_basic_info(self):
        self.assertTrue(self.schema.basic_info().startswith("record Card\n"))

    def test_to_json(self):
        self.assertIn('"namespace": "cards"', self.schema.to_json())


if __name__ == "__main__":
    unittest.main()
