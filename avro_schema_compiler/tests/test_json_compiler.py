#!/usr/bin/env python3

import json
from pathlib import Path

import pytest

from avro_schema_compiler.compiler import (
    JsonSchemaCompiler,
    compile_json_schema,
    compile_json_schema_file,
    compile_json_schema_text,
)
from avro_schema_compiler.config import CompilerConfig
from avro_schema_compiler.exceptions import SchemaError
from avro_schema_compiler.schema import NodeKind, resolve_symbol

TEST_DATA = Path(__file__).parent / "test_data"


def field_names(node):
    return [node.child_name_at(i) for i in range(node.child_name_count())]


class TestPrimitives:
    @pytest.mark.parametrize("name", ["null", "boolean", "int", "long", "float", "double", "bytes", "string"])
    def test_bare_name(self, name):
        assert compile_json_schema(name).root.kind == NodeKind(name)

    def test_object_form(self):
        assert compile_json_schema({"type": "string"}).root.kind == NodeKind.STRING

    def test_wrapped_type(self):
        schema = compile_json_schema({"type": {"type": "array", "items": "int"}})
        assert schema.root.kind == NodeKind.ARRAY


class TestNamedTypes:
    def test_record(self):
        schema = compile_json_schema_file(TEST_DATA / "person.avsc")
        root = schema.root
        assert root.kind == NodeKind.RECORD
        assert root.full_name == "com.example.Person"
        assert field_names(root) == ["name", "age", "emails", "address", "previous"]
        assert [root.child_at(i).kind for i in range(root.child_count())] == [
            NodeKind.STRING,
            NodeKind.INT,
            NodeKind.ARRAY,
            NodeKind.RECORD,
            NodeKind.UNION,
        ]

    def test_nested_record_inherits_namespace(self):
        schema = compile_json_schema_file(TEST_DATA / "person.avsc")
        address = schema.lookup("com.example.Address")
        assert address is not None
        assert address.namespace == "com.example"

    def test_reference_by_short_name(self):
        schema = compile_json_schema_file(TEST_DATA / "person.avsc")
        previous = schema.root.child_at(4)
        symbol = previous.child_at(1)
        assert symbol.kind == NodeKind.SYMBOLIC
        assert resolve_symbol(symbol) is schema.lookup("com.example.Address")

    def test_error_is_a_record(self):
        schema = compile_json_schema({"type": "error", "name": "Failure", "fields": []})
        assert schema.root.kind == NodeKind.RECORD

    def test_enum_fixed_and_map(self):
        schema = compile_json_schema_file(TEST_DATA / "card.avsc")
        suit = schema.lookup("cards.Suit")
        assert field_names(suit) == ["CLUBS", "DIAMONDS", "HEARTS", "SPADES"]
        assert schema.lookup("cards.MD5").fixed_size == 16
        tags = schema.root.child_at(3)
        assert tags.kind == NodeKind.MAP
        assert tags.child_at(1).kind == NodeKind.LONG

    def test_recursive_record(self):
        schema = compile_json_schema_file(TEST_DATA / "linked_list.avsc")
        next_field = schema.root.child_at(1)
        assert next_field.kind == NodeKind.UNION
        assert resolve_symbol(next_field.child_at(1)) is schema.root

    def test_explicit_namespace_overrides_enclosing(self):
        schema = compile_json_schema(
            {
                "type": "record",
                "name": "Outer",
                "namespace": "a",
                "fields": [
                    {"name": "inner", "type": {"type": "enum", "name": "E", "namespace": "b", "symbols": ["X"]}},
                    {"name": "again", "type": "b.E"},
                ],
            }
        )
        assert schema.lookup("b.E") is not None
        assert schema.lookup("a.E") is None

    def test_full_name_ignores_namespace(self):
        schema = compile_json_schema(
            {
                "type": "record",
                "name": "a.b.C",
                "namespace": "x",
                "fields": [{"name": "next", "type": ["null", "a.b.C"]}],
            }
        )
        assert schema.root.full_name == "a.b.C"
        assert resolve_symbol(schema.root.child_at(0).child_at(1)) is schema.root
        assert json.loads(schema.to_json())["namespace"] == "a.b"

    def test_full_name_namespace_is_inherited(self):
        schema = compile_json_schema(
            {
                "type": "record",
                "name": "a.b.C",
                "fields": [
                    {
                        "name": "d",
                        "type": {"type": "record", "name": "D", "fields": [{"name": "up", "type": ["null", "C"]}]},
                    }
                ],
            }
        )
        assert list(schema.named_types()) == ["a.b.C", "a.b.D"]
        up = schema.lookup("a.b.D").child_at(0)
        assert resolve_symbol(up.child_at(1)) is schema.root

    def test_namespace_inheritance_disabled(self):
        document = {
            "type": "record",
            "name": "Outer",
            "namespace": "a",
            "fields": [{"name": "inner", "type": {"type": "fixed", "name": "F", "size": 2}}],
        }
        config = CompilerConfig(inherit_enclosing_namespace=False)
        schema = JsonSchemaCompiler(config).compile(document)
        assert schema.lookup("F") is not None


class TestErrors:
    @pytest.mark.parametrize(
        "document,message",
        [
            ({}, "Missing 'type' at #"),
            (42, "Unexpected schema value at #"),
            ({"type": "record", "fields": []}, "Missing or invalid 'name' at #"),
            ({"type": "record", "name": "R"}, "Missing or invalid 'fields' at #"),
            ({"type": "record", "name": "R", "fields": [{"type": "int"}]}, "Field without a name at #/fields/0"),
            ({"type": "record", "name": "R", "fields": [{"name": "x"}]}, "Field without a type at #/fields/0"),
            ({"type": "array"}, "Missing 'items' at #"),
            ({"type": "map"}, "Missing 'values' at #"),
            ({"type": "fixed", "name": "F"}, "Missing 'size' at #"),
            ({"type": "enum", "name": "E", "symbols": "A"}, "Missing or invalid 'symbols' at #"),
            ({"type": "array", "items": [1]}, "Unexpected schema value at #/items/0"),
        ],
    )
    def test_malformed_document(self, document, message):
        with pytest.raises(SchemaError, match=message):
            compile_json_schema(document)

    def test_undefined_reference(self):
        with pytest.raises(SchemaError, match="Symbol not defined: Nowhere"):
            compile_json_schema({"type": "array", "items": "Nowhere"})

    def test_undefined_reference_rejected_early(self):
        config = CompilerConfig(allow_forward_references=False)
        with pytest.raises(SchemaError, match="Reference to undefined type"):
            compile_json_schema({"type": "array", "items": "Nowhere"}, config)

    def test_duplicate_symbol(self):
        with pytest.raises(SchemaError, match="duplicate name: A"):
            compile_json_schema({"type": "enum", "name": "E", "symbols": ["A", "A"]})

    def test_duplicate_union_branch(self):
        with pytest.raises(SchemaError, match="bad node of type union"):
            compile_json_schema(["string", "string"])

    def test_nested_union(self):
        with pytest.raises(SchemaError):
            compile_json_schema(["null", ["int", "long"]])

    def test_bad_fixed_size(self):
        with pytest.raises(SchemaError, match="Invalid fixed size"):
            compile_json_schema({"type": "fixed", "name": "F", "size": "abc"})

    def test_invalid_json_text(self):
        with pytest.raises(SchemaError, match="not valid JSON"):
            compile_json_schema_text("{not json")


def test_canonical_json_output():
    text = (TEST_DATA / "person.avsc").read_text()
    schema = compile_json_schema_text(text)
    assert json.loads(schema.to_json()) == {
        "type": "record",
        "name": "Person",
        "namespace": "com.example",
        "fields": [
            {"name": "name", "type": "string"},
            {"name": "age", "type": "int"},
            {"name": "emails", "type": {"type": "array", "items": "string"}},
            {
                "name": "address",
                "type": {
                    "type": "record",
                    "name": "Address",
                    "namespace": "com.example",
                    "fields": [
                        {"name": "street", "type": "string"},
                        {"name": "zip", "type": ["null", "string"]},
                    ],
                },
            },
            {"name": "previous", "type": ["null", "com.example.Address"]},
        ],
    }


if __name__ == "__main__":
    pytest.main([__file__])
