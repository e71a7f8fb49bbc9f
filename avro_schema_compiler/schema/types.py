"""
Type tags for schema nodes and schema resolution results.
"""

from __future__ import annotations

from enum import Enum


class NodeKind(str, Enum):
    """Kind of a schema node."""

    # Primitives
    NULL = "null"
    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BYTES = "bytes"
    STRING = "string"

    # Compound and named types
    RECORD = "record"
    ENUM = "enum"
    ARRAY = "array"
    MAP = "map"
    UNION = "union"
    FIXED = "fixed"

    # Reference to a named type defined elsewhere in the tree
    SYMBOLIC = "symbolic"

    def __str__(self) -> str:
        return self.value


PRIMITIVE_KINDS = frozenset(
    {
        NodeKind.NULL,
        NodeKind.BOOLEAN,
        NodeKind.INT,
        NodeKind.LONG,
        NodeKind.FLOAT,
        NodeKind.DOUBLE,
        NodeKind.BYTES,
        NodeKind.STRING,
    }
)

NAMED_KINDS = frozenset({NodeKind.RECORD, NodeKind.ENUM, NodeKind.FIXED})

COMPOUND_KINDS = frozenset(
    {
        NodeKind.RECORD,
        NodeKind.ENUM,
        NodeKind.ARRAY,
        NodeKind.MAP,
        NodeKind.UNION,
        NodeKind.FIXED,
    }
)


def is_primitive(kind: NodeKind) -> bool:
    return kind in PRIMITIVE_KINDS


def is_compound(kind: NodeKind) -> bool:
    return kind in COMPOUND_KINDS


def is_named(kind: NodeKind) -> bool:
    """Named kinds carry a name and a namespace and can be referenced by full name."""
    return kind in NAMED_KINDS


def primitive_kind(type_name: str) -> NodeKind | None:
    """Return the primitive kind spelled `type_name`, or None."""
    try:
        kind = NodeKind(type_name)
    except ValueError:
        return None
    return kind if kind in PRIMITIVE_KINDS else None


class SchemaResolution(str, Enum):
    """How data written with one schema can be read with another."""

    NO_MATCH = "no_match"
    MATCH = "match"  # Identical types
    PROMOTABLE = "promotable"  # Reader widens the writer's type

    def __str__(self) -> str:
        return self.value
