"""
Schema tree module.

Contains the node kinds, their attribute slots, and schema resolution.
"""

from __future__ import annotations

from .attributes import AttributeSlot, MultiAttribute, NameIndex, NoAttribute, SingleAttribute
from .nodes import (
    ArrayNode,
    EnumNode,
    FixedNode,
    MapNode,
    Node,
    PrimitiveNode,
    RecordNode,
    SymbolicNode,
    UnionNode,
    discriminant_of,
    full_name_of,
    resolve_symbol,
)
from .resolution import PROMOTIONS, resolve_schemas
from .types import NodeKind, SchemaResolution, is_compound, is_named, is_primitive, primitive_kind

__all__ = [
    "AttributeSlot",
    "NoAttribute",
    "SingleAttribute",
    "MultiAttribute",
    "NameIndex",
    "Node",
    "PrimitiveNode",
    "SymbolicNode",
    "RecordNode",
    "EnumNode",
    "ArrayNode",
    "MapNode",
    "UnionNode",
    "FixedNode",
    "discriminant_of",
    "full_name_of",
    "resolve_symbol",
    "PROMOTIONS",
    "resolve_schemas",
    "NodeKind",
    "SchemaResolution",
    "is_compound",
    "is_named",
    "is_primitive",
    "primitive_kind",
]
