"""
Schema resolution between a writer schema and a reader schema.

Classifies whether data written with one node can be read with another:
an exact match, a match through a widening promotion, or no match.
Dispatch is on the writer's kind; symbolic nodes on either side are
followed to the definitions they reference.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .types import NodeKind, SchemaResolution, is_primitive

if TYPE_CHECKING:
    from .nodes import Node

# Writer primitive -> reader primitives it can be promoted to
PROMOTIONS: dict[NodeKind, frozenset[NodeKind]] = {
    NodeKind.INT: frozenset({NodeKind.LONG, NodeKind.FLOAT, NodeKind.DOUBLE}),
    NodeKind.LONG: frozenset({NodeKind.FLOAT, NodeKind.DOUBLE}),
    NodeKind.FLOAT: frozenset({NodeKind.DOUBLE}),
    NodeKind.STRING: frozenset({NodeKind.BYTES}),
    NodeKind.BYTES: frozenset({NodeKind.STRING}),
}


def resolve_schemas(writer: Node, reader: Node) -> SchemaResolution:
    """
    Resolve `writer` against `reader`.

    Args:
        writer: Node the data was written with
        reader: Node the data will be read with

    Returns:
        MATCH, PROMOTABLE or NO_MATCH
    """
    return _Resolver().resolve(writer, reader)


def _worst(results: list[SchemaResolution]) -> SchemaResolution:
    if SchemaResolution.NO_MATCH in results:
        return SchemaResolution.NO_MATCH
    if SchemaResolution.PROMOTABLE in results:
        return SchemaResolution.PROMOTABLE
    return SchemaResolution.MATCH


class _Resolver:
    """One resolution pass; remembers node pairs under comparison so recursive schemas terminate."""

    def __init__(self):
        self._in_progress: set[tuple[int, int]] = set()

    def resolve(self, writer: Node, reader: Node) -> SchemaResolution:
        key = (id(writer), id(reader))
        if key in self._in_progress:
            # Recursive pair, assume it matches
            return SchemaResolution.MATCH
        self._in_progress.add(key)
        try:
            return self._dispatch(writer, reader)
        finally:
            self._in_progress.discard(key)

    def _dispatch(self, writer: Node, reader: Node) -> SchemaResolution:
        kind = writer.kind
        if kind == NodeKind.SYMBOLIC:
            return self.resolve(writer.resolve_target(), reader)
        if is_primitive(kind):
            return self._resolve_primitive(writer, reader)
        if kind == NodeKind.RECORD:
            return self._resolve_record(writer, reader)
        if kind == NodeKind.ENUM:
            return self._resolve_enum(writer, reader)
        if kind == NodeKind.FIXED:
            return self._resolve_fixed(writer, reader)
        if kind == NodeKind.ARRAY:
            return self._resolve_array(writer, reader)
        if kind == NodeKind.MAP:
            return self._resolve_map(writer, reader)
        if kind == NodeKind.UNION:
            return self._resolve_union(writer, reader)
        return SchemaResolution.NO_MATCH

    def _further_resolution(self, writer: Node, reader: Node) -> SchemaResolution:
        """Resolution when the reader's kind does not directly correspond to the writer's."""
        if reader.kind == NodeKind.SYMBOLIC:
            return self.resolve(writer, reader.resolve_target())

        if reader.kind == NodeKind.UNION:
            # An exact branch wins, otherwise the first promotable one
            match = SchemaResolution.NO_MATCH
            for i in range(reader.child_count()):
                this_match = self.resolve(writer, reader.child_at(i))
                if this_match == SchemaResolution.MATCH:
                    return this_match
                if match == SchemaResolution.NO_MATCH:
                    match = this_match
            return match

        return SchemaResolution.NO_MATCH

    def _resolve_primitive(self, writer: Node, reader: Node) -> SchemaResolution:
        if writer.kind == reader.kind:
            return SchemaResolution.MATCH
        if reader.kind in PROMOTIONS.get(writer.kind, ()):
            return SchemaResolution.PROMOTABLE
        return self._further_resolution(writer, reader)

    def _resolve_record(self, writer: Node, reader: Node) -> SchemaResolution:
        if reader.kind != NodeKind.RECORD:
            return self._further_resolution(writer, reader)
        if writer.full_name != reader.full_name:
            return SchemaResolution.NO_MATCH

        results = []
        for i in range(reader.child_name_count()):
            field_name = reader.child_name_at(i)
            writer_index = writer.lookup_child_index(field_name)
            if writer_index is None:
                # No default values, a field the writer lacks cannot be filled
                return SchemaResolution.NO_MATCH
            results.append(self.resolve(writer.child_at(writer_index), reader.child_at(i)))
        return _worst(results)

    def _resolve_enum(self, writer: Node, reader: Node) -> SchemaResolution:
        if reader.kind != NodeKind.ENUM:
            return self._further_resolution(writer, reader)
        if writer.full_name != reader.full_name:
            return SchemaResolution.NO_MATCH
        for i in range(writer.child_name_count()):
            if reader.lookup_child_index(writer.child_name_at(i)) is None:
                return SchemaResolution.NO_MATCH
        return SchemaResolution.MATCH

    def _resolve_fixed(self, writer: Node, reader: Node) -> SchemaResolution:
        if reader.kind != NodeKind.FIXED:
            return self._further_resolution(writer, reader)
        if writer.full_name == reader.full_name and writer.fixed_size == reader.fixed_size:
            return SchemaResolution.MATCH
        return SchemaResolution.NO_MATCH

    def _resolve_array(self, writer: Node, reader: Node) -> SchemaResolution:
        if reader.kind != NodeKind.ARRAY:
            return self._further_resolution(writer, reader)
        return self.resolve(writer.child_at(0), reader.child_at(0))

    def _resolve_map(self, writer: Node, reader: Node) -> SchemaResolution:
        if reader.kind != NodeKind.MAP:
            return self._further_resolution(writer, reader)
        return self.resolve(writer.child_at(1), reader.child_at(1))

    def _resolve_union(self, writer: Node, reader: Node) -> SchemaResolution:
        # Best result over the writer's branches
        match = SchemaResolution.NO_MATCH
        for i in range(writer.child_count()):
            this_match = self.resolve(writer.child_at(i), reader)
            if this_match == SchemaResolution.MATCH:
                return this_match
            if match == SchemaResolution.NO_MATCH:
                match = this_match
        return match
