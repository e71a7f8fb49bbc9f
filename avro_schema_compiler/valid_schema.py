"""
Validated schema holder.

Wraps a finished node tree after checking every node and linking every
symbolic reference to the named type it stands for.
"""

from __future__ import annotations

import logging

from .exceptions import SchemaError
from .printer import SchemaPrinter
from .schema.nodes import Node
from .schema.types import NodeKind, SchemaResolution, is_named

logger = logging.getLogger(__name__)


class ValidSchema:
    """A schema tree whose nodes are valid and whose symbols all resolve.

    Each named type is kept once, at its first occurrence in depth-first
    order. Further occurrences of the same definition and all references
    by name become symbolic nodes holding a weak reference to it.
    """

    def __init__(self, root: Node):
        """
        Validate and link the tree under `root`.

        Args:
            root: Root of a finished schema tree

        Raises:
            SchemaError: If a node is invalid, a named type is defined twice,
                or a symbolic reference names an unknown type
        """
        if root is None:
            raise SchemaError("Schema has no root")
        if root.kind == NodeKind.SYMBOLIC:
            raise SchemaError("Schema root cannot be a symbolic reference")
        self._root = root
        self._symbols: dict[str, Node] = {}

        self._collect(root, set())
        self._link(root, {id(root)}, set())

    @property
    def root(self) -> Node:
        return self._root

    def lookup(self, full_name: str) -> Node | None:
        """Return the named type called `full_name`, or None."""
        return self._symbols.get(full_name)

    def named_types(self) -> dict[str, Node]:
        """Named types by full name, in definition order."""
        return dict(self._symbols)

    def resolve(self, reader: ValidSchema | Node) -> SchemaResolution:
        """Resolve this schema, as writer, against `reader`."""
        reader_node = reader.root if isinstance(reader, ValidSchema) else reader
        return self._root.resolve(reader_node)

    def to_json(self, indent: int | None = 2) -> str:
        return SchemaPrinter(indent=indent).to_json(self._root)

    def basic_info(self) -> str:
        return SchemaPrinter().basic_info(self._root)

    def _collect(self, node: Node, visited: set[int]) -> None:
        """Check each node and register named definitions."""
        if id(node) in visited:
            return
        visited.add(id(node))

        if not node.validate():
            raise SchemaError(f"Schema is invalid, due to bad node of type {node.kind}")

        if is_named(node.kind):
            full_name = node.full_name
            existing = self._symbols.get(full_name)
            if existing is None:
                self._symbols[full_name] = node
            elif existing is not node:
                raise SchemaError(f"Cannot redefine named type {full_name}")

        node.lock()
        for i in range(node.child_count()):
            child = node.child_at(i)
            if child.kind != NodeKind.SYMBOLIC:
                self._collect(child, visited)

    def _link(self, node: Node, defined: set[int], visited: set[int]) -> None:
        """Turn references and repeated definitions into linked symbolic nodes."""
        if id(node) in visited:
            return
        visited.add(id(node))

        for i in range(node.child_count()):
            child = node.child_at(i)

            if child.kind == NodeKind.SYMBOLIC:
                if not child.validate():
                    raise SchemaError("Schema is invalid, due to bad node of type symbolic")
                target = self._symbols.get(child.name)
                if target is None:
                    if child.is_set():
                        continue
                    raise SchemaError(f"Symbol not defined: {child.name}")
                if not child.is_set() or child.resolve_target() is not target:
                    logger.debug("Linking symbol %s", child.name)
                    node.replace_child_with_symbolic_reference(i, target)
                continue

            if is_named(child.kind):
                if id(child) in defined:
                    logger.debug("Replacing repeated definition of %s with a symbol", child.full_name)
                    node.replace_child_with_symbolic_reference(i, child)
                    continue
                defined.add(id(child))

            self._link(child, defined, visited)
