"""
Schema node definitions.

A schema is a tree of nodes. Every node has a fixed kind and is composed
from attribute slots (name, namespace, children, child names, size) whose
shape depends on the kind:

    kind       name  namespace  children    child names  size
    primitive  -     -          -           -            -
    symbolic   1     -          -           -            -
    record     1     1          many        many         -
    enum       1     1          -           many         -
    array      -     -          1           -            -
    map        -     -          2           -            -
    union      -     -          many        -            -
    fixed      1     1          -           -            1

Parents hold their children strongly, so a named type can be shared by
several parents. A symbolic node only holds a weak reference to the node
it stands for, which is how recursive schemas avoid ownership cycles.
"""

from __future__ import annotations

import weakref
from typing import ClassVar

from ..exceptions import SchemaError
from ..utils import is_qualified, make_full_name
from .attributes import AttributeSlot, MultiAttribute, NameIndex, NoAttribute, SingleAttribute
from .resolution import resolve_schemas
from .types import NodeKind, SchemaResolution, is_primitive


class Node:
    """Base class for all schema nodes."""

    # Attribute shape, overridden per kind
    name_slot: ClassVar[type[AttributeSlot]] = NoAttribute
    namespace_slot: ClassVar[type[AttributeSlot]] = NoAttribute
    leaves_slot: ClassVar[type[AttributeSlot]] = NoAttribute
    leaf_names_slot: ClassVar[type[AttributeSlot]] = NoAttribute
    size_slot: ClassVar[type[AttributeSlot]] = NoAttribute

    def __init__(self, kind: NodeKind):
        self._kind = kind
        self._name_attribute: AttributeSlot[str] = self.name_slot()
        self._namespace_attribute: AttributeSlot[str] = self.namespace_slot()
        self._leaf_attributes: AttributeSlot[Node] = self.leaves_slot()
        self._leaf_name_attributes: AttributeSlot[str] = self.leaf_names_slot()
        self._size_attribute: AttributeSlot[int] = self.size_slot()
        self._name_index = NameIndex()
        self._locked = False

    @property
    def kind(self) -> NodeKind:
        return self._kind

    # Locking

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        self._locked = True

    def _check_lock(self) -> None:
        if self._locked:
            raise SchemaError("Cannot modify locked schema")

    # Name

    def has_name(self) -> bool:
        return self._name_attribute.has_attribute

    @property
    def name(self) -> str:
        return self._name_attribute.get()

    def set_name(self, name: str) -> None:
        self._check_lock()
        self._name_attribute.add(name)

    # Namespace

    def has_namespace(self) -> bool:
        return self._namespace_attribute.has_attribute

    @property
    def namespace(self) -> str:
        """The namespace, empty when a namespaced kind declares none."""
        if self._namespace_attribute.has_attribute and not self._namespace_attribute.size():
            return ""
        return self._namespace_attribute.get()

    def set_namespace(self, namespace: str) -> None:
        self._check_lock()
        self._namespace_attribute.add(namespace)

    @property
    def full_name(self) -> str:
        return full_name_of(self)

    # Children

    def has_children(self) -> bool:
        return self._leaf_attributes.has_attribute

    def add_child(self, node: Node) -> None:
        self._check_lock()
        self._leaf_attributes.add(node)

    def child_count(self) -> int:
        return self._leaf_attributes.size()

    def child_at(self, index: int) -> Node:
        return self._leaf_attributes.get(index)

    # Child names (record fields, enum symbols)

    def has_child_names(self) -> bool:
        return self._leaf_name_attributes.has_attribute

    def add_child_name(self, name: str) -> None:
        self._check_lock()
        if not self._leaf_name_attributes.has_attribute:
            raise SchemaError("This type does not have attribute")
        if not self._name_index.add(name, self._leaf_name_attributes.size()):
            raise SchemaError(f"Cannot add duplicate name: {name}")
        self._leaf_name_attributes.add(name)

    def child_name_count(self) -> int:
        return self._leaf_name_attributes.size()

    def child_name_at(self, index: int) -> str:
        return self._leaf_name_attributes.get(index)

    def lookup_child_index(self, name: str) -> int | None:
        """Return the position of the field or symbol called `name`, or None."""
        if not self._leaf_name_attributes.has_attribute:
            raise SchemaError("This type does not have attribute")
        return self._name_index.lookup(name)

    def _index_child_names(self) -> None:
        for i, name in enumerate(self._leaf_name_attributes):
            if not self._name_index.add(name, i):
                raise SchemaError(f"Cannot add duplicate name: {name}")

    # Fixed size

    def has_fixed_size(self) -> bool:
        return self._size_attribute.has_attribute

    @property
    def fixed_size(self) -> int:
        return self._size_attribute.get()

    def set_fixed_size(self, size: int) -> None:
        self._check_lock()
        self._size_attribute.add(size)

    # Contract implemented per kind

    def validate(self) -> bool:
        raise NotImplementedError

    def resolve_target(self) -> Node:
        raise SchemaError("Only symbolic nodes may be resolved")

    def resolve(self, reader: Node) -> SchemaResolution:
        """Classify whether data written with this node can be read with `reader`."""
        return resolve_schemas(self, reader)

    def replace_child_with_symbolic_reference(self, index: int, node: Node) -> None:
        """
        Swap the child at `index` for a symbolic reference to `node`.

        The child must already denote the full name of `node`. Allowed on
        locked nodes, since the schema described does not change.

        Args:
            index: Position of the child to replace
            node: The definition the child refers to
        """
        if not self._leaf_attributes.has_attribute:
            raise SchemaError("Cannot change leaf node for nonexistent leaf")

        replace_node = self._leaf_attributes.get(index)
        full_name = full_name_of(node)
        if not replace_node.has_name() or full_name_of(replace_node) != full_name:
            raise SchemaError(
                f"Symbolic name does not match the name of the schema it references: {full_name}"
            )

        symbol = SymbolicNode(full_name)
        symbol.set_target(node)
        self._leaf_attributes.set(index, symbol)

    def __repr__(self) -> str:
        if self.has_name() and self._name_attribute.size():
            return f"<{type(self).__name__} {self.kind} {self.full_name}>"
        return f"<{type(self).__name__} {self.kind}>"


class PrimitiveNode(Node):
    """A primitive type (null, boolean, int, long, float, double, bytes, string)."""

    def __init__(self, kind: NodeKind):
        if not is_primitive(kind):
            raise SchemaError(f"{kind} is not a primitive type")
        super().__init__(kind)

    def validate(self) -> bool:
        return True


class SymbolicNode(Node):
    """A reference, by full name, to a named type defined elsewhere."""

    name_slot = SingleAttribute

    def __init__(self, name: str | None = None):
        super().__init__(NodeKind.SYMBOLIC)
        self._target: weakref.ref[Node] | None = None
        if name is not None:
            self._name_attribute.add(name)

    def validate(self) -> bool:
        return self._name_attribute.size() == 1

    def is_set(self) -> bool:
        return self._target is not None and self._target() is not None

    def set_target(self, node: Node) -> None:
        self._target = weakref.ref(node)

    def resolve_target(self) -> Node:
        """Follow the reference to the node it stands for."""
        node = self._target() if self._target is not None else None
        if node is None:
            raise SchemaError(f"Could not follow symbol {self.name}")
        return node


class RecordNode(Node):
    """A record: a named, namespaced sequence of named fields."""

    name_slot = SingleAttribute
    namespace_slot = SingleAttribute
    leaves_slot = MultiAttribute
    leaf_names_slot = MultiAttribute

    def __init__(
        self,
        name: str | None = None,
        fields: list[Node] | None = None,
        field_names: list[str] | None = None,
        namespace: str | None = None,
    ):
        super().__init__(NodeKind.RECORD)
        self._name_attribute = SingleAttribute(name)
        self._namespace_attribute = SingleAttribute(namespace)
        self._leaf_attributes = MultiAttribute(fields)
        self._leaf_name_attributes = MultiAttribute(field_names)
        self._index_child_names()

    def validate(self) -> bool:
        return (
            self._name_attribute.size() == 1
            and self._leaf_attributes.size() == self._leaf_name_attributes.size()
        )


class EnumNode(Node):
    """An enum: a named, namespaced list of symbols."""

    name_slot = SingleAttribute
    namespace_slot = SingleAttribute
    leaf_names_slot = MultiAttribute

    def __init__(
        self,
        name: str | None = None,
        symbols: list[str] | None = None,
        namespace: str | None = None,
    ):
        super().__init__(NodeKind.ENUM)
        self._name_attribute = SingleAttribute(name)
        self._namespace_attribute = SingleAttribute(namespace)
        self._leaf_name_attributes = MultiAttribute(symbols)
        self._index_child_names()

    def validate(self) -> bool:
        return self._name_attribute.size() == 1 and self._leaf_name_attributes.size() > 0


class ArrayNode(Node):
    """An array of a single item type."""

    leaves_slot = SingleAttribute

    def __init__(self, items: Node | None = None):
        super().__init__(NodeKind.ARRAY)
        self._leaf_attributes = SingleAttribute(items)

    def validate(self) -> bool:
        return self._leaf_attributes.size() == 1


class MapNode(Node):
    """A map from strings to a value type.

    Child 0 is always the implicit string key, child 1 the value type.
    """

    leaves_slot = MultiAttribute

    def __init__(self, values: Node | None = None):
        super().__init__(NodeKind.MAP)
        leaves = MultiAttribute([values]) if values is not None else MultiAttribute()
        leaves.add(PrimitiveNode(NodeKind.STRING))
        # Key goes before value
        if leaves.size() == 2:
            leaves.swap(0, 1)
        self._leaf_attributes = leaves

    def validate(self) -> bool:
        return self._leaf_attributes.size() == 2 and self._leaf_attributes.get(0).kind == NodeKind.STRING


class UnionNode(Node):
    """A union of branch types."""

    leaves_slot = MultiAttribute

    def __init__(self, branches: list[Node] | None = None):
        super().__init__(NodeKind.UNION)
        self._leaf_attributes = MultiAttribute(branches)

    def validate(self) -> bool:
        if self._leaf_attributes.size() < 1:
            return False
        seen: set[str] = set()
        for branch in self._leaf_attributes:
            if branch.kind == NodeKind.UNION:
                return False
            key = discriminant_of(branch)
            if key in seen:
                return False
            seen.add(key)
        return True


class FixedNode(Node):
    """A named, namespaced blob of a fixed number of bytes."""

    name_slot = SingleAttribute
    namespace_slot = SingleAttribute
    size_slot = SingleAttribute

    def __init__(
        self,
        name: str | None = None,
        size: int | None = None,
        namespace: str | None = None,
    ):
        super().__init__(NodeKind.FIXED)
        self._name_attribute = SingleAttribute(name)
        self._namespace_attribute = SingleAttribute(namespace)
        self._size_attribute = SingleAttribute(size)

    def validate(self) -> bool:
        if self._name_attribute.size() != 1 or self._size_attribute.size() != 1:
            return False
        size = self._size_attribute.get()
        return isinstance(size, int) and not isinstance(size, bool) and size >= 0


def full_name_of(node: Node) -> str:
    """Full name of a named or symbolic node.

    Symbolic nodes already store the full name they refer to. A dotted
    name is a full name and the declared namespace is ignored.
    """
    if node.kind == NodeKind.SYMBOLIC:
        return node.name
    if not node.has_name():
        raise SchemaError(f"Type {node.kind} has no name")
    if is_qualified(node.name) or not node.has_namespace():
        return node.name
    return make_full_name(node.name, node.namespace)


def discriminant_of(node: Node) -> str:
    """Value distinguishing union branches: primitive or kind name, else full name."""
    if node.has_name():
        return full_name_of(node)
    return node.kind.value


def resolve_symbol(node: Node) -> Node:
    """Return the node a symbolic node refers to."""
    return node.resolve_target()
