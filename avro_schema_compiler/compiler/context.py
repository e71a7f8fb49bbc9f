"""
Stack-based schema tree builder.

A `CompilerContext` receives one call per parse event from a schema
reader and assembles the node tree. Each type being defined has a frame
on the stack; finishing a type turns its frame into a validated node
and attaches it to the enclosing frame, or makes it the root.

Namespaces declared by named types are kept on a second stack, pushed
when the namespace is set and popped when that type finishes, so that
references by simple name can be qualified with the namespace in scope.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from ..config import CompilerConfig
from ..exceptions import SchemaError
from ..schema.attributes import MultiAttribute, NameIndex, SingleAttribute
from ..schema.nodes import (
    ArrayNode,
    EnumNode,
    FixedNode,
    MapNode,
    Node,
    PrimitiveNode,
    RecordNode,
    SymbolicNode,
    UnionNode,
)
from ..schema.types import NodeKind, is_named, is_primitive
from ..utils import is_qualified, make_full_name, qualify_name, split_full_name
from ..valid_schema import ValidSchema

logger = logging.getLogger(__name__)


class ChildSlot(Enum):
    """Which slot of the frame receives the next finished child."""

    NONE = "none"
    FIELDS = "fields"  # Record fields
    ITEMS = "items"  # Array item type
    VALUES = "values"  # Map value type
    TYPES = "types"  # Union branches


@dataclass
class CompilerFrame:
    """A type definition that is still being built."""

    kind: NodeKind | None = None
    child_slot: ChildSlot = ChildSlot.NONE

    name: SingleAttribute[str] = field(default_factory=SingleAttribute)
    namespace: SingleAttribute[str] = field(default_factory=SingleAttribute)
    size: SingleAttribute[int] = field(default_factory=SingleAttribute)

    symbols: MultiAttribute[str] = field(default_factory=MultiAttribute)
    symbol_index: NameIndex = field(default_factory=NameIndex)

    field_names: MultiAttribute[str] = field(default_factory=MultiAttribute)
    field_name_index: NameIndex = field(default_factory=NameIndex)
    fields: MultiAttribute[Node] = field(default_factory=MultiAttribute)

    items: SingleAttribute[Node] = field(default_factory=SingleAttribute)
    values: SingleAttribute[Node] = field(default_factory=SingleAttribute)
    types: MultiAttribute[Node] = field(default_factory=MultiAttribute)

    # Namespace in scope when the definition started
    enclosing_namespace: str = ""

    # Whether this frame pushed its namespace onto the namespace stack
    pushed_namespace: bool = False

    def add_node(self, node: Node) -> None:
        """Attach a finished child to the slot selected by the last marker."""
        if self.child_slot == ChildSlot.FIELDS:
            self.fields.add(node)
        elif self.child_slot == ChildSlot.ITEMS:
            self.items.add(node)
        elif self.child_slot == ChildSlot.VALUES:
            self.values.add(node)
        elif self.child_slot == ChildSlot.TYPES:
            self.types.add(node)
        else:
            raise SchemaError("Can't add node if the attribute type is not set")

    def simple_name(self) -> str | None:
        if not self.name.size():
            return None
        return split_full_name(self.name.get())[1]

    def resolved_namespace(self, inherit: bool) -> str:
        """Namespace of a full name, else the declared one, else the enclosing one when `inherit` is set."""
        if self.name.size() and is_qualified(self.name.get()):
            return split_full_name(self.name.get())[0]
        if self.namespace.size():
            return self.namespace.get()
        if inherit and self.name.size():
            return self.enclosing_namespace
        return ""

    def full_name(self, inherit: bool) -> str | None:
        if not self.name.size():
            return None
        return make_full_name(self.simple_name(), self.resolved_namespace(inherit))


def _value_or_none(attribute: SingleAttribute):
    return attribute.get() if attribute.size() else None


class CompilerContext:
    """Builds a schema tree from a sequence of build events."""

    def __init__(self, config: CompilerConfig | None = None):
        """
        Initialize the context.

        Args:
            config: Compiler configuration
        """
        self.config = config or CompilerConfig()
        self._stack: list[CompilerFrame] = []
        self._namespace_stack: list[str] = []
        self._root: Node | None = None

        # Full names of named types finished so far
        self._named_types: dict[str, Node] = {}

    @property
    def root(self) -> Node | None:
        return self._root

    @property
    def depth(self) -> int:
        """Number of type definitions currently open."""
        return len(self._stack)

    @property
    def namespace_depth(self) -> int:
        return len(self._namespace_stack)

    @property
    def current_namespace(self) -> str:
        return self._namespace_stack[-1] if self._namespace_stack else ""

    def _current(self) -> CompilerFrame:
        if not self._stack:
            raise SchemaError("No type definition is in progress")
        return self._stack[-1]

    # Build events

    def start_type(self) -> None:
        logger.debug("Start type definition")
        self._stack.append(CompilerFrame(enclosing_namespace=self.current_namespace))

    def add_type(self, kind: NodeKind | str) -> None:
        if not isinstance(kind, NodeKind):
            try:
                kind = NodeKind(kind)
            except ValueError as e:
                raise SchemaError(f"Unknown type: {kind}") from e
        logger.debug("Setting type to %s", kind)
        self._current().kind = kind

    def set_name(self, text: str) -> None:
        frame = self._current()
        logger.debug("Setting name to %s", text)
        frame.name.add(text)
        if is_qualified(text):
            # A full name brings its own namespace into scope
            self._push_namespace(frame, split_full_name(text)[0])

    def set_namespace(self, text: str) -> None:
        frame = self._current()
        logger.debug("Setting namespace to %s", text)
        frame.namespace.add(text)
        if frame.name.size() and is_qualified(frame.name.get()):
            logger.debug("Ignoring namespace %s of full name %s", text, frame.name.get())
            return
        self._push_namespace(frame, text)

    def add_named_type_reference(self, text: str) -> None:
        """Make the current frame a symbolic reference to the named type `text`."""
        full_name = qualify_name(text, self.current_namespace)
        logger.debug("Adding named type %s (namespace in scope: %r)", full_name, self.current_namespace)
        if not self.config.allow_forward_references and not self._is_known(full_name):
            raise SchemaError(f"Reference to undefined type: {full_name}")
        frame = self._current()
        frame.kind = NodeKind.SYMBOLIC
        frame.name.add(full_name)

    def set_fixed_size(self, text: str | int) -> None:
        size = self._parse_size(text)
        logger.debug("Setting size to %d", size)
        self._current().size.add(size)

    def add_symbol(self, text: str) -> None:
        frame = self._current()
        logger.debug("Adding enum symbol %s", text)
        if not frame.symbol_index.add(text, frame.symbols.size()):
            raise SchemaError(f"Cannot add duplicate name: {text}")
        frame.symbols.add(text)

    def set_fields_attribute(self) -> None:
        logger.debug("Ready for record fields")
        self._current().child_slot = ChildSlot.FIELDS

    def set_items_attribute(self) -> None:
        logger.debug("Ready for array type")
        self._current().child_slot = ChildSlot.ITEMS

    def set_values_attribute(self) -> None:
        logger.debug("Ready for map type")
        self._current().child_slot = ChildSlot.VALUES

    def set_types_attribute(self) -> None:
        logger.debug("Ready for union types")
        self._current().child_slot = ChildSlot.TYPES

    def add_field_name(self, text: str) -> None:
        frame = self._current()
        logger.debug("Setting field name to %s", text)
        if not frame.field_name_index.add(text, frame.field_names.size()):
            raise SchemaError(f"Cannot add duplicate name: {text}")
        frame.field_names.add(text)

    def finish_type(self) -> Node:
        """
        Finish the current type definition.

        Returns:
            The validated node, already attached to its parent or stored as root

        Raises:
            SchemaError: If the definition is incomplete or invalid
        """
        frame = self._current()
        logger.debug("Stop type %s", frame.kind)

        node = self._node_from_frame(frame)
        if not node.validate():
            raise SchemaError(f"Schema is invalid, due to bad node of type {node.kind}")
        node.lock()
        self._stack.pop()

        if frame.pushed_namespace:
            if not self._namespace_stack:
                raise SchemaError("Namespace stack is empty, cannot pop namespace")
            logger.debug("Popping namespace %s", self._namespace_stack[-1])
            self._namespace_stack.pop()

        if is_named(node.kind):
            self._named_types.setdefault(node.full_name, node)

        self._add(node)
        return node

    def valid_schema(self) -> ValidSchema:
        """Wrap the finished tree in a validated schema."""
        if self._stack:
            raise SchemaError(f"{len(self._stack)} type definition(s) were never finished")
        if self._namespace_stack:
            raise SchemaError("Namespace stack is not empty after compilation")
        if self._root is None:
            raise SchemaError("No type has been defined")
        return ValidSchema(self._root)

    # Helpers

    def _push_namespace(self, frame: CompilerFrame, namespace: str) -> None:
        if frame.pushed_namespace:
            logger.debug("Replacing namespace %s with %s", self._namespace_stack[-1], namespace)
            self._namespace_stack[-1] = namespace
            return
        logger.debug("Pushing namespace %s", namespace)
        self._namespace_stack.append(namespace)
        frame.pushed_namespace = True

    def _add(self, node: Node) -> None:
        if not self._stack:
            if self._root is not None:
                raise SchemaError("Schema already has a root type")
            self._root = node
        else:
            self._stack[-1].add_node(node)

    def _is_known(self, full_name: str) -> bool:
        if full_name in self._named_types:
            return True
        inherit = self.config.inherit_enclosing_namespace
        return any(frame.full_name(inherit) == full_name for frame in self._stack if is_named(frame.kind))

    @staticmethod
    def _parse_size(text: str | int) -> int:
        if isinstance(text, bool):
            raise SchemaError(f"Invalid fixed size: {text!r}")
        if isinstance(text, int):
            size = text
        else:
            stripped = str(text).strip()
            if not (stripped.isascii() and stripped.isdigit()):
                raise SchemaError(f"Invalid fixed size: {text!r}")
            size = int(stripped)
        if size < 0:
            raise SchemaError(f"Invalid fixed size: {text!r}")
        return size

    def _namespace_for(self, frame: CompilerFrame) -> str:
        return frame.resolved_namespace(self.config.inherit_enclosing_namespace)

    def _node_from_frame(self, frame: CompilerFrame) -> Node:
        kind = frame.kind
        if kind is None:
            raise SchemaError("Type was never set for this definition")

        if not is_named(kind) and kind != NodeKind.SYMBOLIC and frame.name.size():
            raise SchemaError(f"Type {kind} cannot have a name")
        if not is_named(kind) and frame.namespace.size():
            raise SchemaError(f"Type {kind} cannot have a namespace")
        if kind != NodeKind.FIXED and frame.size.size():
            raise SchemaError(f"Type {kind} cannot have a size")

        if is_primitive(kind):
            return PrimitiveNode(kind)
        if kind == NodeKind.SYMBOLIC:
            return SymbolicNode(_value_or_none(frame.name))
        if kind == NodeKind.RECORD:
            return RecordNode(
                frame.simple_name(),
                list(frame.fields),
                list(frame.field_names),
                self._namespace_for(frame),
            )
        if kind == NodeKind.ENUM:
            return EnumNode(frame.simple_name(), list(frame.symbols), self._namespace_for(frame))
        if kind == NodeKind.ARRAY:
            return ArrayNode(_value_or_none(frame.items))
        if kind == NodeKind.MAP:
            return MapNode(_value_or_none(frame.values))
        if kind == NodeKind.UNION:
            return UnionNode(list(frame.types))
        if kind == NodeKind.FIXED:
            return FixedNode(frame.simple_name(), _value_or_none(frame.size), self._namespace_for(frame))
        raise SchemaError(f"Unknown type: {kind}")
