"""
Rendering of schema trees as Avro JSON and as a plain-text outline.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2

from .exceptions import SchemaError
from .schema.nodes import Node, full_name_of
from .schema.types import NodeKind, is_compound, is_named, is_primitive


@dataclass
class InfoEntry:
    """One line of the outline."""

    depth: int
    text: str


class SchemaPrinter:
    """Renders a node tree."""

    def __init__(self, indent: int | None = 2, outline_indent: str = "  "):
        """
        Initialize the printer.

        Args:
            indent: JSON indentation, None for compact output
            outline_indent: Indentation unit of the text outline
        """
        self.indent = indent
        self.outline_indent = outline_indent
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent / "templates"
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.basic_info_template = self.jinja_env.get_template("basic_info.txt.jinja2")

    # JSON

    def to_json(self, node: Node) -> str:
        """Render `node` as Avro schema JSON."""
        return json.dumps(self.to_dict(node), indent=self.indent)

    def to_dict(self, node: Node) -> Any:
        """Convert `node` to the JSON-compatible value of its Avro schema.

        Each named type is written in full once, then by full name, so the
        result is self-contained even when `node` is not the schema root.
        """
        return self._to_dict(node, set())

    def _to_dict(self, node: Node, written: set[str]) -> Any:
        kind = node.kind
        if is_primitive(kind):
            return kind.value
        if kind == NodeKind.SYMBOLIC:
            # Referenced before being written: expand the definition here
            if node.name not in written and node.is_set():
                return self._to_dict(node.resolve_target(), written)
            return node.name

        if is_named(kind):
            full_name = full_name_of(node)
            if full_name in written:
                return full_name
            written.add(full_name)

        if kind == NodeKind.RECORD:
            result = self._named_header(node)
            result["fields"] = [
                {"name": node.child_name_at(i), "type": self._to_dict(node.child_at(i), written)}
                for i in range(node.child_count())
            ]
            return result
        if kind == NodeKind.ENUM:
            result = self._named_header(node)
            result["symbols"] = [node.child_name_at(i) for i in range(node.child_name_count())]
            return result
        if kind == NodeKind.FIXED:
            result = self._named_header(node)
            result["size"] = node.fixed_size
            return result
        if kind == NodeKind.ARRAY:
            return {"type": "array", "items": self._to_dict(node.child_at(0), written)}
        if kind == NodeKind.MAP:
            return {"type": "map", "values": self._to_dict(node.child_at(1), written)}
        if kind == NodeKind.UNION:
            return [self._to_dict(node.child_at(i), written) for i in range(node.child_count())]
        raise SchemaError(f"Unsupported node kind: {kind}")

    @staticmethod
    def _named_header(node: Node) -> dict[str, Any]:
        header: dict[str, Any] = {"type": node.kind.value, "name": node.name}
        if node.namespace:
            header["namespace"] = node.namespace
        return header

    # Outline

    def basic_info(self, node: Node) -> str:
        """Render the outline of `node`: kind, name and size, field names, and an end marker per compound type."""
        entries = list(self._info_entries(node, 0))
        return self.basic_info_template.render(entries=entries, indent=self.outline_indent)

    def _info_entries(self, node: Node, depth: int):
        header = node.kind.value
        if node.has_name():
            header += f" {node.name}"
        if node.has_fixed_size():
            header += f" {node.fixed_size}"
        yield InfoEntry(depth, header)

        count = node.child_count() or node.child_name_count()
        for i in range(count):
            if node.has_child_names():
                yield InfoEntry(depth + 1, f"name {node.child_name_at(i)}")
            if node.has_children():
                yield from self._info_entries(node.child_at(i), depth + 1)

        if is_compound(node.kind):
            yield InfoEntry(depth, f"end {node.kind.value}")
