"""
Compiler for Avro schemas written as JSON.

Walks a parsed JSON schema document and drives a `CompilerContext` with
one build event per element, then returns the validated schema.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..config import CompilerConfig
from ..exceptions import SchemaError
from ..schema.types import NodeKind, primitive_kind
from ..valid_schema import ValidSchema
from .context import CompilerContext


class JsonSchemaCompiler:
    """Compiles parsed Avro JSON schemas into validated schema trees."""

    def __init__(self, config: CompilerConfig | None = None):
        """
        Initialize the compiler.

        Args:
            config: Compiler configuration
        """
        self.config = config or CompilerConfig()

    def compile(self, document: Any) -> ValidSchema:
        """
        Compile a JSON schema document.

        Args:
            document: The schema as returned by json.loads (str, list or dict)

        Returns:
            The validated schema
        """
        context = CompilerContext(self.config)
        self._emit(context, document, "#")
        return context.valid_schema()

    def _emit(self, context: CompilerContext, schema: Any, path: str) -> None:
        """Emit build events for one schema element."""
        if isinstance(schema, str):
            self._emit_type_name(context, schema)
        elif isinstance(schema, list):
            self._emit_union(context, schema, path)
        elif isinstance(schema, dict):
            self._emit_object(context, schema, path)
        else:
            raise SchemaError(f"Unexpected schema value at {path}: {schema!r}")

    def _emit_type_name(self, context: CompilerContext, name: str) -> None:
        """A primitive type name or a reference to a named type."""
        context.start_type()
        kind = primitive_kind(name)
        if kind is not None:
            context.add_type(kind)
        else:
            context.add_named_type_reference(name)
        context.finish_type()

    def _emit_union(self, context: CompilerContext, branches: list[Any], path: str) -> None:
        context.start_type()
        context.add_type(NodeKind.UNION)
        context.set_types_attribute()
        for i, branch in enumerate(branches):
            self._emit(context, branch, f"{path}/{i}")
        context.finish_type()

    def _emit_object(self, context: CompilerContext, schema: dict[str, Any], path: str) -> None:
        if "type" not in schema:
            raise SchemaError(f"Missing 'type' at {path}")
        type_value = schema["type"]

        # {"type": {...}} and {"type": [...]} wrap another schema
        if isinstance(type_value, (dict, list)):
            self._emit(context, type_value, f"{path}/type")
            return
        if not isinstance(type_value, str):
            raise SchemaError(f"Invalid 'type' at {path}: {type_value!r}")

        if type_value in ("record", "error"):
            self._emit_record(context, schema, path)
        elif type_value == "enum":
            self._emit_enum(context, schema, path)
        elif type_value == "array":
            self._emit_array(context, schema, path)
        elif type_value == "map":
            self._emit_map(context, schema, path)
        elif type_value == "fixed":
            self._emit_fixed(context, schema, path)
        else:
            self._emit_type_name(context, type_value)

    def _emit_name_attributes(self, context: CompilerContext, schema: dict[str, Any], path: str) -> None:
        """Set name and namespace; the namespace must be in scope before any child is emitted."""
        name = schema.get("name")
        if not isinstance(name, str) or not name:
            raise SchemaError(f"Missing or invalid 'name' at {path}")
        context.set_name(name)

        namespace = schema.get("namespace")
        if namespace is not None:
            if not isinstance(namespace, str):
                raise SchemaError(f"Invalid 'namespace' at {path}: {namespace!r}")
            context.set_namespace(namespace)

    def _emit_record(self, context: CompilerContext, schema: dict[str, Any], path: str) -> None:
        context.start_type()
        context.add_type(NodeKind.RECORD)
        self._emit_name_attributes(context, schema, path)

        fields = schema.get("fields")
        if not isinstance(fields, list):
            raise SchemaError(f"Missing or invalid 'fields' at {path}")

        context.set_fields_attribute()
        for i, field_schema in enumerate(fields):
            field_path = f"{path}/fields/{i}"
            if not isinstance(field_schema, dict) or not isinstance(field_schema.get("name"), str):
                raise SchemaError(f"Field without a name at {field_path}")
            if "type" not in field_schema:
                raise SchemaError(f"Field without a type at {field_path}")
            context.add_field_name(field_schema["name"])
            self._emit(context, field_schema["type"], f"{field_path}/type")
        context.finish_type()

    def _emit_enum(self, context: CompilerContext, schema: dict[str, Any], path: str) -> None:
        context.start_type()
        context.add_type(NodeKind.ENUM)
        self._emit_name_attributes(context, schema, path)

        symbols = schema.get("symbols")
        if not isinstance(symbols, list):
            raise SchemaError(f"Missing or invalid 'symbols' at {path}")
        for symbol in symbols:
            if not isinstance(symbol, str):
                raise SchemaError(f"Invalid enum symbol at {path}: {symbol!r}")
            context.add_symbol(symbol)
        context.finish_type()

    def _emit_array(self, context: CompilerContext, schema: dict[str, Any], path: str) -> None:
        if "items" not in schema:
            raise SchemaError(f"Missing 'items' at {path}")
        context.start_type()
        context.add_type(NodeKind.ARRAY)
        context.set_items_attribute()
        self._emit(context, schema["items"], f"{path}/items")
        context.finish_type()

    def _emit_map(self, context: CompilerContext, schema: dict[str, Any], path: str) -> None:
        if "values" not in schema:
            raise SchemaError(f"Missing 'values' at {path}")
        context.start_type()
        context.add_type(NodeKind.MAP)
        context.set_values_attribute()
        self._emit(context, schema["values"], f"{path}/values")
        context.finish_type()

    def _emit_fixed(self, context: CompilerContext, schema: dict[str, Any], path: str) -> None:
        if "size" not in schema:
            raise SchemaError(f"Missing 'size' at {path}")
        context.start_type()
        context.add_type(NodeKind.FIXED)
        self._emit_name_attributes(context, schema, path)
        size = schema["size"]
        context.set_fixed_size(size if isinstance(size, int) else str(size))
        context.finish_type()


def compile_json_schema(document: Any, config: CompilerConfig | None = None) -> ValidSchema:
    """Compile a parsed JSON schema document."""
    return JsonSchemaCompiler(config).compile(document)


def compile_json_schema_text(text: str, config: CompilerConfig | None = None) -> ValidSchema:
    """Compile a JSON schema given as text."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaError(f"Schema is not valid JSON: {e}") from e
    return compile_json_schema(document, config)


def compile_json_schema_file(path: str | Path, config: CompilerConfig | None = None) -> ValidSchema:
    """Compile the JSON schema stored in `path`."""
    with open(path, encoding="utf-8") as f:
        return compile_json_schema_text(f.read(), config)
