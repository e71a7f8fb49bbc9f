"""Avro Schema Compiler

A Python package for building and validating Avro schema trees.
Provides the schema node model, a stack-based tree builder driven by
parse events, a JSON schema compiler, and writer/reader schema resolution.
"""

__version__ = "1.0.0"

from .compiler import (
    CompilerContext,
    JsonSchemaCompiler,
    compile_json_schema,
    compile_json_schema_file,
    compile_json_schema_text,
)
from .config import CompilerConfig, OutputConfig, OutputMode
from .exceptions import SchemaError
from .printer import SchemaPrinter
from .schema import (
    ArrayNode,
    EnumNode,
    FixedNode,
    MapNode,
    NameIndex,
    Node,
    NodeKind,
    PrimitiveNode,
    RecordNode,
    SchemaResolution,
    SymbolicNode,
    UnionNode,
    resolve_symbol,
)
from .valid_schema import ValidSchema
from .writer import AtomicWriter

__all__ = [
    "CompilerContext",
    "JsonSchemaCompiler",
    "compile_json_schema",
    "compile_json_schema_file",
    "compile_json_schema_text",
    "CompilerConfig",
    "OutputConfig",
    "OutputMode",
    "SchemaError",
    "SchemaPrinter",
    "Node",
    "NodeKind",
    "PrimitiveNode",
    "SymbolicNode",
    "RecordNode",
    "EnumNode",
    "ArrayNode",
    "MapNode",
    "UnionNode",
    "FixedNode",
    "NameIndex",
    "SchemaResolution",
    "resolve_symbol",
    "ValidSchema",
    "AtomicWriter",
]
