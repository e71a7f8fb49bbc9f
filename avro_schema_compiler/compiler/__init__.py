"""
Schema compiler module.

Contains the stack-based tree builder and the JSON schema driver.
"""

from __future__ import annotations

from .context import ChildSlot, CompilerContext, CompilerFrame
from .json_compiler import (
    JsonSchemaCompiler,
    compile_json_schema,
    compile_json_schema_file,
    compile_json_schema_text,
)

__all__ = [
    "ChildSlot",
    "CompilerContext",
    "CompilerFrame",
    "JsonSchemaCompiler",
    "compile_json_schema",
    "compile_json_schema_file",
    "compile_json_schema_text",
]
