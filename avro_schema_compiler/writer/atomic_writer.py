"""
Atomic file writer for schema output.

Ensures that file writes are atomic so an interrupted run never leaves
a truncated schema file behind.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

from ..compiler.json_compiler import compile_json_schema_text
from ..exceptions import SchemaError


class AtomicWriter:
    """Handles atomic file writes with validation.

    The schema text is validated first, then written to a temporary file
    beside the target which replaces the target in one rename.
    """

    def __init__(self, validate_schema: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate_schema: Optional validation function for schema text
        """
        self._validate_schema = validate_schema or self._default_validate_schema

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Raises:
            SchemaError: If validation fails
            OSError: If file operations fail
        """
        if validate:
            self._validate_schema(content)

        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", text=True)
        temp_path = Path(temp_name)
        try:
            with open(fd, "w", encoding="utf-8") as f:
                f.write(content)
            # Same directory as the target, so this is a rename on one filesystem
            temp_path.replace(path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

    def write_if_not_exists(self, path: Path, content: str, validate: bool = True) -> bool:
        """Write content only if the file doesn't exist.

        Returns:
            True once the file is written

        Raises:
            FileExistsError: If the file already exists
            SchemaError: If validation fails
        """
        if path.exists():
            raise FileExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")

        self.write(path, content, validate)
        return True

    @staticmethod
    def _default_validate_schema(content: str) -> None:
        """Check that the content compiles as a schema on its own.

        Raises:
            SchemaError: If it does not
        """
        try:
            compile_json_schema_text(content)
        except SchemaError as e:
            raise SchemaError(f"Generated schema is not valid: {e}") from e
