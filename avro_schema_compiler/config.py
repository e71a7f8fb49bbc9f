"""
Configuration for the schema compiler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        indent: JSON indentation, None for compact output
        validate_before_write: Whether to re-compile written schemas before committing them
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    indent: int | None = 2
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class CompilerConfig:
    """Configuration options for schema compilation."""

    # Named types without a namespace take the innermost namespace in scope
    inherit_enclosing_namespace: bool = True

    # Allow a symbolic reference to name a type defined later in the tree
    allow_forward_references: bool = True

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> CompilerConfig:
        """Create a config from a dictionary."""
        config = CompilerConfig()
        for k, v in d.items():
            if k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    indent=v.get("indent", 2),
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "inherit_enclosing_namespace": self.inherit_enclosing_namespace,
            "allow_forward_references": self.allow_forward_references,
            "output": {
                "mode": self.output.mode.value,
                "indent": self.output.indent,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
