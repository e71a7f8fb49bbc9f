"""
Error type raised by schema construction and validation.
"""

from __future__ import annotations


class SchemaError(Exception):
    """Raised when a schema cannot be built or used.

    This can happen when:
    - A field or symbol name is repeated within one record or enum
    - A node fails validation when its definition is finished
    - A symbolic reference is never resolved or cannot be followed
    - A back-patched symbol does not match the name of its target
    - A child or name index is out of range
    - A fixed size is not a non-negative integer
    """

    pass
