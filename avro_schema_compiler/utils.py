"""
Utility functions for schema names and namespaces.
"""

from __future__ import annotations

NAMESPACE_SEPARATOR = "."


def make_full_name(name: str, namespace: str | None = None) -> str:
    """Join a namespace and a simple name into a full name.

    Examples:
        ("Person", "com.example") -> "com.example.Person"
        ("Person", "") -> "Person"
        ("Person", None) -> "Person"

    Args:
        name: The simple name
        namespace: The namespace, empty or None when there is none

    Returns:
        The full name
    """
    if namespace:
        return f"{namespace}{NAMESPACE_SEPARATOR}{name}"
    return name


def split_full_name(full_name: str) -> tuple[str, str]:
    """Split a full name into (namespace, simple name).

    Examples:
        "com.example.Person" -> ("com.example", "Person")
        "Person" -> ("", "Person")
    """
    namespace, _, name = full_name.rpartition(NAMESPACE_SEPARATOR)
    return namespace, name


def is_qualified(name: str) -> bool:
    """Whether `name` already carries a namespace."""
    return NAMESPACE_SEPARATOR in name


def qualify_name(name: str, enclosing_namespace: str | None) -> str:
    """Resolve a name relative to the namespace in scope.

    A name containing a dot is already a full name and is returned as is.
    """
    if is_qualified(name):
        return name
    return make_full_name(name, enclosing_namespace)
