"""
Attribute slots used to compose schema nodes.

Each node kind declares, per attribute (name, namespace, children,
child names, size), whether it has none, exactly one, or many values.
The slot enforces that shape at runtime so a node of the wrong kind
cannot be given an attribute it does not carry.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import ClassVar, Generic, TypeVar

from ..exceptions import SchemaError

T = TypeVar("T")


class AttributeSlot(Generic[T]):
    """Base class for zero, one or many valued attributes."""

    has_attribute: ClassVar[bool] = False

    def add(self, value: T) -> None:
        raise NotImplementedError

    def get(self, index: int = 0) -> T:
        raise NotImplementedError

    def set(self, index: int, value: T) -> None:
        raise NotImplementedError

    def size(self) -> int:
        raise NotImplementedError

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[T]:
        for i in range(self.size()):
            yield self.get(i)


class NoAttribute(AttributeSlot[T]):
    """Slot for an attribute the node kind does not have."""

    has_attribute = False

    def add(self, value: T) -> None:
        raise SchemaError("This type does not have attribute")

    def get(self, index: int = 0) -> T:
        raise SchemaError("This type does not have attribute")

    def set(self, index: int, value: T) -> None:
        raise SchemaError("This type does not have attribute")

    def size(self) -> int:
        return 0


class SingleAttribute(AttributeSlot[T]):
    """Slot holding at most one value."""

    has_attribute = True

    def __init__(self, value: T | None = None):
        self._value = value
        self._size = 0 if value is None else 1

    def add(self, value: T) -> None:
        if self._size:
            raise SchemaError("SingleAttribute can only be set once")
        self._value = value
        self._size = 1

    def get(self, index: int = 0) -> T:
        if index != 0:
            raise SchemaError(f"SingleAttribute has only 1 value, index {index} requested")
        if not self._size:
            raise SchemaError("SingleAttribute has not been set")
        return self._value

    def set(self, index: int, value: T) -> None:
        if index != 0 or not self._size:
            raise SchemaError(f"SingleAttribute index {index} out of range")
        self._value = value

    def size(self) -> int:
        return self._size


class MultiAttribute(AttributeSlot[T]):
    """Slot holding any number of values in insertion order."""

    has_attribute = True

    def __init__(self, values: list[T] | None = None):
        self._values: list[T] = list(values) if values else []

    def add(self, value: T) -> None:
        self._values.append(value)

    def get(self, index: int = 0) -> T:
        if not 0 <= index < len(self._values):
            raise SchemaError(f"Index {index} out of range, size is {len(self._values)}")
        return self._values[index]

    def set(self, index: int, value: T) -> None:
        if not 0 <= index < len(self._values):
            raise SchemaError(f"Index {index} out of range, size is {len(self._values)}")
        self._values[index] = value

    def swap(self, i: int, j: int) -> None:
        for index in (i, j):
            if not 0 <= index < len(self._values):
                raise SchemaError(f"Index {index} out of range, size is {len(self._values)}")
        self._values[i], self._values[j] = self._values[j], self._values[i]

    def size(self) -> int:
        return len(self._values)


class NameIndex:
    """Maps a name to its position within one record's fields or one enum's symbols."""

    def __init__(self):
        self._index: dict[str, int] = {}

    def add(self, name: str, index: int) -> bool:
        """
        Register `name` at `index`.

        Returns:
            False without inserting if the name is already present
        """
        if name in self._index:
            return False
        self._index[name] = index
        return True

    def lookup(self, name: str) -> int | None:
        return self._index.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._index)
