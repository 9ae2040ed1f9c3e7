"""Growable array whose append returns a new view over shared storage."""

from __future__ import annotations

from typing import Any, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


def _grown(capacity: int) -> int:
    if capacity == 0:
        return 1
    if capacity >= 1024:
        return capacity + capacity // 4
    return capacity * 2


class DynamicArray(Generic[T]):
    """A length/capacity view over a backing list.

    ``append`` returns a new array; it shares storage with the original until
    the capacity runs out and a larger list is allocated.
    """

    def __init__(self, length: int = 0, capacity: Optional[int] = None) -> None:
        if capacity is None:
            capacity = length
        if length < 0 or capacity < length:
            raise ValueError("need 0 <= length <= capacity")
        self._data: list[Any] = [None] * capacity
        self._len = length
        self._cap = capacity

    @classmethod
    def _view(cls, data: list[Any], length: int, capacity: int) -> DynamicArray[T]:
        array = cls.__new__(cls)
        array._data = data
        array._len = length
        array._cap = capacity
        return array

    def append(self, *args: T) -> DynamicArray[T]:
        """Return a new array with ``args`` added at the end."""
        data, length, capacity = self._data, self._len, self._cap
        for value in args:
            if length == capacity:
                capacity = _grown(capacity)
                data = data[:length] + [None] * (capacity - length)
            data[length] = value
            length += 1
        return self._view(data, length, capacity)

    def _check(self, index: int) -> None:
        if not 0 <= index < self._len:
            raise IndexError(f"index {index} out of range for length {self._len}")

    def __getitem__(self, index: int) -> T:
        self._check(index)
        return self._data[index]

    def __setitem__(self, index: int, value: T) -> None:
        self._check(index)
        self._data[index] = value

    def __len__(self) -> int:
        return self._len

    def __iter__(self) -> Iterator[T]:
        return iter(self._data[: self._len])

    def capacity(self) -> int:
        return self._cap

    def __repr__(self) -> str:
        return f"DynamicArray({list(self)!r}, capacity={self._cap})"