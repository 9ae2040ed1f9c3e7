"""Last-in, first-out stacks backed by a list or by linked nodes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Stack(ABC, Generic[T]):
    """A LIFO container; ``pop`` and ``peek`` raise IndexError when empty."""

    @abstractmethod
    def push(self, item: T) -> None:
        """Put ``item`` on top of the stack."""

    @abstractmethod
    def pop(self) -> T:
        """Remove and return the top item."""

    @abstractmethod
    def peek(self) -> T:
        """Return the top item without removing it."""

    @abstractmethod
    def is_empty(self) -> bool:
        """Tell whether the stack holds no items."""

    @abstractmethod
    def __len__(self) -> int:
        """Return the number of items on the stack."""


class SliceStack(Stack[T]):
    """Stack kept in a Python list."""

    def __init__(self) -> None:
        self._items: list[T] = []

    def push(self, item: T) -> None:
        self._items.append(item)

    def pop(self) -> T:
        if not self._items:
            raise IndexError("pop from empty stack")
        return self._items.pop()

    def peek(self) -> T:
        if not self._items:
            raise IndexError("peek at empty stack")
        return self._items[-1]

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


@dataclass(slots=True)
class _Node(Generic[T]):
    value: T
    next: Optional[_Node[T]] = None


class LinkedListStack(Stack[T]):
    """Stack kept as a chain of singly linked nodes."""

    def __init__(self) -> None:
        self._top: Optional[_Node[T]] = None
        self._size = 0

    def push(self, item: T) -> None:
        self._top = _Node(item, self._top)
        self._size += 1

    def pop(self) -> T:
        if self._top is None:
            raise IndexError("pop from empty stack")
        node = self._top
        self._top = node.next
        self._size -= 1
        return node.value

    def peek(self) -> T:
        if self._top is None:
            raise IndexError("peek at empty stack")
        return self._top.value

    def is_empty(self) -> bool:
        return self._top is None

    def __len__(self) -> int:
        return self._size