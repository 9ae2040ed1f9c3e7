"""Doubly linked list that inserts at the head."""

from __future__ import annotations

from typing import Generic, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")


class _Node(Generic[T]):
    __slots__ = ("data", "next", "prev")

    def __init__(self, data: T) -> None:
        self.data = data
        self.next: Optional[_Node[T]] = None
        self.prev: Optional[_Node[T]] = None


class LinkedList(Generic[T]):
    """Doubly linked list; new items go in front, lookups use equality."""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._head: Optional[_Node[T]] = None
        for item in items:
            self.insert(item)

    def insert(self, data: T) -> None:
        """Put ``data`` at the head of the list."""
        node = _Node(data)
        if self._head is not None:
            node.next = self._head
            self._head.prev = node
        self._head = node

    def _find_node(self, data: T) -> Optional[_Node[T]]:
        current = self._head
        while current is not None:
            if current.data == data:
                return current
            current = current.next
        return None

    def find(self, data: T) -> Optional[T]:
        """Return the first stored item equal to ``data``, or None."""
        node = self._find_node(data)
        return None if node is None else node.data

    def delete(self, data: T) -> bool:
        """Unlink the first item equal to ``data``; tell whether one was found."""
        node = self._find_node(data)
        if node is None:
            return False
        if node.prev is not None:
            node.prev.next = node.next
        if node.next is not None:
            node.next.prev = node.prev
        if node is self._head:
            self._head = node.next
        return True

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __iter__(self) -> Iterator[T]:
        current = self._head
        while current is not None:
            yield current.data
            current = current.next

    def __repr__(self) -> str:
        return f"LinkedList({list(self)!r})"