"""Fixed-capacity ring buffer queue."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class QueueFullError(IndexError):
    """Raised when enqueueing into a full queue."""

    def __init__(self) -> None:
        super().__init__("queue is full")


class QueueEmptyError(IndexError):
    """Raised when reading from an empty queue."""

    def __init__(self) -> None:
        super().__init__("queue is empty")


class CircularQueue(Generic[T]):
    """FIFO queue of at most ``capacity`` items stored in a ring."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._items: list[Optional[T]] = [None] * capacity
        self._capacity = capacity
        self._front = 0
        self._rear = 0
        self._size = 0

    def enqueue(self, item: T) -> None:
        if self.is_full():
            raise QueueFullError()
        self._items[self._rear] = item
        self._rear = (self._rear + 1) % self._capacity
        self._size += 1

    def dequeue(self) -> T:
        if self.is_empty():
            raise QueueEmptyError()
        item = self._items[self._front]
        self._items[self._front] = None
        self._front = (self._front + 1) % self._capacity
        self._size -= 1
        return item  # type: ignore[return-value]

    def peek(self) -> T:
        if self.is_empty():
            raise QueueEmptyError()
        return self._items[self._front]  # type: ignore[return-value]

    def is_full(self) -> bool:
        return self._size == self._capacity

    def is_empty(self) -> bool:
        return self._size == 0

    def __len__(self) -> int:
        return self._size