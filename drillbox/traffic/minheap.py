"""Binary min-heap of intersections keyed on a cost."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PrioritizedItem:
    id: int
    value: float


class MinHeap:
    """Priority queue returning the item with the smallest value first."""

    def __init__(self) -> None:
        self._data: list[PrioritizedItem] = []

    def insert(self, item: PrioritizedItem) -> None:
        self._data.append(item)
        self._sift_up(len(self._data) - 1)

    def extract_min(self) -> PrioritizedItem:
        """Remove and return the smallest item; raise IndexError when empty."""
        if not self._data:
            raise IndexError("heap is empty")
        smallest = self._data[0]
        last = self._data.pop()
        if self._data:
            self._data[0] = last
            self._sift_down(0)
        return smallest

    def __len__(self) -> int:
        return len(self._data)

    def _sift_up(self, index: int) -> None:
        data = self._data
        while index > 0:
            parent = (index - 1) // 2
            if data[index].value >= data[parent].value:
                return
            data[index], data[parent] = data[parent], data[index]
            index = parent

    def _sift_down(self, index: int) -> None:
        data = self._data
        size = len(data)
        while True:
            smallest = index
            for child in (2 * index + 1, 2 * index + 2):
                if child < size and data[child].value < data[smallest].value:
                    smallest = child
            if smallest == index:
                return
            data[index], data[smallest] = data[smallest], data[index]
            index = smallest