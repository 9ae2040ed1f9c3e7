"""Queue of ride requests served oldest request first."""

from __future__ import annotations

import heapq
import itertools
from datetime import datetime

from drillbox.rideshare.entities import Ride


class EmptyQueueError(IndexError):
    """Raised when reading from an empty ride queue."""

    def __init__(self) -> None:
        super().__init__("queue is empty")


class RideQueue:
    """Min-heap of rides keyed on their request time."""

    def __init__(self) -> None:
        self._heap: list[tuple[datetime, int, Ride]] = []
        self._counter = itertools.count()

    def enqueue(self, ride: Ride) -> None:
        heapq.heappush(self._heap, (ride.request_time, next(self._counter), ride))

    def dequeue(self) -> Ride:
        if not self._heap:
            raise EmptyQueueError()
        return heapq.heappop(self._heap)[2]

    def peek(self) -> Ride:
        if not self._heap:
            raise EmptyQueueError()
        return self._heap[0][2]

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)