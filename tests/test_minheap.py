import random

import pytest

from drillbox.traffic.minheap import MinHeap, PrioritizedItem


def test_extracts_in_ascending_order():
    rng = random.Random(3)
    values = [rng.uniform(0, 100) for _ in range(200)]
    heap = MinHeap()
    for index, value in enumerate(values):
        heap.insert(PrioritizedItem(index, value))
    assert len(heap) == len(values)
    extracted = [heap.extract_min().value for _ in range(len(values))]
    assert extracted == sorted(values)
    assert len(heap) == 0


def test_extract_from_empty_raises():
    with pytest.raises(IndexError):
        MinHeap().extract_min()


def test_extract_returns_inserted_item():
    heap = MinHeap()
    heap.insert(PrioritizedItem(7, 2.5))
    heap.insert(PrioritizedItem(3, 1.5))
    assert heap.extract_min() == PrioritizedItem(3, 1.5)
    assert heap.extract_min() == PrioritizedItem(7, 2.5)
    with pytest.raises(IndexError):
        heap.extract_min()


def test_interleaved_operations_keep_order():
    heap = MinHeap()
    for value in (5.0, 1.0, 4.0):
        heap.insert(PrioritizedItem(int(value), value))
    first = heap.extract_min()
    heap.insert(PrioritizedItem(0, 0.5))
    second = heap.extract_min()
    assert first.value == 1.0
    assert second.value == 0.5
    assert sorted([heap.extract_min().value, heap.extract_min().value]) == [4.0, 5.0]