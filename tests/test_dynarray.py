import pytest

from drillbox.stocks.dynarray import DynamicArray


def test_empty_array():
    arr = DynamicArray()
    assert len(arr) == 0
    assert arr.capacity() == 0
    with pytest.raises(IndexError):
        arr[0]


def test_first_append_gives_capacity_one():
    arr = DynamicArray().append("x")
    assert len(arr) == 1
    assert arr.capacity() == 1
    assert arr[0] == "x"


def test_append_returns_new_array():
    base = DynamicArray()
    grown = base.append(1, 2, 3)
    assert len(base) == 0
    assert list(grown) == [1, 2, 3]


def test_capacity_doubles_when_small():
    arr = DynamicArray(2, 2).append("a")
    assert arr.capacity() == 4
    assert list(arr) == [None, None, "a"]


def test_capacity_grows_by_quarter_when_large():
    arr = DynamicArray(1024, 1024).append(0)
    assert arr.capacity() == 1280
    assert len(arr) == 1025


def test_capacity_never_below_length():
    arr = DynamicArray()
    for value in range(3000):
        arr = arr.append(value)
        assert arr.capacity() >= len(arr)
    assert list(arr) == list(range(3000))


def test_length_and_capacity_constructor():
    arr = DynamicArray(2, 5)
    assert len(arr) == 2
    assert arr.capacity() == 5
    assert arr[1] is None
    with pytest.raises(IndexError):
        arr[2]


def test_invalid_construction():
    with pytest.raises(ValueError):
        DynamicArray(3, 2)
    with pytest.raises(ValueError):
        DynamicArray(-1)


def test_set_and_get():
    arr = DynamicArray(3)
    arr[1] = "mid"
    assert arr[1] == "mid"
    with pytest.raises(IndexError):
        arr[3] = "out"
    with pytest.raises(IndexError):
        arr[-1]


def test_shared_storage_within_capacity():
    base = DynamicArray(2, 4)
    grown = base.append("x")
    base[0] = "y"
    assert grown[0] == "y"


def test_storage_detaches_after_reallocation():
    base = DynamicArray(2, 2)
    grown = base.append("x")
    base[0] = "y"
    assert grown[0] is None